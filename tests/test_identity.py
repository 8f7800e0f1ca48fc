"""Tests for identity resolution across slot swaps."""

import pytest

from bout_stats.models import ScoreType, Side
from bout_stats.services.diagnostics import DiagnosticCode
from bout_stats.services.identity import (
    ResolutionMethod,
    attribute_label,
    creation_slot,
    map_to_current_slot,
    resolve_event,
    resolve_identities,
)


class TestCreationSlot:
    def test_scorer_in_slot_a(self, score):
        assert creation_slot(score("e1", "Alice")) is Side.A

    def test_scorer_in_slot_b(self, score):
        assert creation_slot(score("e1", "Bob")) is Side.B

    def test_scorer_in_neither(self, score):
        assert creation_slot(score("e1", "Carol")) is None

    def test_missing_scorer(self, score):
        assert creation_slot(score("e1", None)) is None


class TestMapToCurrentSlot:
    def test_no_swap(self, score, match):
        """Creation-time A still in A."""
        assert map_to_current_slot(score("e1", "Alice"), Side.A, match()) is Side.A

    def test_swap(self, score, match):
        """Creation-time A now sits in B."""
        current = match(slot_a="Bob", slot_b="Alice")
        assert map_to_current_slot(score("e1", "Alice"), Side.A, current) is Side.B
        assert map_to_current_slot(score("e1", "Bob"), Side.B, current) is Side.A

    def test_unknown_label(self, score, match):
        assert map_to_current_slot(score("e1", "Alice"), Side.A, match("Carol", "Dan")) is None


class TestResolveEvent:
    def test_swap_correctness(self, score, match):
        """Recorded as Alice in slot A; after the swap Alice is current slot B."""
        event = score("e1", "Alice", slot_a="Alice", slot_b="Bob")
        resolved, diagnostic = resolve_event(event, match(slot_a="Bob", slot_b="Alice"))
        assert resolved.side is Side.B
        assert diagnostic is None

    def test_no_swap(self, score, match):
        resolved, _ = resolve_event(score("e1", "Bob"), match())
        assert resolved.side is Side.B

    def test_swap_is_reported(self, score, match):
        attribution = attribute_label(score("e1", "Alice"), match(slot_a="Bob", slot_b="Alice"))
        assert attribution.method == ResolutionMethod.CREATION_SLOT
        assert attribution.swapped is True

    def test_direct_label_fallback_without_creation_labels(self, score, match):
        """Events without creation-time labels compare the scorer to current labels."""
        event = score("e1", "Alice", slot_a=None, slot_b=None)
        resolved, diagnostic = resolve_event(event, match(slot_a="Bob", slot_b="Alice"))
        assert resolved.side is Side.B
        assert diagnostic is None
        assert attribute_label(event, match()).method == ResolutionMethod.DIRECT_LABEL

    def test_direct_label_fallback_when_creation_labels_stale(self, score, match):
        """Creation labels that match no current label fall back to the scorer label."""
        event = score("e1", "Alice", slot_a="Alicia", slot_b="Bobby")
        resolved, diagnostic = resolve_event(event, match())
        assert resolved.side is Side.A
        assert diagnostic is None

    def test_unresolvable_defaults_to_slot_b(self, score, match):
        """An unknown scorer is kept, attributed to B, and diagnosed."""
        event = score("e1", "Carol", slot_a="Xavier", slot_b="Yves")
        resolved, diagnostic = resolve_event(event, match())
        assert resolved.side is Side.B
        assert resolved.points == 1
        assert diagnostic.code == DiagnosticCode.UNRESOLVABLE_IDENTITY
        assert diagnostic.event_id == "e1"

    def test_unresolvable_card_reports_receiving_side(self, score, match):
        """A card against an unknown label is charged to B, so A gets the point."""
        card = score(
            "k1", "Carol", slot_a="Xavier", slot_b="Yves",
            score_type=ScoreType.CARD, card_given="red",
        )
        resolved, diagnostic = resolve_event(card, match())
        assert resolved.side is Side.A
        assert diagnostic.code == DiagnosticCode.UNRESOLVABLE_IDENTITY
        assert diagnostic.side is Side.A
        assert "card charged to slot B" in diagnostic.detail

    def test_shared_label_resolves_to_slot_a(self, score, match):
        """Two competitors with one label resolve to the first matching slot."""
        event = score("e1", "Sam", slot_a="Sam", slot_b="Sam")
        resolved, _ = resolve_event(event, match(slot_a="Sam", slot_b="Sam"))
        assert resolved.side is Side.A

    def test_card_scores_for_opponent(self, score, match):
        """A red card against Alice is a point for Bob."""
        card = score("k1", "Alice", score_type=ScoreType.CARD, card_given="red")
        resolved, _ = resolve_event(card, match())
        assert resolved.side is Side.B
        assert resolved.points == 1

    def test_card_points_awarded(self, score, match):
        card = score("k1", "Bob", score_type=ScoreType.CARD, points_awarded=2)
        resolved, _ = resolve_event(card, match())
        assert resolved.side is Side.A
        assert resolved.points == 2

    def test_double_touch_needs_no_identity(self, double, match):
        resolved, diagnostic = resolve_event(double("d1"), match("Carol", "Dan"))
        assert resolved.side is None
        assert diagnostic is None


class TestResolveIdentities:
    def test_order_independent(self, score, match):
        """Resolution is stateless: reversing input reverses output only."""
        current = match(slot_a="Bob", slot_b="Alice")
        events = [
            score("e1", "Alice", 1),
            score("e2", "Bob", 2, slot_a="Bob", slot_b="Alice"),
            score("e3", "Carol", 3),
        ]
        forward = resolve_identities(events, current)
        backward = resolve_identities(list(reversed(events)), current)
        assert [r.side for r in forward.events] == [r.side for r in reversed(backward.events)]

    @pytest.mark.parametrize(
        "scorer, expected",
        [("Alice", Side.B), ("Bob", Side.A)],
    )
    def test_all_events_after_swap(self, score, match, scorer, expected):
        result = resolve_identities([score("e1", scorer)], match(slot_a="Bob", slot_b="Alice"))
        assert result.events[0].side is expected
        assert result.diagnostics == ()
