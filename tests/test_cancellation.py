"""Tests for cancellation and duplicate resolution."""

from bout_stats.models import ScoreType
from bout_stats.services.cancellation import collect_cancelled_ids, resolve_cancellations
from bout_stats.services.diagnostics import DiagnosticCode


def _ids(result):
    return [event.id for event in result.events]


class TestCancellation:
    def test_cancel_after_target(self, score, cancel):
        """A cancel removes its target and itself."""
        result = resolve_cancellations([score("s1", "Alice", 5), cancel("c1", "s1", 7)])
        assert _ids(result) == []
        assert result.diagnostics == ()

    def test_cancel_before_target(self, score, cancel):
        """Application does not depend on order."""
        result = resolve_cancellations([cancel("c1", "s1", 3), score("s1", "Alice", 5)])
        assert _ids(result) == []

    def test_only_target_removed(self, score, cancel):
        """Other score events survive a cancel."""
        events = [score("s1", "Alice", 5), score("s2", "Bob", 6), cancel("c1", "s1", 7)]
        assert _ids(resolve_cancellations(events)) == ["s2"]

    def test_cancel_without_target_is_diagnosed(self, score, cancel):
        """A targetless cancel is dropped and never cancels the previous event."""
        events = [score("s1", "Alice", 5), cancel("c1", None, 6)]
        result = resolve_cancellations(events)
        assert _ids(result) == ["s1"]
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].code == DiagnosticCode.MALFORMED_CANCEL_EVENT
        assert result.diagnostics[0].event_id == "c1"

    def test_cancel_of_unknown_id_is_harmless(self, score, cancel):
        """A cancel whose target is not in the log changes nothing."""
        result = resolve_cancellations([score("s1", "Alice", 5), cancel("c1", "ghost", 6)])
        assert _ids(result) == ["s1"]
        assert result.diagnostics == ()

    def test_collect_cancelled_ids(self, score, cancel):
        ids, diagnostics = collect_cancelled_ids(
            [cancel("c1", "s1"), cancel("c2", "s2"), score("s3", "Alice")]
        )
        assert ids == frozenset({"s1", "s2"})
        assert diagnostics == []


class TestDeduplication:
    def test_same_id_counts_once(self, score):
        """A redelivered event is kept once, first occurrence wins."""
        first = score("s1", "Alice", 5)
        again = score("s1", "Bob", 8)
        result = resolve_cancellations([first, again])
        assert result.events == (first,)
        assert result.diagnostics[0].code == DiagnosticCode.DUPLICATE_EVENT

    def test_same_time_and_scorer_both_count(self, score):
        """Two genuine touches sharing elapsed time and scorer are both kept."""
        result = resolve_cancellations([score("s1", "Alice", 9), score("s2", "Alice", 9)])
        assert _ids(result) == ["s1", "s2"]
        assert result.diagnostics == ()

    def test_cancelled_duplicate_fully_removed(self, score, cancel):
        """Cancelling an id removes every copy of it."""
        events = [score("s1", "Alice", 5), score("s1", "Alice", 5), cancel("c1", "s1", 6)]
        assert _ids(resolve_cancellations(events)) == []


class TestNonScoring:
    def test_yellow_card_dropped(self, score):
        """A card worth no points is not an effective score."""
        card = score("k1", "Alice", 5, score_type=ScoreType.CARD, card_given="yellow")
        assert _ids(resolve_cancellations([card])) == []

    def test_red_card_kept(self, score):
        card = score("k1", "Alice", 5, score_type=ScoreType.CARD, card_given="red")
        assert _ids(resolve_cancellations([card])) == ["k1"]
