"""Identity resolution: which *current* slot did an event score for?

Slots can be swapped after events were recorded, and events are never
rewritten. Each event therefore carries the two slot labels as they were
when it was created. Resolution works in three steps:

1. CREATION SLOT: compare ``scorer_label`` with the event's creation-time
   slot labels to find which slot scored at the time.
2. CURRENT SLOT: follow that creation-time label to wherever it sits in
   the present match record. A creation-time A label that is now the
   current B label means a swap happened after the event.
3. DIRECT LABEL: when creation-time labels are absent or match neither
   current label, compare ``scorer_label`` directly with the current
   labels.

If none of these resolve, the event is attributed to slot B by convention
and an ``UnresolvableIdentity`` diagnostic is produced. A real touch is
never dropped.

Identity is compared by display label. Two competitors sharing a label
resolve to the first matching slot (A before B).

Resolution is a pure function of ``(event, match)``: no counters, no
memory of earlier events, so results do not depend on event order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from ..models import Match, MatchEvent, ResolvedEvent, ScoreType, Side
from .diagnostics import Diagnostic, DiagnosticCode

logger = logging.getLogger(__name__)

FALLBACK_SIDE = Side.B


class ResolutionMethod(str, Enum):
    CREATION_SLOT = "creation_slot"
    DIRECT_LABEL = "direct_label"
    FALLBACK = "fallback"
    NOT_REQUIRED = "not_required"  # double touches score for both slots


@dataclass(frozen=True)
class Attribution:
    """Where a labelled competitor sits in the current match."""
    side: Side
    method: ResolutionMethod
    swapped: bool = False


@dataclass(frozen=True)
class IdentityResult:
    events: tuple[ResolvedEvent, ...]
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)


def creation_slot(event: MatchEvent) -> Side | None:
    """Slot the scorer occupied when the event was recorded."""
    label = event.scorer_label
    if not label:
        return None
    if label == event.slot_a_label_at_creation:
        return Side.A
    if label == event.slot_b_label_at_creation:
        return Side.B
    return None


def map_to_current_slot(event: MatchEvent, slot: Side, match: Match) -> Side | None:
    """Follow a creation-time slot's label to its current slot."""
    label_at_creation = (
        event.slot_a_label_at_creation if slot is Side.A else event.slot_b_label_at_creation
    )
    if not label_at_creation:
        return None
    if label_at_creation == match.label_for(slot):
        return slot
    if label_at_creation == match.label_for(slot.opponent):
        return slot.opponent
    return None


def direct_label_slot(label: str | None, match: Match) -> Side | None:
    if not label:
        return None
    if label == match.current_slot_a_label:
        return Side.A
    if label == match.current_slot_b_label:
        return Side.B
    return None


def attribute_label(event: MatchEvent, match: Match) -> Attribution | None:
    """Resolve the event's labelled competitor to a current slot.

    Returns None when the label cannot be placed in the current match.
    """
    slot = creation_slot(event)
    if slot is not None:
        current = map_to_current_slot(event, slot, match)
        if current is not None:
            return Attribution(
                side=current,
                method=ResolutionMethod.CREATION_SLOT,
                swapped=current is not slot,
            )

    current = direct_label_slot(event.scorer_label, match)
    if current is not None:
        return Attribution(side=current, method=ResolutionMethod.DIRECT_LABEL)
    return None


def resolve_event(
    event: MatchEvent,
    match: Match,
) -> tuple[ResolvedEvent, Diagnostic | None]:
    """
    Attribute one effective score event to the slot it scores for.

    Touches score for the labelled competitor, cards score for the
    opponent of the labelled (penalized) competitor, and double touches
    score for both slots.

    Args:
        event: An effective score event
        match: Present-day match record

    Returns:
        (ResolvedEvent, diagnostic or None)
    """
    points = event.points
    if event.score_type == ScoreType.DOUBLE:
        return ResolvedEvent(event=event, side=None, points=points), None

    is_card = event.score_type == ScoreType.CARD
    attribution = attribute_label(event, match)
    diagnostic = None
    if attribution is None:
        attribution = Attribution(side=FALLBACK_SIDE, method=ResolutionMethod.FALLBACK)
        detail = f"label {event.scorer_label!r} matches no slot"
        if is_card:
            detail += (
                f"; card charged to slot {FALLBACK_SIDE.value}, "
                f"points to slot {FALLBACK_SIDE.opponent.value}"
            )
        # side is where the points went
        diagnostic = Diagnostic(
            code=DiagnosticCode.UNRESOLVABLE_IDENTITY,
            side=FALLBACK_SIDE.opponent if is_card else FALLBACK_SIDE,
            event_id=event.id,
            detail=detail,
        )

    side = attribution.side.opponent if is_card else attribution.side
    return ResolvedEvent(event=event, side=side, points=points), diagnostic


def resolve_identities(events: Sequence[MatchEvent], match: Match) -> IdentityResult:
    """Resolve every effective event, preserving order."""
    resolved: list[ResolvedEvent] = []
    diagnostics: list[Diagnostic] = []
    for event in events:
        resolved_event, diagnostic = resolve_event(event, match)
        resolved.append(resolved_event)
        if diagnostic is not None:
            diagnostics.append(diagnostic)

    if diagnostics:
        logger.warning(
            "identity_fallback_used",
            extra={
                "match_id": match.match_id,
                "unresolved": len(diagnostics),
                "events": len(resolved),
            },
        )

    return IdentityResult(events=tuple(resolved), diagnostics=tuple(diagnostics))
