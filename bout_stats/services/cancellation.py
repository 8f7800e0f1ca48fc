"""
Cancellation and duplicate resolution.

Turns the normalized event log into the list of *effective* score events.

Rules:
- Every cancel event is dropped from the output.
- A score event whose id is targeted by any cancel is dropped. The cancel
  may appear before or after its target; application is order-independent.
- A cancel without a target id is dropped and diagnosed. It is never
  treated as "cancel the previous event".
- Duplicates are detected by exact id only. Two genuine touches can share
  elapsed time and scorer, so no composite key is used. The first
  occurrence in normalized order wins.
- Score events worth 0 points (e.g. a yellow card) are non-scoring and
  are dropped after deduplication.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from ..models import MatchEvent
from .diagnostics import Diagnostic, DiagnosticCode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CancellationResult:
    """Effective score events plus what was dropped along the way."""
    events: tuple[MatchEvent, ...]
    cancelled_ids: frozenset[str] = frozenset()
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)


def collect_cancelled_ids(
    events: Sequence[MatchEvent],
) -> tuple[frozenset[str], list[Diagnostic]]:
    """Gather every targeted id from cancel events.

    Returns the id set and a diagnostic per malformed cancel.
    """
    cancelled: set[str] = set()
    diagnostics: list[Diagnostic] = []
    for event in events:
        if not event.is_cancel:
            continue
        if not event.cancelled_event_id:
            diagnostics.append(
                Diagnostic(
                    code=DiagnosticCode.MALFORMED_CANCEL_EVENT,
                    event_id=event.id,
                    detail="cancel event has no target id",
                )
            )
            continue
        cancelled.add(event.cancelled_event_id)
    return frozenset(cancelled), diagnostics


def resolve_cancellations(events: Sequence[MatchEvent]) -> CancellationResult:
    """
    Drop cancels, cancelled scores and exact-id duplicates.

    Args:
        events: Normalized (ordered) events

    Returns:
        CancellationResult with the effective score events in input order
    """
    cancelled_ids, diagnostics = collect_cancelled_ids(events)

    seen_ids: set[str] = set()
    effective: list[MatchEvent] = []
    dropped_cancelled = 0
    dropped_non_scoring = 0

    for event in events:
        if event.is_cancel:
            continue
        if event.id in cancelled_ids:
            dropped_cancelled += 1
            continue
        if event.id in seen_ids:
            diagnostics.append(
                Diagnostic(
                    code=DiagnosticCode.DUPLICATE_EVENT,
                    event_id=event.id,
                    detail="repeated event id, first occurrence kept",
                )
            )
            continue
        seen_ids.add(event.id)
        if event.points <= 0:
            dropped_non_scoring += 1
            continue
        effective.append(event)

    targeted_unknown = cancelled_ids - {event.id for event in events if not event.is_cancel}
    if targeted_unknown:
        logger.debug(
            "cancel_targets_not_found",
            extra={"event_ids": sorted(targeted_unknown)},
        )

    logger.debug(
        "cancellations_resolved",
        extra={
            "input_events": len(events),
            "effective_events": len(effective),
            "cancelled": dropped_cancelled,
            "non_scoring": dropped_non_scoring,
            "diagnostics": len(diagnostics),
        },
    )

    return CancellationResult(
        events=tuple(effective),
        cancelled_ids=cancelled_ids,
        diagnostics=tuple(diagnostics),
    )
