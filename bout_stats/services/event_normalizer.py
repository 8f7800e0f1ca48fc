"""
Event normalization.

Produces a globally ordered event sequence in which every event carries a
non-negative, non-decreasing ``elapsed_seconds``. Legacy and offline
remotes often recorded events without relative timing, so missing values
are rebuilt from wall-clock time.

ORDERING
========

Events are ordered by elapsed time. Events without one are placed on the
anchor's timeline: the anchor's elapsed time plus the wall-clock gap to
the anchor (the earliest event carrying both clocks). Without any anchor
no event has elapsed time and ordering falls back to wall-clock time.
Ties break on wall-clock time and then on event id, so the output is
deterministic for a given snapshot.

FILLING
=======

1. With an anchor: ``round((wall_clock - anchor_wall_clock) / 1000)`` in
   milliseconds, clamped to 0.
2. Without an anchor: previous assigned value + 1 (0 for the first event).

The filled value is relative to the anchor's wall clock only, so it can
sit below an earlier event's elapsed time. A final pass bumps any value
lower than its predecessor to ``previous + 1``. Equal values are kept:
two genuine touches can share a second.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Sequence

from ..models import MatchEvent
from ..utils.datetime_utils import to_epoch_ms

logger = logging.getLogger(__name__)


def filter_latest_reset_segment(events: Sequence[MatchEvent]) -> list[MatchEvent]:
    """Keep only the events of the most recent reset segment.

    A restarted bout keeps its earlier events in the log under a lower
    segment number; only the latest segment describes the final match.
    """
    if not events:
        return []
    latest = max(event.reset_segment for event in events)
    kept = [event for event in events if event.reset_segment == latest]
    if len(kept) != len(events):
        logger.info(
            "reset_segment_filtered",
            extra={
                "latest_segment": latest,
                "kept": len(kept),
                "discarded": len(events) - len(kept),
            },
        )
    return kept


def find_timing_anchor(events: Sequence[MatchEvent]) -> MatchEvent | None:
    """Return the earliest event (by wall clock) that has elapsed time."""
    timed = [event for event in events if event.elapsed_seconds is not None]
    if not timed:
        return None
    return min(timed, key=lambda event: (to_epoch_ms(event.wall_clock_time), event.id))


def _derived_elapsed(event: MatchEvent, anchor: MatchEvent) -> int:
    delta_ms = to_epoch_ms(event.wall_clock_time) - to_epoch_ms(anchor.wall_clock_time)
    # half-up, not banker's rounding
    return max(0, math.floor(delta_ms / 1000 + 0.5))


def _anchored_position(event: MatchEvent, anchor: MatchEvent) -> float:
    """Where an untimed event sits on the anchor's elapsed timeline."""
    delta_ms = to_epoch_ms(event.wall_clock_time) - to_epoch_ms(anchor.wall_clock_time)
    return (anchor.elapsed_seconds or 0) + delta_ms / 1000


def _sort_key(event: MatchEvent, anchor: MatchEvent | None) -> tuple[float, float, str]:
    if event.elapsed_seconds is not None:
        provisional: float = event.elapsed_seconds
    elif anchor is not None:
        provisional = _anchored_position(event, anchor)
    else:
        provisional = 0
    return (provisional, to_epoch_ms(event.wall_clock_time), event.id)


def normalize_events(events: Sequence[MatchEvent]) -> list[MatchEvent]:
    """
    Order events and fill in missing elapsed time.

    This is a PURE FUNCTION - the input events are not modified; events
    whose elapsed time changes are returned as new objects.

    Args:
        events: Match events in any order, elapsed time possibly missing

    Returns:
        The same events, ordered, every ``elapsed_seconds`` populated and
        non-decreasing. Empty input gives an empty list.
    """
    if not events:
        return []

    anchor = find_timing_anchor(events)
    ordered = sorted(events, key=lambda event: _sort_key(event, anchor))

    normalized: list[MatchEvent] = []
    last_assigned: int | None = None
    repaired = 0
    bumped = 0

    for event in ordered:
        elapsed = event.elapsed_seconds
        if elapsed is None:
            repaired += 1
            if anchor is not None:
                elapsed = _derived_elapsed(event, anchor)
            else:
                elapsed = 0 if last_assigned is None else last_assigned + 1

        if last_assigned is not None and elapsed < last_assigned:
            elapsed = last_assigned + 1
            bumped += 1

        last_assigned = elapsed
        if elapsed != event.elapsed_seconds:
            event = replace(event, elapsed_seconds=elapsed)
        normalized.append(event)

    if repaired or bumped:
        # MissingTimingData is repaired here and never surfaced as a diagnostic
        logger.debug(
            "elapsed_time_repaired",
            extra={
                "events": len(normalized),
                "missing_elapsed": repaired,
                "bumped_for_monotonicity": bumped,
                "has_anchor": anchor is not None,
            },
        )

    return normalized
