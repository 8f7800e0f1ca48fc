"""
Period classification for resolved events.

Assigns each event the number of the period (round) it happened in.

PRIORITY
========

1. PERIOD REF: the event names a known period id -> that period's number.
2. INTERVAL: the period with ``start_time <= wall_clock <= effective_end``.
   ``effective_end`` is the period's ``end_time``; when unset, the next
   period's ``start_time``; when there is no next period (the last, open
   period), unbounded.
3. NEAREST BOUNDARY: the period whose start or end boundary is closest
   to the event, if that distance is within the tolerance window.
   Otherwise the default period.

Periods can be skipped, merged, or left open when a match completes, so
strict containment alone leaves boundary events unclassified. Step 3
always produces a ``PeriodBoundaryAmbiguous`` diagnostic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Sequence

from ..models import MatchEvent, Period, ResolvedEvent
from ..utils.datetime_utils import seconds_between, to_epoch_ms
from .diagnostics import Diagnostic, DiagnosticCode

logger = logging.getLogger(__name__)

DEFAULT_BOUNDARY_TOLERANCE_SECONDS = 5.0
DEFAULT_PERIOD_NUMBER = 1


class ClassificationMethod(str, Enum):
    PERIOD_REF = "period_ref"
    INTERVAL = "interval"
    NEAREST_BOUNDARY = "nearest_boundary"
    DEFAULT = "default"


@dataclass(frozen=True)
class PeriodAssignment:
    number: int
    method: ClassificationMethod
    diagnostic: Diagnostic | None = None


@dataclass(frozen=True)
class PeriodClassification:
    events: tuple[ResolvedEvent, ...]
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)


def order_periods(periods: Sequence[Period]) -> list[Period]:
    """Periods in chronological order."""
    return sorted(periods, key=lambda period: (to_epoch_ms(period.start_time), period.number))


def effective_end(periods: Sequence[Period], index: int) -> datetime | None:
    """End of the period at ``index`` in chronological order; None is unbounded."""
    period = periods[index]
    if period.end_time is not None:
        return period.end_time
    if index + 1 < len(periods):
        return periods[index + 1].start_time
    return None


def _contains(period: Period, end: datetime | None, moment: datetime) -> bool:
    moment_ms = to_epoch_ms(moment)
    if moment_ms < to_epoch_ms(period.start_time):
        return False
    return end is None or moment_ms <= to_epoch_ms(end)


def _nearest_boundary(
    periods: Sequence[Period],
    moment: datetime,
) -> tuple[Period, float] | None:
    best: tuple[Period, float] | None = None
    for index, period in enumerate(periods):
        distances = [abs(seconds_between(period.start_time, moment))]
        end = effective_end(periods, index)
        if end is not None:
            distances.append(abs(seconds_between(end, moment)))
        distance = min(distances)
        if best is None or distance < best[1]:
            best = (period, distance)
    return best


def classify_event(
    event: MatchEvent,
    periods: Sequence[Period],
    tolerance_seconds: float = DEFAULT_BOUNDARY_TOLERANCE_SECONDS,
    default_period: int = DEFAULT_PERIOD_NUMBER,
) -> PeriodAssignment:
    """
    Classify a single event into a period.

    Args:
        event: The event to classify
        periods: Chronologically ordered periods (see ``order_periods``)
        tolerance_seconds: Nearest-boundary tolerance window
        default_period: Period used when nothing else applies

    Returns:
        PeriodAssignment with the chosen number and how it was chosen
    """
    if event.period_ref:
        for period in periods:
            if period.period_id and period.period_id == event.period_ref:
                return PeriodAssignment(period.number, ClassificationMethod.PERIOD_REF)

    if not periods:
        return PeriodAssignment(default_period, ClassificationMethod.DEFAULT)

    moment = event.wall_clock_time
    for index, period in enumerate(periods):
        if _contains(period, effective_end(periods, index), moment):
            return PeriodAssignment(period.number, ClassificationMethod.INTERVAL)

    nearest = _nearest_boundary(periods, moment)
    if nearest is not None and nearest[1] <= tolerance_seconds:
        period, distance = nearest
        return PeriodAssignment(
            period.number,
            ClassificationMethod.NEAREST_BOUNDARY,
            Diagnostic(
                code=DiagnosticCode.PERIOD_BOUNDARY_AMBIGUOUS,
                event_id=event.id,
                detail=f"nearest boundary of period {period.number} ({distance:.1f}s away)",
            ),
        )

    distance_text = f"{nearest[1]:.1f}s" if nearest is not None else "n/a"
    return PeriodAssignment(
        default_period,
        ClassificationMethod.DEFAULT,
        Diagnostic(
            code=DiagnosticCode.PERIOD_BOUNDARY_AMBIGUOUS,
            event_id=event.id,
            detail=f"outside every period (nearest boundary {distance_text}), "
            f"defaulted to period {default_period}",
        ),
    )


def classify_periods(
    events: Sequence[ResolvedEvent],
    periods: Sequence[Period],
    tolerance_seconds: float = DEFAULT_BOUNDARY_TOLERANCE_SECONDS,
    default_period: int = DEFAULT_PERIOD_NUMBER,
) -> PeriodClassification:
    """Attach a period number to every resolved event."""
    ordered = order_periods(periods)
    classified: list[ResolvedEvent] = []
    diagnostics: list[Diagnostic] = []
    methods: dict[str, int] = {}

    for resolved in events:
        assignment = classify_event(
            resolved.event,
            ordered,
            tolerance_seconds=tolerance_seconds,
            default_period=default_period,
        )
        classified.append(replace(resolved, period=assignment.number))
        methods[assignment.method.value] = methods.get(assignment.method.value, 0) + 1
        if assignment.diagnostic is not None:
            diagnostics.append(assignment.diagnostic)

    logger.debug(
        "periods_classified",
        extra={"periods": len(ordered), "methods": methods},
    )

    return PeriodClassification(events=tuple(classified), diagnostics=tuple(diagnostics))
