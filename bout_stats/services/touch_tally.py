"""Touches per period.

One row per period of the match, so a two-period or five-period format
gets as many rows as the match registry reports. Events classified into a
number the registry does not know (no periods recorded at all) get their
own row rather than being discarded.
"""

from __future__ import annotations

from typing import Sequence

from ..models import Period, PeriodTally, ResolvedEvent, Side
from .period_classifier import DEFAULT_PERIOD_NUMBER


def tally_touches(
    events: Sequence[ResolvedEvent],
    periods: Sequence[Period],
    default_period: int = DEFAULT_PERIOD_NUMBER,
) -> dict[int, PeriodTally]:
    """
    Count touches by period and side.

    Args:
        events: Resolved, period-classified effective events
        periods: The match's periods
        default_period: Row for events the classifier has not placed

    Returns:
        Mapping of period number -> PeriodTally, ordered by period number
    """
    counts: dict[int, list[int]] = {period.number: [0, 0] for period in periods}

    for resolved in events:
        number = resolved.period if resolved.period is not None else default_period
        row = counts.setdefault(number, [0, 0])
        row[0] += resolved.scores_for(Side.A)
        row[1] += resolved.scores_for(Side.B)

    return {
        number: PeriodTally(side_a=row[0], side_b=row[1])
        for number, row in sorted(counts.items())
    }
