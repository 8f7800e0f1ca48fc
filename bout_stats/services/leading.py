"""Share of the bout each side spent in the lead.

Two measures over the resolved, time-ordered event stream:

- TIME LEADING: elapsed time between consecutive events is credited to
  whoever led *before* the later event. The bout is taken to end at the
  last event, so nothing is added after it.
- SCORE LEADING: after each event, the side ahead (or a tie) gets one
  count.

Both are reported as whole percentages. Side percentages are rounded
half-up and the tie share takes the remainder, so the three always sum
to 100. With nothing to measure the tie share is 100.
"""

from __future__ import annotations

import math
from typing import Sequence

from ..models import LeadingShare, ResolvedEvent, Side
from .lead_changes import get_leader


def _percent(part: float, total: float) -> int:
    return math.floor(part * 100 / total + 0.5)


def _share(side_a: float, side_b: float, tied: float) -> LeadingShare:
    total = side_a + side_b + tied
    if total <= 0:
        return LeadingShare()
    pct_a = _percent(side_a, total)
    pct_b = _percent(side_b, total)
    return LeadingShare(side_a=pct_a, side_b=pct_b, tied=100 - pct_a - pct_b)


def time_leading(events: Sequence[ResolvedEvent]) -> LeadingShare:
    """Percentage of elapsed time each side was ahead."""
    totals = {Side.A: 0, Side.B: 0, None: 0}
    score_a = score_b = 0
    last_time = 0

    for resolved in events:
        now = resolved.elapsed_seconds
        totals[get_leader(score_a, score_b)] += max(0, now - last_time)
        score_a += resolved.scores_for(Side.A)
        score_b += resolved.scores_for(Side.B)
        last_time = now

    return _share(totals[Side.A], totals[Side.B], totals[None])


def score_leading(events: Sequence[ResolvedEvent]) -> LeadingShare:
    """Percentage of scoring events after which each side was ahead."""
    counts = {Side.A: 0, Side.B: 0, None: 0}
    score_a = score_b = 0

    for resolved in events:
        score_a += resolved.scores_for(Side.A)
        score_b += resolved.scores_for(Side.B)
        counts[get_leader(score_a, score_b)] += 1

    return _share(counts[Side.A], counts[Side.B], counts[None])
