"""Average bounce-back time per side.

A side's bounce-back time is the gap, in elapsed seconds, between two
consecutive touches it conceded. The average over the bout is rounded
half-up to whole seconds; a side that conceded fewer than two touches
reports 0.

Double touches concede nothing and are skipped.
"""

from __future__ import annotations

import math
from typing import Sequence

from ..models import BounceBack, ResolvedEvent, Side


def bounce_back_times(events: Sequence[ResolvedEvent], side: Side) -> list[int]:
    """Gaps between consecutive touches conceded by ``side``."""
    gaps: list[int] = []
    last_conceded: int | None = None
    for resolved in events:
        if resolved.side is not side.opponent:
            continue
        now = resolved.elapsed_seconds
        if last_conceded is not None:
            gaps.append(now - last_conceded)
        last_conceded = now
    return gaps


def average_bounce_back(events: Sequence[ResolvedEvent], side: Side) -> int:
    gaps = bounce_back_times(events, side)
    if not gaps:
        return 0
    return math.floor(sum(gaps) / len(gaps) + 0.5)


def bounce_back(events: Sequence[ResolvedEvent]) -> BounceBack:
    """Average bounce-back time for both sides."""
    return BounceBack(
        side_a=average_bounce_back(events, Side.A),
        side_b=average_bounce_back(events, Side.B),
    )
