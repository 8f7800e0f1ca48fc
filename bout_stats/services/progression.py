"""
Score progression.

Builds one cumulative score series per current slot. Each series starts
at an implicit (0, 0) point; an event appends a point only to the
series of the side it scored for. A double touch appends to both.

Series are sparse: side B gets no point when side A scores. Consumers
that plot both sides on one time axis must carry the last known value
forward, which ``merge_series`` does.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..models import ORIGIN, ResolvedEvent, ScoreProgression, SeriesPoint, Side


@dataclass
class _RunningScore:
    """Fold state for one side."""
    value: int = 0

    def add(self, points: int) -> int:
        self.value += points
        return self.value


def build_progression(events: Sequence[ResolvedEvent]) -> ScoreProgression:
    """
    Build the per-side cumulative series.

    Args:
        events: Resolved, time-ordered effective events

    Returns:
        ScoreProgression with (elapsed_seconds, cumulative) points
    """
    scores = {Side.A: _RunningScore(), Side.B: _RunningScore()}
    series: dict[Side, list[SeriesPoint]] = {Side.A: [ORIGIN], Side.B: [ORIGIN]}

    for resolved in events:
        for side in (Side.A, Side.B):
            points = resolved.scores_for(side)
            if points <= 0:
                continue
            value = scores[side].add(points)
            series[side].append(SeriesPoint(resolved.elapsed_seconds, value))

    return ScoreProgression(side_a=tuple(series[Side.A]), side_b=tuple(series[Side.B]))


def merge_series(
    side_a: Sequence[SeriesPoint],
    side_b: Sequence[SeriesPoint],
) -> list[tuple[int, int, int]]:
    """
    Put both series on one shared time axis.

    Points are interleaved in series order (each series is already time
    ordered) and the side that did not change keeps its last value.
    Points at the same elapsed second from both series collapse into
    one row.

    Returns:
        List of (elapsed_seconds, score_a, score_b)
    """
    rows: list[tuple[int, int, int]] = []
    i = j = 0
    last_a = last_b = 0

    while i < len(side_a) or j < len(side_b):
        take_a = j >= len(side_b) or (
            i < len(side_a) and side_a[i].elapsed_seconds <= side_b[j].elapsed_seconds
        )
        if take_a:
            point = side_a[i]
            last_a = point.value
            i += 1
        else:
            point = side_b[j]
            last_b = point.value
            j += 1

        if rows and rows[-1][0] == point.elapsed_seconds:
            rows[-1] = (point.elapsed_seconds, last_a, last_b)
        else:
            rows.append((point.elapsed_seconds, last_a, last_b))

    return rows
