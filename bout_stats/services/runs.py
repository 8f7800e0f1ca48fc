"""
Best-run calculation.

A run is a streak of unanswered scoring by one side. Period boundaries
are ignored: a run carries across rounds.

- A scoring event for the focal side extends the run by one, whatever
  its point value (a two-point card is still one scoring event).
- A touch for the opposing side resets it to 0.
- A neutral event (double touch) neither extends nor resets it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..models import BestRuns, ResolvedEvent, Side


@dataclass
class _RunState:
    current: int = 0
    best: int = 0

    def extend(self) -> None:
        self.current += 1
        self.best = max(self.best, self.current)

    def reset(self) -> None:
        self.current = 0


def best_run(events: Sequence[ResolvedEvent], side: Side) -> int:
    """
    Longest scoring streak for ``side``.

    Args:
        events: Resolved, time-ordered effective events
        side: The focal side

    Returns:
        Length of the longest run in scoring events
    """
    state = _RunState()
    for resolved in events:
        if resolved.side is None:
            continue
        if resolved.side is side:
            state.extend()
        else:
            state.reset()
    return state.best


def best_runs(events: Sequence[ResolvedEvent]) -> BestRuns:
    """Best run for both sides."""
    return BestRuns(side_a=best_run(events, Side.A), side_b=best_run(events, Side.B))
