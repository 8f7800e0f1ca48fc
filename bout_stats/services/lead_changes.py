"""Lead change detection over the resolved event stream.

A lead change is when the leading side switches. Ties are not leads: the
last leader is remembered through a tie, so A leads -> tied -> B leads is
one change, while A leads -> tied -> A leads is none.
"""

from __future__ import annotations

from typing import Sequence

from ..models import ResolvedEvent, Side


def get_leader(score_a: int, score_b: int) -> Side | None:
    """Leading side, or None when tied."""
    if score_a > score_b:
        return Side.A
    if score_b > score_a:
        return Side.B
    return None


def count_lead_changes(events: Sequence[ResolvedEvent]) -> int:
    """Count lead changes over the cumulative score of ``events``."""
    score_a = score_b = 0
    last_leader: Side | None = None
    changes = 0

    for resolved in events:
        score_a += resolved.scores_for(Side.A)
        score_b += resolved.scores_for(Side.B)
        leader = get_leader(score_a, score_b)
        if leader is None:
            continue
        if last_leader is not None and leader is not last_leader:
            changes += 1
        last_leader = leader

    return changes
