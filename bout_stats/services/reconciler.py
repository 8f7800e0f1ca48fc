"""
Reconciliation of derived series against the authoritative final score.

The match registry owns the true final score. The derived series must
never claim more than that:

- OVER-COUNT: trailing points are trimmed until the last retained value
  is <= the authoritative score, then that last point is set to the
  authoritative score exactly.
- UNDER-COUNT: nothing is added. Inventing a touch time is worse than an
  incomplete chart, so the series is left as is.

Either way a ``ScoreReconciliationMismatch`` diagnostic records
``{side, expected, observed}``. Reconciliation never raises.

A side whose authoritative score is unknown (match still in progress) is
passed through unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from ..models import ORIGIN, Match, ScoreProgression, SeriesPoint, Side
from .diagnostics import Diagnostic, DiagnosticCode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationResult:
    progression: ScoreProgression
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)


def cap_series(series: Sequence[SeriesPoint], limit: int) -> tuple[SeriesPoint, ...]:
    """Trim trailing points above ``limit`` and pin the last one to it."""
    kept = list(series) or [ORIGIN]
    while len(kept) > 1 and kept[-1].value > limit:
        kept.pop()
    last = kept[-1]
    kept[-1] = SeriesPoint(last.elapsed_seconds, limit)
    return tuple(kept)


def reconcile_side(
    series: Sequence[SeriesPoint],
    side: Side,
    authoritative: int | None,
) -> tuple[tuple[SeriesPoint, ...], Diagnostic | None]:
    """Reconcile one side's series. Returns (series, diagnostic or None)."""
    points = tuple(series) or (ORIGIN,)
    if authoritative is None:
        return points, None

    observed = points[-1].value
    if observed == authoritative:
        return points, None

    diagnostic = Diagnostic(
        code=DiagnosticCode.SCORE_RECONCILIATION_MISMATCH,
        side=side,
        expected=authoritative,
        observed=observed,
    )
    if observed > authoritative:
        return cap_series(points, authoritative), diagnostic
    return points, diagnostic


def reconcile(progression: ScoreProgression, match: Match) -> ReconciliationResult:
    """
    Align both series with the match's authoritative scores.

    Args:
        progression: Unreconciled per-side series
        match: Match record holding the authoritative scores

    Returns:
        ReconciliationResult with the capped series and mismatch diagnostics
    """
    reconciled: dict[Side, tuple[SeriesPoint, ...]] = {}
    diagnostics: list[Diagnostic] = []

    for side in (Side.A, Side.B):
        authoritative = match.authoritative_score(side)
        if authoritative is None:
            logger.debug(
                "reconciliation_skipped",
                extra={"match_id": match.match_id, "side": side.value},
            )
        series, diagnostic = reconcile_side(progression.series(side), side, authoritative)
        reconciled[side] = series
        if diagnostic is not None:
            diagnostics.append(diagnostic)
            logger.warning(
                "score_progression_mismatch",
                extra={
                    "match_id": match.match_id,
                    "side": side.value,
                    "expected": diagnostic.expected,
                    "observed": diagnostic.observed,
                    "capped": (diagnostic.observed or 0) > (diagnostic.expected or 0),
                },
            )

    return ReconciliationResult(
        progression=ScoreProgression(side_a=reconciled[Side.A], side_b=reconciled[Side.B]),
        diagnostics=tuple(diagnostics),
    )
