"""Structured diagnostics for data-quality anomalies.

The reconstruction never raises for problems found *inside* the event
log. Each anomaly degrades to a best-effort result plus one of these
records, which the caller forwards to a ``DiagnosticSink``.

TAXONOMY
========

- MalformedCancelEvent: a cancel without a target id (dropped)
- DuplicateEvent: a repeated event id (first occurrence kept)
- UnresolvableIdentity: scorer matched no slot (attributed to slot B)
- PeriodBoundaryAmbiguous: event outside every period interval
  (nearest boundary within tolerance, else the default period)
- ScoreReconciliationMismatch: derived total differs from the
  authoritative score (capped when over, flagged when under)

Missing timing data is repaired by normalization and only logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Protocol

from ..models import Side

logger = logging.getLogger(__name__)


class DiagnosticCode(str, Enum):
    MALFORMED_CANCEL_EVENT = "MalformedCancelEvent"
    DUPLICATE_EVENT = "DuplicateEvent"
    UNRESOLVABLE_IDENTITY = "UnresolvableIdentity"
    PERIOD_BOUNDARY_AMBIGUOUS = "PeriodBoundaryAmbiguous"
    SCORE_RECONCILIATION_MISMATCH = "ScoreReconciliationMismatch"


@dataclass(frozen=True)
class Diagnostic:
    """A single data-quality finding."""
    code: DiagnosticCode
    side: Side | None = None
    expected: int | None = None
    observed: int | None = None
    event_id: str | None = None
    detail: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"code": self.code.value}
        if self.side is not None:
            result["side"] = self.side.value
        if self.expected is not None:
            result["expected"] = self.expected
        if self.observed is not None:
            result["observed"] = self.observed
        if self.event_id is not None:
            result["eventId"] = self.event_id
        if self.detail:
            result["detail"] = self.detail
        return result


class DiagnosticSink(Protocol):
    """Where diagnostics go once a reconstruction finishes."""

    def emit(self, match_id: str, diagnostics: Iterable[Diagnostic]) -> None:
        ...


class LoggingDiagnosticSink:
    """Writes every diagnostic as a WARNING record with structured extras."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def emit(self, match_id: str, diagnostics: Iterable[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            self._log.warning(
                "reconstruction_diagnostic",
                extra={"match_id": match_id, "diagnostic": diagnostic.to_dict()},
            )


def count_by_code(diagnostics: Iterable[Diagnostic]) -> dict[str, int]:
    """Summarize diagnostics for log lines."""
    counts: dict[str, int] = {}
    for diagnostic in diagnostics:
        counts[diagnostic.code.value] = counts.get(diagnostic.code.value, 0) + 1
    return counts
