"""Bout statistics - rebuild post-hoc stats from a match event log.

Takes a closed snapshot of scoring/cancellation events plus the match
record and its periods, and derives per-side score progression, touches
by period and best runs, reconciled against the authoritative score.

Usage:
    from bout_stats import reconstruct, reconstruct_match
"""

# Domain types
from .models import (
    BestRuns,
    BounceBack,
    EventKind,
    LeadingShare,
    Match,
    MatchEvent,
    MatchSnapshot,
    MatchStatistics,
    Period,
    PeriodTally,
    ResolvedEvent,
    ScoreProgression,
    ScoreType,
    SeriesPoint,
    Side,
)

# Collaborator boundary
from .collaborators import (
    EventStore,
    InMemoryMatchStore,
    MatchNotFoundError,
    MatchRegistry,
    SnapshotFetchError,
    fetch_snapshot,
)

# Diagnostics and entry points
from .services.diagnostics import Diagnostic, DiagnosticCode, DiagnosticSink
from .services.reconstruction import reconstruct, reconstruct_match

__all__ = [
    "BestRuns",
    "BounceBack",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticSink",
    "EventKind",
    "EventStore",
    "InMemoryMatchStore",
    "LeadingShare",
    "Match",
    "MatchEvent",
    "MatchNotFoundError",
    "MatchRegistry",
    "MatchSnapshot",
    "MatchStatistics",
    "Period",
    "PeriodTally",
    "ResolvedEvent",
    "ScoreProgression",
    "ScoreType",
    "SeriesPoint",
    "Side",
    "SnapshotFetchError",
    "fetch_snapshot",
    "reconstruct",
    "reconstruct_match",
]
