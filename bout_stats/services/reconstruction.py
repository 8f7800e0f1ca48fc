"""Reconstruction of bout statistics from an event log snapshot.

Stage order:
1. Reset-segment filter (latest restart only)
2. Normalize - order events, fill missing elapsed time
3. Cancellations - drop cancels, cancelled scores, exact-id duplicates
4. Identity - attribute each effective event to a current slot
5. Independent consumers of the resolved stream:
   - Periods -> touches by period
   - Progression -> reconciliation against the authoritative score
   - Best runs, lead changes, double touch count
   - Time and score leading shares, bounce-back times

Each stage takes the previous stage's value and returns a new one along
with its own diagnostics. Nothing outlives a call, so reconstructing the
same snapshot twice gives identical statistics.
"""

from __future__ import annotations

import logging

from ..collaborators import EventStore, MatchRegistry, fetch_snapshot
from ..config import get_settings
from ..models import MatchSnapshot, MatchStatistics
from .bounce_back import bounce_back
from .cancellation import resolve_cancellations
from .diagnostics import DiagnosticSink, LoggingDiagnosticSink, count_by_code
from .event_normalizer import filter_latest_reset_segment, normalize_events
from .identity import resolve_identities
from .lead_changes import count_lead_changes
from .leading import score_leading, time_leading
from .period_classifier import (
    DEFAULT_BOUNDARY_TOLERANCE_SECONDS,
    DEFAULT_PERIOD_NUMBER,
    classify_periods,
)
from .progression import build_progression
from .reconciler import reconcile
from .runs import best_runs
from .touch_tally import tally_touches

logger = logging.getLogger(__name__)


def reconstruct(
    snapshot: MatchSnapshot,
    *,
    tolerance_seconds: float = DEFAULT_BOUNDARY_TOLERANCE_SECONDS,
    default_period: int = DEFAULT_PERIOD_NUMBER,
    latest_segment_only: bool = True,
) -> MatchStatistics:
    """
    Derive all statistics from one snapshot.

    This is a PURE FUNCTION of its arguments.

    Args:
        snapshot: Events, match record and periods
        tolerance_seconds: Nearest-boundary window for period classification
        default_period: Period for events no rule can place
        latest_segment_only: Ignore events from before the latest reset

    Returns:
        MatchStatistics with diagnostics in stage order
    """
    match = snapshot.match
    events = list(snapshot.events)
    if latest_segment_only:
        events = filter_latest_reset_segment(events)

    normalized = normalize_events(events)
    cancellation = resolve_cancellations(normalized)
    identity = resolve_identities(cancellation.events, match)
    resolved = identity.events

    classification = classify_periods(
        resolved,
        snapshot.periods,
        tolerance_seconds=tolerance_seconds,
        default_period=default_period,
    )
    touches_by_period = tally_touches(
        classification.events,
        snapshot.periods,
        default_period=default_period,
    )

    raw_progression = build_progression(resolved)
    reconciliation = reconcile(raw_progression, match)

    diagnostics = (
        cancellation.diagnostics
        + identity.diagnostics
        + classification.diagnostics
        + reconciliation.diagnostics
    )

    stats = MatchStatistics(
        match_id=match.match_id,
        progression=reconciliation.progression,
        raw_progression=raw_progression,
        touches_by_period=touches_by_period,
        best_runs=best_runs(resolved),
        double_touch_count=sum(1 for event in resolved if event.is_double),
        lead_changes=count_lead_changes(resolved),
        time_leading=time_leading(resolved),
        score_leading=score_leading(resolved),
        bounce_back=bounce_back(resolved),
        diagnostics=diagnostics,
    )

    logger.info(
        "match_reconstructed",
        extra={
            "match_id": match.match_id,
            "input_events": len(snapshot.events),
            "effective_events": len(resolved),
            "periods": len(snapshot.periods),
            "diagnostics": count_by_code(diagnostics),
        },
    )
    return stats


def reconstruct_match(
    match_id: str,
    event_store: EventStore,
    registry: MatchRegistry,
    sink: DiagnosticSink | None = None,
    tolerance_seconds: float | None = None,
) -> MatchStatistics:
    """
    Fetch a snapshot once and reconstruct it with the configured settings.

    Raises:
        SnapshotFetchError: A collaborator failed; no partial result
    """
    settings = get_settings()
    snapshot = fetch_snapshot(match_id, event_store, registry)
    stats = reconstruct(
        snapshot,
        tolerance_seconds=(
            tolerance_seconds
            if tolerance_seconds is not None
            else settings.period_boundary_tolerance_seconds
        ),
        default_period=settings.default_period_number,
        latest_segment_only=settings.latest_reset_segment_only,
    )
    if settings.emit_diagnostics and stats.diagnostics:
        (sink or LoggingDiagnosticSink()).emit(match_id, stats.diagnostics)
    return stats
