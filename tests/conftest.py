"""pytest configuration and fixtures."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta, timezone

import pytest

# Set required environment variables for testing before any imports
os.environ.setdefault("ENVIRONMENT", "development")

from bout_stats.config import get_settings  # noqa: E402
from bout_stats.models import (  # noqa: E402
    EventKind,
    Match,
    MatchEvent,
    MatchSnapshot,
    Period,
    ScoreType,
)

MATCH_START = datetime(2026, 3, 14, 18, 0, 0, tzinfo=timezone.utc)


def at(seconds: float) -> datetime:
    """Wall-clock time ``seconds`` after the match started."""
    return MATCH_START + timedelta(seconds=seconds)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """configure_logging replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def score():
    """Build a score event. Wall clock defaults to the elapsed second."""

    def _score(
        event_id: str,
        scorer: str | None,
        elapsed: int | None = None,
        wall: float | None = None,
        slot_a: str | None = "Alice",
        slot_b: str | None = "Bob",
        **kwargs,
    ) -> MatchEvent:
        if wall is None:
            wall = elapsed if elapsed is not None else 0
        return MatchEvent(
            id=event_id,
            kind=EventKind.SCORE,
            wall_clock_time=at(wall),
            scorer_label=scorer,
            slot_a_label_at_creation=slot_a,
            slot_b_label_at_creation=slot_b,
            elapsed_seconds=elapsed,
            **kwargs,
        )

    return _score


@pytest.fixture
def double():
    def _double(event_id: str, elapsed: int | None = None, wall: float | None = None, **kwargs):
        if wall is None:
            wall = elapsed if elapsed is not None else 0
        return MatchEvent(
            id=event_id,
            kind=EventKind.SCORE,
            wall_clock_time=at(wall),
            elapsed_seconds=elapsed,
            score_type=ScoreType.DOUBLE,
            slot_a_label_at_creation="Alice",
            slot_b_label_at_creation="Bob",
            **kwargs,
        )

    return _double


@pytest.fixture
def cancel():
    def _cancel(
        event_id: str,
        target: str | None,
        elapsed: int | None = None,
        wall: float | None = None,
        **kwargs,
    ) -> MatchEvent:
        if wall is None:
            wall = elapsed if elapsed is not None else 0
        return MatchEvent(
            id=event_id,
            kind=EventKind.CANCEL,
            wall_clock_time=at(wall),
            elapsed_seconds=elapsed,
            cancelled_event_id=target,
            **kwargs,
        )

    return _cancel


@pytest.fixture
def match():
    def _match(
        slot_a: str | None = "Alice",
        slot_b: str | None = "Bob",
        score_a: int | None = None,
        score_b: int | None = None,
        match_id: str = "match-1",
    ) -> Match:
        return Match(
            match_id=match_id,
            current_slot_a_label=slot_a,
            current_slot_b_label=slot_b,
            authoritative_score_a=score_a,
            authoritative_score_b=score_b,
        )

    return _match


@pytest.fixture
def period():
    def _period(
        number: int,
        start: float,
        end: float | None = None,
        period_id: str | None = None,
    ) -> Period:
        return Period(
            number=number,
            start_time=at(start),
            end_time=at(end) if end is not None else None,
            period_id=period_id,
        )

    return _period


@pytest.fixture
def snapshot():
    def _snapshot(match: Match, events=(), periods=()) -> MatchSnapshot:
        return MatchSnapshot(match=match, events=tuple(events), periods=tuple(periods))

    return _snapshot
