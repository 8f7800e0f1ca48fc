"""Boundary with the event store and match registry.

The engine performs no I/O of its own. Callers provide collaborators that
satisfy the protocols below; ``fetch_snapshot`` reads everything the
reconstruction needs exactly once.

SNAPSHOT CONSISTENCY
====================

The event list, the match record and the periods must describe the same
instant. Reading them separately can tear (a period closing between two
fetches). A registry that can read all three atomically exposes
``read_snapshot`` and ``fetch_snapshot`` prefers it. Otherwise the three
reads are issued back to back and consistency is the collaborators'
responsibility.

Any exception raised by a collaborator aborts the reconstruction as a
``SnapshotFetchError``: without a valid snapshot there is no meaningful
partial result.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Protocol, runtime_checkable

from .models import Match, MatchEvent, MatchSnapshot, Period

logger = logging.getLogger(__name__)


class SnapshotFetchError(Exception):
    """Reading the match snapshot from a collaborator failed."""

    def __init__(self, match_id: str, message: str) -> None:
        super().__init__(f"Snapshot fetch failed for match {match_id}: {message}")
        self.match_id = match_id


class MatchNotFoundError(SnapshotFetchError):
    """The match registry has no record for the requested match."""

    def __init__(self, match_id: str) -> None:
        super().__init__(match_id, "match not found")


class EventStore(Protocol):
    def get_events_for_match(self, match_id: str) -> Iterable[MatchEvent]:
        """All events of a match, in no particular order."""
        ...


class MatchRegistry(Protocol):
    def get_match(self, match_id: str) -> Match | None:
        ...

    def get_periods(self, match_id: str) -> Iterable[Period]:
        ...


@runtime_checkable
class SnapshotReader(Protocol):
    def read_snapshot(self, match_id: str) -> MatchSnapshot | None:
        """Events, match and periods read atomically."""
        ...


def fetch_snapshot(
    match_id: str,
    event_store: EventStore,
    registry: MatchRegistry,
) -> MatchSnapshot:
    """
    Read the snapshot for one reconstruction.

    Raises:
        MatchNotFoundError: The registry does not know the match
        SnapshotFetchError: A collaborator call failed
    """
    if isinstance(registry, SnapshotReader):
        try:
            snapshot = registry.read_snapshot(match_id)
        except Exception as exc:
            raise SnapshotFetchError(match_id, str(exc)) from exc
        if snapshot is None:
            raise MatchNotFoundError(match_id)
        return snapshot

    try:
        match = registry.get_match(match_id)
        if match is None:
            raise MatchNotFoundError(match_id)
        periods = tuple(registry.get_periods(match_id))
        events = tuple(event_store.get_events_for_match(match_id))
    except SnapshotFetchError:
        raise
    except Exception as exc:
        raise SnapshotFetchError(match_id, str(exc)) from exc

    logger.debug(
        "snapshot_fetched",
        extra={"match_id": match_id, "events": len(events), "periods": len(periods)},
    )
    return MatchSnapshot(match=match, events=events, periods=periods)


class InMemoryMatchStore:
    """Event store and match registry backed by dicts.

    All reads and writes take one lock, so ``read_snapshot`` never observes
    a half-applied update. Used by the CLI and tests.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._matches: dict[str, Match] = {}
        self._periods: dict[str, tuple[Period, ...]] = {}
        self._events: dict[str, tuple[MatchEvent, ...]] = {}

    def put_snapshot(self, snapshot: MatchSnapshot) -> None:
        match_id = snapshot.match.match_id
        with self._lock:
            self._matches[match_id] = snapshot.match
            self._periods[match_id] = tuple(snapshot.periods)
            self._events[match_id] = tuple(snapshot.events)

    def append_event(self, match_id: str, event: MatchEvent) -> None:
        with self._lock:
            self._events[match_id] = self._events.get(match_id, ()) + (event,)

    def get_events_for_match(self, match_id: str) -> tuple[MatchEvent, ...]:
        with self._lock:
            return self._events.get(match_id, ())

    def get_match(self, match_id: str) -> Match | None:
        with self._lock:
            return self._matches.get(match_id)

    def get_periods(self, match_id: str) -> tuple[Period, ...]:
        with self._lock:
            return self._periods.get(match_id, ())

    def read_snapshot(self, match_id: str) -> MatchSnapshot | None:
        with self._lock:
            match = self._matches.get(match_id)
            if match is None:
                return None
            return MatchSnapshot(
                match=match,
                events=self._events.get(match_id, ()),
                periods=self._periods.get(match_id, ()),
            )
