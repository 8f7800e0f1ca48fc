"""Domain models for bout reconstruction.

These are plain immutable value objects. Collaborator rows are parsed
into them by ``bout_stats.schemas``; every service in
``bout_stats.services`` consumes and produces these types.

IMPORTANT:
- Events are never mutated. Stages that need to attach information
  (repaired elapsed time, resolved side, period number) return new
  objects via ``dataclasses.replace``.
- A "slot" is a fixed position (A/B). The competitor occupying a slot can
  change mid-match (a swap), so slot labels recorded on an event are a
  snapshot of identity *at creation time*, not the present assignment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .services.diagnostics import Diagnostic


# =============================================================================
# ENUMS
# =============================================================================


class EventKind(str, Enum):
    """Kind of entry in the match event log."""
    SCORE = "score"
    CANCEL = "cancel"


class ScoreType(str, Enum):
    """What a score event awards."""
    TOUCH = "touch"    # one point to the scorer
    DOUBLE = "double"  # one point to each side
    CARD = "card"      # penalty against the labelled competitor


class Side(str, Enum):
    """One of the two current competitor slots."""
    A = "A"
    B = "B"

    @property
    def opponent(self) -> "Side":
        return Side.B if self is Side.A else Side.A


# =============================================================================
# INPUT SNAPSHOT
# =============================================================================


@dataclass(frozen=True)
class MatchEvent:
    """A single immutable entry of the match event log.

    ``scorer_label`` is only meaningful for score events and
    ``cancelled_event_id`` only for cancel events.
    """
    id: str
    kind: EventKind
    wall_clock_time: datetime
    scorer_label: str | None = None
    slot_a_label_at_creation: str | None = None
    slot_b_label_at_creation: str | None = None
    elapsed_seconds: int | None = None
    cancelled_event_id: str | None = None
    period_ref: str | None = None
    score_type: ScoreType = ScoreType.TOUCH
    points_awarded: int | None = None
    card_given: str | None = None
    reset_segment: int = 0

    @property
    def is_cancel(self) -> bool:
        return self.kind == EventKind.CANCEL

    @property
    def points(self) -> int:
        """Points this event awards (0 for non-scoring entries)."""
        if self.kind != EventKind.SCORE:
            return 0
        if self.score_type == ScoreType.CARD:
            if self.points_awarded is not None:
                return self.points_awarded
            return 1 if (self.card_given or "").lower() == "red" else 0
        return 1


@dataclass(frozen=True)
class Period:
    """A bounded sub-interval of the match. The last one may still be open."""
    number: int
    start_time: datetime
    end_time: datetime | None = None
    period_id: str | None = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None


@dataclass(frozen=True)
class Match:
    """Present-day match record owned by the match registry."""
    match_id: str
    current_slot_a_label: str | None
    current_slot_b_label: str | None
    authoritative_score_a: int | None = None
    authoritative_score_b: int | None = None

    def label_for(self, side: Side) -> str | None:
        return self.current_slot_a_label if side is Side.A else self.current_slot_b_label

    def authoritative_score(self, side: Side) -> int | None:
        return self.authoritative_score_a if side is Side.A else self.authoritative_score_b


@dataclass(frozen=True)
class MatchSnapshot:
    """Events, match record and periods read as one consistent snapshot."""
    match: Match
    events: tuple[MatchEvent, ...] = ()
    periods: tuple[Period, ...] = ()


# =============================================================================
# DERIVED VALUES
# =============================================================================


@dataclass(frozen=True)
class ResolvedEvent:
    """An effective score event attributed to a current slot.

    ``side`` is None for a double touch, which scores for both slots.
    ``period`` is filled in by the period classifier.
    """
    event: MatchEvent
    side: Side | None
    points: int
    period: int | None = None

    @property
    def elapsed_seconds(self) -> int:
        return self.event.elapsed_seconds or 0

    @property
    def is_double(self) -> bool:
        return self.side is None

    def scores_for(self, side: Side) -> int:
        """Points this event adds to ``side``."""
        if self.side is None or self.side is side:
            return self.points
        return 0


@dataclass(frozen=True)
class SeriesPoint:
    """One point of a cumulative score series."""
    elapsed_seconds: int
    value: int

    def as_tuple(self) -> tuple[int, int]:
        return (self.elapsed_seconds, self.value)


ORIGIN = SeriesPoint(elapsed_seconds=0, value=0)


@dataclass(frozen=True)
class ScoreProgression:
    """Per-side cumulative score series, each starting at (0, 0)."""
    side_a: tuple[SeriesPoint, ...] = (ORIGIN,)
    side_b: tuple[SeriesPoint, ...] = (ORIGIN,)

    def series(self, side: Side) -> tuple[SeriesPoint, ...]:
        return self.side_a if side is Side.A else self.side_b

    def terminal_value(self, side: Side) -> int:
        points = self.series(side)
        return points[-1].value if points else 0


@dataclass(frozen=True)
class PeriodTally:
    """Touches per side within one period."""
    side_a: int = 0
    side_b: int = 0

    def total(self) -> int:
        return self.side_a + self.side_b


@dataclass(frozen=True)
class BestRuns:
    """Longest unanswered scoring streak for each side."""
    side_a: int = 0
    side_b: int = 0

    def for_side(self, side: Side) -> int:
        return self.side_a if side is Side.A else self.side_b


@dataclass(frozen=True)
class LeadingShare:
    """Whole percentages of the bout spent ahead or tied; they sum to 100."""
    side_a: int = 0
    side_b: int = 0
    tied: int = 100


@dataclass(frozen=True)
class BounceBack:
    """Average seconds between consecutive touches conceded, per side."""
    side_a: int = 0
    side_b: int = 0

    def for_side(self, side: Side) -> int:
        return self.side_a if side is Side.A else self.side_b


@dataclass(frozen=True)
class MatchStatistics:
    """Everything reconstructed from one snapshot."""
    match_id: str
    progression: ScoreProgression
    raw_progression: ScoreProgression
    touches_by_period: dict[int, PeriodTally]
    best_runs: BestRuns
    double_touch_count: int = 0
    lead_changes: int = 0
    time_leading: LeadingShare = field(default_factory=LeadingShare)
    score_leading: LeadingShare = field(default_factory=LeadingShare)
    bounce_back: BounceBack = field(default_factory=BounceBack)
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    def best_run(self, side: Side) -> int:
        return self.best_runs.for_side(side)
