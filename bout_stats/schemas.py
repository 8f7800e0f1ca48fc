"""Pydantic models for collaborator rows and the statistics payload.

Rows coming from the event store and match registry are validated here
and converted into the immutable domain models. Field names accept both
snake_case and the camelCase names used by the scoring remote.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import (
    EventKind,
    LeadingShare,
    Match,
    MatchEvent,
    MatchSnapshot,
    MatchStatistics,
    Period,
    ScoreType,
    SeriesPoint,
    Side,
)
from .services.diagnostics import Diagnostic
from .utils.datetime_utils import ensure_utc


# =============================================================================
# COLLABORATOR ROWS
# =============================================================================


class MatchEventRecord(BaseModel):
    """One row of the match event log."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1)
    kind: EventKind
    wall_clock_time: datetime = Field(..., alias="wallClockTime")
    scorer_label: str | None = Field(None, alias="scorerLabel")
    slot_a_label_at_creation: str | None = Field(None, alias="slotALabelAtCreation")
    slot_b_label_at_creation: str | None = Field(None, alias="slotBLabelAtCreation")
    elapsed_seconds: int | None = Field(None, ge=0, alias="elapsedSeconds")
    cancelled_event_id: str | None = Field(None, alias="cancelledEventId")
    period_ref: str | None = Field(None, alias="periodRef")
    score_type: ScoreType = Field(ScoreType.TOUCH, alias="scoreType")
    points_awarded: int | None = Field(None, ge=0, alias="pointsAwarded")
    card_given: str | None = Field(None, alias="cardGiven")
    reset_segment: int = Field(0, alias="resetSegment")

    @field_validator("kind", "score_type", mode="before")
    @classmethod
    def lowercase_enum(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("reset_segment", mode="before")
    @classmethod
    def missing_segment_is_zero(cls, value: object) -> object:
        return 0 if value is None else value

    def to_domain(self) -> MatchEvent:
        return MatchEvent(
            id=self.id,
            kind=self.kind,
            wall_clock_time=ensure_utc(self.wall_clock_time),
            scorer_label=self.scorer_label,
            slot_a_label_at_creation=self.slot_a_label_at_creation,
            slot_b_label_at_creation=self.slot_b_label_at_creation,
            elapsed_seconds=self.elapsed_seconds,
            cancelled_event_id=self.cancelled_event_id,
            period_ref=self.period_ref,
            score_type=self.score_type,
            points_awarded=self.points_awarded,
            card_given=self.card_given,
            reset_segment=self.reset_segment,
        )


class PeriodRecord(BaseModel):
    """One period (round) of a match."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    number: int = Field(..., ge=1)
    start_time: datetime = Field(..., alias="startTime")
    end_time: datetime | None = Field(None, alias="endTime")
    period_id: str | None = Field(None, alias="periodId")

    def to_domain(self) -> Period:
        return Period(
            number=self.number,
            start_time=ensure_utc(self.start_time),
            end_time=ensure_utc(self.end_time) if self.end_time is not None else None,
            period_id=self.period_id,
        )


class MatchRecord(BaseModel):
    """The match registry's present-day record."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    match_id: str = Field(..., alias="matchId")
    current_slot_a_label: str | None = Field(None, alias="currentSlotALabel")
    current_slot_b_label: str | None = Field(None, alias="currentSlotBLabel")
    authoritative_score_a: int | None = Field(None, ge=0, alias="authoritativeScoreA")
    authoritative_score_b: int | None = Field(None, ge=0, alias="authoritativeScoreB")

    def to_domain(self) -> Match:
        return Match(
            match_id=self.match_id,
            current_slot_a_label=self.current_slot_a_label,
            current_slot_b_label=self.current_slot_b_label,
            authoritative_score_a=self.authoritative_score_a,
            authoritative_score_b=self.authoritative_score_b,
        )


class SnapshotDocument(BaseModel):
    """A complete snapshot as exported to JSON (used by the CLI)."""

    model_config = ConfigDict(populate_by_name=True)

    match: MatchRecord
    periods: list[PeriodRecord] = Field(default_factory=list)
    events: list[MatchEventRecord] = Field(default_factory=list)

    def to_snapshot(self) -> MatchSnapshot:
        return MatchSnapshot(
            match=self.match.to_domain(),
            periods=tuple(period.to_domain() for period in self.periods),
            events=tuple(event.to_domain() for event in self.events),
        )


# =============================================================================
# RESPONSE PAYLOAD
# =============================================================================


class SeriesPointModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    elapsed_seconds: int = Field(..., alias="elapsedSeconds")
    value: int

    @classmethod
    def from_point(cls, point: SeriesPoint) -> "SeriesPointModel":
        return cls(elapsed_seconds=point.elapsed_seconds, value=point.value)


class PeriodTallyModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    period: int
    side_a: int = Field(..., alias="sideA")
    side_b: int = Field(..., alias="sideB")


class LeadingShareModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    side_a: int = Field(..., alias="sideA")
    side_b: int = Field(..., alias="sideB")
    tied: int

    @classmethod
    def from_share(cls, share: LeadingShare) -> "LeadingShareModel":
        return cls(side_a=share.side_a, side_b=share.side_b, tied=share.tied)


class DiagnosticModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: str
    side: str | None = None
    expected: int | None = None
    observed: int | None = None
    event_id: str | None = Field(None, alias="eventId")
    detail: str | None = None

    @classmethod
    def from_diagnostic(cls, diagnostic: Diagnostic) -> "DiagnosticModel":
        return cls(
            code=diagnostic.code.value,
            side=diagnostic.side.value if diagnostic.side is not None else None,
            expected=diagnostic.expected,
            observed=diagnostic.observed,
            event_id=diagnostic.event_id,
            detail=diagnostic.detail,
        )


class MatchStatisticsResponse(BaseModel):
    """Payload handed to the presentation layer."""

    model_config = ConfigDict(populate_by_name=True)

    match_id: str = Field(..., alias="matchId")
    side_a_series: list[SeriesPointModel] = Field(..., alias="sideASeries")
    side_b_series: list[SeriesPointModel] = Field(..., alias="sideBSeries")
    touches_by_period: list[PeriodTallyModel] = Field(..., alias="touchesByPeriod")
    focal_side: Side = Field(Side.A, alias="focalSide")
    best_run: int = Field(..., alias="bestRun")
    best_run_a: int = Field(..., alias="bestRunA")
    best_run_b: int = Field(..., alias="bestRunB")
    double_touch_count: int = Field(0, alias="doubleTouchCount")
    lead_changes: int = Field(0, alias="leadChanges")
    time_leading: LeadingShareModel = Field(..., alias="timeLeading")
    score_leading: LeadingShareModel = Field(..., alias="scoreLeading")
    bounce_back_a: int = Field(0, alias="bounceBackA")
    bounce_back_b: int = Field(0, alias="bounceBackB")
    diagnostics: list[DiagnosticModel] = Field(default_factory=list)

    @classmethod
    def from_statistics(
        cls,
        stats: MatchStatistics,
        focal_side: Side = Side.A,
    ) -> "MatchStatisticsResponse":
        return cls(
            match_id=stats.match_id,
            side_a_series=[SeriesPointModel.from_point(p) for p in stats.progression.side_a],
            side_b_series=[SeriesPointModel.from_point(p) for p in stats.progression.side_b],
            touches_by_period=[
                PeriodTallyModel(period=number, side_a=tally.side_a, side_b=tally.side_b)
                for number, tally in stats.touches_by_period.items()
            ],
            focal_side=focal_side,
            best_run=stats.best_run(focal_side),
            best_run_a=stats.best_runs.side_a,
            best_run_b=stats.best_runs.side_b,
            double_touch_count=stats.double_touch_count,
            lead_changes=stats.lead_changes,
            time_leading=LeadingShareModel.from_share(stats.time_leading),
            score_leading=LeadingShareModel.from_share(stats.score_leading),
            bounce_back_a=stats.bounce_back.side_a,
            bounce_back_b=stats.bounce_back.side_b,
            diagnostics=[DiagnosticModel.from_diagnostic(d) for d in stats.diagnostics],
        )
