"""
Pydantic schemas for the tracked records consumed by the analytics engine.
Records arrive from the persistence layer as camelCase documents; snake_case
field names are accepted as well.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Tuple, Union

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    TypeAdapter,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

logger = logging.getLogger("app_logger")


def as_utc(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]
RecordId = Annotated[str, BeforeValidator(lambda v: str(v) if isinstance(v, (int, float)) else v)]


def lenient(inner: Any, label: str, fallback: Any = None) -> BeforeValidator:
    """
    Validator for optional detail fields: a missing or unreadable value falls back
    to ``fallback`` so the rest of the record is still counted.
    """
    adapter = TypeAdapter(inner)

    def _validate(value: Any) -> Any:
        if value is None:
            return fallback
        try:
            return adapter.validate_python(value)
        except ValidationError:
            logger.warning(f"[RECORDS] Unreadable {label} {value!r}; using {fallback!r}")
            return fallback

    return BeforeValidator(_validate)


Rating = Annotated[float, Field(ge=1, le=5)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class RecordKind(str, Enum):
    job = "job"
    interview = "interview"
    networking_event = "networking_event"
    relationship_activity = "relationship_activity"


class StatusEntry(CamelModel):
    state: str = Field(..., validation_alias=AliasChoices("state", "status"))
    timestamp: UtcDatetime


_HISTORY_ADAPTER = TypeAdapter(Tuple[StatusEntry, ...])


class TrackedRecord(CamelModel):
    """
    Common shape of every record the engine aggregates.

    ``status_history`` is ``None`` when the source document carried a history that
    could not be read; an empty tuple means the record simply has no history yet.
    """

    id: RecordId = Field(..., validation_alias=AliasChoices("id", "_id"))
    kind: RecordKind
    current_state: str = Field(..., validation_alias=AliasChoices("currentState", "current_state", "status"))
    status_history: Optional[Tuple[StatusEntry, ...]] = ()
    created_at: Optional[UtcDatetime] = None
    key_date: Optional[UtcDatetime] = None
    deadline: Optional[UtcDatetime] = None
    archived: bool = False
    company: Optional[str] = None
    industry: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_unreadable_history(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        for key in ("statusHistory", "status_history"):
            if key not in data or data[key] is None:
                continue
            try:
                _HISTORY_ADAPTER.validate_python(data[key])
            except ValidationError as exc:
                logger.warning(
                    f"[RECORDS] Unreadable status history on record {data.get('id', data.get('_id'))}: "
                    f"{exc.error_count()} error(s); history ignored"
                )
                data = {**data, key: None}
        return data

    @property
    def has_history(self) -> bool:
        return self.status_history is not None

    @property
    def history(self) -> Tuple[StatusEntry, ...]:
        return self.status_history or ()

    def states_seen(self) -> frozenset:
        """Every state the record is in or has passed through."""
        return frozenset(entry.state for entry in self.history) | {self.current_state}

    def first_entry(self, state: str) -> Optional[StatusEntry]:
        for entry in self.history:
            if entry.state == state:
                return entry
        return None


class JobRecord(TrackedRecord):
    kind: Literal["job"] = "job"
    key_date: Optional[UtcDatetime] = Field(
        None, validation_alias=AliasChoices("keyDate", "key_date", "applicationDate", "application_date")
    )
    work_mode: Optional[str] = None
    title: Optional[str] = None


class InterviewOutcome(CamelModel):
    result: Optional[str] = None
    rating: Annotated[Optional[float], lenient(Rating, "outcome.rating")] = None
    feedback: Optional[str] = None


class InterviewRecord(TrackedRecord):
    kind: Literal["interview"] = "interview"
    key_date: Optional[UtcDatetime] = Field(
        None, validation_alias=AliasChoices("keyDate", "key_date", "scheduledDate", "scheduled_date")
    )
    interview_type: Optional[str] = None
    duration: Annotated[Optional[float], lenient(NonNegativeFloat, "duration")] = None
    outcome: Optional[InterviewOutcome] = None

    @property
    def result(self) -> Optional[str]:
        return self.outcome.result if self.outcome else None

    @property
    def rating(self) -> Optional[float]:
        return self.outcome.rating if self.outcome else None


class RelationshipActivityRecord(TrackedRecord):
    """One logged interaction with a contact. Its state is the activity type."""

    kind: Literal["relationship_activity"] = "relationship_activity"
    key_date: Optional[UtcDatetime] = Field(
        None, validation_alias=AliasChoices("keyDate", "key_date", "activityDate", "activity_date")
    )
    activity_type: Annotated[str, lenient(str, "activityType", "Other")] = "Other"
    direction: Annotated[str, lenient(str, "direction", "Outbound")] = "Outbound"
    sentiment: Annotated[str, lenient(str, "sentiment", "Neutral")] = "Neutral"
    response_received: Annotated[bool, lenient(bool, "responseReceived", False)] = False
    response_time: Annotated[Optional[float], lenient(NonNegativeFloat, "responseTime")] = None
    value_exchange: Annotated[str, lenient(str, "valueExchange", "None")] = "None"
    value_type: Optional[str] = None
    opportunity_generated: Annotated[bool, lenient(bool, "opportunityGenerated", False)] = False
    opportunity_type: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _state_from_activity_type(cls, data: Any) -> Any:
        if isinstance(data, dict) and not any(k in data for k in ("currentState", "current_state", "status")):
            activity_type = data.get("activityType", data.get("activity_type"))
            data = {**data, "currentState": activity_type or "Other"}
        return data


class NetworkingEventRecord(TrackedRecord):
    kind: Literal["networking_event"] = "networking_event"
    current_state: str = Field(
        ...,
        validation_alias=AliasChoices("currentState", "current_state", "attendanceStatus", "attendance_status", "status"),
    )
    key_date: Optional[UtcDatetime] = Field(
        None, validation_alias=AliasChoices("keyDate", "key_date", "eventDate", "event_date")
    )
    name: Optional[str] = None
    cost: Annotated[float, lenient(NonNegativeFloat, "cost", 0.0)] = 0.0
    connections_gained: Annotated[int, lenient(NonNegativeInt, "connectionsGained", 0)] = 0
    job_leads_generated: Annotated[int, lenient(NonNegativeInt, "jobLeadsGenerated", 0)] = 0
    roi_rating: Annotated[Optional[float], lenient(Rating, "roiRating")] = None
    linked_job_applications: Tuple[str, ...] = ()


NetworkingRecord = Annotated[
    Union[RelationshipActivityRecord, NetworkingEventRecord],
    Field(discriminator="kind"),
]
