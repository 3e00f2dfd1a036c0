from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from tracklog.models.references import ReferenceData, StopLabel


class ReferenceType(str, Enum):
    TRIP = "trip"
    SHIPMENT = "shipment"


class ActorType(str, Enum):
    USER = "user"
    SYSTEM = "system"


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class EventSubmission(BaseModel):
    """Producer input for a new tracking event.

    ``actor_type`` is inferred when omitted: ``user`` if ``actor_id`` is given,
    ``system`` otherwise. ``source`` defaults to ``manual``. ``event_time``
    defaults to ingestion time.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    reference_type: ReferenceType
    reference_id: str = Field(..., min_length=1, max_length=64)
    event_type: str = Field(..., min_length=1, max_length=64)
    event_time: datetime | None = None
    description: str | None = None
    location_text: str | None = None
    stop_id: str | None = None
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    actor_type: ActorType | None = None
    actor_id: str | None = None
    payload: dict[str, Any] | None = None
    external_event_id: str | None = Field(default=None, max_length=255)
    source: str = Field(default="manual", min_length=1, max_length=30)

    @field_validator(
        "description", "location_text", "stop_id", "actor_id", "external_event_id", mode="after"
    )
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        return value or None

    @field_validator("event_time", mode="after")
    @classmethod
    def event_time_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class NewEvent(BaseModel):
    """A fully defaulted event, ready to be appended once a sequence is allocated."""

    model_config = ConfigDict(frozen=True)

    reference_type: ReferenceType
    reference_id: str
    event_type: str
    event_time: datetime
    stop_id: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    actor_type: ActorType
    actor_id: str | None = None
    description: str | None = None
    location_text: str | None = None
    payload: dict[str, Any] | None = None
    external_event_id: str | None = None
    source: str


class TrackingEvent(NewEvent):
    id: str
    sequence: int = Field(..., ge=1)
    created_at: datetime

    @field_validator("id", "reference_id", "stop_id", "actor_id", mode="before")
    @classmethod
    def stringify_ids(cls, value: Any) -> Any:
        # UUID columns come back from the driver as uuid.UUID
        return str(value) if value is not None else None


class EnrichedEvent(TrackingEvent):
    reference_data: ReferenceData | None = None
    stop: StopLabel | None = None


class EventFilters(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    reference_type: str = Field(default="all", pattern="^(trip|shipment|all)$")
    date_from: datetime | None = None
    date_to: datetime | None = None
    search: str | None = None

    @field_validator("date_from", "date_to", mode="after")
    @classmethod
    def dates_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @field_validator("search", mode="after")
    @classmethod
    def blank_search(cls, value: str | None) -> str | None:
        return value or None

    @model_validator(mode="after")
    def date_range_ordered(self) -> "EventFilters":
        if self.date_from and self.date_to and self.date_to < self.date_from:
            raise ValueError("date_to must not be before date_from")
        return self

    @property
    def reference_type_filter(self) -> ReferenceType | None:
        if self.reference_type == "all":
            return None
        return ReferenceType(self.reference_type)
