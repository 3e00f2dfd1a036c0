"""Read-side shapes joined in from the trip, shipment and stop registries."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class ReferenceData(BaseModel):
    code: str
    status: str
    origin: str | None = None
    destination: str | None = None


class StopLabel(BaseModel):
    id: str
    name: str
    city: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        return str(value)


class TrackableRecord(BaseModel):
    """Current state of a trip or shipment as owned by its registry."""

    id: str
    code: str
    status: str
    origin_label: str | None = None
    destination_label: str | None = None
    updated_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        return str(value)


class StoppedItem(BaseModel):
    type: str = Field(..., pattern="^(trip|shipment)$")
    id: str
    code: str
    status: str
    stopped_since: datetime | None = None


class ReferenceMatch(BaseModel):
    type: str = Field(..., pattern="^(trip|shipment)$")
    id: str
    code: str
    status: str


class TrackingStats(BaseModel):
    """Dashboard counters.

    Log counts and live-status counts are read independently and may be
    skewed relative to each other; they are not a transactional snapshot.
    """

    total_events: int = Field(..., ge=0)
    trip_events: int = Field(..., ge=0)
    shipment_events: int = Field(..., ge=0)
    today_events: int = Field(..., ge=0)
    stopped_items: int = Field(..., ge=0)
