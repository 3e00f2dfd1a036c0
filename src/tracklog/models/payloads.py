"""Per-event-type payload schemas.

Payloads stay opaque JSON objects in storage. Event types listed in
PAYLOAD_SCHEMAS are validated against their model on ingestion; any other
event type accepts an arbitrary object.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class IncidentPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    severity: str = Field(..., pattern="^(low|medium|high|critical)$")
    category: str | None = None
    requires_assistance: bool = False


class DelayPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    delay_minutes: int = Field(..., ge=0)
    reason: str | None = None


class PositionUpdatePayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    speed_kmh: float | None = Field(default=None, ge=0.0)
    heading_deg: float | None = Field(default=None, ge=0.0, lt=360.0)
    accuracy_m: float | None = Field(default=None, ge=0.0)


PAYLOAD_SCHEMAS: dict[str, type[BaseModel]] = {
    "incident": IncidentPayload,
    "delayed": DelayPayload,
    "position_update": PositionUpdatePayload,
}


def register_payload_schema(event_type: str, schema: type[BaseModel]) -> None:
    PAYLOAD_SCHEMAS[event_type] = schema


def validate_payload(event_type: str, payload: dict[str, Any] | None) -> dict[str, Any] | None:
    """Return the normalized payload, raising pydantic.ValidationError on a schema mismatch."""
    if payload is None:
        return None
    schema = PAYLOAD_SCHEMAS.get(event_type)
    if schema is None:
        return payload
    return schema.model_validate(payload).model_dump(mode="json", exclude_none=True)
