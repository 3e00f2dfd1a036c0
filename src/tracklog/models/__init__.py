"""
Pydantic models for the tracking log.
"""

from tracklog.models.events import (
    ActorType,
    EnrichedEvent,
    EventFilters,
    EventSubmission,
    NewEvent,
    ReferenceType,
    TrackingEvent,
)
from tracklog.models.references import (
    ReferenceData,
    ReferenceMatch,
    StopLabel,
    StoppedItem,
    TrackableRecord,
    TrackingStats,
)

__all__ = [
    "ActorType",
    "EnrichedEvent",
    "EventFilters",
    "EventSubmission",
    "NewEvent",
    "ReferenceData",
    "ReferenceMatch",
    "ReferenceType",
    "StopLabel",
    "StoppedItem",
    "TrackableRecord",
    "TrackingEvent",
    "TrackingStats",
]
