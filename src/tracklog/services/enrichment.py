"""Batch enrichment of events with registry data.

Distinct ids are collected per reference type and resolved with one lookup
per registry. A trackable or stop that is not found leaves its field empty;
a lookup call that fails outright aborts the whole batch.
"""

from collections.abc import Callable, Sequence
from typing import TypeVar

from tracklog.errors import ReferenceLookupError, TrackingLogError
from tracklog.models import EnrichedEvent, ReferenceData, ReferenceType, StopLabel, TrackableRecord, TrackingEvent
from tracklog.registries.interface import StopsDirectory, TrackableRegistry

T = TypeVar("T")


def _distinct_reference_ids(events: Sequence[TrackingEvent], reference_type: ReferenceType) -> list[str]:
    return list(dict.fromkeys(e.reference_id for e in events if e.reference_type == reference_type))


def _distinct_stop_ids(events: Sequence[TrackingEvent]) -> list[str]:
    return list(dict.fromkeys(e.stop_id for e in events if e.stop_id))


def _batched_lookup(label: str, lookup: Callable[[int, list[str]], dict[str, T]], organization_id: int, ids: list[str]) -> dict[str, T]:
    if not ids:
        return {}
    try:
        return lookup(organization_id, ids)
    except TrackingLogError:
        raise
    except Exception as e:
        raise ReferenceLookupError(f"{label} lookup failed: {e}") from e


def _reference_data(record: TrackableRecord | None) -> ReferenceData | None:
    if record is None:
        return None
    return ReferenceData(
        code=record.code,
        status=record.status,
        origin=record.origin_label,
        destination=record.destination_label,
    )


def _enriched(event: TrackingEvent, record: TrackableRecord | None, stop_labels: dict[str, StopLabel]) -> EnrichedEvent:
    return EnrichedEvent(
        **event.model_dump(exclude={"reference_data", "stop"}),
        reference_data=_reference_data(record),
        stop=stop_labels.get(event.stop_id) if event.stop_id else None,
    )


def _stop_labels(events: Sequence[TrackingEvent], organization_id: int, stops: StopsDirectory | None) -> dict[str, StopLabel]:
    if stops is None:
        return {}
    return _batched_lookup("Stop", stops.get_many, organization_id, _distinct_stop_ids(events))


def enrich_events(
    events: Sequence[TrackingEvent],
    organization_id: int,
    trips: TrackableRegistry,
    shipments: TrackableRegistry,
    stops: StopsDirectory | None = None,
) -> list[EnrichedEvent]:
    trip_records = _batched_lookup(
        "Trip", trips.get_many, organization_id, _distinct_reference_ids(events, ReferenceType.TRIP)
    )
    shipment_records = _batched_lookup(
        "Shipment", shipments.get_many, organization_id, _distinct_reference_ids(events, ReferenceType.SHIPMENT)
    )
    stop_labels = _stop_labels(events, organization_id, stops)

    records = {ReferenceType.TRIP: trip_records, ReferenceType.SHIPMENT: shipment_records}
    return [_enriched(e, records[e.reference_type].get(e.reference_id), stop_labels) for e in events]


def attach_stops(
    events: Sequence[TrackingEvent],
    organization_id: int,
    stops: StopsDirectory,
) -> list[EnrichedEvent]:
    """Label events with their stop only; used where the trackable is already known."""
    stop_labels = _stop_labels(events, organization_id, stops)
    return [_enriched(e, None, stop_labels) for e in events]
