"""Event feed and per-trackable history queries."""

from collections.abc import Mapping, Sequence
from typing import Any

import pydantic

from tracklog.errors import ValidationError
from tracklog.models import EnrichedEvent, EventFilters, ReferenceType
from tracklog.registries.interface import StopsDirectory, TrackableRegistry
from tracklog.services.enrichment import attach_stops, enrich_events
from tracklog.store.interface import EventStore


def parse_filters(params: Mapping[str, Any]) -> EventFilters:
    try:
        return EventFilters.model_validate(params)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid event filters: {e}") from e


def apply_search(events: Sequence[EnrichedEvent], search: str) -> list[EnrichedEvent]:
    """Keep events whose code, description or location text contains ``search``, ignoring case."""
    needle = search.casefold()

    def matches(event: EnrichedEvent) -> bool:
        code = event.reference_data.code if event.reference_data else None
        return any(needle in field.casefold() for field in (code, event.description, event.location_text) if field)

    return [e for e in events if matches(e)]


def list_events(
    organization_id: int,
    filters: EventFilters,
    store: EventStore,
    trips: TrackableRegistry,
    shipments: TrackableRegistry,
    stops: StopsDirectory | None = None,
    *,
    limit: int = 200,
) -> list[EnrichedEvent]:
    """Most recent events first, enriched, within a fixed window of ``limit`` rows.

    There is no cursor: events older than the window are only reachable by
    narrowing the date range. Search runs after enrichment, so it only sees
    the fetched window.
    """
    window = store.fetch_window(
        reference_type=filters.reference_type_filter,
        date_from=filters.date_from,
        date_to=filters.date_to,
        limit=limit,
    )
    enriched = enrich_events(window, organization_id, trips, shipments, stops)
    if filters.search:
        return apply_search(enriched, filters.search)
    return enriched


def entity_history(
    store: EventStore,
    reference_type: ReferenceType,
    reference_id: str,
    organization_id: int,
    stops: StopsDirectory,
) -> list[EnrichedEvent]:
    """Chronological history of one trackable, oldest first, each event labelled with its stop."""
    return attach_stops(store.fetch_history(reference_type, reference_id), organization_id, stops)
