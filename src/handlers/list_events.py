"""GET /tracking/events: enriched, filtered event feed (most recent first)."""

from typing import Any

from tracklog.clients import get_event_store, get_shipment_registry, get_stops_directory, get_trip_registry
from tracklog.config import get_config
from tracklog.http import handle_errors, json_response, organization_id_from, query_params
from tracklog.services.query import list_events, parse_filters


@handle_errors("List events")
def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    organization_id = organization_id_from(event)
    filters = parse_filters(query_params(event))

    events = list_events(
        organization_id,
        filters,
        get_event_store(),
        get_trip_registry(),
        get_shipment_registry(),
        get_stops_directory(),
        limit=get_config().event_window_limit,
    )
    return json_response(200, [e.model_dump(mode="json") for e in events])
