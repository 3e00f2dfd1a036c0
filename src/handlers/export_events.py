"""GET /tracking/events/export: the filtered feed as CSV."""

from typing import Any

from tracklog.clients import get_event_store, get_shipment_registry, get_stops_directory, get_trip_registry
from tracklog.config import get_config
from tracklog.http import handle_errors, organization_id_from, query_params
from tracklog.services.export import to_csv
from tracklog.services.query import list_events, parse_filters


@handle_errors("Export events")
def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    config = get_config()
    events = list_events(
        organization_id_from(event),
        parse_filters(query_params(event)),
        get_event_store(),
        get_trip_registry(),
        get_shipment_registry(),
        get_stops_directory(),
        limit=config.event_window_limit,
    )
    return {
        "statusCode": 200,
        "headers": {
            "Content-Type": "text/csv; charset=utf-8",
            "Content-Disposition": 'attachment; filename="tracking-events.csv"',
        },
        "body": to_csv(events, timezone_name=config.display_timezone),
    }
