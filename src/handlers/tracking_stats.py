"""GET /tracking/stats: dashboard counters."""

from typing import Any

from tracklog.clients import get_event_store, get_shipment_registry, get_trip_registry
from tracklog.config import get_config
from tracklog.http import handle_errors, json_response, organization_id_from
from tracklog.services.stats import compute_stats


@handle_errors("Tracking stats")
def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    stats = compute_stats(
        organization_id_from(event),
        get_event_store(),
        get_trip_registry(),
        get_shipment_registry(),
        timezone_name=get_config().display_timezone,
    )
    return json_response(200, stats.model_dump(mode="json"))
