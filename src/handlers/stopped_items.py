"""GET /tracking/stopped: trips and shipments whose live status is stalled."""

from typing import Any

from tracklog.clients import get_shipment_registry, get_trip_registry
from tracklog.http import handle_errors, json_response, organization_id_from
from tracklog.services.stats import list_stopped_items


@handle_errors("Stopped items")
def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    items = list_stopped_items(organization_id_from(event), get_trip_registry(), get_shipment_registry())
    return json_response(200, [item.model_dump(mode="json") for item in items])
