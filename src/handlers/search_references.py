"""GET /tracking/references?q=: type-ahead over trip codes and tracking numbers."""

from typing import Any

from tracklog.clients import get_shipment_registry, get_trip_registry
from tracklog.config import get_config
from tracklog.http import handle_errors, json_response, organization_id_from, query_params
from tracklog.services.search import search_references


@handle_errors("Reference search")
def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    matches = search_references(
        organization_id_from(event),
        query_params(event).get("q", ""),
        get_trip_registry(),
        get_shipment_registry(),
        limit=get_config().reference_search_limit,
    )
    return json_response(200, [m.model_dump(mode="json") for m in matches])
