"""GET /tracking/stops: active stops for operator forms."""

from typing import Any

from tracklog.clients import get_stops_directory
from tracklog.http import handle_errors, json_response, organization_id_from
from tracklog.services.search import fetch_active_stops


@handle_errors("List stops")
def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    stops = fetch_active_stops(organization_id_from(event), get_stops_directory())
    return json_response(200, [s.model_dump(mode="json") for s in stops])
