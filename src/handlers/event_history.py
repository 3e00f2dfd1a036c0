"""GET /tracking/{reference_type}/{reference_id}/events: one trackable's history, oldest first."""

from typing import Any

from tracklog.clients import get_event_store, get_stops_directory
from tracklog.errors import ValidationError
from tracklog.http import handle_errors, json_response, organization_id_from, path_params
from tracklog.models import ReferenceType
from tracklog.services.query import entity_history


@handle_errors("Event history")
def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    params = path_params(event)
    try:
        reference_type = ReferenceType(params["reference_type"])
        reference_id = params["reference_id"].strip()
    except (KeyError, ValueError) as e:
        raise ValidationError(f"Invalid trackable reference: {params}") from e
    if not reference_id:
        raise ValidationError("reference_id must not be empty")

    history = entity_history(
        get_event_store(),
        reference_type,
        reference_id,
        organization_id_from(event),
        get_stops_directory(),
    )
    return json_response(200, [e.model_dump(mode="json") for e in history])
