"""POST /tracking/events: record one tracking event."""

from typing import Any

from tracklog.clients import get_event_store
from tracklog.config import get_config
from tracklog.http import handle_errors, json_response, parse_json_body
from tracklog.services.ingest import submit_event


@handle_errors("Submit event")
def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    config = get_config()
    recorded = submit_event(
        parse_json_body(event),
        get_event_store(),
        max_attempts=config.sequence_retry_attempts,
    )
    return json_response(201, recorded.model_dump(mode="json"))
