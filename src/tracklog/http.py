"""API Gateway request parsing and response helpers shared by the Lambda handlers."""

import base64
import binascii
import functools
import json
import logging
from collections.abc import Callable
from typing import Any

from tracklog.errors import (
    DuplicateEventError,
    ReferenceLookupError,
    StorageError,
    TrackingLogError,
    ValidationError,
)

logger = logging.getLogger(__name__)

Handler = Callable[[dict[str, Any], object], dict[str, Any]]

STATUS_CODES: dict[type[TrackingLogError], int] = {
    ValidationError: 400,
    DuplicateEventError: 409,
    ReferenceLookupError: 502,
    StorageError: 503,
}


def status_for(error: TrackingLogError) -> int:
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(error, error_type):
            return status_code
    return 500


def json_response(status_code: int, body: Any) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def error_response(error: TrackingLogError) -> dict[str, Any]:
    return json_response(status_for(error), {"error": error.code.value, "message": error.user_message})


def parse_json_body(event: dict[str, Any]) -> dict[str, Any]:
    raw = event.get("body") or "{}"
    try:
        if event.get("isBase64Encoded"):
            raw = base64.b64decode(raw, validate=True).decode("utf-8")
        body = json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError(f"Request body is not valid JSON: {e}") from e
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def query_params(event: dict[str, Any]) -> dict[str, str]:
    return event.get("queryStringParameters") or {}


def path_params(event: dict[str, Any]) -> dict[str, str]:
    return event.get("pathParameters") or {}


def organization_id_from(event: dict[str, Any]) -> int:
    """Organization id placed in the request context by the API authorizer."""
    try:
        return int(event["requestContext"]["authorizer"]["organizationId"])
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError("Request is missing a valid organization id") from e


def handle_errors(action: str) -> Callable[[Handler], Handler]:
    """Map tracking log errors to HTTP responses; anything else becomes a logged 500."""

    def decorator(fn: Handler) -> Handler:
        @functools.wraps(fn)
        def wrapper(event: dict[str, Any], context: object) -> dict[str, Any]:
            try:
                return fn(event, context)
            except TrackingLogError as e:
                logger.warning("%s failed: %s", action, e.message)
                return error_response(e)
            except Exception:
                logger.exception("%s failed unexpectedly", action)
                return error_response(TrackingLogError(f"{action} failed"))

        return wrapper

    return decorator
