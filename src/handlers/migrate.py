"""Migration Lambda. Applies Alembic revisions to the tracking log schema."""

import logging
from typing import Any

from tracklog.services.migration import run_migrations

logger = logging.getLogger(__name__)


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    """Fails loudly so the deployment step that invokes it sees the error."""
    event = event or {}
    result = run_migrations(event.get("revision", "head"), downgrade=bool(event.get("downgrade", False)))
    logger.info("Schema %s to %s", result["direction"], result["revision"])
    return {"statusCode": 200, "body": result["output"]}
