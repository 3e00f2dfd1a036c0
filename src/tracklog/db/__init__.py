"""
Database ORM models and clients for the tracking log.

Importing this package registers all models on Base.metadata,
which Alembic needs for autogenerate.
"""

from tracklog.db.aurora import AuroraClient
from tracklog.db.schemas.base import Base
from tracklog.db.schemas.transport_event import TransportEvent

__all__ = ["AuroraClient", "Base", "TransportEvent"]
