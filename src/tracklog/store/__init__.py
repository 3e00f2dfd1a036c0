"""Event store backends for the tracking log."""

from tracklog.store.interface import EventStore
from tracklog.store.memory import InMemoryEventStore
from tracklog.store.postgres import PostgresEventStore

__all__ = ["EventStore", "InMemoryEventStore", "PostgresEventStore"]
