"""Read-only clients for the externally owned trip, shipment and stop registries."""

from tracklog.registries.interface import StopsDirectory, TrackableRegistry
from tracklog.registries.memory import InMemoryStopsDirectory, InMemoryTrackableRegistry
from tracklog.registries.postgres import PostgresShipmentRegistry, PostgresStopsDirectory, PostgresTripRegistry

__all__ = [
    "InMemoryStopsDirectory",
    "InMemoryTrackableRegistry",
    "PostgresShipmentRegistry",
    "PostgresStopsDirectory",
    "PostgresTripRegistry",
    "StopsDirectory",
    "TrackableRegistry",
]
