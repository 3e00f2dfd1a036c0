"""Lazy-initialized storage and registry clients, reused across warm Lambda invocations."""

from functools import lru_cache

from tracklog.config import get_config
from tracklog.db.aurora import AuroraClient
from tracklog.registries import PostgresShipmentRegistry, PostgresStopsDirectory, PostgresTripRegistry
from tracklog.store import PostgresEventStore


@lru_cache(maxsize=1)
def get_aurora_client() -> AuroraClient:
    client = AuroraClient(get_config())
    client.connect()
    return client


@lru_cache(maxsize=1)
def get_event_store() -> PostgresEventStore:
    return PostgresEventStore(get_aurora_client())


@lru_cache(maxsize=1)
def get_trip_registry() -> PostgresTripRegistry:
    return PostgresTripRegistry(get_aurora_client())


@lru_cache(maxsize=1)
def get_shipment_registry() -> PostgresShipmentRegistry:
    return PostgresShipmentRegistry(get_aurora_client())


@lru_cache(maxsize=1)
def get_stops_directory() -> PostgresStopsDirectory:
    return PostgresStopsDirectory(get_aurora_client())
