#!/usr/bin/env python3
"""Create and seed the registry tables the tracking log reads for local development.

In deployed environments trips, shipments, routes and stops belong to other
services. Locally this script creates minimal versions of those tables against
the docker Postgres so the read paths have something to join against. The
transport_events table itself is created by `alembic upgrade head`.

Usage:
    python scripts/create_local_registry_tables.py
"""

import sys
from pathlib import Path

import psycopg

# Add src to path for config import
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tracklog.config import get_config

ORGANIZATION_ID = 1

REGISTRY_DDL = [
    """
    CREATE TABLE IF NOT EXISTS transport_stops (
        id VARCHAR(64) PRIMARY KEY,
        organization_id INTEGER NOT NULL,
        name VARCHAR(120) NOT NULL,
        city VARCHAR(120),
        is_active BOOLEAN NOT NULL DEFAULT TRUE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS transport_routes (
        id VARCHAR(64) PRIMARY KEY,
        organization_id INTEGER NOT NULL,
        origin_stop_id VARCHAR(64) REFERENCES transport_stops (id),
        destination_stop_id VARCHAR(64) REFERENCES transport_stops (id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS trips (
        id VARCHAR(64) PRIMARY KEY,
        organization_id INTEGER NOT NULL,
        trip_code VARCHAR(40) NOT NULL,
        route_id VARCHAR(64) REFERENCES transport_routes (id),
        status VARCHAR(30) NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS shipments (
        id VARCHAR(64) PRIMARY KEY,
        organization_id INTEGER NOT NULL,
        tracking_number VARCHAR(40) NOT NULL,
        origin_stop_id VARCHAR(64) REFERENCES transport_stops (id),
        destination_stop_id VARCHAR(64) REFERENCES transport_stops (id),
        status VARCHAR(30) NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
]

STOPS = [
    ("stop-bog", "Bogotá Terminal", "Bogotá", True),
    ("stop-med", "Medellín Norte", "Medellín", True),
    ("stop-cal", "Cali Sur", "Cali", True),
    ("stop-old", "Antigua Bodega", "Cali", False),
]

ROUTES = [
    ("route-bog-med", "stop-bog", "stop-med"),
    ("route-cal-bog", "stop-cal", "stop-bog"),
]

TRIPS = [
    ("trip-1", "VJ-20261018-001", "route-bog-med", "in_transit"),
    ("trip-2", "VJ-20261018-002", "route-cal-bog", "delayed"),
    ("trip-3", "VJ-20261017-014", "route-bog-med", "incident"),
]

SHIPMENTS = [
    ("shp-1", "SHP48213", "stop-cal", "stop-bog", "pending"),
    ("shp-2", "SHP90177", "stop-bog", "stop-med", "delivered"),
]


def create_tables(conn):
    """Create the registry tables if they are missing."""
    with conn.cursor() as cur:
        for ddl in REGISTRY_DDL:
            cur.execute(ddl)
    print("✓ Registry tables ready")


def seed(conn):
    """Insert sample stops, routes, trips and shipments (idempotent)."""
    with conn.cursor() as cur:
        cur.executemany(
            "INSERT INTO transport_stops (id, organization_id, name, city, is_active) "
            "VALUES (%s, %s, %s, %s, %s) ON CONFLICT (id) DO NOTHING",
            [(sid, ORGANIZATION_ID, name, city, active) for sid, name, city, active in STOPS],
        )
        cur.executemany(
            "INSERT INTO transport_routes (id, organization_id, origin_stop_id, destination_stop_id) "
            "VALUES (%s, %s, %s, %s) ON CONFLICT (id) DO NOTHING",
            [(rid, ORGANIZATION_ID, origin, destination) for rid, origin, destination in ROUTES],
        )
        cur.executemany(
            "INSERT INTO trips (id, organization_id, trip_code, route_id, status) "
            "VALUES (%s, %s, %s, %s, %s) ON CONFLICT (id) DO NOTHING",
            [(tid, ORGANIZATION_ID, code, route, status) for tid, code, route, status in TRIPS],
        )
        cur.executemany(
            "INSERT INTO shipments (id, organization_id, tracking_number, origin_stop_id, destination_stop_id, status) "
            "VALUES (%s, %s, %s, %s, %s, %s) ON CONFLICT (id) DO NOTHING",
            [(sid, ORGANIZATION_ID, code, o, d, status) for sid, code, o, d, status in SHIPMENTS],
        )
    print(f"✓ Seeded {len(STOPS)} stops, {len(TRIPS)} trips, {len(SHIPMENTS)} shipments")


def main():
    """Create and seed all registry tables."""
    config = get_config()

    print(f"Creating registry tables on {config.aurora_host}:{config.aurora_port}/{config.aurora_database}...")
    print()

    with psycopg.connect(
        host=config.aurora_host,
        port=config.aurora_port,
        dbname=config.aurora_database,
        user=config.aurora_user,
        password=config.aurora_password,
    ) as conn:
        create_tables(conn)
        seed(conn)

    print()
    print("✅ Local registries ready")


if __name__ == "__main__":
    main()
