"""Shared test fixtures for the tracking log."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env file for test configuration
load_dotenv()

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from tracklog.models import ReferenceType, StopLabel, TrackableRecord  # noqa: E402
from tracklog.registries import InMemoryStopsDirectory, InMemoryTrackableRegistry  # noqa: E402
from tracklog.store import InMemoryEventStore  # noqa: E402

ORG_ID = 7


# In-memory backends
@pytest.fixture
def store():
    return InMemoryEventStore()


@pytest.fixture
def trips():
    registry = InMemoryTrackableRegistry(ReferenceType.TRIP)
    registry.add(
        ORG_ID,
        TrackableRecord(
            id="trip-1",
            code="VJ-20261018-001",
            status="in_transit",
            origin_label="Bogotá Terminal",
            destination_label="Medellín Norte",
            updated_at=datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc),
        ),
    )
    registry.add(
        ORG_ID,
        TrackableRecord(
            id="trip-2",
            code="VJ-20261018-002",
            status="delayed",
            updated_at=datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc),
        ),
    )
    registry.add(
        ORG_ID,
        TrackableRecord(
            id="trip-3",
            code="VJ-20261017-014",
            status="incident",
            updated_at=datetime(2026, 10, 17, 22, 15, tzinfo=timezone.utc),
        ),
    )
    return registry


@pytest.fixture
def shipments():
    registry = InMemoryTrackableRegistry(ReferenceType.SHIPMENT)
    registry.add(
        ORG_ID,
        TrackableRecord(
            id="shp-1",
            code="SHP48213",
            status="pending",
            origin_label="Cali Sur",
            destination_label="Bogotá Terminal",
            updated_at=datetime(2026, 10, 18, 7, 45, tzinfo=timezone.utc),
        ),
    )
    registry.add(
        ORG_ID,
        TrackableRecord(
            id="shp-2",
            code="SHP90177",
            status="delivered",
            updated_at=datetime(2026, 10, 18, 10, 5, tzinfo=timezone.utc),
        ),
    )
    return registry


@pytest.fixture
def stops():
    directory = InMemoryStopsDirectory()
    directory.add(ORG_ID, StopLabel(id="stop-bog", name="Bogotá Terminal", city="Bogotá"))
    directory.add(ORG_ID, StopLabel(id="stop-med", name="Medellín Norte", city="Medellín"))
    directory.add(ORG_ID, StopLabel(id="stop-old", name="Antigua Bodega", city="Cali"), active=False)
    return directory


# PostgreSQL fixtures
@pytest.fixture
def pg_connection():
    """Provide a PostgreSQL connection for integration tests."""
    import psycopg
    from tracklog.config import get_config

    config = get_config()
    conn_str = (
        f"host={config.aurora_host} port={config.aurora_port} "
        f"dbname={config.aurora_database} user={config.aurora_user} "
        f"password={config.aurora_password}"
    )

    conn = psycopg.connect(conn_str)
    yield conn

    # Rollback any uncommitted changes
    conn.rollback()
    conn.close()


@pytest.fixture
def clean_events(pg_connection):
    """Empty transport_events before and after an integration test."""
    with pg_connection.cursor() as cur:
        cur.execute("DELETE FROM transport_events")
    pg_connection.commit()
    yield
    with pg_connection.cursor() as cur:
        cur.execute("DELETE FROM transport_events")
    pg_connection.commit()
