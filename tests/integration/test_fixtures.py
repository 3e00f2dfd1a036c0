"""Test that integration test fixtures are working."""

import pytest


@pytest.mark.integration
def test_pg_connection_fixture(pg_connection):
    """Test that PostgreSQL connection fixture works."""
    with pg_connection.cursor() as cur:
        cur.execute("SELECT 1")
        result = cur.fetchone()
        assert result[0] == 1


@pytest.mark.integration
def test_transport_events_table_exists(pg_connection):
    """Test that the migrated schema is in place."""
    with pg_connection.cursor() as cur:
        cur.execute("""
            SELECT column_name FROM information_schema.columns
            WHERE table_name = 'transport_events' ORDER BY ordinal_position
        """)
        columns = [row[0] for row in cur.fetchall()]
    assert "sequence" in columns
    assert "external_event_id" in columns
    assert "payload" in columns


@pytest.mark.integration
def test_clean_events_fixture(pg_connection, clean_events):
    """Test that clean_events leaves the log empty."""
    with pg_connection.cursor() as cur:
        cur.execute("SELECT COUNT(*) FROM transport_events")
        assert cur.fetchone()[0] == 0
