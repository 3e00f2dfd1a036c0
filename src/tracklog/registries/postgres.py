"""PostgreSQL clients for the trip, shipment and stop registries.

These tables are owned by other services; the tracking log only reads them.
"""

from collections.abc import Sequence
from typing import TypeVar

import psycopg
import pydantic
from psycopg.rows import dict_row

from tracklog.db.aurora import AuroraClient
from tracklog.errors import ReferenceLookupError
from tracklog.models import ReferenceType, StopLabel, TrackableRecord
from tracklog.registries.interface import StopsDirectory, TrackableRegistry

M = TypeVar("M", bound=pydantic.BaseModel)

_TRIP_SELECT = """
    SELECT t.id, t.trip_code AS code, t.status, t.updated_at,
           os.name AS origin_label, ds.name AS destination_label
    FROM trips t
    LEFT JOIN transport_routes r ON r.id = t.route_id
    LEFT JOIN transport_stops os ON os.id = r.origin_stop_id
    LEFT JOIN transport_stops ds ON ds.id = r.destination_stop_id
"""

_SHIPMENT_SELECT = """
    SELECT t.id, t.tracking_number AS code, t.status, t.updated_at,
           os.name AS origin_label, ds.name AS destination_label
    FROM shipments t
    LEFT JOIN transport_stops os ON os.id = t.origin_stop_id
    LEFT JOIN transport_stops ds ON ds.id = t.destination_stop_id
"""

_STOPS_BY_ID_SQL = """
    SELECT id, name, city
    FROM transport_stops
    WHERE organization_id = %s AND id::text = ANY(%s)
"""

_ACTIVE_STOPS_SQL = """
    SELECT id, name, city
    FROM transport_stops
    WHERE organization_id = %s AND is_active
    ORDER BY name
"""


def _escape_like(query: str) -> str:
    return query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _run_query(client: AuroraClient, table: str, sql: str, params: tuple, model: type[M]) -> list[M]:
    """Run a registry read and validate its rows; driver and row-shape failures are lookup errors."""
    conn = client.require_connection()
    try:
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(sql, params)
            rows = cur.fetchall()
        return [model.model_validate(row) for row in rows]
    except psycopg.Error as e:
        raise ReferenceLookupError(f"Lookup on {table} failed: {e}") from e
    except pydantic.ValidationError as e:
        raise ReferenceLookupError(f"Lookup on {table} returned an unexpected row: {e}") from e


class _StatusCount(pydantic.BaseModel):
    total: int


class _PostgresTrackableRegistry(TrackableRegistry):
    _select_sql: str
    _table: str
    _code_column: str

    def __init__(self, client: AuroraClient) -> None:
        self._client = client

    def get_many(self, organization_id: int, ids: Sequence[str]) -> dict[str, TrackableRecord]:
        if not ids:
            return {}
        records = self._records(
            f"{self._select_sql} WHERE t.organization_id = %s AND t.id::text = ANY(%s)",
            (organization_id, list(ids)),
        )
        return {record.id: record for record in records}

    def count_by_status(self, organization_id: int, statuses: Sequence[str]) -> int:
        counts = _run_query(
            self._client,
            self._table,
            f"SELECT COUNT(*) AS total FROM {self._table} WHERE organization_id = %s AND status = ANY(%s)",
            (organization_id, list(statuses)),
            _StatusCount,
        )
        return counts[0].total if counts else 0

    def list_by_status(self, organization_id: int, statuses: Sequence[str]) -> list[TrackableRecord]:
        return self._records(
            f"{self._select_sql} WHERE t.organization_id = %s AND t.status = ANY(%s) "
            "ORDER BY t.updated_at DESC NULLS LAST",
            (organization_id, list(statuses)),
        )

    def search_codes(self, organization_id: int, query: str, limit: int) -> list[TrackableRecord]:
        return self._records(
            f"{self._select_sql} WHERE t.organization_id = %s AND t.{self._code_column} ILIKE %s "
            f"ORDER BY t.{self._code_column} LIMIT %s",
            (organization_id, f"%{_escape_like(query)}%", limit),
        )

    def _records(self, sql: str, params: tuple) -> list[TrackableRecord]:
        return _run_query(self._client, self._table, sql, params, TrackableRecord)


class PostgresTripRegistry(_PostgresTrackableRegistry):
    reference_type = ReferenceType.TRIP
    _select_sql = _TRIP_SELECT
    _table = "trips"
    _code_column = "trip_code"


class PostgresShipmentRegistry(_PostgresTrackableRegistry):
    reference_type = ReferenceType.SHIPMENT
    _select_sql = _SHIPMENT_SELECT
    _table = "shipments"
    _code_column = "tracking_number"


class PostgresStopsDirectory(StopsDirectory):
    def __init__(self, client: AuroraClient) -> None:
        self._client = client

    def get_many(self, organization_id: int, ids: Sequence[str]) -> dict[str, StopLabel]:
        if not ids:
            return {}
        stops = _run_query(self._client, "transport_stops", _STOPS_BY_ID_SQL, (organization_id, list(ids)), StopLabel)
        return {stop.id: stop for stop in stops}

    def list_active(self, organization_id: int) -> list[StopLabel]:
        return _run_query(self._client, "transport_stops", _ACTIVE_STOPS_SQL, (organization_id,), StopLabel)
