"""PostgreSQL-backed event store."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from tracklog.db.aurora import AuroraClient
from tracklog.db.schemas.transport_event import EXTERNAL_EVENT_ID_CONSTRAINT, REFERENCE_SEQUENCE_CONSTRAINT
from tracklog.errors import DuplicateEventError, SequenceConflictError, StorageError, TrackingLogError
from tracklog.models import NewEvent, ReferenceType, TrackingEvent
from tracklog.store.interface import EventStore

_COLUMNS = """
    id, reference_type, reference_id, event_type, event_time, sequence,
    stop_id, latitude, longitude, actor_type, actor_id, description,
    location_text, payload, external_event_id, source, created_at
"""

_ADVISORY_LOCK_SQL = "SELECT pg_advisory_xact_lock(hashtextextended(%s, 0))"

_FIND_BY_EXTERNAL_ID_SQL = f"""
    SELECT {_COLUMNS}
    FROM transport_events
    WHERE external_event_id = %s
    LIMIT 1
"""

_LATEST_SEQUENCE_SQL = """
    SELECT sequence
    FROM transport_events
    WHERE reference_type = %s AND reference_id = %s
    ORDER BY sequence DESC
    LIMIT 1
"""

_INSERT_SQL = f"""
    INSERT INTO transport_events (
        reference_type, reference_id, event_type, event_time, sequence,
        stop_id, latitude, longitude, actor_type, actor_id, description,
        location_text, payload, external_event_id, source
    )
    VALUES (
        %(reference_type)s, %(reference_id)s, %(event_type)s, %(event_time)s, %(sequence)s,
        %(stop_id)s, %(latitude)s, %(longitude)s, %(actor_type)s, %(actor_id)s, %(description)s,
        %(location_text)s, %(payload)s, %(external_event_id)s, %(source)s
    )
    RETURNING {_COLUMNS}
"""

_WINDOW_SQL = f"""
    SELECT {_COLUMNS}
    FROM transport_events
    WHERE (%(reference_type)s::text IS NULL OR reference_type = %(reference_type)s)
      AND (%(date_from)s::timestamptz IS NULL OR event_time >= %(date_from)s)
      AND (%(date_to)s::timestamptz IS NULL OR event_time <= %(date_to)s)
    ORDER BY event_time DESC, sequence DESC
    LIMIT %(limit)s
"""

_HISTORY_SQL = f"""
    SELECT {_COLUMNS}
    FROM transport_events
    WHERE reference_type = %s AND reference_id = %s
    ORDER BY event_time ASC, sequence ASC
"""

_COUNT_SQL = """
    SELECT COUNT(*) AS total
    FROM transport_events
    WHERE (%(reference_type)s::text IS NULL OR reference_type = %(reference_type)s)
      AND (%(since)s::timestamptz IS NULL OR event_time >= %(since)s)
"""


def _translate_unique_violation(e: psycopg.errors.UniqueViolation, event: NewEvent, sequence: int) -> StorageError | DuplicateEventError:
    constraint = e.diag.constraint_name
    if constraint == EXTERNAL_EVENT_ID_CONSTRAINT:
        return DuplicateEventError(f"External event {event.external_event_id!r} already recorded")
    if constraint == REFERENCE_SEQUENCE_CONSTRAINT:
        return SequenceConflictError(
            f"Sequence {sequence} already taken for {event.reference_type.value} {event.reference_id}"
        )
    return StorageError(f"Insert into transport_events failed: {e}")


class PostgresEventStore(EventStore):
    def __init__(self, client: AuroraClient) -> None:
        self._client = client

    @contextmanager
    def unit_of_work(self, reference_type: ReferenceType, reference_id: str) -> Iterator[None]:
        conn = self._client.require_connection()
        try:
            with conn.transaction():
                with conn.cursor() as cur:
                    cur.execute(_ADVISORY_LOCK_SQL, (f"{reference_type.value}:{reference_id}",))
                yield
        except TrackingLogError:
            raise
        except psycopg.Error as e:
            raise StorageError(f"Transaction on transport_events failed: {e}") from e

    def find_by_external_id(self, external_event_id: str) -> TrackingEvent | None:
        row = self._fetch_one(_FIND_BY_EXTERNAL_ID_SQL, (external_event_id,))
        return TrackingEvent.model_validate(row) if row else None

    def latest_sequence(self, reference_type: ReferenceType, reference_id: str) -> int:
        row = self._fetch_one(_LATEST_SEQUENCE_SQL, (reference_type.value, reference_id))
        return int(row["sequence"]) if row else 0

    def insert(self, event: NewEvent, sequence: int) -> TrackingEvent:
        conn = self._client.require_connection()
        params = event.model_dump()
        params.update(
            reference_type=event.reference_type.value,
            actor_type=event.actor_type.value,
            payload=Jsonb(event.payload) if event.payload is not None else None,
            sequence=sequence,
        )
        try:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(_INSERT_SQL, params)
                row = cur.fetchone()
        except psycopg.errors.UniqueViolation as e:
            raise _translate_unique_violation(e, event, sequence) from e
        except psycopg.Error as e:
            raise StorageError(f"Insert into transport_events failed: {e}") from e
        return TrackingEvent.model_validate(row)

    def fetch_window(
        self,
        *,
        reference_type: ReferenceType | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int,
    ) -> list[TrackingEvent]:
        rows = self._fetch_all(
            _WINDOW_SQL,
            {
                "reference_type": reference_type.value if reference_type else None,
                "date_from": date_from,
                "date_to": date_to,
                "limit": limit,
            },
        )
        return [TrackingEvent.model_validate(row) for row in rows]

    def fetch_history(self, reference_type: ReferenceType, reference_id: str) -> list[TrackingEvent]:
        rows = self._fetch_all(_HISTORY_SQL, (reference_type.value, reference_id))
        return [TrackingEvent.model_validate(row) for row in rows]

    def count_events(
        self,
        *,
        reference_type: ReferenceType | None = None,
        since: datetime | None = None,
    ) -> int:
        row = self._fetch_one(
            _COUNT_SQL,
            {"reference_type": reference_type.value if reference_type else None, "since": since},
        )
        return int(row["total"]) if row else 0

    def _fetch_one(self, sql: str, params: object) -> dict | None:
        conn = self._client.require_connection()
        try:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(sql, params)
                return cur.fetchone()
        except psycopg.Error as e:
            raise StorageError(f"Query on transport_events failed: {e}") from e

    def _fetch_all(self, sql: str, params: object) -> list[dict]:
        conn = self._client.require_connection()
        try:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(sql, params)
                return cur.fetchall()
        except psycopg.Error as e:
            raise StorageError(f"Query on transport_events failed: {e}") from e
