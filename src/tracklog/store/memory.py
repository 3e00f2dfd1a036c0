"""Thread-safe in-memory event store for local runs and tests."""

import threading
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from tracklog.errors import DuplicateEventError, SequenceConflictError
from tracklog.models import NewEvent, ReferenceType, TrackingEvent
from tracklog.store.interface import EventStore


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryEventStore(EventStore):
    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._events: list[TrackingEvent] = []
        self._by_external_id: dict[str, TrackingEvent] = {}
        self._sequences: dict[tuple[ReferenceType, str], set[int]] = {}

    @contextmanager
    def unit_of_work(self, reference_type: ReferenceType, reference_id: str) -> Iterator[None]:
        # insert() is the only mutation, so holding the lock is enough for atomicity
        with self._lock:
            yield

    def find_by_external_id(self, external_event_id: str) -> TrackingEvent | None:
        with self._lock:
            return self._by_external_id.get(external_event_id)

    def latest_sequence(self, reference_type: ReferenceType, reference_id: str) -> int:
        with self._lock:
            return max(self._sequences.get((reference_type, reference_id), ()), default=0)

    def insert(self, event: NewEvent, sequence: int) -> TrackingEvent:
        key = (event.reference_type, event.reference_id)
        with self._lock:
            if event.external_event_id and event.external_event_id in self._by_external_id:
                raise DuplicateEventError(f"External event {event.external_event_id!r} already recorded")
            taken = self._sequences.setdefault(key, set())
            if sequence in taken:
                raise SequenceConflictError(
                    f"Sequence {sequence} already taken for {event.reference_type.value} {event.reference_id}"
                )
            stored = TrackingEvent(
                **event.model_dump(),
                id=str(uuid.uuid4()),
                sequence=sequence,
                created_at=self._clock(),
            )
            taken.add(sequence)
            self._events.append(stored)
            if stored.external_event_id:
                self._by_external_id[stored.external_event_id] = stored
            return stored

    def fetch_window(
        self,
        *,
        reference_type: ReferenceType | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int,
    ) -> list[TrackingEvent]:
        with self._lock:
            selected = [
                e
                for e in self._events
                if (reference_type is None or e.reference_type == reference_type)
                and (date_from is None or e.event_time >= date_from)
                and (date_to is None or e.event_time <= date_to)
            ]
        selected.sort(key=lambda e: (e.event_time, e.sequence), reverse=True)
        return selected[:limit]

    def fetch_history(self, reference_type: ReferenceType, reference_id: str) -> list[TrackingEvent]:
        with self._lock:
            selected = [
                e for e in self._events if e.reference_type == reference_type and e.reference_id == reference_id
            ]
        selected.sort(key=lambda e: (e.event_time, e.sequence))
        return selected

    def count_events(
        self,
        *,
        reference_type: ReferenceType | None = None,
        since: datetime | None = None,
    ) -> int:
        with self._lock:
            return sum(
                1
                for e in self._events
                if (reference_type is None or e.reference_type == reference_type)
                and (since is None or e.event_time >= since)
            )
