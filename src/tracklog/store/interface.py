from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime

from tracklog.models import NewEvent, ReferenceType, TrackingEvent


class EventStore(ABC):
    """Append-only persistence for tracking events.

    Events are never updated or deleted through this interface. Writers call
    find_by_external_id, latest_sequence and insert inside one unit_of_work
    for the trackable they are appending to.
    """

    @abstractmethod
    def unit_of_work(self, reference_type: ReferenceType, reference_id: str) -> AbstractContextManager[None]:
        """Serialize writers for one trackable; everything inside commits or rolls back together."""

    @abstractmethod
    def find_by_external_id(self, external_event_id: str) -> TrackingEvent | None: ...

    @abstractmethod
    def latest_sequence(self, reference_type: ReferenceType, reference_id: str) -> int:
        """Highest sequence recorded for the trackable, or 0 when it has no events."""

    @abstractmethod
    def insert(self, event: NewEvent, sequence: int) -> TrackingEvent:
        """Append one event.

        Raises DuplicateEventError when the external event id is taken and
        SequenceConflictError when the sequence is taken.
        """

    @abstractmethod
    def fetch_window(
        self,
        *,
        reference_type: ReferenceType | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int,
    ) -> list[TrackingEvent]:
        """Most recent events first (event_time desc, sequence desc), at most ``limit``."""

    @abstractmethod
    def fetch_history(self, reference_type: ReferenceType, reference_id: str) -> list[TrackingEvent]:
        """All events of one trackable, oldest first."""

    @abstractmethod
    def count_events(
        self,
        *,
        reference_type: ReferenceType | None = None,
        since: datetime | None = None,
    ) -> int: ...
