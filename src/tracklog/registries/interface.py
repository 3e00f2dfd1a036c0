from abc import ABC, abstractmethod
from collections.abc import Sequence

from tracklog.models import ReferenceType, StopLabel, TrackableRecord


class TrackableRegistry(ABC):
    """Read-only view of the registry that owns one kind of trackable."""

    reference_type: ReferenceType

    @abstractmethod
    def get_many(self, organization_id: int, ids: Sequence[str]) -> dict[str, TrackableRecord]:
        """Batch lookup keyed by id. Unknown ids are simply absent from the result."""

    @abstractmethod
    def count_by_status(self, organization_id: int, statuses: Sequence[str]) -> int: ...

    @abstractmethod
    def list_by_status(self, organization_id: int, statuses: Sequence[str]) -> list[TrackableRecord]:
        """Trackables in any of ``statuses``, most recently updated first."""

    @abstractmethod
    def search_codes(self, organization_id: int, query: str, limit: int) -> list[TrackableRecord]:
        """Case-insensitive substring match on the human-readable code."""


class StopsDirectory(ABC):
    @abstractmethod
    def get_many(self, organization_id: int, ids: Sequence[str]) -> dict[str, StopLabel]: ...

    @abstractmethod
    def list_active(self, organization_id: int) -> list[StopLabel]:
        """Active stops ordered by name."""
