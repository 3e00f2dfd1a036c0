"""In-memory registries for local runs and tests."""

from collections.abc import Sequence
from datetime import datetime, timezone

from tracklog.models import ReferenceType, StopLabel, TrackableRecord
from tracklog.registries.interface import StopsDirectory, TrackableRegistry

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryTrackableRegistry(TrackableRegistry):
    def __init__(self, reference_type: ReferenceType) -> None:
        self.reference_type = reference_type
        self._records: dict[int, dict[str, TrackableRecord]] = {}

    def add(self, organization_id: int, record: TrackableRecord) -> None:
        self._records.setdefault(organization_id, {})[record.id] = record

    def _org(self, organization_id: int) -> dict[str, TrackableRecord]:
        return self._records.get(organization_id, {})

    def get_many(self, organization_id: int, ids: Sequence[str]) -> dict[str, TrackableRecord]:
        records = self._org(organization_id)
        return {i: records[i] for i in ids if i in records}

    def count_by_status(self, organization_id: int, statuses: Sequence[str]) -> int:
        return sum(1 for r in self._org(organization_id).values() if r.status in statuses)

    def list_by_status(self, organization_id: int, statuses: Sequence[str]) -> list[TrackableRecord]:
        matches = [r for r in self._org(organization_id).values() if r.status in statuses]
        return sorted(matches, key=lambda r: r.updated_at or _OLDEST, reverse=True)

    def search_codes(self, organization_id: int, query: str, limit: int) -> list[TrackableRecord]:
        needle = query.casefold()
        matches = [r for r in self._org(organization_id).values() if needle in r.code.casefold()]
        return sorted(matches, key=lambda r: r.code)[:limit]


class InMemoryStopsDirectory(StopsDirectory):
    def __init__(self) -> None:
        self._stops: dict[int, dict[str, tuple[StopLabel, bool]]] = {}

    def add(self, organization_id: int, stop: StopLabel, active: bool = True) -> None:
        self._stops.setdefault(organization_id, {})[stop.id] = (stop, active)

    def get_many(self, organization_id: int, ids: Sequence[str]) -> dict[str, StopLabel]:
        stops = self._stops.get(organization_id, {})
        return {i: stops[i][0] for i in ids if i in stops}

    def list_active(self, organization_id: int) -> list[StopLabel]:
        stops = [stop for stop, active in self._stops.get(organization_id, {}).values() if active]
        return sorted(stops, key=lambda s: s.name)
