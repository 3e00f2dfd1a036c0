"""Type-ahead lookup over trip codes and tracking numbers, and stop listing for entry forms."""

from tracklog.models import ReferenceMatch, StopLabel
from tracklog.registries.interface import StopsDirectory, TrackableRegistry


def search_references(
    organization_id: int,
    query: str,
    trips: TrackableRegistry,
    shipments: TrackableRegistry,
    *,
    limit: int = 10,
) -> list[ReferenceMatch]:
    query = query.strip()
    if not query:
        return []

    results: list[ReferenceMatch] = []
    for registry in (trips, shipments):
        for record in registry.search_codes(organization_id, query, limit):
            results.append(
                ReferenceMatch(
                    type=registry.reference_type.value,
                    id=record.id,
                    code=record.code,
                    status=record.status,
                )
            )
    return results


def fetch_active_stops(organization_id: int, stops: StopsDirectory) -> list[StopLabel]:
    return stops.list_active(organization_id)
