"""Dashboard counters and stalled trackables."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from tracklog.models import ReferenceType, StoppedItem, TrackableRecord, TrackingStats
from tracklog.registries.interface import TrackableRegistry
from tracklog.store.interface import EventStore

STALLED_TRIP_STATUSES = ("delayed", "incident")
STALLED_SHIPMENT_STATUSES = ("pending", "received")

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def start_of_day(now: datetime, timezone_name: str = "UTC") -> datetime:
    local = now.astimezone(ZoneInfo(timezone_name))
    midnight = local.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(timezone.utc)


def compute_stats(
    organization_id: int,
    store: EventStore,
    trips: TrackableRegistry,
    shipments: TrackableRegistry,
    *,
    now: datetime | None = None,
    timezone_name: str = "UTC",
) -> TrackingStats:
    """Log-wide counts plus the live count of stalled trackables.

    The two halves are separate reads and are not guaranteed to be
    consistent with each other.
    """
    today = start_of_day(now or datetime.now(timezone.utc), timezone_name)

    total = store.count_events()
    trip_events = store.count_events(reference_type=ReferenceType.TRIP)
    shipment_events = store.count_events(reference_type=ReferenceType.SHIPMENT)
    today_events = store.count_events(since=today)

    stopped = trips.count_by_status(organization_id, STALLED_TRIP_STATUSES) + shipments.count_by_status(
        organization_id, STALLED_SHIPMENT_STATUSES
    )

    return TrackingStats(
        total_events=total,
        trip_events=trip_events,
        shipment_events=shipment_events,
        today_events=today_events,
        stopped_items=stopped,
    )


def _stopped_item(reference_type: ReferenceType, record: TrackableRecord) -> StoppedItem:
    return StoppedItem(
        type=reference_type.value,
        id=record.id,
        code=record.code,
        status=record.status,
        stopped_since=record.updated_at,
    )


def list_stopped_items(
    organization_id: int,
    trips: TrackableRegistry,
    shipments: TrackableRegistry,
) -> list[StoppedItem]:
    """Trackables whose live status is stalled, most recently updated first."""
    items = [
        _stopped_item(ReferenceType.TRIP, r) for r in trips.list_by_status(organization_id, STALLED_TRIP_STATUSES)
    ]
    items += [
        _stopped_item(ReferenceType.SHIPMENT, r)
        for r in shipments.list_by_status(organization_id, STALLED_SHIPMENT_STATUSES)
    ]
    items.sort(key=lambda item: item.stopped_since or _OLDEST, reverse=True)
    return items
