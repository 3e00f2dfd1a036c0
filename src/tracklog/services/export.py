"""CSV export of an already filtered and enriched event list.

The whole document is built in memory, so callers should export bounded
windows (the list endpoint's window cap applies).
"""

import csv
import io
from collections.abc import Sequence
from zoneinfo import ZoneInfo

from tracklog.models import EnrichedEvent, ReferenceType

CSV_HEADERS = ["Date/Time", "Type", "Code", "Event", "Location", "Description", "Status"]

TYPE_LABELS = {
    ReferenceType.TRIP: "Trip",
    ReferenceType.SHIPMENT: "Shipment",
}

DATETIME_FORMAT = "%d/%m/%Y %H:%M:%S"

EMPTY = "-"


def _row(event: EnrichedEvent, tz: ZoneInfo) -> list[str]:
    reference = event.reference_data
    location = event.location_text or (event.stop.name if event.stop else None)
    return [
        event.event_time.astimezone(tz).strftime(DATETIME_FORMAT),
        TYPE_LABELS[event.reference_type],
        reference.code if reference else EMPTY,
        event.event_type,
        location or EMPTY,
        event.description or EMPTY,
        reference.status if reference else EMPTY,
    ]


def to_csv(events: Sequence[EnrichedEvent], timezone_name: str = "UTC") -> str:
    """Header row plus one row per event, every field quoted, no trailing newline."""
    tz = ZoneInfo(timezone_name)
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for event in events:
        writer.writerow(_row(event, tz))
    return buffer.getvalue().rstrip("\n")
