"""Unit tests for event ingestion."""

import threading
from contextlib import nullcontext
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from tracklog.errors import (
    DuplicateEventError,
    ErrorCode,
    SequenceConflictError,
    StorageError,
    ValidationError,
)
from tracklog.models import ActorType, ReferenceType
from tracklog.services.ingest import allocate_sequence, ensure_not_duplicate, submit_event

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _trip_event(**overrides):
    return {"reference_type": "trip", "reference_id": "T1", "event_type": "departed", **overrides}


def test_sequences_are_contiguous_per_trackable(store):
    seqs = [submit_event(_trip_event(), store, now=NOW).sequence for _ in range(5)]
    assert seqs == [1, 2, 3, 4, 5]


def test_sequences_are_independent_per_trackable(store):
    submit_event(_trip_event(), store, now=NOW)
    submit_event(_trip_event(), store, now=NOW)
    other_trip = submit_event(_trip_event(reference_id="T2"), store, now=NOW)
    shipment = submit_event(
        {"reference_type": "shipment", "reference_id": "T1", "event_type": "received"}, store, now=NOW
    )
    assert other_trip.sequence == 1
    assert shipment.sequence == 1


def test_history_preserves_ingestion_order(store):
    a = submit_event(_trip_event(event_type="departed"), store, now=NOW)
    b = submit_event(_trip_event(event_type="arrived"), store, now=NOW)
    assert (a.sequence, b.sequence) == (1, 2)
    history = store.fetch_history(ReferenceType.TRIP, "T1")
    assert [e.id for e in history] == [a.id, b.id]


def test_duplicate_external_event_id_rejected(store):
    first = submit_event(_trip_event(external_event_id="ext-1"), store, now=NOW)
    with pytest.raises(DuplicateEventError) as exc_info:
        submit_event(_trip_event(external_event_id="ext-1", event_type="arrived"), store, now=NOW)

    assert first.id in exc_info.value.message
    assert store.count_events() == 1
    assert store.find_by_external_id("ext-1").id == first.id


def test_duplicate_rejected_across_trackables(store):
    submit_event(_trip_event(external_event_id="ext-9"), store, now=NOW)
    with pytest.raises(DuplicateEventError):
        submit_event(
            {"reference_type": "shipment", "reference_id": "S1", "event_type": "received", "external_event_id": "ext-9"},
            store,
            now=NOW,
        )
    assert store.latest_sequence(ReferenceType.SHIPMENT, "S1") == 0


def test_events_without_external_id_never_collide(store):
    submit_event(_trip_event(), store, now=NOW)
    submit_event(_trip_event(), store, now=NOW)
    assert store.count_events() == 2


@pytest.mark.parametrize("missing", ["reference_type", "reference_id", "event_type"])
def test_validation_error_before_any_write(store, missing):
    data = _trip_event()
    data[missing] = ""
    with pytest.raises(ValidationError) as exc_info:
        submit_event(data, store, now=NOW)
    assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
    assert store.count_events() == 0


def test_invalid_payload_rejected(store):
    with pytest.raises(ValidationError) as exc_info:
        submit_event(_trip_event(event_type="incident", payload={"severity": "unknown"}), store, now=NOW)
    assert exc_info.value.code == ErrorCode.INVALID_PAYLOAD
    assert store.count_events() == 0


def test_event_time_defaults_to_ingestion_time(store):
    event = submit_event(_trip_event(), store, now=NOW)
    assert event.event_time == NOW


def test_producer_event_time_is_kept(store):
    event = submit_event(_trip_event(event_time="2026-10-17T23:59:00Z"), store, now=NOW)
    assert event.event_time == datetime(2026, 10, 17, 23, 59, tzinfo=timezone.utc)


def test_actor_type_inferred_from_actor_id(store):
    by_user = submit_event(_trip_event(actor_id="user-42"), store, now=NOW)
    by_system = submit_event(_trip_event(), store, now=NOW)
    assert by_user.actor_type is ActorType.USER
    assert by_system.actor_type is ActorType.SYSTEM


def test_explicit_actor_type_wins(store):
    event = submit_event(_trip_event(actor_id="gps-unit-4", actor_type="system"), store, now=NOW)
    assert event.actor_type is ActorType.SYSTEM


def test_source_defaults_to_manual(store):
    assert submit_event(_trip_event(), store, now=NOW).source == "manual"
    assert submit_event(_trip_event(source="integration"), store, now=NOW).source == "integration"


def test_concurrent_submissions_get_distinct_sequences(store):
    results = []
    errors = []

    def worker():
        try:
            results.append(submit_event(_trip_event(), store, now=NOW).sequence)
        except Exception as e:  # pragma: no cover - surfaced by the assertion below
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert sorted(results) == list(range(1, 21))


# --- Duplicate guard / sequence allocator ---


def test_ensure_not_duplicate_skips_lookup_without_key():
    store = MagicMock()
    ensure_not_duplicate(store, None)
    store.find_by_external_id.assert_not_called()


def test_allocate_sequence_starts_at_one():
    store = MagicMock()
    store.latest_sequence.return_value = 0
    assert allocate_sequence(store, ReferenceType.TRIP, "T1") == 1


def test_allocate_sequence_increments_latest():
    store = MagicMock()
    store.latest_sequence.return_value = 7
    assert allocate_sequence(store, ReferenceType.TRIP, "T1") == 8
    store.latest_sequence.assert_called_once_with(ReferenceType.TRIP, "T1")


# --- Retry on sequence conflict ---


def _conflicting_store(conflicts: int):
    store = MagicMock()
    store.unit_of_work.return_value = nullcontext()
    store.find_by_external_id.return_value = None
    store.latest_sequence.return_value = 2
    recorded = MagicMock(sequence=3, id="evt-3", event_type="departed")
    store.insert.side_effect = [SequenceConflictError("seq 3 taken")] * conflicts + [recorded]
    return store, recorded


def test_sequence_conflict_is_retried():
    store, recorded = _conflicting_store(conflicts=1)
    assert submit_event(_trip_event(), store, now=NOW) is recorded
    assert store.insert.call_count == 2


def test_sequence_conflict_gives_up_after_max_attempts():
    store, _ = _conflicting_store(conflicts=3)
    with pytest.raises(StorageError) as exc_info:
        submit_event(_trip_event(), store, max_attempts=3, now=NOW)
    assert exc_info.value.code == ErrorCode.SEQUENCE_CONFLICT
    assert store.insert.call_count == 3


def test_duplicate_from_constraint_is_not_retried():
    store = MagicMock()
    store.unit_of_work.return_value = nullcontext()
    store.find_by_external_id.return_value = None
    store.latest_sequence.return_value = 0
    store.insert.side_effect = DuplicateEventError("ext-1 already recorded")

    with pytest.raises(DuplicateEventError):
        submit_event(_trip_event(external_event_id="ext-1"), store, now=NOW)
    assert store.insert.call_count == 1


def test_storage_error_propagates_unchanged():
    store = MagicMock()
    store.unit_of_work.return_value = nullcontext()
    store.find_by_external_id.return_value = None
    store.latest_sequence.side_effect = StorageError("connection reset")

    with pytest.raises(StorageError, match="connection reset"):
        submit_event(_trip_event(external_event_id="ext-2"), store, now=NOW)
    store.insert.assert_not_called()
