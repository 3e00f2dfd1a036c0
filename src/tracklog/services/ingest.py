"""Event ingestion: duplicate guard, sequence allocation and append."""

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import pydantic

from tracklog.errors import (
    DuplicateEventError,
    ErrorCode,
    SequenceConflictError,
    StorageError,
    ValidationError,
)
from tracklog.models import ActorType, EventSubmission, NewEvent, ReferenceType, TrackingEvent
from tracklog.models.payloads import validate_payload
from tracklog.store.interface import EventStore

logger = logging.getLogger(__name__)


def parse_submission(data: Mapping[str, Any]) -> EventSubmission:
    try:
        return EventSubmission.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid event submission: {e}") from e


def build_new_event(submission: EventSubmission, now: datetime) -> NewEvent:
    """Apply ingestion defaults: event_time, actor_type and payload normalization."""
    try:
        payload = validate_payload(submission.event_type, submission.payload)
    except pydantic.ValidationError as e:
        raise ValidationError(
            f"Invalid payload for event type {submission.event_type!r}: {e}",
            code=ErrorCode.INVALID_PAYLOAD,
        ) from e

    actor_type = submission.actor_type
    if actor_type is None:
        actor_type = ActorType.USER if submission.actor_id else ActorType.SYSTEM

    return NewEvent(
        reference_type=submission.reference_type,
        reference_id=submission.reference_id,
        event_type=submission.event_type,
        event_time=submission.event_time or now,
        stop_id=submission.stop_id,
        latitude=submission.latitude,
        longitude=submission.longitude,
        actor_type=actor_type,
        actor_id=submission.actor_id,
        description=submission.description,
        location_text=submission.location_text,
        payload=payload,
        external_event_id=submission.external_event_id,
        source=submission.source,
    )


def ensure_not_duplicate(store: EventStore, external_event_id: str | None) -> None:
    if not external_event_id:
        return
    existing = store.find_by_external_id(external_event_id)
    if existing is not None:
        logger.warning("Rejected duplicate external event %s (recorded as %s)", external_event_id, existing.id)
        raise DuplicateEventError(f"External event {external_event_id!r} already recorded as {existing.id}")


def allocate_sequence(store: EventStore, reference_type: ReferenceType, reference_id: str) -> int:
    return store.latest_sequence(reference_type, reference_id) + 1


def submit_event(
    submission: EventSubmission | Mapping[str, Any],
    store: EventStore,
    *,
    max_attempts: int = 3,
    now: datetime | None = None,
) -> TrackingEvent:
    """Validate, de-duplicate, sequence and append one event.

    Nothing is written unless every step succeeds. The duplicate check, the
    sequence read and the insert share one unit of work; if another writer
    still takes the sequence first, the whole unit is retried.
    """
    if not isinstance(submission, EventSubmission):
        submission = parse_submission(submission)
    new_event = build_new_event(submission, now or datetime.now(timezone.utc))
    ref_type = new_event.reference_type
    ref_id = new_event.reference_id

    for attempt in range(1, max_attempts + 1):
        try:
            with store.unit_of_work(ref_type, ref_id):
                ensure_not_duplicate(store, new_event.external_event_id)
                sequence = allocate_sequence(store, ref_type, ref_id)
                event = store.insert(new_event, sequence)
        except SequenceConflictError:
            logger.warning("Sequence conflict for %s %s (attempt %d/%d)", ref_type.value, ref_id, attempt, max_attempts)
            continue
        logger.info(
            "Recorded %s event %s for %s %s at sequence %d",
            event.event_type,
            event.id,
            ref_type.value,
            ref_id,
            event.sequence,
        )
        return event

    raise StorageError(
        f"Could not allocate a sequence for {ref_type.value} {ref_id} after {max_attempts} attempts",
        code=ErrorCode.SEQUENCE_CONFLICT,
    )
