"""
Custom exceptions and error handling for the tracking log.

Defines application-specific exceptions with error codes for consistent
error handling across Lambda handlers and client communication.

Usage:
    from tracklog.errors import DuplicateEventError, ErrorCode

    raise DuplicateEventError("external event already recorded", code=ErrorCode.DUPLICATE_EVENT)
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for client-facing error messages."""

    # Ingestion errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_PAYLOAD = "INVALID_PAYLOAD"
    DUPLICATE_EVENT = "DUPLICATE_EVENT"

    # Read path errors
    REFERENCE_LOOKUP_FAILED = "REFERENCE_LOOKUP_FAILED"

    # Storage errors
    STORAGE_FAILED = "STORAGE_FAILED"
    SEQUENCE_CONFLICT = "SEQUENCE_CONFLICT"
    NOT_CONNECTED = "NOT_CONNECTED"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.VALIDATION_ERROR: "The event is missing required information. Please check and try again.",
    ErrorCode.INVALID_PAYLOAD: "The event payload does not match the expected format for its event type.",
    ErrorCode.DUPLICATE_EVENT: "This external event has already been recorded.",
    ErrorCode.REFERENCE_LOOKUP_FAILED: "Unable to load trip or shipment details. Please try again.",
    ErrorCode.STORAGE_FAILED: "The tracking log is temporarily unavailable. Please try again.",
    ErrorCode.SEQUENCE_CONFLICT: "The event could not be ordered due to concurrent updates. Please try again.",
    ErrorCode.NOT_CONNECTED: "The tracking log is temporarily unavailable. Please try again.",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again.",
}


class TrackingLogError(Exception):
    """Base exception for all tracking log errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        self.message = message
        self.code = code
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return USER_MESSAGES.get(self.code, USER_MESSAGES[ErrorCode.INTERNAL_ERROR])


class ValidationError(TrackingLogError):
    """A submitted event is missing required fields or carries an invalid payload."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.VALIDATION_ERROR):
        super().__init__(message, code=code)


class DuplicateEventError(TrackingLogError):
    """An event with the same external event id was already recorded."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.DUPLICATE_EVENT):
        super().__init__(message, code=code)


class ReferenceLookupError(TrackingLogError):
    """A batched lookup against the trip, shipment or stop registry failed outright."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.REFERENCE_LOOKUP_FAILED):
        super().__init__(message, code=code)


class StorageError(TrackingLogError):
    """The persistence layer failed."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.STORAGE_FAILED):
        super().__init__(message, code=code)


class SequenceConflictError(StorageError):
    """Another writer took the same sequence number for a trackable first."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.SEQUENCE_CONFLICT):
        super().__init__(message, code=code)
