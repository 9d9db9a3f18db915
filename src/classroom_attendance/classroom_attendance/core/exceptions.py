class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain_error"


class InvalidInput(DomainError):
    """Raised when required fields are missing or malformed."""

    kind = "invalid_input"


class NotFoundOrForbidden(DomainError):
    """Raised when a class/subject does not exist or belongs to another teacher.

    Both cases share one error so callers cannot probe for other teachers' ids.
    """

    kind = "not_found_or_forbidden"


class NotFound(DomainError):
    kind = "not_found"


class Conflict(DomainError):
    """Raised when a write would duplicate a unique resource."""

    kind = "conflict"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    kind = "authentication_failed"


class RecordingFailed(DomainError):
    """Raised when the store fails while attendance is being written."""

    kind = "recording_failed"


class StoreError(Exception):
    """Raised by the database layer for any driver failure."""


class DuplicateRecord(StoreError):
    """Raised when an insert hits a unique key."""
