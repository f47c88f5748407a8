"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
VALIDATION_ERROR = "VALIDATION_ERROR"
FORBIDDEN = "FORBIDDEN"
UNAUTHORIZED = "UNAUTHORIZED"
PRECONDITION_FAILED = "PRECONDITION_FAILED"
INVALID_SNAPSHOT = "INVALID_SNAPSHOT"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    code: str = VALIDATION_ERROR


class NotFoundError(DomainError):
    """Raised when a referenced user, meetup, recipe, template or membership does not exist."""

    code = NOT_FOUND


class DuplicateResourceError(DomainError):
    """Raised when attempting to overwrite a resource that must stay unique (e.g. a built-in template)."""

    code = DUPLICATE_RESOURCE


class DomainValidationError(DomainError):
    """Raised when input fails validation (blank strings, malformed timestamps, unknown enum values)."""

    code = VALIDATION_ERROR


class ForbiddenError(DomainError):
    """Raised when the acting user lacks the role or access required for an operation."""

    code = FORBIDDEN


class UnauthorizedError(DomainError):
    """Raised when a request does not identify a known acting user."""

    code = UNAUTHORIZED


class PreconditionFailedError(DomainError):
    """Raised when the club is not in the state an operation requires."""

    code = PRECONDITION_FAILED


class SnapshotError(DomainError):
    """Raised when a state snapshot file cannot be imported."""

    code = INVALID_SNAPSHOT

    def __init__(self, message: str, issues: list[str] | None = None):
        super().__init__(message)
        self.issues = issues or []
