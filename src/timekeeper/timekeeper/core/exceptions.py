class DomainError(Exception):
    """Base exception for business rule violations.

    ``kind`` is a stable identifier surfaced to API clients; ``http_status``
    is the status code the controller layer answers with.
    """

    kind = "DomainError"
    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "ValidationError"
    http_status = 400


class InvalidRange(ValidationError):
    kind = "InvalidRange"


class ConflictError(DomainError):
    """Raised when an operation clashes with the current state of a record."""

    kind = "ConflictError"
    http_status = 400


class AlreadyClockedIn(ConflictError):
    kind = "AlreadyClockedIn"


class AlreadyClockedOut(ConflictError):
    kind = "AlreadyClockedOut"


class OverlappingLeave(ConflictError):
    kind = "OverlappingLeave"


class AlreadyReviewed(ConflictError):
    kind = "AlreadyReviewed"


class PodInUse(ConflictError):
    kind = "PodInUse"


class NotFoundError(DomainError):
    kind = "NotFoundError"
    http_status = 404


class NoActiveSession(NotFoundError):
    kind = "NoActiveSession"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or no session exists."""

    kind = "AuthenticationError"
    http_status = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "AuthorizationError"
    http_status = 403
