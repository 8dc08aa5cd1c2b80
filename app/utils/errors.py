"""Service-layer exceptions.

Every error a service raises on purpose derives from ServiceError and knows
the HTTP status it maps to. Routers translate them into HTTPException; the
message is always safe to show to the caller.

Not-found errors deliberately cover "exists but belongs to someone else" as
well, so callers cannot probe for other users' data.
"""


class ServiceError(ValueError):
    """Base class for expected, user-facing failures."""

    status_code: int = 400


class InvalidInputError(ServiceError):
    """Missing or malformed input."""

    status_code = 400


class InvalidTimestampError(InvalidInputError):
    """A timestamp could not be parsed."""


class InvalidRangeError(InvalidInputError):
    """Start time is not strictly before end time."""


class NotFoundError(ServiceError):
    """Entity absent or not owned by the caller."""

    status_code = 404


class TimeEntryNotFoundError(NotFoundError):
    pass


class TaskNotFoundError(NotFoundError):
    pass


class ProjectNotFoundError(NotFoundError):
    pass


class ClientNotFoundError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


class TimerAlreadyRunningError(ServiceError):
    """The user already has an entry without an end time."""

    status_code = 400


class NoRunningTimerError(ServiceError):
    """Stop was requested but nothing is running."""

    status_code = 404


class AuthenticationError(ServiceError):
    """Credentials were rejected."""

    status_code = 401
