"""Business outcomes of the booking engine.

Every error carries the HTTP status it maps to and whether the caller may retry
(re-fetch availability and pick again). None of them is a defect; they are
rendered by the handler registered in ``app.main``.
"""


class BookingError(Exception):
    status_code: int = 400
    code: str = "booking_error"
    retryable: bool = False

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(BookingError):
    """Malformed or missing field; nothing was written."""

    status_code = 400
    code = "validation_error"


class PermissionDeniedError(BookingError):
    status_code = 403
    code = "permission_denied"


class ModificationWindowExpired(BookingError):
    """Reschedule/cancel attempted inside the modification window."""

    status_code = 403
    code = "modification_window_expired"


class NotFoundError(BookingError):
    status_code = 404
    code = "not_found"


class ConflictError(BookingError):
    """Requested slot is no longer free for the groomer."""

    status_code = 409
    code = "conflict"
    retryable = True


class InvalidStateTransition(BookingError):
    status_code = 409
    code = "invalid_state_transition"
