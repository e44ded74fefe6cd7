"""Domain error taxonomy.

Every error raised by the service layer carries a machine-checkable ``kind``
and a human-readable ``message``. ``main.py`` renders them as
``{"success": false, "kind": ..., "message": ...}`` with the matching status code.
"""

from typing import Optional


class DomainError(Exception):
    kind = "internal"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "kind": self.kind, "message": self.message}


class NotFoundError(DomainError):
    kind = "not_found"
    status_code = 404
    default_message = "Resource not found"


class ForbiddenError(DomainError):
    kind = "forbidden"
    status_code = 403
    default_message = "Access denied"


class InvalidStateError(DomainError):
    kind = "invalid_state"
    status_code = 400
    default_message = "Invalid appointment status for this action"


class ConflictError(DomainError):
    kind = "conflict"
    status_code = 409
    default_message = "This time slot is already booked"


class InvalidInputError(DomainError):
    kind = "validation_error"
    status_code = 400
    default_message = "Validation failed"


class TooLateError(DomainError):
    kind = "too_late"
    status_code = 400
    default_message = "Appointments can only be cancelled at least 2 hours in advance"


# Availability failures are all 400-class validation errors with distinct kinds


class DoctorUnavailableError(DomainError):
    kind = "unavailable"
    status_code = 400
    default_message = "Doctor not available for appointments"


class DayUnavailableError(DomainError):
    kind = "day_unavailable"
    status_code = 400
    default_message = "Doctor not available on this day"


class InvalidSlotError(DomainError):
    kind = "invalid_slot"
    status_code = 400
    default_message = "Invalid time slot for this doctor"


class InternalError(DomainError):
    """Unexpected store or infrastructure failure; details stay in the logs"""
