"""Shared enumerations for roles, appointment statuses and notification types."""


class UserRole:
    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"

    ALL = (PATIENT, DOCTOR, ADMIN)
    SELF_SIGNUP = (PATIENT, DOCTOR)


class AppointmentStatus:
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    ALL = (PENDING, APPROVED, REJECTED, CANCELLED, COMPLETED)
    # Only active appointments occupy a slot
    ACTIVE = (PENDING, APPROVED)
    TERMINAL = (REJECTED, CANCELLED, COMPLETED)


class CreatedBy:
    PATIENT = "patient"
    ADMIN = "admin"


class NotificationType:
    APPOINTMENT_REQUEST = "appointment_request"
    APPOINTMENT_APPROVED = "appointment_approved"
    APPOINTMENT_REJECTED = "appointment_rejected"
    APPOINTMENT_CANCELLED = "appointment_cancelled"
    APPOINTMENT_COMPLETED = "appointment_completed"
    DOCTOR_VERIFIED = "doctor_verified"
    NEW_REVIEW = "new_review"

    ALL = (
        APPOINTMENT_REQUEST,
        APPOINTMENT_APPROVED,
        APPOINTMENT_REJECTED,
        APPOINTMENT_CANCELLED,
        APPOINTMENT_COMPLETED,
        DOCTOR_VERIFIED,
        NEW_REVIEW,
    )


WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
