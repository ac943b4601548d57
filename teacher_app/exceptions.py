"""
Error taxonomy for scheduling and attendance operations.
Every error carries the HTTP status the views answer with.
"""


class SchoolError(Exception):
    status_code = 400
    code = "error"
    default_message = "Request failed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(SchoolError):
    """Bad input (dates, times, statuses, ids), rejected before any store access."""
    status_code = 400
    code = "validation_error"
    default_message = "Invalid input."


class MalformedTokenError(SchoolError):
    status_code = 400
    code = "malformed_token"
    default_message = "Invalid QR code format. Expected: STUDENT:{id}"


class EnrollmentError(SchoolError):
    status_code = 403
    code = "not_enrolled"
    default_message = "Student is not enrolled in this session"


class NotFoundError(SchoolError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class ConflictError(SchoolError):
    status_code = 409
    code = "conflict"
    default_message = "Room is already booked for this time slot"


class StoreError(SchoolError):
    """Database or transport failure underneath the store."""
    status_code = 500
    code = "store_error"
    default_message = "Database error."


class DuplicateRecord(Exception):
    """Raised by a store when an insert hits the (student, session) uniqueness rule."""
