"""
Custom exceptions for Slotkeeper.

Every failure the scheduling engine reports is one of these classes. Input
errors are never worth retrying, a booking conflict means the time was taken,
and infrastructure errors carry whether a retry is safe.
"""

from django.utils.translation import gettext_lazy as _
from rest_framework import status


class APIException(Exception):
    """Base exception for all API-related exceptions."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = _("An unexpected error occurred.")
    code = "internal_error"
    retryable = False

    def __init__(self, message=None, status_code=None, errors=None):
        self.message = message or self.default_message
        if status_code:
            self.status_code = status_code
        self.errors = errors
        super().__init__(self.message)

    def to_dict(self):
        """Convert exception to dictionary representation."""
        error_dict = {
            "message": str(self.message),
            "status_code": self.status_code,
            "code": self.code,
        }

        if self.errors:
            error_dict["errors"] = self.errors

        return error_dict


class InvalidDataException(APIException):
    """Exception raised when request data is invalid."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = _("Invalid data provided.")
    code = "invalid_data"


class InvalidTimezoneException(InvalidDataException):
    """Exception raised when a timezone name is not a known IANA zone."""

    default_message = _("Unknown timezone.")
    code = "invalid_timezone"


class ResourceNotFoundException(APIException):
    """Exception raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = _("The requested resource was not found.")
    code = "not_found"


class BookingConflictException(APIException):
    """The requested time overlaps an active booking (buffers included)."""

    status_code = status.HTTP_409_CONFLICT
    default_message = _("That time was just taken. Please pick another slot.")
    code = "booking_conflict"


class StoreUnavailableException(APIException):
    """The database could not be reached. Reads may be retried."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = _("The booking store is currently unavailable.")
    code = "store_unavailable"
    retryable = True


class AdmissionOutcomeUnknownException(APIException):
    """
    Admission did not finish within its time bound.

    The booking may or may not have been written; callers must look it up
    (for example by idempotency key) before trying again.
    """

    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    default_message = _(
        "The booking request timed out. Check whether it was created before retrying."
    )
    code = "admission_outcome_unknown"


class ConcurrentWriteException(APIException):
    """A uniqueness rule rejected a write, usually because of a parallel request."""

    status_code = status.HTTP_409_CONFLICT
    default_message = _("The record was changed by another request. Please try again.")
    code = "concurrent_write"
    retryable = True
