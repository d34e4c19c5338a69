"""
Slotkeeper – centralised custom exceptions.

Import these from `core.exceptions` across the project instead of redefining
ad-hoc `Exception` subclasses in each app.
"""

from __future__ import annotations

from .custom_exceptions import (
    AdmissionOutcomeUnknownException,
    APIException,
    BookingConflictException,
    ConcurrentWriteException,
    InvalidDataException,
    InvalidTimezoneException,
    ResourceNotFoundException,
    StoreUnavailableException,
)

__all__ = [
    "APIException",
    "InvalidDataException",
    "InvalidTimezoneException",
    "ResourceNotFoundException",
    "BookingConflictException",
    "ConcurrentWriteException",
    "StoreUnavailableException",
    "AdmissionOutcomeUnknownException",
]
