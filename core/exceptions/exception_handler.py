"""
Global exception handler for Slotkeeper.

This module provides a custom exception handler for DRF that renders the
custom exception hierarchy and maps Django/database errors onto it.
"""

import logging
from typing import Any, Dict

from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.utils import DatabaseError, IntegrityError, OperationalError
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from .custom_exceptions import (
    APIException,
    ConcurrentWriteException,
    ResourceNotFoundException,
    StoreUnavailableException,
)

logger = logging.getLogger(__name__)


def translate_exception(exc: Exception) -> Exception:
    """
    Map Django and database errors onto the custom exception hierarchy.

    Args:
        exc: The raised exception

    Returns:
        Exception: The exception to render (unchanged when no mapping applies)
    """
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, "message_dict"):
            return ValidationError(detail=exc.message_dict)
        return ValidationError(detail=exc.messages)
    if isinstance(exc, ObjectDoesNotExist):
        return ResourceNotFoundException(str(exc) or None)
    if isinstance(exc, IntegrityError):
        # Admission translates its own constraint errors before they get here
        return ConcurrentWriteException()
    if isinstance(exc, (OperationalError, DatabaseError)):
        return StoreUnavailableException()
    return exc


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """
    Custom exception handler for DRF views.

    Args:
        exc: The exception
        context: The exception context

    Returns:
        Response: Consistent error response
    """
    original = exc
    exc = translate_exception(exc)

    if isinstance(exc, APIException):
        if exc.status_code >= 500:
            logger.error(
                f"Exception: {exc.code} - {exc.message} ({original.__class__.__name__}: {original})"
            )
        else:
            logger.info(f"Exception: {exc.code} - {exc.message}")
        return Response(exc.to_dict(), status=exc.status_code)

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    logger.warning(f"Exception: {exc.__class__.__name__} - {response.data}")
    if isinstance(exc, ValidationError):
        response.data = {
            "message": "Validation failed.",
            "status_code": response.status_code,
            "code": "validation_error",
            "errors": response.data,
        }
    else:
        response.data = {
            "message": str(getattr(exc, "detail", exc)),
            "status_code": response.status_code,
            "code": getattr(exc, "default_code", "error"),
        }
    return response
