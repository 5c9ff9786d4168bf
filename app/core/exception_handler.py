"""
DRF exception handler for application errors.

Plugged in through REST_FRAMEWORK["EXCEPTION_HANDLER"]. DRF's default
handler still covers its own exceptions (authentication, throttling,
serializer errors); this module adds:

- BaseApplicationError subclasses rendered with to_dict() and the
  exception's status_code
- django.db.DatabaseError wrapped as PersistenceError (500)

Response body:
    {
        "error": "Cannot approve transaction in completed state",
        "error_code": "INVALID_STATE_TRANSITION",
        "details": {"current_state": "completed", "expected_state": "pending_admin"}
    }
"""

from __future__ import annotations

import logging

from django.db import DatabaseError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError, PersistenceError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    if isinstance(exc, DatabaseError):
        logger.error(
            "Database error while handling request",
            extra={"view": context.get("view").__class__.__name__},
            exc_info=exc,
        )
        exc = PersistenceError("The operation could not be persisted. No funds were moved.")

    if isinstance(exc, BaseApplicationError):
        if exc.status_code >= 500:
            logger.error(f"Application error: {exc}")
        else:
            logger.info(
                f"Request rejected: {exc}",
                extra={"error_code": exc.error_code},
            )
        return Response(exc.to_dict(), status=exc.status_code)

    return exception_handler(exc, context)
