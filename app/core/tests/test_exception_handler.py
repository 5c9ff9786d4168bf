"""
Tests for the DRF exception handler and application error types.
"""

from unittest.mock import Mock

import pytest
from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated

from core.exception_handler import api_exception_handler
from core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from core.services import BaseService, ServiceResult


@pytest.fixture
def context():
    return {"view": Mock(), "request": Mock()}


class TestApiExceptionHandler:
    @pytest.mark.parametrize(
        "error, expected_status",
        [
            (ValidationError("bad"), status.HTTP_400_BAD_REQUEST),
            (PermissionDeniedError("no"), status.HTTP_403_FORBIDDEN),
            (NotFoundError("gone"), status.HTTP_404_NOT_FOUND),
            (ConflictError("busy"), status.HTTP_409_CONFLICT),
        ],
    )
    def test_application_errors_use_their_status(self, context, error, expected_status):
        response = api_exception_handler(error, context)

        assert response.status_code == expected_status
        assert response.data["error_code"] == error.error_code

    def test_details_are_rendered(self, context):
        error = ValidationError("Invalid", error_code="INVALID_COURSE", details={"price": ["x"]})

        response = api_exception_handler(error, context)

        assert response.data == {
            "error": "Invalid",
            "error_code": "INVALID_COURSE",
            "details": {"price": ["x"]},
        }

    def test_empty_details_are_omitted(self, context):
        response = api_exception_handler(NotFoundError("gone"), context)

        assert "details" not in response.data

    def test_database_errors_become_persistence_failure(self, context):
        response = api_exception_handler(DatabaseError("disk full"), context)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data["error_code"] == "PERSISTENCE_FAILURE"
        assert "disk full" not in response.data["error"]

    def test_drf_errors_fall_through(self, context):
        response = api_exception_handler(NotAuthenticated(), context)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestServiceResult:
    def test_success(self):
        result = ServiceResult.ok({"refunded": []})

        assert result
        assert result.data == {"refunded": []}

    def test_from_application_error_keeps_code(self):
        result = ServiceResult.from_exception(ConflictError("busy", error_code="STALE_RECORD"))

        assert not result
        assert result.error == "busy"
        assert result.error_code == "STALE_RECORD"

    def test_handle_exception_wraps_unknown_errors(self):
        result = BaseService.handle_exception(RuntimeError("boom"))

        assert result.success is False
        assert result.error_code == "RUNTIMEERROR"
