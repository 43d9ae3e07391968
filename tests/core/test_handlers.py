"""
Tests for the application exception handlers.

Run:
    pytest tests/core/test_handlers.py -v
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from app.core.exceptions import (
    AppException,
    InvalidSubmissionException,
    NotFoundException,
    PersistenceException,
    RateLimitExceededException,
)
from app.core.handlers import app_exception_handler, persistence_exception_handler


@pytest.fixture
def request_stub():
    request = MagicMock()
    request.method = "POST"
    request.url.path = "/api/v1/submit-order-inquiry"
    return request


class TestExceptionTypes:

    def test_defaults(self):
        assert AppException("x").status_code == 500
        assert InvalidSubmissionException().status_code == 400
        assert NotFoundException().status_code == 404

    def test_rate_limit_carries_flag(self):
        exc = RateLimitExceededException()

        assert exc.status_code == 429
        assert exc.message == "Too many submissions. Please try again later."
        assert exc.details == {"rateLimited": True}


class TestAppExceptionHandler:

    @pytest.mark.asyncio
    async def test_renders_error_body(self, request_stub):
        response = await app_exception_handler(request_stub, InvalidSubmissionException("Bad"))

        assert response.status_code == 400
        assert json.loads(response.body) == {"error": "Bad"}

    @pytest.mark.asyncio
    async def test_merges_details(self, request_stub):
        response = await app_exception_handler(request_stub, RateLimitExceededException())

        assert response.status_code == 429
        assert json.loads(response.body)["rateLimited"] is True

    @pytest.mark.asyncio
    async def test_logs_warning(self, request_stub):
        with patch("app.core.handlers.app_logger") as mock_logger:
            await app_exception_handler(request_stub, NotFoundException())

        mock_logger.warning.assert_called_once()


class TestPersistenceExceptionHandler:

    @pytest.mark.asyncio
    async def test_hides_internal_message(self, request_stub):
        with patch("app.core.handlers.app_logger") as mock_logger:
            response = await persistence_exception_handler(
                request_stub, PersistenceException("relation order_inquiries does not exist")
            )

        assert response.status_code == 500
        assert json.loads(response.body) == {"error": "An unexpected error occurred"}
        assert "order_inquiries" in mock_logger.error.call_args[0][0]
