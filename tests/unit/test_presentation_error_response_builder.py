"""Unit tests for ErrorResponseBuilder utility.

Tests cover:
- Status chosen by error code, not error class
- Field errors for ValidationError and ConflictError
- Retry-After on rate-limit errors, WWW-Authenticate on 401
- Unmapped codes fall back to 500
"""

import json
from unittest.mock import MagicMock

import pytest

from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import ConflictError, NotFoundError, ValidationError
from dsagrind.domain.errors import AuthError, RateLimitError
from dsagrind.infrastructure.enums import InfrastructureErrorCode
from dsagrind.infrastructure.errors import CacheError
from dsagrind.presentation.routers.api.errors import ErrorResponseBuilder


def make_request(path: str = "/api/auth/login"):
    request = MagicMock()
    request.url.path = path
    return request


def body(response) -> dict:
    return json.loads(bytes(response.body).decode())


@pytest.mark.unit
class TestErrorResponseBuilder:
    """Unit tests for ErrorResponseBuilder utility class."""

    def test_invalid_credentials(self):
        # Arrange
        error = AuthError(
            code=ErrorCode.INVALID_CREDENTIALS, message="Invalid email or password"
        )
        trace_id = "550e8400-e29b-41d4-a716-446655440000"

        # Act
        response = ErrorResponseBuilder.from_domain_error(error, make_request(), trace_id)

        # Assert
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        content = body(response)
        assert content["type"].endswith("/errors/invalid_credentials")
        assert content["title"] == "Invalid Credentials"
        assert content["detail"] == "Invalid email or password"
        assert content["instance"] == "/api/auth/login"
        assert content["trace_id"] == trace_id
        assert "errors" not in content

    def test_same_class_different_status(self):
        error = AuthError(code=ErrorCode.EMAIL_NOT_VERIFIED, message="Verify first")

        response = ErrorResponseBuilder.from_domain_error(error, make_request())

        assert response.status_code == 403
        assert "WWW-Authenticate" not in response.headers

    def test_rate_limit_sets_retry_after(self):
        error = RateLimitError(
            code=ErrorCode.RATE_LIMITED, message="Too many attempts", retry_after=900
        )

        response = ErrorResponseBuilder.from_domain_error(error, make_request())

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "900"

    def test_validation_error_field(self):
        error = ValidationError(
            code=ErrorCode.VALIDATION_FAILED,
            message="website must be an http(s) URL",
            field="website",
        )

        response = ErrorResponseBuilder.from_domain_error(
            error, make_request("/api/auth/profile")
        )

        assert response.status_code == 400
        assert body(response)["errors"] == [
            {
                "field": "website",
                "code": "validation_failed",
                "message": "website must be an http(s) URL",
            }
        ]

    def test_conflict_error_field(self):
        error = ConflictError(
            code=ErrorCode.USERNAME_TAKEN,
            message="Username already taken",
            resource_type="User",
            conflicting_field="username",
        )

        response = ErrorResponseBuilder.from_domain_error(error, make_request())

        assert response.status_code == 409
        assert body(response)["errors"][0]["field"] == "username"

    def test_not_found(self):
        error = NotFoundError(
            code=ErrorCode.USER_NOT_FOUND,
            message="User not found",
            resource_type="User",
            resource_id="123",
        )

        response = ErrorResponseBuilder.from_domain_error(error, make_request())

        assert response.status_code == 404

    def test_infrastructure_error_is_500(self):
        error = CacheError(
            code=ErrorCode.CACHE_ERROR,
            infrastructure_code=InfrastructureErrorCode.CACHE_CONNECTION_ERROR,
            message="Cache ping failed",
        )

        response = ErrorResponseBuilder.from_domain_error(error, make_request())

        assert response.status_code == 500
        assert body(response)["title"] == "Internal Server Error"

    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            (ErrorCode.UNSUPPORTED_PROVIDER, 400),
            (ErrorCode.PASSWORD_NOT_SET, 400),
            (ErrorCode.TOKEN_STALE, 401),
            (ErrorCode.OAUTH_FAILED, 401),
            (ErrorCode.TOKEN_NOT_FOUND, 404),
            (ErrorCode.EMAIL_TAKEN, 409),
            (ErrorCode.EXTERNAL_SERVICE_ERROR, 502),
        ],
    )
    def test_get_status_code(self, code, expected):
        assert ErrorResponseBuilder.get_status_code(code) == expected
