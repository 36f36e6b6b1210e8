"""Error response builder for RFC 7807 Problem Details.

Converts ``DomainError`` values returned by handlers into JSON responses.
The HTTP status is chosen from the error code, never from the error class,
so an ``AuthError`` carrying ``EMAIL_NOT_VERIFIED`` maps to 403 while one
carrying ``INVALID_CREDENTIALS`` maps to 401.

Exports:
    ErrorResponseBuilder: Utility class for building RFC 7807 responses
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from dsagrind.core.config import settings
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import ConflictError, DomainError, ValidationError
from dsagrind.domain.errors import RateLimitError
from dsagrind.presentation.routers.api.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)

# ErrorCode -> (HTTP status, title)
_ERROR_STATUS: dict[ErrorCode, tuple[int, str]] = {
    ErrorCode.VALIDATION_FAILED: (status.HTTP_400_BAD_REQUEST, "Validation Failed"),
    ErrorCode.UNSUPPORTED_PROVIDER: (
        status.HTTP_400_BAD_REQUEST,
        "Unsupported OAuth Provider",
    ),
    ErrorCode.PASSWORD_NOT_SET: (status.HTTP_400_BAD_REQUEST, "Password Not Set"),
    ErrorCode.INVALID_CREDENTIALS: (
        status.HTTP_401_UNAUTHORIZED,
        "Invalid Credentials",
    ),
    ErrorCode.TOKEN_INVALID: (status.HTTP_401_UNAUTHORIZED, "Invalid Token"),
    ErrorCode.TOKEN_EXPIRED: (status.HTTP_401_UNAUTHORIZED, "Token Expired"),
    ErrorCode.TOKEN_STALE: (status.HTTP_401_UNAUTHORIZED, "Token Already Used"),
    ErrorCode.OAUTH_FAILED: (
        status.HTTP_401_UNAUTHORIZED,
        "OAuth Authentication Failed",
    ),
    ErrorCode.EMAIL_NOT_VERIFIED: (status.HTTP_403_FORBIDDEN, "Email Not Verified"),
    ErrorCode.USER_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Resource Not Found"),
    ErrorCode.TOKEN_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Resource Not Found"),
    ErrorCode.EMAIL_TAKEN: (status.HTTP_409_CONFLICT, "Resource Conflict"),
    ErrorCode.USERNAME_TAKEN: (status.HTTP_409_CONFLICT, "Resource Conflict"),
    ErrorCode.RATE_LIMITED: (status.HTTP_429_TOO_MANY_REQUESTS, "Too Many Requests"),
    ErrorCode.CACHE_ERROR: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
    ),
    ErrorCode.EXTERNAL_SERVICE_ERROR: (
        status.HTTP_502_BAD_GATEWAY,
        "External Service Error",
    ),
}


class ErrorResponseBuilder:
    """Build RFC 7807 Problem Details error responses.

    Example:
        >>> match result:
        ...     case Failure(error=error):
        ...         return ErrorResponseBuilder.from_domain_error(
        ...             error, request, get_trace_id()
        ...         )
    """

    @staticmethod
    def from_domain_error(
        error: DomainError,
        request: Request,
        trace_id: str | None = None,
    ) -> JSONResponse:
        """Convert a DomainError to an RFC 7807 JSON response.

        Args:
            error: Error returned by a handler.
            request: FastAPI Request object (for instance URL).
            trace_id: Request trace ID for debugging.

        Returns:
            JSONResponse with ProblemDetails content. Rate-limit errors carry
            a ``Retry-After`` header.
        """
        status_code = ErrorResponseBuilder.get_status_code(error.code)

        problem = ProblemDetails(
            type=f"{settings.api_base_url}/errors/{error.code.value}",
            title=ErrorResponseBuilder._get_title(error.code),
            status=status_code,
            detail=error.message,
            instance=str(request.url.path),
            errors=ErrorResponseBuilder._field_errors(error),
            trace_id=trace_id,
        )

        headers: dict[str, str] | None = None
        if isinstance(error, RateLimitError) and error.retry_after is not None:
            headers = {"Retry-After": str(error.retry_after)}
        elif status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}

        return JSONResponse(
            status_code=status_code,
            content=problem.model_dump(exclude_none=True),
            headers=headers,
        )

    @staticmethod
    def get_status_code(code: ErrorCode) -> int:
        """Map an error code to an HTTP status code (500 when unmapped).

        Example:
            >>> ErrorResponseBuilder.get_status_code(ErrorCode.RATE_LIMITED)
            429
        """
        return _ERROR_STATUS.get(code, (status.HTTP_500_INTERNAL_SERVER_ERROR, ""))[0]

    @staticmethod
    def _get_title(code: ErrorCode) -> str:
        return _ERROR_STATUS.get(code, (0, "Internal Server Error"))[1]

    @staticmethod
    def _field_errors(error: DomainError) -> list[ErrorDetail] | None:
        if isinstance(error, ValidationError) and error.field:
            field = error.field
        elif isinstance(error, ConflictError):
            field = error.conflicting_field
        else:
            return None
        return [ErrorDetail(field=field, code=error.code.value, message=error.message)]
