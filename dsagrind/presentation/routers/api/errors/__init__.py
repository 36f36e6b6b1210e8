"""RFC 7807 error responses.

Exports:
    ProblemDetails, ErrorDetail: Response schemas
    ErrorResponseBuilder: DomainError -> JSONResponse
    register_exception_handlers: Global exception handlers
"""

from dsagrind.presentation.routers.api.errors.error_response_builder import (
    ErrorResponseBuilder,
)
from dsagrind.presentation.routers.api.errors.exception_handlers import (
    register_exception_handlers,
)
from dsagrind.presentation.routers.api.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponseBuilder",
    "ProblemDetails",
    "register_exception_handlers",
]
