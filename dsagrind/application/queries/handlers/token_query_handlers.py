"""Access token query handlers.

Pure delegations to the token service; no store or cache access.
"""

from uuid import UUID

from dsagrind.application.queries.auth_queries import (
    GetUserIdFromToken,
    ValidateToken,
)
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import DomainError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.errors import AuthError
from dsagrind.domain.protocols import TokenGenerationProtocol


class ValidateTokenHandler:
    """Handler for the ValidateToken query. Always succeeds with a bool."""

    def __init__(self, token_service: TokenGenerationProtocol) -> None:
        self._token_service = token_service

    async def handle(self, query: ValidateToken) -> Result[bool, DomainError]:
        result = self._token_service.validate_access_token(query.token)
        return Success(value=isinstance(result, Success))


class GetUserIdFromTokenHandler:
    """Handler for the GetUserIdFromToken query.

    Failures keep the token service's code (TOKEN_EXPIRED or TOKEN_INVALID)
    so callers can tell an expired session from a forged token.
    """

    def __init__(self, token_service: TokenGenerationProtocol) -> None:
        self._token_service = token_service

    async def handle(self, query: GetUserIdFromToken) -> Result[UUID, DomainError]:
        match self._token_service.validate_access_token(query.token):
            case Failure(error=error):
                return Failure(error=error)
            case Success(value=claims):
                try:
                    return Success(value=UUID(str(claims["sub"])))
                except (KeyError, ValueError):
                    return Failure(
                        error=AuthError(
                            code=ErrorCode.TOKEN_INVALID,
                            message="Token subject is not a user id",
                        )
                    )
