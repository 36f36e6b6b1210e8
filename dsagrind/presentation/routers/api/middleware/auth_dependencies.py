"""Request dependencies for authenticated routes.

Usage:
    @router.get("/me")
    async def me(current_user: CurrentUser = Depends(get_current_user)):
        return {"user_id": str(current_user.user_id)}
"""

from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dsagrind.application.queries.auth_queries import GetUserIdFromToken
from dsagrind.application.queries.handlers.token_query_handlers import (
    GetUserIdFromTokenHandler,
)
from dsagrind.core.container import get_user_id_from_token_handler
from dsagrind.core.result import Failure, Success

# Missing credentials are answered with 401 below, not HTTPBearer's default
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True, slots=True, kw_only=True)
class CurrentUser:
    """Authenticated caller resolved from the access token.

    Attributes:
        user_id: User id (JWT ``sub`` claim).
        access_token: The bearer token the request presented.
    """

    user_id: UUID
    access_token: str


async def get_current_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
    handler: Annotated[
        GetUserIdFromTokenHandler, Depends(get_user_id_from_token_handler)
    ],
) -> CurrentUser:
    """Resolve the current user from the ``Authorization: Bearer`` header.

    Raises:
        HTTPException 401: If the token is missing, invalid or expired.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = await handler.handle(GetUserIdFromToken(token=credentials.credentials))

    match result:
        case Success(value=user_id):
            return CurrentUser(user_id=user_id, access_token=credentials.credentials)
        case Failure(error=error):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=error.message,
                headers={"WWW-Authenticate": "Bearer"},
            )


def get_client_ip(request: Request) -> str:
    """Client address: first ``X-Forwarded-For`` hop, else the socket peer.

    Returns "unknown" when neither is available.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return request.client.host if request.client else "unknown"
