"""GetUser query handler.

Cache-aside read of the user projection: a cache hit is returned as is, a
miss (or a cache failure) falls back to the store and re-populates the
cache for ``user_cache_ttl_minutes``.
"""

from dsagrind.application.dtos import UserProjection
from dsagrind.application.queries.auth_queries import GetUser
from dsagrind.application.services import UserCache
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import NotFoundError
from dsagrind.core.result import Failure, Result, Success
from dsagrind.domain.protocols import UserRepository


class GetUserHandler:
    """Handler for the GetUser query."""

    def __init__(self, user_repo: UserRepository, user_cache: UserCache) -> None:
        self._user_repo = user_repo
        self._user_cache = user_cache

    async def handle(self, query: GetUser) -> Result[UserProjection, NotFoundError]:
        cached = await self._user_cache.get(query.user_id)
        if cached is not None:
            return Success(value=cached)

        user = await self._user_repo.find_by_id(query.user_id)
        if user is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.USER_NOT_FOUND,
                    message="User not found",
                    resource_type="User",
                    resource_id=str(query.user_id),
                )
            )

        projection = UserProjection.from_user(user)
        await self._user_cache.set(projection)
        return Success(value=projection)
