"""Update profile handler.

Writes names, avatar and the profile sub-document, invalidates the cached
projection and returns a fresh one through GetUser.
"""

from dataclasses import replace
from urllib.parse import urlparse

from dsagrind.application.commands.auth_commands import UpdateProfile
from dsagrind.application.dtos import UserProjection
from dsagrind.application.queries.auth_queries import GetUser
from dsagrind.application.queries.handlers.get_user_handler import GetUserHandler
from dsagrind.application.services import UserCache
from dsagrind.core.enums import ErrorCode
from dsagrind.core.errors import DomainError, NotFoundError, ValidationError
from dsagrind.core.result import Failure, Result
from dsagrind.domain.entities import UserProfile
from dsagrind.domain.protocols import LoggerProtocol, UserRepository


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class UpdateProfileHandler:
    """Handler for the UpdateProfile command."""

    def __init__(
        self,
        user_repo: UserRepository,
        user_cache: UserCache,
        get_user_handler: GetUserHandler,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._user_cache = user_cache
        self._get_user_handler = get_user_handler
        self._logger = logger

    async def handle(self, cmd: UpdateProfile) -> Result[UserProjection, DomainError]:
        """Handle the UpdateProfile command.

        Returns:
            Success(UserProjection) re-read after the write.
            Failure(ValidationError) for a malformed avatar or website URL.
            Failure(NotFoundError) for an unknown user.
        """
        for field_name in ("avatar", "website"):
            value = getattr(cmd, field_name)
            if value and not _is_http_url(value):
                return Failure(
                    error=ValidationError(
                        code=ErrorCode.VALIDATION_FAILED,
                        message=f"{field_name} must be an http(s) URL",
                        field=field_name,
                    )
                )

        user = await self._user_repo.find_by_id(cmd.user_id)
        if user is None:
            return Failure(error=self._not_found(cmd))

        if cmd.first_name is not None:
            user.first_name = cmd.first_name
        if cmd.last_name is not None:
            user.last_name = cmd.last_name
        if cmd.avatar is not None:
            user.avatar = cmd.avatar

        profile = user.profile
        changes = {
            name: getattr(cmd, name)
            for name in ("bio", "location", "website", "company", "skills")
            if getattr(cmd, name) is not None
        }
        if changes:
            profile = replace(profile, **changes)
        if cmd.preferences is not None:
            merged = profile.to_dict()
            merged["preferences"] = cmd.preferences
            profile = replace(
                profile, preferences=UserProfile.from_dict(merged).preferences
            )
        user.profile = profile

        if not await self._user_repo.update_profile(cmd.user_id, user):
            return Failure(error=self._not_found(cmd))

        await self._user_cache.invalidate(cmd.user_id)
        self._logger.info("profile_updated", user_id=str(cmd.user_id))
        return await self._get_user_handler.handle(GetUser(user_id=cmd.user_id))

    @staticmethod
    def _not_found(cmd: UpdateProfile) -> NotFoundError:
        return NotFoundError(
            code=ErrorCode.USER_NOT_FOUND,
            message="User not found",
            resource_type="User",
            resource_id=str(cmd.user_id),
        )
