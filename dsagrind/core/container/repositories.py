"""Repository dependency factories.

Request-scoped repository instances. Each request gets a fresh repository
bound to the request's session.
"""

from typing import TYPE_CHECKING

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dsagrind.core.container.infrastructure import get_db_session

if TYPE_CHECKING:
    from dsagrind.infrastructure.persistence.repositories import UserRepository


async def get_user_repository(
    session: AsyncSession = Depends(get_db_session),
) -> "UserRepository":
    """Get user repository (request-scoped).

    Args:
        session: Database session for request duration.
            Injected via Depends(get_db_session).
    """
    from dsagrind.infrastructure.persistence.repositories import UserRepository

    return UserRepository(session=session)
