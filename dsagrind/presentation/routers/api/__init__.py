"""API routers.

Resources:
    /api/auth   - Credentials, sessions, email verification, passwords, profile
    /api/oauth  - Third-party sign-in
"""

from fastapi import APIRouter

from dsagrind.presentation.routers.api.auth import router as auth_router
from dsagrind.presentation.routers.api.oauth import router as oauth_router

api_router = APIRouter(prefix="/api")
api_router.include_router(auth_router)
api_router.include_router(oauth_router)

__all__ = [
    "api_router",
]
