"""System router for non-API endpoints (root and health).

These endpoints are lightweight and side-effect free to support health
checks and basic diagnostics.
"""

from fastapi import APIRouter

from dsagrind.core.config import settings


system_router = APIRouter(tags=["System"])


@system_router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint - basic status check.

    Returns:
        dict[str, str]: Service name, status and version.
    """
    return {
        "message": f"{settings.app_name} Auth API",
        "status": "operational",
        "version": settings.app_version,
    }


@system_router.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint for monitoring and load balancers."""
    return {"status": "healthy", "service": "auth"}
