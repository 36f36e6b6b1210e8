"""Main FastAPI application entry point.

Wires the trace middleware, CORS, RFC 7807 exception handlers and the
system and API routers. Run with:

    uvicorn dsagrind.main:app --reload
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dsagrind.core.config import settings
from dsagrind.core.container import get_database, get_logger, get_redis_client
from dsagrind.presentation.routers.api import api_router
from dsagrind.presentation.routers.api.errors import register_exception_handlers
from dsagrind.presentation.routers.api.middleware.trace_middleware import (
    TraceMiddleware,
)
from dsagrind.presentation.routers.system import system_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    - Startup: log configuration summary
    - Shutdown: dispose the database engine and close the Redis pool
    """
    logger = get_logger()
    logger.info(
        "application_starting",
        environment=settings.environment.value,
        version=settings.app_version,
    )

    yield

    await get_database().close()
    await get_redis_client().aclose()
    logger.info("application_stopped")


app = FastAPI(
    title=f"{settings.app_name} Auth API",
    description="Authentication and session lifecycle service",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(TraceMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Trace-Id", "Retry-After"],
)

register_exception_handlers(app)

app.include_router(system_router)
app.include_router(api_router)
