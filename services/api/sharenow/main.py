"""FastAPI application entry point.

Share Now API - share, tag, vote on and get digests of content links in Teams.
"""

import asyncio
import contextlib
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sharenow.errors import error_body
from sharenow.routes import api_router
from sharenow.services.digest import digest_scheduler_loop
from sharenow.services.notifier import TeamsNotifier
from sharenow.settings import get_settings
from sharenow.stores.postgres import init_db, close_db, ping_db
from sharenow.stores.redis import init_redis, close_redis

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    settings = get_settings()

    # Initialize database (skip in tests if no DB available)
    try:
        await init_db()
        await ping_db()
        logger.info("Postgres connected")
    except Exception:
        logger.exception("Postgres init failed")

    # Initialize Redis (caches and digest lock are optional)
    try:
        await init_redis()
    except Exception:
        logger.exception("Redis init failed")

    digest_task: asyncio.Task | None = None
    if settings.digest_scheduler_enabled:
        digest_task = asyncio.create_task(
            digest_scheduler_loop(TeamsNotifier.from_settings(), settings.digest_interval_seconds)
        )
        logger.info(f"Digest scheduler started (every {settings.digest_interval_seconds}s)")

    yield

    # Shutdown
    if digest_task is not None:
        digest_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await digest_task
    await close_redis()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Share Now: discover and share content links in Microsoft Teams",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Render HTTP errors (routing 404/405 included) in the structured error format."""
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.status_code, exc.detail),
            headers=exc.headers,
        )

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": str(exc) if settings.debug else "Internal server error",
                    "detail": None,
                }
            },
        )

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    # Include API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "sharenow.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
