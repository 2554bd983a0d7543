"""
Blog Gateway API

Token-gated FastAPI service for publishing and reading blog posts.
"""

import logging
import time
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gateway import dependencies
from gateway.config import Settings, get_settings
from gateway.errors import GatewayError, RepositoryError
from gateway.middleware import (
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from gateway.routers import auth, blog

logger = logging.getLogger(__name__)

VERSION = "0.1.0"

_started_at = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: refuse to serve if the content store is unreachable."""
    settings = get_settings()
    if settings.signing_secret == settings.admin_secret_key:
        logger.warning(
            "AUTH_TOKEN_SECRET is unset or equal to ADMIN_SECRET_KEY; "
            "use a separate signing secret in production"
        )

    repository = dependencies.get_repository()
    try:
        await repository.ping()
    except RepositoryError:
        logger.critical("Content store unreachable at startup", exc_info=True)
        raise
    logger.info("Blog gateway ready (environment=%s)", settings.environment)
    yield
    await repository.close()


async def _gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    # Store failures are already logged with a traceback where they are caught
    logger.debug(
        "%s %s rejected (%d): %s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.debug("Malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Malformed request body."})


async def _http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    # Unknown paths and unsupported methods on known paths are both unmatched
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error."})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Blog Gateway API",
        description="Token-gated publishing API for blog posts",
        version=VERSION,
        lifespan=lifespan,
    )

    # Starlette runs the most recently added middleware first
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or ["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(GatewayError, _gateway_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(auth.router)
    app.include_router(blog.router)

    @app.get("/health")
    async def health_check() -> dict[str, object]:
        """Liveness check with process uptime in seconds."""
        return {"status": "ok", "uptime": round(time.monotonic() - _started_at, 3)}

    return app


app = create_app()
