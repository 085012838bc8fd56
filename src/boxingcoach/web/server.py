import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from boxingcoach.app import App
from boxingcoach.config import Config
from boxingcoach.errors import UserError
from boxingcoach.utils import now
from boxingcoach.web.error_handlers import (
    general_exception_handler,
    http_exception_handler,
    request_validation_error_handler,
    user_error_handler,
)
from boxingcoach.web.openapi import set_custom_openapi
from boxingcoach.web.routers import auth_router, meta_router, training_router, users_router

logger = structlog.get_logger(__name__)


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        # Store app instance and config in app state
        app.state.app = app_instance
        app.state.config = config
        app.state.started_at = time.monotonic()
        async with app_instance.lifespan():
            logger.info("server_started", environment=config.environment)
            yield

    app = FastAPI(
        title="Boxing Coach API",
        lifespan=lifespan,
        openapi_tags=[],  # Tags will be added by custom OpenAPI function
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        logger.info("request", method=request.method, path=request.url.path)
        return await call_next(request)

    # Added last so it wraps the logging middleware and answers preflight requests
    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check(request: Request) -> dict[str, str | float]:
        return {
            "status": "ok",
            "timestamp": now().isoformat(),
            "uptime": time.monotonic() - request.app.state.started_at,
        }

    # API v1 routes
    app.include_router(meta_router, prefix="/api/v1")
    app.include_router(auth_router, prefix="/api/v1/auth")
    app.include_router(users_router, prefix="/api/v1/users")
    app.include_router(training_router, prefix="/api/v1/training")

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
