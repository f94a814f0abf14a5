"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (one per bounded context)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from wagerbridge.core.config import settings
from wagerbridge.interfaces.betting.router import router as betting_router
from wagerbridge.interfaces.fantasy402.dependencies import close_fantasy402_adapter
from wagerbridge.interfaces.fantasy402.router import router as fantasy402_router
from wagerbridge.interfaces.health import router as health_router
from wagerbridge.shared.errors.handlers import register_error_handlers
from wagerbridge.shared.logging import configure_logging
from wagerbridge.shared.security.headers import SecurityHeadersMiddleware
from wagerbridge.shared.security.rate_limiting import (
    limiter,
    rate_limit_exceeded_handler,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: release the Fantasy402 session on shutdown."""
    logger.info("%s %s starting", settings.project_name, settings.version)
    yield
    await close_fantasy402_adapter()
    logger.info("%s stopped", settings.project_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(betting_router, prefix="/api/v1")
    app.include_router(fantasy402_router, prefix="/api/v1")

    return app


app = create_app()
