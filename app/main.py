"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (one per market resource)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration
- Schema creation at startup (opt-in)

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from app.core.config import settings
from app.infrastructure.market.schema import create_schema
from app.interfaces.health import router as health_router
from app.interfaces.market.dependencies import get_engine
from app.interfaces.market.neighbor_posts_router import router as neighbor_posts_router
from app.interfaces.market.trade_posts_router import router as trade_posts_router
from app.interfaces.market.users_router import router as users_router
from app.shared.errors.handlers import register_error_handlers
from app.shared.logging import configure_logging
from app.shared.security.headers import SecurityHeadersMiddleware
from app.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: create missing tables when configured to."""
    if settings.auto_create_schema:
        engine = app.dependency_overrides.get(get_engine, get_engine)()
        create_schema(engine)
        logger.info("Database schema ensured")
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level, sql_echo=settings.sql_echo)

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
    app.include_router(users_router, prefix="/api/v1")
    app.include_router(trade_posts_router, prefix="/api/v1")
    app.include_router(neighbor_posts_router, prefix="/api/v1")

    return app


app = create_app()
