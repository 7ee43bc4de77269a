"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (identity, shop, health)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, correlation id, rate limiting)
- Logging configuration

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from shopapp.core.config import settings
from shopapp.infrastructure.shop.database import create_schema
from shopapp.interfaces.health import router as health_router
from shopapp.interfaces.shop.auth_router import router as auth_router
from shopapp.interfaces.shop.dependencies import get_engine
from shopapp.interfaces.shop.router import router as shop_router
from shopapp.shared.errors.handlers import register_error_handlers
from shopapp.shared.logging import configure_logging
from shopapp.shared.security.headers import (
    CorrelationIdMiddleware,
    SecurityHeadersMiddleware,
)
from shopapp.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: optionally create tables, dispose the pool on exit."""
    engine = get_engine()
    if settings.db_create_schema:
        create_schema(engine)
    logger.info("%s %s started", settings.project_name, settings.version)

    yield

    engine.dispose()
    logger.info("Connection pool disposed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level, show_sql=settings.db_show_sql)

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
    app.add_middleware(CorrelationIdMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router)
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(shop_router, prefix=settings.api_prefix)

    return app


app = create_app()
