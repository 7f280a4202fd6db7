"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from erp_api.config import get_settings
from erp_api.middleware import RequestContextMiddleware, SecurityHeadersMiddleware
from erp_api.middleware.error_handler import register_exception_handlers
from erp_api.routers import auth, health, permissions, roles, users
from erp_api.security.rate_limit import limiter
from erp_api.services.role_bootstrap_service import bootstrap_system_roles
from erp_api.utils.request_id import REQUEST_ID_HEADER

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    if get_settings().bootstrap_system_roles:
        await bootstrap_system_roles()
    yield
    # Shutdown
    from erp_api.database import get_engine

    await get_engine().dispose()


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Custom rate limit handler returning RFC 7807 Problem Details.

    Includes Retry-After header per RFC 6585 Section 4.
    """
    logger.warning(f"Rate limit exceeded for {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={
            "type": "https://datatracker.ietf.org/doc/html/rfc6585#section-4",
            "title": "Too many requests",
            "status": 429,
            "detail": "Rate limit exceeded",
            "instance": request.url.path,
        },
        headers={
            "Content-Type": "application/problem+json",
            "Retry-After": "60",
        },
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_settings()

    app = FastAPI(
        title=config.app_name,
        version="0.1.0",
        description="ERP administration API",
        lifespan=lifespan,
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Domain errors and sanitized framework errors
    register_exception_handlers(app)

    allowed_origins = config.cors_origins_list
    if "*" in allowed_origins:
        raise ValueError(
            "CORS_ORIGINS cannot contain '*' wildcard when allow_credentials=True. "
            "Specify explicit origins."
        )

    # Middleware runs in REVERSE order of addition: CORS first on requests
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
    app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])
    app.include_router(roles.router, prefix="/api/v1/roles", tags=["Roles"])
    app.include_router(permissions.router, prefix="/api/v1/permissions", tags=["Permissions"])

    return app


app = create_app()
