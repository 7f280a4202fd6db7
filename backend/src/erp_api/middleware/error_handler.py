"""Centralized translation of exceptions into client-facing responses.

Handlers never leak internal details: domain errors carry their own safe
messages, persistence errors are logged in full and answered generically.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from erp_api.config import get_settings
from erp_api.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    ERPAPIError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

# Safe error messages that can be shown to users
SAFE_ERROR_MESSAGES = {
    400: "Invalid request",
    401: "Authentication required",
    403: "Access denied",
    404: "Resource not found",
    405: "Method not allowed",
    409: "Conflict with existing resource",
    422: "Invalid input data",
    429: "Too many requests",
    500: "Internal server error",
    503: "Service temporarily unavailable",
}

# Error messages that are safe to pass through from HTTPException
ALLOWED_ERROR_PATTERNS = [
    "Not authenticated",
    "Authentication required",
    "Access denied",
    "Not Found",
    "Method Not Allowed",
]

# Most specific classes first
_STATUS_BY_ERROR: list[tuple[type[ERPAPIError], int]] = [
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_for_error(exc: ERPAPIError) -> int:
    """Map a domain error to its HTTP status code."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def is_safe_error_message(message: str) -> bool:
    """Check if an error message is safe to expose to users."""
    message_lower = message.lower()
    return any(pattern.lower() in message_lower for pattern in ALLOWED_ERROR_PATTERNS)


def sanitize_error_detail(detail: Any, status_code: int) -> str:
    """Sanitize error detail to prevent information disclosure.

    Args:
        detail: Original error detail
        status_code: HTTP status code

    Returns:
        Safe error message
    """
    if isinstance(detail, str):
        if is_safe_error_message(detail):
            return detail
    elif isinstance(detail, list):
        # Validation errors - keep field names and messages only
        safe_errors = []
        for error in detail:
            if isinstance(error, dict):
                loc = error.get("loc", [])
                msg = error.get("msg", "Invalid value")
                field = loc[-1] if loc else "field"
                if isinstance(field, str) and not field.startswith("_"):
                    safe_errors.append(f"{field}: {msg}")
        if safe_errors:
            return "; ".join(safe_errors[:3])

    return SAFE_ERROR_MESSAGES.get(status_code, "Request failed")


async def domain_exception_handler(request: Request, exc: ERPAPIError) -> JSONResponse:
    """Handle domain errors raised by services and the access gate."""
    status_code = status_for_error(exc)
    headers: dict[str, str] = {}

    if isinstance(exc, AuthenticationError):
        headers["WWW-Authenticate"] = "Bearer"
    if isinstance(exc, ConfigurationError):
        logger.error(f"Configuration error for {request.url.path}: {exc.message} {exc.details}")
    elif isinstance(exc, ConflictError):
        logger.info(f"Conflict for {request.url.path}: {exc.message} {exc.details}")

    content: dict[str, Any] = {"detail": exc.message}
    if get_settings().debug and exc.details:
        content["details"] = exc.details

    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions with sanitized messages."""
    if get_settings().debug:
        detail = exc.detail
    else:
        detail = sanitize_error_detail(exc.detail, exc.status_code)

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle validation exceptions with sanitized messages."""
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")

    if get_settings().debug:
        detail: Any = exc.errors()
    else:
        detail = sanitize_error_detail(exc.errors(), status.HTTP_422_UNPROCESSABLE_ENTITY)

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": detail},
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle SQLAlchemy exceptions without leaking database details.

    The underlying cause is logged for operators.
    """
    if isinstance(exc, NoResultFound):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": SAFE_ERROR_MESSAGES[404]},
        )

    if isinstance(exc, IntegrityError):
        logger.warning(f"Integrity error for {request.url.path}: {exc.orig}")
        message = str(exc.orig).lower()
        if "unique" in message or "duplicate" in message:
            detail = "Resource already exists"
        elif "foreign key" in message:
            detail = "Conflicting data relations"
        else:
            detail = SAFE_ERROR_MESSAGES[409]
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": detail})

    logger.error(f"Database error for {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred"},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without leaking information."""
    logger.error(f"Unhandled exception for {request.url.path}: {exc}", exc_info=True)

    if get_settings().debug:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc), "type": type(exc).__name__},
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": SAFE_ERROR_MESSAGES[500]},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install every exception handler on the application."""
    app.add_exception_handler(ERPAPIError, domain_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
