"""Middleware package."""

from erp_api.middleware.request_context_middleware import RequestContextMiddleware
from erp_api.middleware.security_headers_middleware import SecurityHeadersMiddleware

__all__ = [
    "RequestContextMiddleware",
    "SecurityHeadersMiddleware",
]
