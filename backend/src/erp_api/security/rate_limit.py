"""Rate limiting configuration for security-sensitive endpoints."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from erp_api.config import get_settings

limiter = Limiter(key_func=get_remote_address)


def auth_login_limit() -> str:
    """Rate limit for the login endpoint, read from settings."""
    return f"{get_settings().rate_limit_auth_login}/minute"
