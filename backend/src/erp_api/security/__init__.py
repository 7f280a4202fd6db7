"""Security package."""

from erp_api.security.auth import TokenAuthenticator, create_access_token, decode_token
from erp_api.security.password import PasswordService, get_password_service

__all__ = [
    "PasswordService",
    "TokenAuthenticator",
    "create_access_token",
    "decode_token",
    "get_password_service",
]
