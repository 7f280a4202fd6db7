"""Access token issuance and verification."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from erp_api.config import Settings, get_settings
from erp_api.exceptions import InvalidTokenError, MissingCredentialsError
from erp_api.models.domain.identity import Identity

logger = logging.getLogger(__name__)

# auto_error=False: a missing header is reported by TokenAuthenticator
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: UUID | str, role_name: str) -> str:
    """Create a signed JWT access token.

    Args:
        user_id: User UUID (becomes the ``sub`` claim)
        role_name: Name of the user's role

    Returns:
        JWT token string
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role_name,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expiration_minutes),
        "iss": settings.jwt_issuer,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """Decode and verify a JWT token.

    Expiry is always enforced.

    Args:
        token: JWT token string
        settings: Settings to verify against (defaults to process settings)

    Returns:
        Token payload

    Raises:
        InvalidTokenError: If the token is malformed, tampered with or expired
    """
    settings = settings or get_settings()
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
            options={"verify_exp": True, "require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise InvalidTokenError() from e


class TokenAuthenticator:
    """Authentication stage of the access gate.

    Turns the ``Authorization: Bearer`` credentials of a request into an
    ``Identity`` or rejects the request.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def authenticate(self, credentials: HTTPAuthorizationCredentials | None) -> Identity:
        """Verify bearer credentials.

        Args:
            credentials: Parsed Authorization header, None when absent

        Returns:
            Identity built from the token's ``sub`` and ``role`` claims

        Raises:
            MissingCredentialsError: If no bearer token was supplied
            InvalidTokenError: If the token fails verification
        """
        if credentials is None or not credentials.credentials:
            raise MissingCredentialsError()

        payload = decode_token(credentials.credentials, self.settings)

        subject = payload.get("sub")
        role = payload.get("role")
        if not subject or (role is not None and not isinstance(role, str)):
            logger.warning("Rejected token with malformed payload")
            raise InvalidTokenError()

        return Identity(subject_id=subject, role_name=role)
