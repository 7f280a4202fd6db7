"""Authentication DTOs."""

from pydantic import EmailStr, Field

from erp_api.models.dto.base import CamelModel


class LoginRequest(CamelModel):
    """Login request."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class TokenResponse(CamelModel):
    """Access token issued after a successful login."""

    access_token: str


class IdentityResponse(CamelModel):
    """Identity attached to the current request."""

    user_id: str
    role: str | None = None
