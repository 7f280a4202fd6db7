"""User DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from erp_api.models.dto.base import CamelModel
from erp_api.models.dto.role import RoleSummary


class UserCreateRequest(CamelModel):
    """User creation request."""

    email: EmailStr
    full_name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=8, max_length=128)
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = Field(default=None, max_length=500)
    role_id: UUID | None = None


class UserUpdateRequest(CamelModel):
    """User update request.

    Email and role are changed through dedicated operations.
    """

    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    password: str | None = Field(default=None, min_length=8, max_length=128)
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = Field(default=None, max_length=500)

    @field_validator("full_name", "password")
    @classmethod
    def reject_null(cls, value: str | None) -> str:
        """Omit a field to keep it; null is not a valid value."""
        if value is None:
            raise ValueError("must not be null")
        return value


class UserRoleChangeRequest(CamelModel):
    """Role change request."""

    role_id: UUID


class UserResponse(CamelModel):
    """User response. Never includes the password hash."""

    id: UUID
    email: str
    full_name: str
    phone: str | None = None
    address: str | None = None
    role_id: UUID
    role: RoleSummary | None = None
    deleted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserListResponse(CamelModel):
    """User list response."""

    items: list[UserResponse]
    total: int
