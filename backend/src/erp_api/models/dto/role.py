"""Role and permission DTOs."""

from uuid import UUID

from pydantic import Field

from erp_api.models.dto.base import CamelModel


class PermissionCreateRequest(CamelModel):
    """Permission creation request."""

    name: str = Field(min_length=1, max_length=100)
    description: str | None = None


class PermissionUpdateRequest(CamelModel):
    """Permission update request."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None


class PermissionResponse(CamelModel):
    """Permission response."""

    id: UUID
    name: str
    description: str | None = None


class RoleCreateRequest(CamelModel):
    """Role creation request."""

    name: str = Field(min_length=1, max_length=100)
    description: str | None = None


class RoleUpdateRequest(CamelModel):
    """Role update request."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None


class RolePermissionsUpdateRequest(CamelModel):
    """Replace the full permission set of a role."""

    permission_ids: list[UUID] = Field(default_factory=list, max_length=500)


class RoleSummary(CamelModel):
    """Role without its permissions."""

    id: UUID
    name: str
    description: str | None = None


class RoleResponse(RoleSummary):
    """Role with its permissions."""

    permissions: list[PermissionResponse] = Field(default_factory=list)
