"""Role management router, including role-permission associations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Response, status

from erp_api.constants.permissions import Permissions
from erp_api.dependencies import get_role_service
from erp_api.models.domain.identity import Identity
from erp_api.models.dto.role import (
    RoleCreateRequest,
    RolePermissionsUpdateRequest,
    RoleResponse,
    RoleUpdateRequest,
)
from erp_api.security.access import GuardedRouter, get_current_identity, require_permissions
from erp_api.services.role_service import RoleService

router = GuardedRouter(required_permissions=[Permissions.ROLES_MANAGE])

RoleServiceDep = Annotated[RoleService, Depends(get_role_service)]
IdentityDep = Annotated[Identity, Depends(get_current_identity)]


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    request: RoleCreateRequest,
    service: RoleServiceDep,
    identity: IdentityDep,
) -> RoleResponse:
    """Create a role."""
    return await service.create_role(request, actor_id=identity.subject_id)


@router.get("", response_model=list[RoleResponse])
@require_permissions(Permissions.ROLES_VIEW, Permissions.ROLES_MANAGE)
async def list_roles(service: RoleServiceDep) -> list[RoleResponse]:
    """List roles with their permissions."""
    return await service.list_roles()


@router.get("/by-name/{name}", response_model=RoleResponse)
@require_permissions(Permissions.ROLES_VIEW, Permissions.ROLES_MANAGE)
async def get_role_by_name(name: str, service: RoleServiceDep) -> RoleResponse:
    """Get a role by its exact name."""
    return await service.get_role_by_name(name)


@router.get("/{role_id}", response_model=RoleResponse)
@require_permissions(Permissions.ROLES_VIEW, Permissions.ROLES_MANAGE)
async def get_role(role_id: UUID, service: RoleServiceDep) -> RoleResponse:
    """Get a role by ID."""
    return await service.get_role(role_id)


@router.patch("/{role_id}", response_model=RoleResponse)
async def update_role(
    role_id: UUID,
    request: RoleUpdateRequest,
    service: RoleServiceDep,
) -> RoleResponse:
    """Rename a role or change its description."""
    return await service.update_role(role_id, request)


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    role_id: UUID,
    service: RoleServiceDep,
    identity: IdentityDep,
) -> Response:
    """Delete a role no user references."""
    await service.delete_role(role_id, actor_id=identity.subject_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{role_id}/permissions", response_model=RoleResponse)
async def set_role_permissions(
    role_id: UUID,
    request: RolePermissionsUpdateRequest,
    service: RoleServiceDep,
    identity: IdentityDep,
) -> RoleResponse:
    """Replace the full permission set of a role."""
    return await service.set_permissions(
        role_id, request.permission_ids, actor_id=identity.subject_id
    )


@router.post("/{role_id}/permissions/{permission_id}", response_model=RoleResponse)
async def add_role_permission(
    role_id: UUID,
    permission_id: UUID,
    service: RoleServiceDep,
    identity: IdentityDep,
) -> RoleResponse:
    """Connect a permission to a role."""
    return await service.add_permission(role_id, permission_id, actor_id=identity.subject_id)


@router.delete("/{role_id}/permissions/{permission_id}", response_model=RoleResponse)
async def remove_role_permission(
    role_id: UUID,
    permission_id: UUID,
    service: RoleServiceDep,
    identity: IdentityDep,
) -> RoleResponse:
    """Disconnect a permission from a role."""
    return await service.remove_permission(role_id, permission_id, actor_id=identity.subject_id)
