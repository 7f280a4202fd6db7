"""Permission management router."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Response, status

from erp_api.constants.permissions import Permissions
from erp_api.dependencies import get_permission_service
from erp_api.models.dto.role import (
    PermissionCreateRequest,
    PermissionResponse,
    PermissionUpdateRequest,
)
from erp_api.security.access import GuardedRouter, require_permissions
from erp_api.services.permission_service import PermissionService

router = GuardedRouter(required_permissions=[Permissions.PERMISSIONS_MANAGE])

PermissionServiceDep = Annotated[PermissionService, Depends(get_permission_service)]


@router.post("", response_model=PermissionResponse, status_code=status.HTTP_201_CREATED)
async def create_permission(
    request: PermissionCreateRequest,
    service: PermissionServiceDep,
) -> PermissionResponse:
    """Create a permission."""
    return await service.create_permission(request)


@router.get("", response_model=list[PermissionResponse])
@require_permissions(Permissions.PERMISSIONS_VIEW, Permissions.PERMISSIONS_MANAGE)
async def list_permissions(service: PermissionServiceDep) -> list[PermissionResponse]:
    """List permissions."""
    return await service.list_permissions()


@router.get("/by-name/{name}", response_model=PermissionResponse)
@require_permissions(Permissions.PERMISSIONS_VIEW, Permissions.PERMISSIONS_MANAGE)
async def get_permission_by_name(name: str, service: PermissionServiceDep) -> PermissionResponse:
    """Get a permission by its exact name."""
    return await service.get_permission_by_name(name)


@router.get("/{permission_id}", response_model=PermissionResponse)
@require_permissions(Permissions.PERMISSIONS_VIEW, Permissions.PERMISSIONS_MANAGE)
async def get_permission(permission_id: UUID, service: PermissionServiceDep) -> PermissionResponse:
    """Get a permission by ID."""
    return await service.get_permission(permission_id)


@router.patch("/{permission_id}", response_model=PermissionResponse)
async def update_permission(
    permission_id: UUID,
    request: PermissionUpdateRequest,
    service: PermissionServiceDep,
) -> PermissionResponse:
    """Rename a permission or change its description."""
    return await service.update_permission(permission_id, request)


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_permission(permission_id: UUID, service: PermissionServiceDep) -> Response:
    """Delete a permission no role holds."""
    await service.delete_permission(permission_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
