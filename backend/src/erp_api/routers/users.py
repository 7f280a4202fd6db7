"""User management router."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Query, status

from erp_api.constants.permissions import Permissions
from erp_api.dependencies import get_user_service
from erp_api.models.domain.identity import Identity
from erp_api.models.dto.user import (
    UserCreateRequest,
    UserListResponse,
    UserResponse,
    UserRoleChangeRequest,
    UserUpdateRequest,
)
from erp_api.security.access import GuardedRouter, get_current_identity, require_permissions
from erp_api.services.user_service import UserService

router = GuardedRouter(required_permissions=[Permissions.USERS_VIEW])

UserServiceDep = Annotated[UserService, Depends(get_user_service)]
IdentityDep = Annotated[Identity, Depends(get_current_identity)]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@require_permissions(Permissions.USERS_CREATE)
async def create_user(
    request: UserCreateRequest,
    service: UserServiceDep,
    identity: IdentityDep,
) -> UserResponse:
    """Create a user. Without ``roleId`` the default USER role is assigned."""
    return await service.create_user(request, actor_id=identity.subject_id)


@router.post("/privileged", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@require_permissions(Permissions.USERS_CREATE_PRIVILEGED)
async def create_privileged_user(
    request: UserCreateRequest,
    service: UserServiceDep,
    identity: IdentityDep,
) -> UserResponse:
    """Create a user with any role, ADMIN and MANAGER included."""
    return await service.create_user(
        request, actor_id=identity.subject_id, allow_restricted_roles=True
    )


@router.get("", response_model=UserListResponse | UserResponse)
async def list_users(
    service: UserServiceDep,
    email: Annotated[str | None, Query(max_length=255)] = None,
) -> UserListResponse | UserResponse:
    """List non-deleted users, or fetch one by ``?email=``."""
    if email:
        return await service.get_user_by_email(email)
    return await service.list_users()


@router.get("/deleted", response_model=UserListResponse)
async def list_deleted_users(service: UserServiceDep) -> UserListResponse:
    """List soft-deleted users."""
    return await service.list_deleted_users()


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, service: UserServiceDep) -> UserResponse:
    """Get a user by ID."""
    return await service.get_user(user_id)


@router.patch("/{user_id}", response_model=UserResponse)
@require_permissions(Permissions.USERS_EDIT)
async def update_user(
    user_id: UUID,
    request: UserUpdateRequest,
    service: UserServiceDep,
) -> UserResponse:
    """Update profile fields or password."""
    return await service.update_user(user_id, request)


@router.patch("/{user_id}/role", response_model=UserResponse)
@require_permissions(Permissions.USERS_EDIT)
async def change_user_role(
    user_id: UUID,
    request: UserRoleChangeRequest,
    service: UserServiceDep,
    identity: IdentityDep,
) -> UserResponse:
    """Assign a different role to a user."""
    return await service.change_role(user_id, request.role_id, actor_id=identity.subject_id)


@router.delete("/{user_id}", response_model=UserResponse)
@require_permissions(Permissions.USERS_DELETE)
async def delete_user(
    user_id: UUID,
    service: UserServiceDep,
    identity: IdentityDep,
) -> UserResponse:
    """Soft-delete a user."""
    return await service.delete_user(user_id, actor_id=identity.subject_id)


@router.post("/{user_id}/restore", response_model=UserResponse)
@require_permissions(Permissions.USERS_DELETE)
async def restore_user(
    user_id: UUID,
    service: UserServiceDep,
    identity: IdentityDep,
) -> UserResponse:
    """Restore a soft-deleted user."""
    return await service.restore_user(user_id, actor_id=identity.subject_id)
