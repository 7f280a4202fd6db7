"""Permission management service."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.exceptions import (
    PermissionAlreadyExistsError,
    PermissionInUseError,
    PermissionNotFoundError,
)
from erp_api.models.dto.role import (
    PermissionCreateRequest,
    PermissionResponse,
    PermissionUpdateRequest,
)
from erp_api.models.orm.permission import PermissionORM
from erp_api.repositories.permission_repository import PermissionRepository

logger = logging.getLogger(__name__)


class PermissionService:
    """Service for permission operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.permission_repo = PermissionRepository(session)

    async def create_permission(self, request: PermissionCreateRequest) -> PermissionResponse:
        """Create a permission.

        Raises:
            PermissionAlreadyExistsError: If the name is taken
        """
        if await self.permission_repo.get_by_name(request.name) is not None:
            raise PermissionAlreadyExistsError(request.name)

        permission = await self.permission_repo.create(
            name=request.name, description=request.description
        )
        return PermissionResponse.model_validate(permission)

    async def list_permissions(self) -> list[PermissionResponse]:
        """List all permissions."""
        permissions = await self.permission_repo.get_all()
        return [PermissionResponse.model_validate(p) for p in permissions]

    async def get_permission(self, permission_id: UUID) -> PermissionResponse:
        """Get a permission by ID.

        Raises:
            PermissionNotFoundError: If the permission does not exist
        """
        return PermissionResponse.model_validate(await self._get(permission_id))

    async def get_permission_by_name(self, name: str) -> PermissionResponse:
        """Get a permission by name.

        Raises:
            PermissionNotFoundError: If the permission does not exist
        """
        permission = await self.permission_repo.get_by_name(name)
        if permission is None:
            raise PermissionNotFoundError(permission_name=name)
        return PermissionResponse.model_validate(permission)

    async def update_permission(
        self, permission_id: UUID, request: PermissionUpdateRequest
    ) -> PermissionResponse:
        """Rename a permission or change its description.

        Raises:
            PermissionNotFoundError: If the permission does not exist
            PermissionAlreadyExistsError: If the new name is taken
        """
        permission = await self._get(permission_id)

        updates = request.model_dump(exclude_unset=True)
        if updates.get("name") is None:
            updates.pop("name", None)
        new_name = updates.get("name")
        if new_name is not None and new_name != permission.name:
            if await self.permission_repo.get_by_name(new_name) is not None:
                raise PermissionAlreadyExistsError(new_name)

        permission = await self.permission_repo.update(permission, **updates)

        return PermissionResponse.model_validate(permission)

    async def delete_permission(self, permission_id: UUID) -> None:
        """Delete a permission no role holds.

        Raises:
            PermissionNotFoundError: If the permission does not exist
            PermissionInUseError: If a role still holds the permission
        """
        permission = await self._get(permission_id)

        role_count = await self.permission_repo.count_roles_with_permission(permission_id)
        if role_count > 0:
            raise PermissionInUseError(str(permission_id), role_count)

        await self.permission_repo.delete(permission)

    async def _get(self, permission_id: UUID) -> PermissionORM:
        permission = await self.permission_repo.get_by_id(permission_id)
        if permission is None:
            raise PermissionNotFoundError(str(permission_id))
        return permission
