"""Role management service, including role-permission associations."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.exceptions import (
    PermissionNotFoundError,
    RoleAlreadyExistsError,
    RoleInUseError,
    RoleNotFoundError,
)
from erp_api.models.dto.role import RoleCreateRequest, RoleResponse, RoleUpdateRequest
from erp_api.models.orm.role import RoleORM
from erp_api.repositories.permission_repository import PermissionRepository
from erp_api.repositories.role_repository import RoleRepository
from erp_api.utils.security_events import SecurityEventType, log_security_event

logger = logging.getLogger(__name__)


class RoleService:
    """Service for role operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.role_repo = RoleRepository(session)
        self.permission_repo = PermissionRepository(session)

    async def create_role(self, request: RoleCreateRequest, actor_id: str | None = None) -> RoleResponse:
        """Create a role without permissions.

        Raises:
            RoleAlreadyExistsError: If the name is taken
        """
        if await self.role_repo.get_by_name(request.name) is not None:
            raise RoleAlreadyExistsError(request.name)

        role = await self.role_repo.create(name=request.name, description=request.description)

        log_security_event(
            SecurityEventType.ROLE_CREATED,
            user_id=actor_id,
            target_id=role.id,
            details={"name": role.name},
        )

        return await self._response(role.id)

    async def list_roles(self) -> list[RoleResponse]:
        """List all roles with their permissions."""
        roles = await self.role_repo.get_all_with_permissions()
        return [RoleResponse.model_validate(r) for r in roles]

    async def get_role(self, role_id: UUID) -> RoleResponse:
        """Get a role by ID.

        Raises:
            RoleNotFoundError: If the role does not exist
        """
        return await self._response(role_id)

    async def get_role_by_name(self, name: str) -> RoleResponse:
        """Get a role by name.

        Raises:
            RoleNotFoundError: If the role does not exist
        """
        role = await self.role_repo.get_by_name(name)
        if role is None:
            raise RoleNotFoundError(role_name=name)
        return RoleResponse.model_validate(role)

    async def update_role(self, role_id: UUID, request: RoleUpdateRequest) -> RoleResponse:
        """Rename a role or change its description.

        Raises:
            RoleNotFoundError: If the role does not exist
            RoleAlreadyExistsError: If the new name is taken by another role
        """
        role = await self._get(role_id)

        updates = request.model_dump(exclude_unset=True)
        if updates.get("name") is None:
            updates.pop("name", None)
        new_name = updates.get("name")
        if new_name is not None and new_name != role.name:
            if await self.role_repo.get_by_name(new_name) is not None:
                raise RoleAlreadyExistsError(new_name)

        await self.role_repo.update(role, **updates)

        return await self._response(role_id)

    async def delete_role(self, role_id: UUID, actor_id: str | None = None) -> None:
        """Delete a role that no user references.

        Raises:
            RoleNotFoundError: If the role does not exist
            RoleInUseError: If any user, soft-deleted or not, has the role
        """
        role = await self._get(role_id)

        user_count = await self.role_repo.count_users_with_role(role_id)
        if user_count > 0:
            raise RoleInUseError(str(role_id), user_count)

        name = role.name
        await self.role_repo.delete(role)

        log_security_event(
            SecurityEventType.ROLE_DELETED,
            user_id=actor_id,
            target_id=role_id,
            details={"name": name},
        )

    async def add_permission(
        self, role_id: UUID, permission_id: UUID, actor_id: str | None = None
    ) -> RoleResponse:
        """Connect a permission to a role. Connecting twice is a no-op.

        Raises:
            RoleNotFoundError: If the role does not exist
            PermissionNotFoundError: If the permission does not exist
        """
        role = await self._get(role_id)
        if await self.permission_repo.get_by_id(permission_id) is None:
            raise PermissionNotFoundError(str(permission_id))

        if not await self.role_repo.has_permission(role_id, permission_id):
            await self.role_repo.add_permission(role_id, permission_id)

        self._log_permission_change(actor_id, role, added=[permission_id])
        return await self._response(role_id)

    async def remove_permission(
        self, role_id: UUID, permission_id: UUID, actor_id: str | None = None
    ) -> RoleResponse:
        """Disconnect a permission from a role.

        Raises:
            RoleNotFoundError: If the role does not exist
            PermissionNotFoundError: If the permission does not exist
        """
        role = await self._get(role_id)
        if await self.permission_repo.get_by_id(permission_id) is None:
            raise PermissionNotFoundError(str(permission_id))

        await self.role_repo.remove_permission(role_id, permission_id)

        self._log_permission_change(actor_id, role, removed=[permission_id])
        return await self._response(role_id)

    async def set_permissions(
        self, role_id: UUID, permission_ids: list[UUID], actor_id: str | None = None
    ) -> RoleResponse:
        """Replace the full permission set of a role atomically.

        Every ID is checked before anything is changed; the replacement
        itself runs in a savepoint.

        Raises:
            RoleNotFoundError: If the role does not exist
            PermissionNotFoundError: If any permission does not exist
        """
        role = await self._get(role_id)

        wanted = list(dict.fromkeys(permission_ids))
        found = {p.id for p in await self.permission_repo.get_by_ids(wanted)}
        missing = [pid for pid in wanted if pid not in found]
        if missing:
            raise PermissionNotFoundError(str(missing[0]))

        await self.role_repo.set_permissions(role_id, wanted)

        self._log_permission_change(actor_id, role, replaced=wanted)
        return await self._response(role_id)

    async def _get(self, role_id: UUID) -> RoleORM:
        role = await self.role_repo.get_by_id(role_id)
        if role is None:
            raise RoleNotFoundError(role_id=str(role_id))
        return role

    async def _response(self, role_id: UUID) -> RoleResponse:
        role = await self.role_repo.get_with_permissions(role_id)
        if role is None:
            raise RoleNotFoundError(role_id=str(role_id))
        return RoleResponse.model_validate(role)

    def _log_permission_change(
        self,
        actor_id: str | None,
        role: RoleORM,
        added: list[UUID] | None = None,
        removed: list[UUID] | None = None,
        replaced: list[UUID] | None = None,
    ) -> None:
        details: dict[str, object] = {"role": role.name}
        if added:
            details["added"] = [str(p) for p in added]
        if removed:
            details["removed"] = [str(p) for p in removed]
        if replaced is not None:
            details["replaced"] = [str(p) for p in replaced]
        log_security_event(
            SecurityEventType.PERMISSION_CHANGED,
            user_id=actor_id,
            target_id=role.id,
            details=details,
        )
