"""Role repository."""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.orm import selectinload

from erp_api.models.orm.role import RoleORM
from erp_api.models.orm.role_permission import RolePermissionORM
from erp_api.models.orm.user import UserORM
from erp_api.repositories.base import BaseRepository


class RoleRepository(BaseRepository[RoleORM]):
    """Repository for role operations."""

    model = RoleORM

    async def get_by_name(self, name: str) -> RoleORM | None:
        """Get role by name with permissions loaded.

        Args:
            name: Role name (case-sensitive)

        Returns:
            RoleORM or None if not found
        """
        result = await self.session.execute(
            select(RoleORM).options(selectinload(RoleORM.permissions)).where(RoleORM.name == name)
        )
        return result.scalar_one_or_none()

    async def get_with_permissions(self, role_id: UUID) -> RoleORM | None:
        """Get role with permissions loaded.

        Args:
            role_id: Role UUID

        Returns:
            RoleORM with permissions or None
        """
        result = await self.session.execute(
            select(RoleORM)
            .options(selectinload(RoleORM.permissions))
            .where(RoleORM.id == role_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_all_with_permissions(self) -> list[RoleORM]:
        """Get all roles with permissions, ordered by name."""
        result = await self.session.execute(
            select(RoleORM)
            .options(selectinload(RoleORM.permissions))
            .order_by(RoleORM.name)
        )
        return list(result.scalars().all())

    async def get_permission_names(self, name: str) -> set[str] | None:
        """Get the permission names held by a role.

        Args:
            name: Role name (case-sensitive)

        Returns:
            Set of permission names, or None if the role does not exist
        """
        role = await self.get_by_name(name)
        if role is None:
            return None
        return {permission.name for permission in role.permissions}

    async def has_permission(self, role_id: UUID, permission_id: UUID) -> bool:
        """Check whether a role already holds a permission."""
        result = await self.session.execute(
            select(func.count())
            .select_from(RolePermissionORM)
            .where(RolePermissionORM.role_id == role_id)
            .where(RolePermissionORM.permission_id == permission_id)
        )
        return result.scalar_one() > 0

    async def add_permission(self, role_id: UUID, permission_id: UUID) -> None:
        """Connect a permission to a role.

        Args:
            role_id: Role UUID
            permission_id: Permission UUID
        """
        self.session.add(RolePermissionORM(role_id=role_id, permission_id=permission_id))
        await self.session.flush()

    async def remove_permission(self, role_id: UUID, permission_id: UUID) -> None:
        """Disconnect a permission from a role.

        Args:
            role_id: Role UUID
            permission_id: Permission UUID
        """
        await self.session.execute(
            delete(RolePermissionORM)
            .where(RolePermissionORM.role_id == role_id)
            .where(RolePermissionORM.permission_id == permission_id)
        )
        await self.session.flush()

    async def set_permissions(
        self,
        role_id: UUID,
        permission_ids: list[UUID],
    ) -> None:
        """Replace the permissions of a role.

        Clear and reconnect run inside a savepoint, so a failure part way
        through leaves the previous permission set untouched.

        Args:
            role_id: Role UUID
            permission_ids: List of permission UUIDs
        """
        async with self.session.begin_nested():
            await self.session.execute(
                delete(RolePermissionORM).where(RolePermissionORM.role_id == role_id)
            )
            for perm_id in dict.fromkeys(permission_ids):
                self.session.add(RolePermissionORM(role_id=role_id, permission_id=perm_id))
            await self.session.flush()

    async def count_users_with_role(self, role_id: UUID) -> int:
        """Count users referencing a role, soft-deleted users included.

        Args:
            role_id: Role UUID

        Returns:
            Number of users with this role
        """
        result = await self.session.execute(
            select(func.count(UserORM.id)).where(UserORM.role_id == role_id)
        )
        return result.scalar_one()
