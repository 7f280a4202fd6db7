"""Permission repository."""

from uuid import UUID

from sqlalchemy import func, select

from erp_api.models.orm.permission import PermissionORM
from erp_api.models.orm.role_permission import RolePermissionORM
from erp_api.repositories.base import BaseRepository


class PermissionRepository(BaseRepository[PermissionORM]):
    """Repository for permission operations."""

    model = PermissionORM

    async def get_by_name(self, name: str) -> PermissionORM | None:
        """Get permission by name.

        Args:
            name: Permission name (case-sensitive)

        Returns:
            PermissionORM or None if not found
        """
        result = await self.session.execute(select(PermissionORM).where(PermissionORM.name == name))
        return result.scalar_one_or_none()

    async def get_by_ids(self, ids: list[UUID]) -> list[PermissionORM]:
        """Get permissions by IDs.

        Args:
            ids: List of permission UUIDs

        Returns:
            List of PermissionORM (missing IDs are simply absent)
        """
        if not ids:
            return []
        result = await self.session.execute(
            select(PermissionORM).where(PermissionORM.id.in_(ids))
        )
        return list(result.scalars().all())

    async def get_all(self) -> list[PermissionORM]:
        """Get all permissions ordered by name."""
        result = await self.session.execute(
            select(PermissionORM).order_by(PermissionORM.name)
        )
        return list(result.scalars().all())

    async def count_roles_with_permission(self, permission_id: UUID) -> int:
        """Count roles holding a permission.

        Args:
            permission_id: Permission UUID

        Returns:
            Number of roles connected to this permission
        """
        result = await self.session.execute(
            select(func.count(RolePermissionORM.role_id)).where(
                RolePermissionORM.permission_id == permission_id
            )
        )
        return result.scalar_one()
