"""User repository.

Standard lookups only see users whose ``deleted_at`` is NULL. Soft-deleted
users are reachable through the explicit ``*_deleted`` methods and
``get_including_deleted``.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.orm import selectinload

from erp_api.models.orm.user import UserORM
from erp_api.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserORM]):
    """Repository for user operations."""

    model = UserORM

    @staticmethod
    def _active() -> Select[tuple[UserORM]]:
        return (
            select(UserORM)
            .options(selectinload(UserORM.role))
            .where(UserORM.deleted_at.is_(None))
        )

    async def get_by_id(self, id: UUID) -> UserORM | None:
        """Get a non-deleted user by ID with role loaded.

        Args:
            id: User UUID

        Returns:
            UserORM or None if not found or soft-deleted
        """
        result = await self.session.execute(self._active().where(UserORM.id == id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> UserORM | None:
        """Get a non-deleted user by email with role loaded.

        Args:
            email: User email address

        Returns:
            UserORM or None if not found or soft-deleted
        """
        result = await self.session.execute(self._active().where(UserORM.email == email))
        return result.scalar_one_or_none()

    async def get_all(self) -> list[UserORM]:
        """Get all non-deleted users ordered by email."""
        result = await self.session.execute(self._active().order_by(UserORM.email))
        return list(result.scalars().all())

    async def get_all_deleted(self) -> list[UserORM]:
        """Get all soft-deleted users ordered by deletion time."""
        result = await self.session.execute(
            select(UserORM)
            .options(selectinload(UserORM.role))
            .where(UserORM.deleted_at.is_not(None))
            .order_by(UserORM.deleted_at.desc())
        )
        return list(result.scalars().all())

    async def get_including_deleted(self, user_id: UUID) -> UserORM | None:
        """Get a user by ID regardless of soft-delete state."""
        result = await self.session.execute(
            select(UserORM).options(selectinload(UserORM.role)).where(UserORM.id == user_id)
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Check whether any user, deleted or not, owns an email."""
        result = await self.session.execute(select(UserORM.id).where(UserORM.email == email))
        return result.first() is not None

    async def create_user(
        self,
        email: str,
        full_name: str,
        password_hash: str,
        role_id: UUID,
        phone: str | None = None,
        address: str | None = None,
    ) -> UserORM:
        """Create a new user.

        Args:
            email: User email
            full_name: Display name
            password_hash: bcrypt hash of the password
            role_id: Assigned role UUID
            phone: Optional phone number
            address: Optional postal address

        Returns:
            Created UserORM with role loaded
        """
        user = await self.create(
            email=email,
            full_name=full_name,
            password_hash=password_hash,
            role_id=role_id,
            phone=phone,
            address=address,
        )
        return await self.reload(user)

    async def reload(self, user: UserORM) -> UserORM:
        """Refresh a user and its role from the database."""
        await self.session.refresh(user, attribute_names=["role"])
        return user

    async def soft_delete(self, user: UserORM) -> UserORM:
        """Mark a user as deleted.

        Args:
            user: Non-deleted user

        Returns:
            Updated UserORM
        """
        user.deleted_at = datetime.now(timezone.utc)
        await self.session.flush()
        return user

    async def restore(self, user: UserORM) -> UserORM:
        """Clear the soft-delete marker of a user.

        Args:
            user: User to restore

        Returns:
            Updated UserORM
        """
        user.deleted_at = None
        await self.session.flush()
        return user

    async def change_role(self, user: UserORM, role_id: UUID) -> UserORM:
        """Assign a different role to a user.

        Args:
            user: User to update
            role_id: New role UUID

        Returns:
            Updated UserORM with the new role loaded
        """
        user.role_id = role_id
        await self.session.flush()
        await self.session.refresh(user, attribute_names=["role_id", "role"])
        return user
