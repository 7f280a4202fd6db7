"""User management service."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.constants.roles import DEFAULT_ROLE_NAME, RESTRICTED_ROLE_NAMES
from erp_api.exceptions import (
    DefaultRoleMissingError,
    RestrictedRoleError,
    RoleNotFoundError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from erp_api.models.dto.user import (
    UserCreateRequest,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)
from erp_api.models.orm.role import RoleORM
from erp_api.models.orm.user import UserORM
from erp_api.repositories.role_repository import RoleRepository
from erp_api.repositories.user_repository import UserRepository
from erp_api.security.password import PasswordService, get_password_service
from erp_api.utils.security_events import SecurityEventType, log_security_event

logger = logging.getLogger(__name__)


class UserService:
    """Service for user CRUD, soft delete and role assignment."""

    def __init__(
        self,
        session: AsyncSession,
        password_service: PasswordService | None = None,
    ) -> None:
        """Initialize service with database session."""
        self.session = session
        self.user_repo = UserRepository(session)
        self.role_repo = RoleRepository(session)
        self.password_service = password_service or get_password_service()

    async def create_user(
        self,
        request: UserCreateRequest,
        actor_id: str | None = None,
        allow_restricted_roles: bool = False,
    ) -> UserResponse:
        """Create a new user.

        Users created without a role get the default ``USER`` role.

        Args:
            request: User creation data
            actor_id: ID of the user performing the action
            allow_restricted_roles: Permit ADMIN and MANAGER assignment

        Returns:
            Created user

        Raises:
            UserAlreadyExistsError: If the email is taken
            RoleNotFoundError: If the requested role does not exist
            RestrictedRoleError: If a restricted role was requested
            DefaultRoleMissingError: If no role was requested and USER is missing
        """
        email = request.email.lower()
        if await self.user_repo.email_exists(email):
            raise UserAlreadyExistsError(email)

        role = await self._resolve_role(request.role_id)
        if not allow_restricted_roles and role.name.upper() in RESTRICTED_ROLE_NAMES:
            raise RestrictedRoleError(role.name)

        user = await self.user_repo.create_user(
            email=email,
            full_name=request.full_name,
            password_hash=self.password_service.hash_password(request.password),
            role_id=role.id,
            phone=request.phone,
            address=request.address,
        )

        log_security_event(
            SecurityEventType.USER_CREATED,
            user_id=actor_id,
            target_id=user.id,
            details={"role": role.name},
        )

        return UserResponse.model_validate(user)

    async def _resolve_role(self, role_id: UUID | None) -> RoleORM:
        if role_id is not None:
            role = await self.role_repo.get_by_id(role_id)
            if role is None:
                raise RoleNotFoundError(role_id=str(role_id))
            return role

        role = await self.role_repo.get_by_name(DEFAULT_ROLE_NAME)
        if role is None:
            logger.error(f"Default role '{DEFAULT_ROLE_NAME}' is missing; cannot create users")
            raise DefaultRoleMissingError(DEFAULT_ROLE_NAME)
        return role

    async def list_users(self) -> UserListResponse:
        """List all non-deleted users."""
        users = await self.user_repo.get_all()
        items = [UserResponse.model_validate(u) for u in users]
        return UserListResponse(items=items, total=len(items))

    async def list_deleted_users(self) -> UserListResponse:
        """List all soft-deleted users."""
        users = await self.user_repo.get_all_deleted()
        items = [UserResponse.model_validate(u) for u in users]
        return UserListResponse(items=items, total=len(items))

    async def get_user(self, user_id: UUID) -> UserResponse:
        """Get a non-deleted user by ID.

        Raises:
            UserNotFoundError: If the user does not exist or is soft-deleted
        """
        return UserResponse.model_validate(await self._get_active(user_id))

    async def get_user_by_email(self, email: str) -> UserResponse:
        """Get a non-deleted user by email.

        Raises:
            UserNotFoundError: If the user does not exist or is soft-deleted
        """
        user = await self.user_repo.get_by_email(email.lower())
        if user is None:
            raise UserNotFoundError(email=email)
        return UserResponse.model_validate(user)

    async def update_user(self, user_id: UUID, request: UserUpdateRequest) -> UserResponse:
        """Update profile fields and, optionally, the password.

        Raises:
            UserNotFoundError: If the user does not exist or is soft-deleted
        """
        user = await self._get_active(user_id)

        updates = request.model_dump(exclude_unset=True, exclude={"password"})
        if request.password is not None:
            updates["password_hash"] = self.password_service.hash_password(request.password)

        user = await self.user_repo.update(user, **updates)
        return UserResponse.model_validate(await self.user_repo.reload(user))

    async def delete_user(self, user_id: UUID, actor_id: str | None = None) -> UserResponse:
        """Soft-delete a user.

        Raises:
            UserNotFoundError: If the user does not exist or is already deleted
        """
        user = await self._get_active(user_id)
        user = await self.user_repo.soft_delete(user)

        log_security_event(SecurityEventType.USER_DELETED, user_id=actor_id, target_id=user.id)

        return UserResponse.model_validate(user)

    async def restore_user(self, user_id: UUID, actor_id: str | None = None) -> UserResponse:
        """Clear the soft-delete marker of a user.

        Restoring a user that is not deleted is a no-op.

        Raises:
            UserNotFoundError: If no such user exists at all
        """
        user = await self.user_repo.get_including_deleted(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))

        if user.deleted_at is not None:
            user = await self.user_repo.restore(user)
            log_security_event(SecurityEventType.USER_RESTORED, user_id=actor_id, target_id=user.id)

        return UserResponse.model_validate(user)

    async def change_role(
        self, user_id: UUID, role_id: UUID, actor_id: str | None = None
    ) -> UserResponse:
        """Assign a different role to a user.

        Raises:
            UserNotFoundError: If the user does not exist or is soft-deleted
            RoleNotFoundError: If the role does not exist
        """
        user = await self._get_active(user_id)
        role = await self.role_repo.get_by_id(role_id)
        if role is None:
            raise RoleNotFoundError(role_id=str(role_id))

        previous = user.role.name
        user = await self.user_repo.change_role(user, role.id)

        log_security_event(
            SecurityEventType.ROLE_ASSIGNED,
            user_id=actor_id,
            target_id=user.id,
            details={"from": previous, "to": role.name},
        )

        return UserResponse.model_validate(user)

    async def _get_active(self, user_id: UUID) -> UserORM:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        return user
