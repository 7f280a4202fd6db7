"""Startup bootstrap for the well-known system roles.

Ensures the ``USER`` role (default for new users) and the ``ADMIN`` role
(permission bypass) exist. Existing roles are left untouched.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.constants.roles import SYSTEM_ROLES
from erp_api.repositories.role_repository import RoleRepository

logger = logging.getLogger(__name__)


class RoleBootstrapService:
    """Creates missing system roles."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the service.

        Args:
            session: Database session
        """
        self.session = session
        self.role_repo = RoleRepository(session)

    async def ensure_system_roles(self) -> list[str]:
        """Create any missing system role.

        Returns:
            Names of the roles that were created
        """
        created = []
        for name, description in SYSTEM_ROLES.items():
            if await self.role_repo.get_by_name(name) is None:
                await self.role_repo.create(name=name, description=description)
                created.append(name)
        return created


async def bootstrap_system_roles() -> None:
    """Ensure system roles exist. Called on application startup."""
    from erp_api.database import get_session_maker

    async with get_session_maker()() as session:
        service = RoleBootstrapService(session)
        created = await service.ensure_system_roles()
        await session.commit()

    if created:
        logger.info(f"Created system roles: {', '.join(created)}")
    else:
        logger.info("System roles verified")
