"""Permission resolution for authorization-gated routes."""

import logging
from collections.abc import Iterable

from erp_api.constants.roles import ADMIN_ROLE_NAME
from erp_api.exceptions import (
    IdentityRoleNotFoundError,
    InsufficientPermissionError,
    UserNotIdentifiedError,
)
from erp_api.models.domain.identity import Identity
from erp_api.repositories.role_repository import RoleRepository
from erp_api.utils.security_events import SecurityEventType, log_security_event

logger = logging.getLogger(__name__)


class PermissionResolver:
    """Authorization stage of the access gate.

    Decides whether an identity holds at least one of the permissions a
    route requires. Callers with the ``ADMIN`` role are always allowed
    without touching the database.
    """

    def __init__(self, role_repo: RoleRepository) -> None:
        """Initialize the resolver.

        Args:
            role_repo: Repository used to look up role permissions
        """
        self.role_repo = role_repo

    async def authorize(
        self,
        identity: Identity | None,
        required_permissions: Iterable[str] | None,
    ) -> None:
        """Allow the request or raise an authorization error.

        Args:
            identity: Authenticated identity, None when unauthenticated
            required_permissions: Permission names of which any one suffices

        Raises:
            UserNotIdentifiedError: If permissions are required but there is no role
            IdentityRoleNotFoundError: If the identity's role no longer exists
            InsufficientPermissionError: If the role holds none of the permissions
        """
        required = frozenset(required_permissions or ())
        if not required:
            return

        if identity is None or not identity.role_name:
            raise UserNotIdentifiedError()

        if identity.role_name == ADMIN_ROLE_NAME:
            return

        # Looked up on every request so role edits apply to the next request
        granted = await self.role_repo.get_permission_names(identity.role_name)
        if granted is None:
            log_security_event(
                SecurityEventType.ACCESS_DENIED,
                user_id=identity.subject_id,
                details={"reason": "role_not_found", "role": identity.role_name},
                success=False,
            )
            raise IdentityRoleNotFoundError(identity.role_name)

        if granted.isdisjoint(required):
            log_security_event(
                SecurityEventType.ACCESS_DENIED,
                user_id=identity.subject_id,
                details={
                    "reason": "insufficient_permission",
                    "role": identity.role_name,
                    "required": sorted(required),
                },
                success=False,
            )
            raise InsufficientPermissionError(list(required))

