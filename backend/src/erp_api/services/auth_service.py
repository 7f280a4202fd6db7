"""Authentication service."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.exceptions import InvalidCredentialsError
from erp_api.models.dto.auth import TokenResponse
from erp_api.repositories.user_repository import UserRepository
from erp_api.security.auth import create_access_token
from erp_api.security.password import PasswordService, get_password_service
from erp_api.utils.security_events import SecurityEventType, log_security_event

logger = logging.getLogger(__name__)


class AuthService:
    """Service for credential verification and token issuance."""

    def __init__(
        self,
        session: AsyncSession,
        password_service: PasswordService | None = None,
    ) -> None:
        """Initialize service with database session."""
        self.session = session
        self.user_repo = UserRepository(session)
        self.password_service = password_service or get_password_service()

    async def sign_in(self, email: str, password: str) -> TokenResponse:
        """Authenticate with email and password.

        Unknown accounts, soft-deleted accounts and wrong passwords all fail
        with the same error. Database failures are not masked.

        Args:
            email: User email
            password: Plain text password

        Returns:
            TokenResponse with a signed access token

        Raises:
            InvalidCredentialsError: If the credentials do not match an account
        """
        user = await self.user_repo.get_by_email(email.lower())

        if user is None:
            # One comparison on every path so response time does not reveal existence
            self.password_service.verify_password(password, self.password_service.dummy_hash)
            self._log_failure(email, "unknown_account")
            raise InvalidCredentialsError()

        if not self.password_service.verify_password(password, user.password_hash):
            self._log_failure(email, "wrong_password", user_id=str(user.id))
            raise InvalidCredentialsError()

        access_token = create_access_token(user_id=user.id, role_name=user.role.name)

        log_security_event(
            SecurityEventType.LOGIN_SUCCESS,
            user_id=user.id,
            user_email=user.email,
        )

        return TokenResponse(access_token=access_token)

    def _log_failure(self, email: str, reason: str, user_id: str | None = None) -> None:
        log_security_event(
            SecurityEventType.LOGIN_FAILED,
            user_id=user_id,
            user_email=email,
            details={"reason": reason},
            success=False,
        )
