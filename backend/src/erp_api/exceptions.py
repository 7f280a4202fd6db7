"""Domain-specific exceptions for the ERP API.

These exceptions provide a clean separation between service-layer errors
and HTTP responses. They are translated to HTTP status codes in a single
place, ``erp_api.middleware.error_handler``.
"""

from typing import Any


class ERPAPIError(Exception):
    """Base exception for all ERP API errors."""

    def __init__(self, message: str = "An error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Authentication Errors (401)
# =============================================================================


class AuthenticationError(ERPAPIError):
    """Base class for authentication failures."""

    pass


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email/password pair does not match an account.

    The message is identical for unknown accounts and wrong passwords.
    """

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class MissingCredentialsError(AuthenticationError):
    """Raised when a protected route is called without a bearer token."""

    def __init__(self) -> None:
        super().__init__("Authentication required")


class InvalidTokenError(AuthenticationError):
    """Raised when a bearer token fails signature, expiry or payload checks."""

    def __init__(self) -> None:
        super().__init__("Invalid or expired token")


# =============================================================================
# Authorization Errors (403)
# =============================================================================


class AuthorizationError(ERPAPIError):
    """Base class for access denied outcomes."""

    pass


class UserNotIdentifiedError(AuthorizationError):
    """Raised when a permission-gated route has no identity or role."""

    def __init__(self) -> None:
        super().__init__("User not identified")


class IdentityRoleNotFoundError(AuthorizationError):
    """Raised when the role named in a token no longer exists."""

    def __init__(self, role_name: str | None = None) -> None:
        details = {"role_name": role_name} if role_name else {}
        super().__init__("Role not found", details)


class InsufficientPermissionError(AuthorizationError):
    """Raised when the caller's role holds none of the required permissions."""

    def __init__(self, required: list[str] | None = None) -> None:
        details = {"required": sorted(required)} if required else {}
        super().__init__("You do not have permission to perform this action.", details)


class RestrictedRoleError(AuthorizationError):
    """Raised when a restricted role is assigned from a generic endpoint."""

    def __init__(self, role_name: str | None = None) -> None:
        details = {"role_name": role_name} if role_name else {}
        super().__init__("You cannot create this role from this endpoint.", details)


# =============================================================================
# Resource Not Found Errors (404)
# =============================================================================


class NotFoundError(ERPAPIError):
    """Base class for resource not found errors."""

    pass


class UserNotFoundError(NotFoundError):
    """Raised when a user cannot be found."""

    def __init__(self, user_id: str | None = None, email: str | None = None) -> None:
        details: dict[str, Any] = {}
        if user_id:
            details["user_id"] = str(user_id)
        if email:
            details["email"] = email
        super().__init__("User not found", details)


class RoleNotFoundError(NotFoundError):
    """Raised when a role cannot be found."""

    def __init__(self, role_id: str | None = None, role_name: str | None = None) -> None:
        details: dict[str, Any] = {}
        if role_id:
            details["role_id"] = str(role_id)
        if role_name:
            details["role_name"] = role_name
        super().__init__("Role not found", details)


class PermissionNotFoundError(NotFoundError):
    """Raised when a permission cannot be found."""

    def __init__(
        self, permission_id: str | None = None, permission_name: str | None = None
    ) -> None:
        details: dict[str, Any] = {}
        if permission_id:
            details["permission_id"] = str(permission_id)
        if permission_name:
            details["permission_name"] = permission_name
        super().__init__("Permission not found", details)


# =============================================================================
# Conflict Errors (409)
# =============================================================================


class ConflictError(ERPAPIError):
    """Base class for resource conflict errors."""

    pass


class UserAlreadyExistsError(ConflictError):
    """Raised when trying to create a user that already exists."""

    def __init__(self, email: str | None = None) -> None:
        details = {"email": email} if email else {}
        super().__init__("Email already registered", details)


class RoleAlreadyExistsError(ConflictError):
    """Raised when trying to create a role whose name is taken."""

    def __init__(self, name: str | None = None) -> None:
        details = {"name": name} if name else {}
        super().__init__("Role name already exists", details)


class PermissionAlreadyExistsError(ConflictError):
    """Raised when trying to create a permission whose name is taken."""

    def __init__(self, name: str | None = None) -> None:
        details = {"name": name} if name else {}
        super().__init__("Permission name already exists", details)


class RoleInUseError(ConflictError):
    """Raised when deleting a role that users still reference."""

    def __init__(self, role_id: str | None = None, user_count: int = 0) -> None:
        details: dict[str, Any] = {"user_count": user_count}
        if role_id:
            details["role_id"] = str(role_id)
        super().__init__("Role is assigned to users", details)


class PermissionInUseError(ConflictError):
    """Raised when deleting a permission still connected to roles."""

    def __init__(self, permission_id: str | None = None, role_count: int = 0) -> None:
        details: dict[str, Any] = {"role_count": role_count}
        if permission_id:
            details["permission_id"] = str(permission_id)
        super().__init__("Permission is assigned to roles", details)


# =============================================================================
# Configuration Errors (500)
# =============================================================================


class ConfigurationError(ERPAPIError):
    """Raised when the system is misconfigured.

    Never reported as an access problem so operators can tell
    misconfiguration apart from legitimate denials.
    """

    pass


class DefaultRoleMissingError(ConfigurationError):
    """Raised when the default role for new users does not exist."""

    def __init__(self, role_name: str) -> None:
        super().__init__(
            "The system is not configured correctly (Missing default role).",
            {"role_name": role_name},
        )
