"""Security event logging for sensitive operations.

Security-relevant events (sign-ins, access denials, role and permission
changes) go to a dedicated ``security`` logger so they can be routed
separately from application logs.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID


class SecurityEventType(str, Enum):
    """Types of security events that are logged."""

    # Authentication events
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"

    # Authorization events
    ACCESS_DENIED = "access_denied"

    # Account management
    USER_CREATED = "user_created"
    USER_DELETED = "user_deleted"
    USER_RESTORED = "user_restored"
    ROLE_ASSIGNED = "role_assigned"

    # Role and permission events
    ROLE_CREATED = "role_created"
    ROLE_DELETED = "role_deleted"
    PERMISSION_CHANGED = "permission_changed"


security_logger = logging.getLogger("security")


def log_security_event(
    event_type: SecurityEventType,
    user_id: UUID | str | None = None,
    user_email: str | None = None,
    target_id: UUID | str | None = None,
    details: dict[str, Any] | None = None,
    success: bool = True,
) -> None:
    """Log a security event.

    Args:
        event_type: The type of security event
        user_id: The ID of the user performing the action
        user_email: The email of the user performing the action
        target_id: The ID of the affected user, role or permission
        details: Additional event-specific details
        success: Whether the operation succeeded
    """
    event_data: dict[str, Any] = {
        "event_type": event_type.value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "success": success,
        "actor": {
            "user_id": str(user_id) if user_id else None,
            "email": user_email,
        },
    }

    if target_id:
        event_data["target_id"] = str(target_id)

    if details:
        event_data["details"] = details

    if success:
        security_logger.info(
            f"Security event: {event_type.value}",
            extra={"security_event": event_data},
        )
    else:
        security_logger.warning(
            f"Security event (failed): {event_type.value}",
            extra={"security_event": event_data},
        )
