"""Well-known role names.

``ADMIN_ROLE_NAME`` is the superuser bypass used by the permission resolver.
Changing it changes who bypasses every permission check.
"""

# Exact, case-sensitive match; holders skip permission lookups entirely.
ADMIN_ROLE_NAME = "ADMIN"

# Assigned to users created without an explicit role.
DEFAULT_ROLE_NAME = "USER"

# Roles that cannot be assigned through the generic user creation endpoint.
RESTRICTED_ROLE_NAMES = frozenset({"ADMIN", "MANAGER"})

SYSTEM_ROLES: dict[str, str] = {
    DEFAULT_ROLE_NAME: "Default role for new users",
    ADMIN_ROLE_NAME: "System administrator",
}
