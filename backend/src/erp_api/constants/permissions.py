"""Permission names required by the built-in routes."""


class Permissions:
    """Permission name constants."""

    USERS_VIEW = "users.view"
    USERS_CREATE = "users.create"
    # Create users holding ADMIN or MANAGER
    USERS_CREATE_PRIVILEGED = "users.create_privileged"
    USERS_EDIT = "users.edit"
    USERS_DELETE = "users.delete"

    ROLES_VIEW = "roles.view"
    ROLES_MANAGE = "roles.manage"

    PERMISSIONS_VIEW = "permissions.view"
    PERMISSIONS_MANAGE = "permissions.manage"
