"""Repositories package."""

from erp_api.repositories.permission_repository import PermissionRepository
from erp_api.repositories.role_repository import RoleRepository
from erp_api.repositories.user_repository import UserRepository

__all__ = [
    "PermissionRepository",
    "RoleRepository",
    "UserRepository",
]
