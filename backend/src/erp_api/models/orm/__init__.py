"""SQLAlchemy ORM models package."""

from erp_api.models.orm.base import Base
from erp_api.models.orm.permission import PermissionORM
from erp_api.models.orm.role import RoleORM
from erp_api.models.orm.role_permission import RolePermissionORM
from erp_api.models.orm.user import UserORM

__all__ = [
    "Base",
    "PermissionORM",
    "RoleORM",
    "RolePermissionORM",
    "UserORM",
]
