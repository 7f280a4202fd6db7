"""Role ORM model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class RoleORM(Base, UUIDMixin, TimestampMixin):
    """Role database model."""

    __tablename__ = "roles"

    # Case-sensitive and globally unique
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    permissions: Mapped[list["PermissionORM"]] = relationship(
        "PermissionORM",
        secondary="role_permissions",
        back_populates="roles",
    )
    users: Mapped[list["UserORM"]] = relationship(
        "UserORM",
        back_populates="role",
        passive_deletes=True,
    )
