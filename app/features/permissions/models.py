"""
Project, Permission, and PermissionGroup models.

A project owns its permissions and permission groups. Groups switch
permissions on through GroupPermission link rows, one per
(group, permission) pair; a missing link means the permission is off.
"""
import uuid
from sqlalchemy import String, ForeignKey, Text, Boolean, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base, TimestampMixin


def generate_api_key() -> str:
    """Generate a new project API key."""
    return str(uuid.uuid4())


class Project(Base, TimestampMixin):
    """
    Top-level tenant scoping permissions and groups.

    External services address a project by ``api_key``, never by ``id``.
    """
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    api_key: Mapped[str] = mapped_column(
        String(36), unique=True, nullable=False, index=True, default=generate_api_key
    )

    # Relationships
    permissions: Mapped[list["Permission"]] = relationship(
        "Permission",
        back_populates="project",
        order_by="Permission.id",
        lazy="selectin"
    )

    permission_groups: Mapped[list["PermissionGroup"]] = relationship(
        "PermissionGroup",
        back_populates="project",
        order_by="PermissionGroup.id",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name!r})>"


class Permission(Base, TimestampMixin):
    """
    A keyed capability belonging to one project, e.g. ``invoice.read``.
    """
    __tablename__ = "permissions"
    __table_args__ = (
        UniqueConstraint("project_id", "key"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id"),
        nullable=False,
        index=True
    )
    key: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    project: Mapped["Project"] = relationship("Project", back_populates="permissions")

    def __repr__(self) -> str:
        return f"<Permission(id={self.id}, key={self.key!r}, project_id={self.project_id})>"


class PermissionGroup(Base, TimestampMixin):
    """
    A named bundle of permission toggles within a project.
    """
    __tablename__ = "permission_groups"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id"),
        nullable=False,
        index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)

    project: Mapped["Project"] = relationship("Project", back_populates="permission_groups")

    group_permissions: Mapped[list["GroupPermission"]] = relationship(
        "GroupPermission",
        back_populates="group",
        order_by="GroupPermission.permission_id",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<PermissionGroup(id={self.id}, name={self.name!r}, project_id={self.project_id})>"


class GroupPermission(Base, TimestampMixin):
    """
    Enabled/disabled state of one permission within one group.
    """
    __tablename__ = "group_permissions"
    __table_args__ = (
        UniqueConstraint("group_id", "permission_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        ForeignKey("permission_groups.id"),
        nullable=False,
        index=True
    )
    permission_id: Mapped[int] = mapped_column(
        ForeignKey("permissions.id"),
        nullable=False,
        index=True
    )
    enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    group: Mapped["PermissionGroup"] = relationship("PermissionGroup", back_populates="group_permissions")
    permission: Mapped["Permission"] = relationship("Permission", lazy="selectin")

    def __repr__(self) -> str:
        return (
            f"<GroupPermission(group_id={self.group_id}, permission_id={self.permission_id}, "
            f"enabled={self.enabled})>"
        )
