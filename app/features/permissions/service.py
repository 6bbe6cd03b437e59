"""
Project, permission, and group operations.

Each public coroutine is one unit of work on the given session and commits
it before returning. A failure part way through leaves the transaction
open for ``get_db`` to roll back, so multi-step deletes never leave
orphaned rows.
"""
from typing import Any, Sequence
from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, ValidationError
from app.features.permissions.models import (
    GroupPermission,
    Permission,
    PermissionGroup,
    Project,
)
from app.utils import get_logger


log = get_logger(__name__)


# ============================================================================
# Projects
# ============================================================================

async def list_projects(db: AsyncSession) -> Sequence[Project]:
    """All projects with permissions, groups, and group links loaded."""
    result = await db.execute(
        select(Project)
        .order_by(Project.id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().all()


async def get_project(db: AsyncSession, project_id: int) -> Project:
    result = await db.execute(
        select(Project)
        .where(Project.id == project_id)
        .execution_options(populate_existing=True)
    )
    project = result.scalar_one_or_none()
    if project is None:
        raise NotFoundError("Project not found")
    return project


async def create_project(db: AsyncSession, name: str | None, description: str | None = None) -> Project:
    """Insert a project with a freshly generated API key."""
    if not name:
        raise ValidationError("Name is required")

    project = Project(name=name, description=description)
    db.add(project)
    await db.commit()
    await db.refresh(project)

    log.info("Created project %s (%r)", project.id, project.name)
    return project


async def delete_project(db: AsyncSession, project_id: int) -> None:
    """
    Delete a project and everything scoped to it.

    Links are removed by group and then by permission, since a link can
    reference either side of the project; permissions and groups follow,
    and the project row goes last.
    """
    permission_ids = (await db.execute(
        select(Permission.id).where(Permission.project_id == project_id)
    )).scalars().all()
    group_ids = (await db.execute(
        select(PermissionGroup.id).where(PermissionGroup.project_id == project_id)
    )).scalars().all()

    if group_ids:
        await db.execute(delete(GroupPermission).where(GroupPermission.group_id.in_(group_ids)))
    if permission_ids:
        await db.execute(delete(GroupPermission).where(GroupPermission.permission_id.in_(permission_ids)))

    await db.execute(delete(Permission).where(Permission.project_id == project_id))
    await db.execute(delete(PermissionGroup).where(PermissionGroup.project_id == project_id))
    await db.execute(delete(Project).where(Project.id == project_id))
    await db.commit()

    log.info(
        "Deleted project %s with %d permissions and %d groups",
        project_id, len(permission_ids), len(group_ids)
    )


# ============================================================================
# Permissions
# ============================================================================

async def create_permission(
    db: AsyncSession,
    project_id: int | None,
    key: str | None,
    description: str | None = None,
) -> Permission:
    if not project_id or not key:
        raise ValidationError("Project ID and Key are required")

    permission = Permission(project_id=project_id, key=key, description=description)
    db.add(permission)
    await db.commit()
    await db.refresh(permission)

    log.info("Created permission %s (%r) in project %s", permission.id, key, project_id)
    return permission


async def update_permission(db: AsyncSession, permission_id: int, changes: dict[str, Any]) -> Permission:
    """
    Overwrite the supplied fields of a permission.

    ``changes`` holds only the fields the caller sent; an omitted field
    keeps its current value.
    """
    if "key" in changes and not changes["key"]:
        raise ValidationError("Key is required")

    result = await db.execute(select(Permission).where(Permission.id == permission_id))
    permission = result.scalar_one_or_none()
    if permission is None:
        raise NotFoundError("Permission not found")

    for field, value in changes.items():
        setattr(permission, field, value)

    await db.commit()
    await db.refresh(permission)
    return permission


async def delete_permission(db: AsyncSession, permission_id: int) -> None:
    """Delete a permission along with its group links."""
    await db.execute(delete(GroupPermission).where(GroupPermission.permission_id == permission_id))
    await db.execute(delete(Permission).where(Permission.id == permission_id))
    await db.commit()
    log.info("Deleted permission %s", permission_id)


# ============================================================================
# Groups
# ============================================================================

async def create_group(db: AsyncSession, project_id: int, name: str | None) -> PermissionGroup:
    if not name:
        raise ValidationError("Name is required")

    group = PermissionGroup(project_id=project_id, name=name)
    db.add(group)
    await db.commit()
    await db.refresh(group)

    log.info("Created group %s (%r) in project %s", group.id, name, project_id)
    return group


async def delete_group(db: AsyncSession, group_id: int) -> None:
    """Delete a group along with its permission links."""
    await db.execute(delete(GroupPermission).where(GroupPermission.group_id == group_id))
    await db.execute(delete(PermissionGroup).where(PermissionGroup.id == group_id))
    await db.commit()
    log.info("Deleted group %s", group_id)


def _insert_for(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    if dialect == "sqlite":
        return sqlite.insert
    if dialect == "postgresql":
        return postgresql.insert
    raise ValueError(f"Upsert is not supported on {dialect}")


async def set_group_permission(db: AsyncSession, group_id: int, permission_id: int, enabled: bool) -> None:
    """
    Turn a permission on or off for a group.

    Issued as a single insert-or-update on (group_id, permission_id) so
    concurrent toggles of the same pair cannot create duplicate links.
    """
    insert = _insert_for(db)
    stmt = insert(GroupPermission).values(
        group_id=group_id,
        permission_id=permission_id,
        enabled=enabled,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[GroupPermission.group_id, GroupPermission.permission_id],
        set_={"enabled": stmt.excluded.enabled, "updated_at": func.now()},
    )
    await db.execute(stmt)
    await db.commit()

    log.debug("Group %s permission %s enabled=%s", group_id, permission_id, enabled)
