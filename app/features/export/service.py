"""
Projection of projects onto their enabled permissions.
"""
from typing import List
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import NotFoundError
from app.features.export.schemas import ExportGroup, ExportPermission, ExportProject
from app.features.permissions.models import GroupPermission, PermissionGroup, Project


def _export_query() -> Select:
    # Only enabled links are loaded; disabled ones never leave the database
    enabled_links = PermissionGroup.group_permissions.and_(GroupPermission.enabled.is_(True))
    return (
        select(Project)
        .options(
            selectinload(Project.permission_groups)
            .selectinload(enabled_links)
            .selectinload(GroupPermission.permission)
        )
        .order_by(Project.id)
        .execution_options(populate_existing=True)
    )


def to_export(project: Project) -> ExportProject:
    """Flatten group -> link -> permission into group -> permissions."""
    return ExportProject(
        id=project.id,
        name=project.name,
        description=project.description,
        api_key=project.api_key,
        permission_groups=[
            ExportGroup(
                id=group.id,
                name=group.name,
                permissions=[
                    ExportPermission(key=link.permission.key, description=link.permission.description)
                    for link in group.group_permissions
                    if link.enabled
                ],
            )
            for group in project.permission_groups
        ],
    )


async def export_all(db: AsyncSession) -> List[ExportProject]:
    result = await db.execute(_export_query())
    return [to_export(project) for project in result.scalars().all()]


async def export_by_api_key(db: AsyncSession, api_key: str) -> ExportProject:
    result = await db.execute(_export_query().where(Project.api_key == api_key))
    project = result.scalar_one_or_none()
    if project is None:
        raise NotFoundError("Project not found")
    return to_export(project)
