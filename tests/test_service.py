from types import SimpleNamespace

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, ValidationError
from app.features.export import service as export_service
from app.features.permissions import service
from app.features.permissions.models import GroupPermission, Permission, PermissionGroup, Project


async def _count(session: AsyncSession, model, *where) -> int:
    stmt = select(func.count()).select_from(model)
    for clause in where:
        stmt = stmt.where(clause)
    return (await session.execute(stmt)).scalar_one()


@pytest.mark.asyncio
async def test_create_project_validates_name(session: AsyncSession) -> None:
    with pytest.raises(ValidationError, match="Name is required"):
        await service.create_project(session, "")
    assert await _count(session, Project) == 0


@pytest.mark.asyncio
async def test_set_group_permission_keeps_single_row(session: AsyncSession) -> None:
    project = await service.create_project(session, "Billing")
    permission = await service.create_permission(session, project.id, "invoice.read")
    group = await service.create_group(session, project.id, "Admins")

    await service.set_group_permission(session, group.id, permission.id, True)
    await service.set_group_permission(session, group.id, permission.id, False)

    links = (await session.execute(select(GroupPermission))).scalars().all()
    assert len(links) == 1
    assert links[0].enabled is False

    [listed] = await service.list_projects(session)
    assert [link.enabled for link in listed.permission_groups[0].group_permissions] == [False]


@pytest.mark.asyncio
async def test_delete_project_leaves_no_residue(session: AsyncSession) -> None:
    project = await service.create_project(session, "Billing")
    permissions = [
        await service.create_permission(session, project.id, key)
        for key in ("invoice.read", "invoice.void")
    ]
    groups = [
        await service.create_group(session, project.id, name)
        for name in ("Admins", "Viewers")
    ]
    for group in groups:
        for permission in permissions:
            await service.set_group_permission(session, group.id, permission.id, True)

    await service.delete_project(session, project.id)

    assert await _count(session, Project) == 0
    assert await _count(session, Permission) == 0
    assert await _count(session, PermissionGroup) == 0
    assert await _count(session, GroupPermission) == 0
    assert await service.list_projects(session) == []


@pytest.mark.asyncio
async def test_update_permission_only_touches_supplied_fields(session: AsyncSession) -> None:
    project = await service.create_project(session, "Billing")
    permission = await service.create_permission(session, project.id, "invoice.read", "Read invoices")

    updated = await service.update_permission(session, permission.id, {"key": "invoice.view"})
    assert updated.key == "invoice.view"
    assert updated.description == "Read invoices"

    updated = await service.update_permission(session, permission.id, {"description": None})
    assert updated.description is None

    with pytest.raises(NotFoundError):
        await service.update_permission(session, 999, {"key": "x"})


@pytest.mark.asyncio
async def test_export_by_api_key(session: AsyncSession) -> None:
    project = await service.create_project(session, "Billing")
    read = await service.create_permission(session, project.id, "invoice.read")
    void = await service.create_permission(session, project.id, "invoice.void")
    group = await service.create_group(session, project.id, "Admins")
    await service.set_group_permission(session, group.id, read.id, True)
    await service.set_group_permission(session, group.id, void.id, False)

    exported = await export_service.export_by_api_key(session, project.api_key)
    assert [p.key for p in exported.permission_groups[0].permissions] == ["invoice.read"]

    with pytest.raises(NotFoundError, match="Project not found"):
        await export_service.export_by_api_key(session, "missing")


def test_upsert_rejects_unsupported_dialect() -> None:
    bind = SimpleNamespace(dialect=SimpleNamespace(name="mysql"))
    db = SimpleNamespace(get_bind=lambda: bind)

    with pytest.raises(ValueError, match="Upsert is not supported on mysql"):
        service._insert_for(db)
