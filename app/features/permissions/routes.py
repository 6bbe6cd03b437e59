"""
Project and permission management API routes.

Provides endpoints for managing projects, their permissions and permission
groups, and which permissions each group has enabled.
"""
from typing import Annotated, List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.features.permissions import service
from app.features.permissions.schemas import (
    GroupCreate,
    GroupPermissionUpdate,
    GroupResponse,
    PermissionCreate,
    PermissionResponse,
    PermissionUpdate,
    ProjectCreate,
    ProjectResponse,
    ProjectWithRelations,
    SuccessResponse,
)


router = APIRouter()


# ============================================================================
# Project Routes
# ============================================================================

@router.get("/projects", response_model=List[ProjectWithRelations], tags=["projects"])
async def list_projects(db: Annotated[AsyncSession, Depends(get_db)]):
    """List all projects with their permissions and groups."""
    return await service.list_projects(db)


@router.get("/projects/{project_id}", response_model=ProjectWithRelations, tags=["projects"])
async def get_project(project_id: int, db: Annotated[AsyncSession, Depends(get_db)]):
    """Get a specific project with its permissions and groups."""
    return await service.get_project(db, project_id)


@router.post("/projects", response_model=ProjectResponse, tags=["projects"])
async def create_project(project: ProjectCreate, db: Annotated[AsyncSession, Depends(get_db)]):
    """Create a new project with a generated API key."""
    return await service.create_project(db, project.name, project.description)


@router.delete("/projects/{project_id}", response_model=SuccessResponse, tags=["projects"])
async def delete_project(project_id: int, db: Annotated[AsyncSession, Depends(get_db)]):
    """Delete a project with all of its permissions, groups, and group links."""
    await service.delete_project(db, project_id)
    return SuccessResponse()


# ============================================================================
# Group Routes
# ============================================================================

@router.post("/projects/{project_id}/groups", response_model=GroupResponse, tags=["groups"])
async def create_group(
    project_id: int,
    group: GroupCreate,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Create a new permission group in a project."""
    return await service.create_group(db, project_id, group.name)


@router.delete("/groups/{group_id}", response_model=SuccessResponse, tags=["groups"])
async def delete_group(group_id: int, db: Annotated[AsyncSession, Depends(get_db)]):
    """Delete a permission group and its links."""
    await service.delete_group(db, group_id)
    return SuccessResponse()


@router.post("/groups/{group_id}/permissions", response_model=SuccessResponse, tags=["groups"])
async def set_group_permission(
    group_id: int,
    update: GroupPermissionUpdate,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Enable or disable a permission for a group."""
    await service.set_group_permission(db, group_id, update.permission_id, update.enabled)
    return SuccessResponse()


# ============================================================================
# Permission Routes
# ============================================================================

@router.post("/permissions", response_model=PermissionResponse, tags=["permissions"])
async def create_permission(permission: PermissionCreate, db: Annotated[AsyncSession, Depends(get_db)]):
    """Create a new permission in a project."""
    return await service.create_permission(db, permission.project_id, permission.key, permission.description)


@router.put("/permissions/{permission_id}", response_model=PermissionResponse, tags=["permissions"])
async def update_permission(
    permission_id: int,
    permission_update: PermissionUpdate,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Update a permission's key and description."""
    update_data = permission_update.model_dump(exclude_unset=True)
    return await service.update_permission(db, permission_id, update_data)


@router.delete("/permissions/{permission_id}", response_model=SuccessResponse, tags=["permissions"])
async def delete_permission(permission_id: int, db: Annotated[AsyncSession, Depends(get_db)]):
    """Delete a permission and its group links."""
    await service.delete_permission(db, permission_id)
    return SuccessResponse()
