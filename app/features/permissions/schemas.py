"""
Pydantic schemas for project and permission management.

Required fields on the create schemas are optional at the schema level so
that the service can answer a missing value with its own error message.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import Field

from app.core.schemas import CamelModel


# ============================================================================
# Permission Schemas
# ============================================================================

class PermissionCreate(CamelModel):
    """Schema for creating a new permission."""
    project_id: Optional[int] = Field(None, description="Owning project ID")
    key: Optional[str] = Field(None, description="Permission key (e.g., 'invoice.read')")
    description: Optional[str] = Field(None, description="Permission description")


class PermissionUpdate(CamelModel):
    """Schema for updating a permission."""
    key: Optional[str] = None
    description: Optional[str] = None


class PermissionResponse(CamelModel):
    """Schema for permission response."""
    id: int
    project_id: int
    key: str
    description: Optional[str]
    created_at: datetime
    updated_at: datetime


# ============================================================================
# Group Schemas
# ============================================================================

class GroupCreate(CamelModel):
    """Schema for creating a new permission group."""
    name: Optional[str] = Field(None, description="Group name")


class GroupPermissionUpdate(CamelModel):
    """Schema for toggling a permission within a group."""
    permission_id: int = Field(..., description="Permission ID")
    enabled: bool = Field(..., description="Whether the permission is on for the group")


class GroupPermissionResponse(CamelModel):
    """Schema for a group/permission link."""
    id: int
    group_id: int
    permission_id: int
    enabled: bool


class GroupResponse(CamelModel):
    """Schema for permission group response."""
    id: int
    project_id: int
    name: str
    created_at: datetime
    updated_at: datetime


class GroupWithLinks(GroupResponse):
    """Schema for a group with its permission links."""
    group_permissions: List[GroupPermissionResponse] = []


# ============================================================================
# Project Schemas
# ============================================================================

class ProjectCreate(CamelModel):
    """Schema for creating a new project."""
    name: Optional[str] = Field(None, description="Project name")
    description: Optional[str] = Field(None, description="Project description")


class ProjectResponse(CamelModel):
    """Schema for project response."""
    id: int
    name: str
    description: Optional[str]
    api_key: str
    created_at: datetime
    updated_at: datetime


class ProjectWithRelations(ProjectResponse):
    """Schema for project with its permissions and groups."""
    permissions: List[PermissionResponse] = []
    permission_groups: List[GroupWithLinks] = []


class SuccessResponse(CamelModel):
    """Acknowledgement for writes that return no entity."""
    success: bool = True
