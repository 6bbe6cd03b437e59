"""
Read-only export shapes.

Groups list their enabled permissions directly; link rows are not exposed.
"""
from typing import List, Optional

from app.core.schemas import CamelModel


class ExportPermission(CamelModel):
    key: str
    description: Optional[str]


class ExportGroup(CamelModel):
    id: int
    name: str
    permissions: List[ExportPermission] = []


class ExportProject(CamelModel):
    id: int
    name: str
    description: Optional[str]
    api_key: str
    permission_groups: List[ExportGroup] = []
