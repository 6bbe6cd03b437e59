"""
Export routes for external authorization consumers.

Read-only; projects are addressed by API key rather than numeric id.
"""
from typing import Annotated, List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from app.core import config
from app.core.database.engine import get_db
from app.core.limiter import limiter
from app.features.export import service
from app.features.export.schemas import ExportProject


router = APIRouter(tags=["export"])


@router.get("/all", response_model=List[ExportProject])
@limiter.limit(config.EXPORT_RATE_LIMIT)
async def export_all(request: Request, db: Annotated[AsyncSession, Depends(get_db)]):
    """Every project with the enabled permissions of each group."""
    return await service.export_all(db)


@router.get("/project/{api_key}", response_model=ExportProject)
@limiter.limit(config.EXPORT_RATE_LIMIT)
async def export_project(api_key: str, request: Request, db: Annotated[AsyncSession, Depends(get_db)]):
    """A single project, looked up by API key, with its enabled permissions."""
    return await service.export_by_api_key(db, api_key)
