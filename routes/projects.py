"""
Project API routes.

Projects are groups of catalog entries sharing a project number.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
import structlog

from models.catalog import CatalogEntry, EditResult
from models.project import ProjectCreate, ProjectGroup
from routes.common import handle_error, require_api_key
from services.project_service import get_project_service

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("", response_model=list[ProjectGroup])
async def list_projects():
    """Entries grouped by project number."""
    try:
        return await get_project_service().get_projects()
    except Exception as e:
        return handle_error(e)


@router.get("/numbers", response_model=list[str])
async def list_project_numbers():
    """Project number choices, starting with "none"."""
    try:
        return await get_project_service().get_project_numbers()
    except Exception as e:
        return handle_error(e)


@router.get("/search", response_model=list[CatalogEntry])
async def search_project_documents(
    documentno: str = Query("", description="Document number to search for")
):
    """Candidate entries to add to a project."""
    try:
        return await get_project_service().search_documents(documentno)
    except Exception as e:
        return handle_error(e)


@router.post("", response_model=EditResult, status_code=201, dependencies=[Depends(require_api_key)])
async def create_project(data: ProjectCreate):
    """
    Create a project by tagging the selected entries.

    Raises:
        422: Blank project number or no documents
        404: A selected entry no longer exists
        502: One or more entries could not be updated
    """
    try:
        result = await get_project_service().create_project(data)
        return JSONResponse(
            status_code=201 if result.success else 502,
            content=result.model_dump(mode="json", by_alias=True)
        )
    except Exception as e:
        return handle_error(e)
