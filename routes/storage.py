"""
Storage proxy routes.

Forward blob and table calls to Azure with server-side SAS tokens, for
clients that talk to storage through the API rather than the upload and
edit endpoints.
"""

from typing import Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
import structlog

from config.catalog import PUBLIC_CONTAINER, RESTRICTED_CONTAINER
from exceptions import ValidationError
from integrations.azure_storage import blob_name_from, get_remote_store
from routes.common import handle_error, require_api_key
from services.catalog_cache import get_catalog_cache

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Storage"])


def _is_public(flag: Optional[str]) -> bool:
    """Anything except the literal "false" selects the public container."""
    return (flag or "").lower() != "false"


# ===================
# BLOB
# ===================

@router.post("/blob/upload", dependencies=[Depends(require_api_key)])
async def upload_blob(
    file: Optional[UploadFile] = File(None),
    isPublic: Optional[str] = Form("true"),
    projectId: Optional[str] = Form(None)
):
    """
    Upload one file to the public or restricted container.

    Returns:
        Blob URL, blob name and container
    """
    try:
        if file is None or not file.filename:
            raise ValidationError("No file provided", code="FILE_REQUIRED")

        public = _is_public(isPublic)
        content = await file.read()
        url = await get_remote_store().upload_file(
            file.filename,
            content,
            file.content_type,
            public=public,
        )
        return {
            "success": True,
            "url": url,
            "blobName": blob_name_from(url),
            "container": PUBLIC_CONTAINER if public else RESTRICTED_CONTAINER,
        }
    except Exception as e:
        return handle_error(e)


@router.delete("/blob/delete", dependencies=[Depends(require_api_key)])
async def delete_blob(
    blobName: Optional[str] = Query(None, description="Blob name or URL"),
    isPublic: Optional[str] = Query("true")
):
    """Delete one blob by name or URL."""
    try:
        if not blobName:
            raise ValidationError("Blob name is required", code="BLOB_NAME_REQUIRED")

        await get_remote_store().delete_file(blobName, public=_is_public(isPublic))
        return {"success": True}
    except Exception as e:
        return handle_error(e)


# ===================
# TABLE
# ===================

@router.get("/table")
async def list_table():
    """Raw catalog rows (encoded fields left as stored)."""
    try:
        rows = await get_remote_store().list_entries()
        return {"value": rows}
    except Exception as e:
        return handle_error(e)


@router.post("/table", dependencies=[Depends(require_api_key)])
async def create_table_entry(entity: dict):
    """Insert a raw catalog row."""
    try:
        await get_remote_store().create_entry(entity)
        get_catalog_cache().invalidate()
        return {"success": True}
    except Exception as e:
        return handle_error(e)


@router.put("/table", dependencies=[Depends(require_api_key)])
async def update_table_entry(entity: dict):
    """Replace a raw catalog row (PartitionKey and RowKey required)."""
    try:
        if not entity.get("PartitionKey") or not entity.get("RowKey"):
            raise ValidationError(
                "PartitionKey and RowKey are required",
                code="ENTITY_KEYS_REQUIRED"
            )
        await get_remote_store().update_entry(entity)
        get_catalog_cache().invalidate()
        return {"success": True}
    except Exception as e:
        return handle_error(e)
