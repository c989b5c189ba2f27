"""
Document (catalog entry) API routes.

Listing and lookups read the cached catalog; writes go through the
upload and edit coordinators and return their user-facing message.
"""

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse
from typing import Optional
from pydantic import TypeAdapter, ValidationError as PydanticValidationError
import structlog

from exceptions import LanguageVariantRequiredError, ValidationError, VariantIndexError
from models.catalog import CatalogEntry, DocumentListResponse, DocumentMetadata, EditResult
from models.upload import FileMetadata, FileMetadataInput, PendingUpload, UploadResult, UploadState
from routes.common import handle_error, require_api_key
from services.catalog_service import get_catalog_service
from services.edit_service import get_edit_coordinator
from services.upload_service import get_upload_coordinator

logger = structlog.get_logger(__name__)

router = APIRouter()

_file_metadata_list = TypeAdapter(list[FileMetadataInput])


def _parse_form_json(raw: str, schema, field: str):
    """Validate a JSON-encoded multipart field."""
    try:
        if isinstance(schema, TypeAdapter):
            return schema.validate_json(raw)
        return schema.model_validate_json(raw)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid {field}",
            code="INVALID_FORM_FIELD",
            details={"field": field, "errors": e.errors(include_url=False, include_context=False)}
        )


def _edit_response(result: EditResult) -> JSONResponse:
    """Failed edits at this point are storage failures."""
    return JSONResponse(
        status_code=200 if result.success else 502,
        content=result.model_dump(mode="json", by_alias=True)
    )


# ===================
# ROUTES
# ===================

@router.get("", response_model=DocumentListResponse)
async def list_documents(
    search: Optional[str] = Query(None, description="Document number filter"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: Optional[int] = Query(None, ge=1, le=100, description="Items per page")
):
    """
    List catalog entries.

    Returns paginated entries whose document number contains `search`.
    """
    try:
        service = get_catalog_service()
        return await service.get_page(search=search, page=page, page_size=page_size)
    except Exception as e:
        return handle_error(e)


@router.get("/{partition_key}/{row_key}", response_model=CatalogEntry)
async def get_document(partition_key: str, row_key: str):
    """
    Get a single catalog entry.

    Raises:
        404: Entry not found
    """
    try:
        service = get_catalog_service()
        return await service.get_entry(partition_key, row_key)
    except Exception as e:
        return handle_error(e)


@router.post("", response_model=UploadResult, status_code=201, dependencies=[Depends(require_api_key)])
async def upload_document(
    metadata: str = Form(..., description="DocumentMetadata as JSON"),
    file_metadata: str = Form("[]", description="List of per-file details as JSON, one per file"),
    files: list[UploadFile] = File(..., description="PDF files, one per language variant")
):
    """
    Upload a new document with one or more language variants.

    Files are uploaded first, then one catalog entry is created. If the
    entry cannot be written the files are deleted again.

    Raises:
        422: Missing document number, files or file details
        502: Storage failure (body carries the upload result)
    """
    try:
        document = _parse_form_json(metadata, DocumentMetadata, "metadata")
        annotations = _parse_form_json(file_metadata, _file_metadata_list, "file_metadata")

        if len(annotations) > len(files):
            raise ValidationError(
                "More file details than files",
                code="FILE_METADATA_MISMATCH",
                details={"files": len(files), "file_metadata": len(annotations)}
            )

        pending = []
        for i, upload in enumerate(files):
            annotation = annotations[i] if i < len(annotations) else FileMetadataInput()
            pending.append(PendingUpload(
                filename=upload.filename or "",
                content=await upload.read(),
                content_type=upload.content_type or "application/pdf",
                public=annotation.public,
                metadata=FileMetadata(**annotation.model_dump(exclude={"public"})),
            ))

        def report(percent: int) -> None:
            logger.debug("upload_progress", documentno=document.documentno, progress=percent)

        coordinator = get_upload_coordinator()
        result = await coordinator.upload(document, pending, on_progress=report)

        status_code = {
            UploadState.DONE: 201,
            UploadState.FAILED: 502,
        }.get(result.status, 200)
        return JSONResponse(
            status_code=status_code,
            content=result.model_dump(mode="json", by_alias=True)
        )
    except Exception as e:
        return handle_error(e)


@router.put("/{partition_key}/{row_key}", response_model=EditResult, dependencies=[Depends(require_api_key)])
async def update_document(partition_key: str, row_key: str, data: CatalogEntry):
    """
    Save an edited catalog entry.

    Path keys take precedence over keys in the body.

    Raises:
        422: Entry has no language variants
        502: Storage failure
    """
    try:
        entry = data.model_copy(update={"partition_key": partition_key, "row_key": row_key})
        if not entry.languagevariants:
            raise LanguageVariantRequiredError()

        coordinator = get_edit_coordinator()
        return _edit_response(await coordinator.save_edits(entry))
    except Exception as e:
        return handle_error(e)


@router.delete(
    "/{partition_key}/{row_key}/variants/{index}",
    response_model=EditResult,
    dependencies=[Depends(require_api_key)]
)
async def delete_document_variant(partition_key: str, row_key: str, index: int):
    """
    Delete one language variant and its file.

    The entry is read from the table, not the cache.

    Raises:
        404: Entry not found
        422: Index out of range
        502: Storage failure
    """
    try:
        entry = await get_catalog_service().get_entry(partition_key, row_key, fresh=True)
        if not 0 <= index < len(entry.languagevariants):
            raise VariantIndexError(index, len(entry.languagevariants))

        coordinator = get_edit_coordinator()
        return _edit_response(await coordinator.delete_variant(entry, index))
    except Exception as e:
        return handle_error(e)
