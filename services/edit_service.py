"""
Catalog edit coordination.

Saves edited entries, deletes single language variants (file first,
then the row), and tags entries with a project number. Storage errors
are turned into an EditResult message rather than raised.
"""

import asyncio
from typing import Optional
import structlog

from exceptions import (
    AppError,
    LanguageVariantRequiredError,
    ProjectNumberRequiredError,
    VariantIndexError,
    ValidationError,
)
from integrations.azure_storage import AzureStorageClient, get_remote_store
from models.catalog import CatalogEntry, EditResult
from services.catalog_cache import CatalogCache, get_catalog_cache
from services.catalog_formatter import to_storage_row

logger = structlog.get_logger(__name__)

SAVE_SUCCESS_MESSAGE = "Document updated successfully!"
VARIANT_DELETED_MESSAGE = "Language variant deleted successfully"
VARIANT_DELETE_FAILED_MESSAGE = "Failed to delete language variant. Please try again."
PROJECT_CREATED_MESSAGE = "Project created successfully!"
PROJECT_FAILED_MESSAGE = "Failed to create project. Please try again."


class EditCoordinator:
    """
    Edits existing catalog entries.

    Callers pass the entry they edited; it is never read back from the
    cache before writing.
    """

    def __init__(
        self,
        store: Optional[AzureStorageClient] = None,
        cache: Optional[CatalogCache] = None
    ):
        self.store = store or get_remote_store()
        self.cache = cache or get_catalog_cache()

    async def save_edits(self, entry: CatalogEntry) -> EditResult:
        """
        Persist an edited entry.

        Args:
            entry: Entry with its final field values

        Returns:
            EditResult; on failure the message is the validation or
            upstream error message
        """
        if not entry.languagevariants:
            error = LanguageVariantRequiredError()
            logger.info("save_rejected", row_key=entry.row_key, code=error.code)
            return EditResult(success=False, message=error.message, entry=entry)

        try:
            await self.store.update_entry(to_storage_row(entry))
        except AppError as e:
            logger.error(
                "save_edits_failed",
                partition_key=entry.partition_key,
                row_key=entry.row_key,
                error=e.message
            )
            return EditResult(success=False, message=e.message, entry=entry)

        self.cache.invalidate()
        logger.info("entry_saved", partition_key=entry.partition_key, row_key=entry.row_key)
        return EditResult(success=True, message=SAVE_SUCCESS_MESSAGE, entry=entry)

    async def delete_variant(self, entry: CatalogEntry, index: int) -> EditResult:
        """
        Delete one language variant: its blob first, then the row entry.

        If the blob delete fails nothing changes. If the row update fails
        after the blob is gone, the stored row still lists the variant and
        the returned entry is the unchanged one.

        Args:
            entry: Entry owning the variant
            index: Position in entry.languagevariants

        Returns:
            EditResult with the updated entry on success
        """
        if not 0 <= index < len(entry.languagevariants):
            error = VariantIndexError(index, len(entry.languagevariants))
            return EditResult(success=False, message=error.message, entry=entry)

        variant = entry.languagevariants[index]

        try:
            await self.store.delete_file(variant.url, public=entry.public)
        except AppError as e:
            logger.error(
                "variant_blob_delete_failed",
                row_key=entry.row_key,
                url=variant.url,
                error=e.message
            )
            return EditResult(success=False, message=VARIANT_DELETE_FAILED_MESSAGE, entry=entry)

        updated = entry.model_copy(
            update={
                "languagevariants": [
                    v for i, v in enumerate(entry.languagevariants) if i != index
                ]
            },
            deep=True,
        )

        try:
            await self.store.update_entry(to_storage_row(updated))
        except AppError as e:
            # Blob is already gone; stored row still references it
            logger.error(
                "variant_delete_not_persisted",
                row_key=entry.row_key,
                url=variant.url,
                error=e.message
            )
            return EditResult(
                success=False,
                message=f"File deleted but the document could not be updated: {e.message}",
                entry=entry,
            )

        self.cache.invalidate()
        logger.info("variant_deleted", row_key=entry.row_key, lang=variant.lang)
        return EditResult(success=True, message=VARIANT_DELETED_MESSAGE, entry=updated)

    async def assign_project(
        self,
        entries: list[CatalogEntry],
        projectno: str
    ) -> EditResult:
        """
        Tag entries with a project number.

        Updates run concurrently; any failure fails the whole operation,
        though entries already updated stay updated.
        """
        projectno = projectno.strip()
        if not projectno:
            return EditResult(success=False, message=ProjectNumberRequiredError().message)
        if not entries:
            error = ValidationError("Select at least one document", code="NO_DOCUMENTS_SELECTED")
            return EditResult(success=False, message=error.message)

        updated = [
            entry.model_copy(update={"projectno": projectno}, deep=True)
            for entry in entries
        ]
        results = await asyncio.gather(
            *(self.store.update_entry(to_storage_row(entry)) for entry in updated),
            return_exceptions=True,
        )

        failures = [
            (entry, result) for entry, result in zip(updated, results)
            if isinstance(result, BaseException)
        ]
        for entry, error in failures:
            logger.error(
                "project_assignment_failed",
                projectno=projectno,
                documentno=entry.documentno,
                error=str(error),
                error_type=type(error).__name__
            )

        if len(failures) < len(updated):
            self.cache.invalidate()

        if failures:
            return EditResult(success=False, message=PROJECT_FAILED_MESSAGE)

        logger.info("project_created", projectno=projectno, documents=len(updated))
        return EditResult(success=True, message=PROJECT_CREATED_MESSAGE)


# Singleton instance
_edit_coordinator: Optional[EditCoordinator] = None


def get_edit_coordinator() -> EditCoordinator:
    """Get or create EditCoordinator instance."""
    global _edit_coordinator
    if _edit_coordinator is None:
        _edit_coordinator = EditCoordinator()
    return _edit_coordinator
