"""
Upload wizard coordination.

Drives the "document metadata → add files → file details → upload" flow.
Submitting uploads every file to blob storage, then writes one catalog
row referencing all of them. If the row write fails, the files just
uploaded are deleted again (best effort). A failed file upload aborts the
batch without cleanup, and so does a confirmed cancel; files uploaded
before either point stay in blob storage with no catalog row.
"""

import asyncio
import math
import uuid
from typing import Callable, Optional
import structlog

from config.catalog import (
    UPLOAD_PROGRESS_BEFORE_WRITE,
    UPLOAD_PROGRESS_COMPLETE,
    UPLOAD_PROGRESS_FILES_SHARE,
)
from exceptions import (
    AppError,
    DocumentNumberRequiredError,
    FileMetadataIncompleteError,
    InvalidUploadStateError,
    NoFilesSelectedError,
    FileIndexError,
)
from integrations.azure_storage import AzureStorageClient, get_remote_store
from models.catalog import CatalogEntry, DocumentMetadata, LanguageVariant, Market
from models.upload import PendingUpload, UploadResult, UploadState
from services.catalog_cache import CatalogCache, get_catalog_cache
from services.catalog_formatter import to_storage_row

logger = structlog.get_logger(__name__)

ProgressCallback = Callable[[int], None]

UPLOAD_FAILED_MESSAGE = "Upload failed. Please try again."
UPLOAD_SUCCESS_MESSAGE = "Document uploaded successfully!"
UPLOAD_CANCELLED_MESSAGE = "Upload cancelled."


def files_progress(completed: int, total: int) -> int:
    """Percentage shown while files upload: 80% spread over the files."""
    # Round half up, as the dashboard's progress bar does
    return math.floor(UPLOAD_PROGRESS_FILES_SHARE * completed / total + 0.5)


class UploadSession:
    """
    One run of the upload wizard.

    States:
        COLLECTING_METADATA → SELECTING_FILES → ANNOTATING_FILES
        → UPLOADING → DONE | FAILED, or CANCELLED on a confirmed close.

    Wizard steps raise InvalidUploadStateError when called out of order
    and ValidationError subclasses for incomplete input. submit() never
    raises storage errors; they come back as a FAILED UploadResult.
    """

    def __init__(
        self,
        store: AzureStorageClient,
        cache: CatalogCache,
        on_progress: Optional[ProgressCallback] = None,
        row_key_factory: Callable[[], str] = lambda: str(uuid.uuid4())
    ):
        self.store = store
        self.cache = cache
        self._on_progress = on_progress
        self._row_key_factory = row_key_factory

        self.state = UploadState.COLLECTING_METADATA
        self.metadata: Optional[DocumentMetadata] = None
        self.files: list[PendingUpload] = []
        self.progress = 0
        self.status_message = ""
        self.close_requested = False
        self._abandoned = False

    # ===================
    # WIZARD STEPS
    # ===================

    def _require(self, action: str, *states: UploadState) -> None:
        if self.state not in states:
            raise InvalidUploadStateError(self.state.value, action)

    def set_metadata(self, metadata: DocumentMetadata) -> None:
        """Step 1: document-level metadata. Document number is required."""
        self._require("set metadata", UploadState.COLLECTING_METADATA)
        if not metadata.documentno:
            raise DocumentNumberRequiredError()
        self.metadata = metadata
        self.state = UploadState.SELECTING_FILES

    def add_file(self, upload: PendingUpload) -> None:
        """Step 2: add a selected file."""
        self._require("add a file", UploadState.SELECTING_FILES)
        self.files.append(upload)

    def remove_file(self, index: int) -> PendingUpload:
        """Drop a selected file before upload."""
        self._require("remove a file", UploadState.SELECTING_FILES, UploadState.ANNOTATING_FILES)
        if not 0 <= index < len(self.files):
            raise FileIndexError(index, len(self.files))
        return self.files.pop(index)

    def proceed_to_annotation(self) -> None:
        """Step 2 → 3. Needs at least one file."""
        self._require("continue to file details", UploadState.SELECTING_FILES)
        if not self.files:
            raise NoFilesSelectedError()
        self.state = UploadState.ANNOTATING_FILES

    def annotate_file(
        self,
        index: int,
        lang: Optional[str] = None,
        manualtype: Optional[list[str]] = None,
        releasedate: Optional[str] = None,
        regions: Optional[Market] = None,
        public: Optional[bool] = None
    ) -> PendingUpload:
        """Step 3: fill in per-file details. Only given fields change."""
        self._require("edit file details", UploadState.ANNOTATING_FILES)
        if not 0 <= index < len(self.files):
            raise FileIndexError(index, len(self.files))

        upload = self.files[index]
        if lang is not None:
            upload.metadata.lang = lang
        if manualtype is not None:
            upload.metadata.manualtype = list(manualtype)
        if releasedate is not None:
            upload.metadata.releasedate = releasedate
        if regions is not None:
            upload.metadata.regions = regions
        if public is not None:
            upload.public = public
        return upload

    def back(self) -> None:
        """Go back one wizard step."""
        self._require("go back", UploadState.SELECTING_FILES, UploadState.ANNOTATING_FILES)
        if self.state == UploadState.ANNOTATING_FILES:
            self.state = UploadState.SELECTING_FILES
        else:
            self.state = UploadState.COLLECTING_METADATA

    # ===================
    # CLOSE / CANCEL
    # ===================

    def request_close(self) -> bool:
        """
        Ask to close the wizard.

        Returns:
            True if it closed immediately; False if an upload is running and
            confirm_close() is needed
        """
        if self.state == UploadState.UPLOADING:
            self.close_requested = True
            return False
        if self.state not in (UploadState.DONE, UploadState.FAILED):
            self._discard()
        return True

    def dismiss_close(self) -> None:
        """Keep uploading after a close request."""
        self.close_requested = False

    def confirm_close(self) -> None:
        """
        Abandon the wizard.

        A running upload stops at its next step boundary. Files already
        uploaded in this batch are left in blob storage.
        """
        self.close_requested = False
        if self.state == UploadState.UPLOADING:
            self._abandoned = True
            self.state = UploadState.CANCELLED
            logger.warning(
                "upload_cancel_confirmed",
                documentno=self.metadata.documentno if self.metadata else None
            )
        elif self.state not in (UploadState.DONE, UploadState.FAILED):
            self._discard()

    def _discard(self) -> None:
        self.files = []
        self.state = UploadState.CANCELLED

    # ===================
    # SUBMIT
    # ===================

    def _report(self, percent: int) -> None:
        self.progress = percent
        if self._on_progress is not None:
            self._on_progress(percent)

    def _validate_files(self) -> None:
        if not self.files:
            raise NoFilesSelectedError()
        incomplete = [
            {"index": i, "filename": upload.filename}
            for i, upload in enumerate(self.files)
            if not upload.metadata.is_complete
        ]
        if incomplete:
            raise FileMetadataIncompleteError(incomplete)

    def _build_entry(self, uploaded: list[PendingUpload]) -> CatalogEntry:
        """One row for the whole batch; market flags come from the first file."""
        metadata = self.metadata
        return CatalogEntry(
            partition_key=metadata.productcategory,
            row_key=self._row_key_factory(),
            documentno=metadata.documentno,
            familyname=metadata.familyname,
            manualtitle=metadata.manualtitle,
            productcategory=metadata.productcategory,
            productgin=metadata.productgin,
            projectno=metadata.projectno,
            serialno=metadata.serialno,
            subcategory=metadata.subcategory,
            public=metadata.public,
            languagevariants=[
                LanguageVariant(
                    lang=upload.metadata.lang,
                    url=upload.url or "",
                    manualtype=list(upload.metadata.manualtype),
                    releasedate=upload.metadata.releasedate,
                )
                for upload in uploaded
            ],
            market=uploaded[0].metadata.regions.model_copy() if uploaded else Market(),
        )

    def _finish(
        self,
        status: UploadState,
        message: str,
        uploaded: list[PendingUpload],
        entry: Optional[CatalogEntry] = None
    ) -> UploadResult:
        self.state = status
        self.status_message = message
        self._report(UPLOAD_PROGRESS_COMPLETE)
        return UploadResult(
            status=status,
            message=message,
            progress=self.progress,
            entry=entry,
            uploaded_urls=[upload.url for upload in uploaded if upload.url],
        )

    def _abandon(self, uploaded: list[PendingUpload]) -> UploadResult:
        self.status_message = UPLOAD_CANCELLED_MESSAGE
        logger.warning(
            "upload_abandoned",
            orphaned_files=[upload.url for upload in uploaded],
        )
        return UploadResult(
            status=UploadState.CANCELLED,
            message=UPLOAD_CANCELLED_MESSAGE,
            progress=self.progress,
            uploaded_urls=[upload.url for upload in uploaded if upload.url],
        )

    async def _compensate(self, uploaded: list[PendingUpload]) -> None:
        """Delete files of a batch whose catalog row was not written."""
        results = await asyncio.gather(
            *(
                self.store.delete_file(upload.url, public=upload.public)
                for upload in uploaded
                if upload.url
            ),
            return_exceptions=True,
        )
        for upload, result in zip([u for u in uploaded if u.url], results):
            if isinstance(result, BaseException):
                logger.error(
                    "compensating_delete_failed",
                    url=upload.url,
                    error=str(result),
                    error_type=type(result).__name__
                )
            else:
                logger.info("compensating_delete_done", url=upload.url)

    async def submit(self) -> UploadResult:
        """
        Upload every file, then write the catalog row.

        Progress: 80% * files done / total during uploads, 90% before the
        row write, 100% when finished (success or failure).

        Returns:
            UploadResult with DONE, FAILED or CANCELLED status

        Raises:
            InvalidUploadStateError: Not at the file details step
            NoFilesSelectedError / FileMetadataIncompleteError: Input incomplete
        """
        self._require("submit", UploadState.ANNOTATING_FILES)
        self._validate_files()

        self.state = UploadState.UPLOADING
        self.status_message = "Uploading documents..."
        self._report(0)

        total = len(self.files)
        uploaded: list[PendingUpload] = []

        logger.info(
            "upload_started",
            documentno=self.metadata.documentno,
            files=total
        )

        for upload in self.files:
            try:
                upload.url = await self.store.upload_file(
                    upload.filename,
                    upload.content,
                    upload.content_type,
                    public=upload.public,
                )
            except AppError as e:
                if self._abandoned:
                    return self._abandon(uploaded)
                # Batch is lost; files uploaded so far are not cleaned up
                logger.error(
                    "upload_batch_aborted",
                    documentno=self.metadata.documentno,
                    failed_file=upload.filename,
                    uploaded_before_failure=len(uploaded),
                    error=e.message
                )
                return self._finish(UploadState.FAILED, UPLOAD_FAILED_MESSAGE, uploaded)

            uploaded.append(upload)
            self._report(files_progress(len(uploaded), total))

            if self._abandoned:
                return self._abandon(uploaded)

        entry = self._build_entry(uploaded)
        self._report(UPLOAD_PROGRESS_BEFORE_WRITE)

        try:
            await self.store.create_entry(to_storage_row(entry))
        except AppError as e:
            if self._abandoned:
                return self._abandon(uploaded)
            logger.error(
                "catalog_entry_create_failed",
                documentno=entry.documentno,
                row_key=entry.row_key,
                error=e.message
            )
            await self._compensate(uploaded)
            return self._finish(
                UploadState.FAILED,
                f"Failed to complete upload process: {e.message}",
                uploaded,
            )

        self.cache.invalidate()

        if self._abandoned:
            # Row was written before the cancel could take effect
            return self._abandon(uploaded)

        logger.info(
            "upload_completed",
            documentno=entry.documentno,
            partition_key=entry.partition_key,
            row_key=entry.row_key,
            files=total,
            markets=entry.market.regions()
        )
        return self._finish(UploadState.DONE, UPLOAD_SUCCESS_MESSAGE, uploaded, entry)


class UploadCoordinator:
    """Creates upload sessions wired to the remote store and cache."""

    def __init__(
        self,
        store: Optional[AzureStorageClient] = None,
        cache: Optional[CatalogCache] = None
    ):
        self.store = store or get_remote_store()
        self.cache = cache or get_catalog_cache()

    def new_session(self, on_progress: Optional[ProgressCallback] = None) -> UploadSession:
        """Start a fresh wizard run."""
        return UploadSession(self.store, self.cache, on_progress=on_progress)

    async def upload(
        self,
        metadata: DocumentMetadata,
        files: list[PendingUpload],
        on_progress: Optional[ProgressCallback] = None
    ) -> UploadResult:
        """
        Run the whole wizard in one call with pre-annotated files.

        Raises:
            ValidationError: Metadata or file details incomplete
        """
        session = self.new_session(on_progress)
        session.set_metadata(metadata)
        for upload in files:
            session.add_file(upload)
        session.proceed_to_annotation()
        return await session.submit()


# Singleton instance
_upload_coordinator: Optional[UploadCoordinator] = None


def get_upload_coordinator() -> UploadCoordinator:
    """Get or create UploadCoordinator instance."""
    global _upload_coordinator
    if _upload_coordinator is None:
        _upload_coordinator = UploadCoordinator()
    return _upload_coordinator
