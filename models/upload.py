"""
Upload wizard schemas.

A PendingUpload is a file the user picked but that has not reached blob
storage yet, together with the per-file metadata filled in during the
annotation step.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from pydantic import Field

from models.base import BaseSchema
from models.catalog import CatalogEntry, Market


class UploadState(str, Enum):
    """Upload wizard states."""
    COLLECTING_METADATA = "collecting_metadata"
    SELECTING_FILES = "selecting_files"
    ANNOTATING_FILES = "annotating_files"
    UPLOADING = "uploading"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


class FileMetadata(BaseSchema):
    """Per-file draft metadata."""

    lang: str = ""
    manualtype: list[str] = Field(default_factory=list)
    releasedate: Optional[str] = None
    regions: Market = Field(default_factory=Market)

    @property
    def is_complete(self) -> bool:
        """Language, at least one manual type and a release date are set."""
        return bool(self.lang and self.manualtype and self.releasedate)


class FileMetadataInput(FileMetadata):
    """Per-file metadata as posted by the client, including visibility."""

    public: bool = True


@dataclass
class PendingUpload:
    """A selected file awaiting upload."""

    filename: str
    content: bytes
    content_type: str = "application/pdf"
    public: bool = True
    metadata: FileMetadata = field(default_factory=FileMetadata)
    url: Optional[str] = None


class UploadResult(BaseSchema):
    """Final status of an upload attempt, shown to the user."""

    status: UploadState
    message: str
    progress: int = Field(..., ge=0, le=100)
    entry: Optional[CatalogEntry] = None
    uploaded_urls: list[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status == UploadState.DONE
