"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema
from models.catalog import (
    Market,
    LanguageVariant,
    CatalogEntry,
    DocumentMetadata,
    DocumentListResponse,
    EditResult
)
from models.upload import (
    UploadState,
    FileMetadata,
    FileMetadataInput,
    PendingUpload,
    UploadResult
)
from models.project import (
    EntryKey,
    ProjectCreate,
    ProjectGroup
)

__all__ = [
    # Base
    "BaseSchema",

    # Catalog
    "Market",
    "LanguageVariant",
    "CatalogEntry",
    "DocumentMetadata",
    "DocumentListResponse",
    "EditResult",

    # Upload
    "UploadState",
    "FileMetadata",
    "FileMetadataInput",
    "PendingUpload",
    "UploadResult",

    # Project
    "EntryKey",
    "ProjectCreate",
    "ProjectGroup",
]
