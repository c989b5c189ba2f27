"""
Custom exceptions module.

Import from here rather than from exceptions.errors.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    UnauthorizedError,

    # Storage
    ConfigurationError,
    RemoteStoreError,

    # Catalog
    CatalogEntryNotFoundError,
    DocumentNumberRequiredError,
    LanguageVariantRequiredError,
    VariantIndexError,

    # Upload
    FileIndexError,
    NoFilesSelectedError,
    FileMetadataIncompleteError,
    InvalidUploadStateError,

    # Projects
    ProjectNumberRequiredError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "UnauthorizedError",

    # Storage
    "ConfigurationError",
    "RemoteStoreError",

    # Catalog
    "CatalogEntryNotFoundError",
    "DocumentNumberRequiredError",
    "LanguageVariantRequiredError",
    "VariantIndexError",

    # Upload
    "FileIndexError",
    "NoFilesSelectedError",
    "FileMetadataIncompleteError",
    "InvalidUploadStateError",

    # Projects
    "ProjectNumberRequiredError",
]
