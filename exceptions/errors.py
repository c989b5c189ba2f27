"""
Custom exception classes for the application.

Every error carries a machine-readable code, a human-readable message
and the HTTP status it maps to.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "CATALOG_ENTRY_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with current state (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class UnauthorizedError(AppError):
    """Missing or invalid API key (401)."""

    def __init__(self, message: str = "Missing or invalid API key"):
        super().__init__(
            code="UNAUTHORIZED",
            message=message,
            status_code=401
        )


# ===================
# STORAGE ERRORS
# ===================

class ConfigurationError(AppError):
    """Storage endpoint or SAS token missing (500). Not retryable."""

    def __init__(self, resource: str, missing: list[str]):
        super().__init__(
            code="STORAGE_NOT_CONFIGURED",
            message=f"{resource} configuration is missing",
            status_code=500,
            details={"resource": resource, "missing": missing}
        )


class RemoteStoreError(AppError):
    """
    Upstream storage call did not succeed (502).

    Attributes:
        upstream_status: HTTP status returned by Azure, or None when the
            request never got a response
        operation: Store operation that failed (e.g. "upload_file")
    """

    def __init__(
        self,
        operation: str,
        message: str,
        upstream_status: Optional[int] = None
    ):
        self.operation = operation
        self.upstream_status = upstream_status
        super().__init__(
            code="REMOTE_STORE_ERROR",
            message=message,
            status_code=502,
            details={"operation": operation, "upstream_status": upstream_status}
        )


# ===================
# CATALOG ERRORS
# ===================

class CatalogEntryNotFoundError(NotFoundError):
    """Catalog entry not found."""

    def __init__(self, partition_key: str, row_key: str):
        super().__init__(
            resource="Catalog entry",
            identifier=f"{partition_key}/{row_key}",
            code="CATALOG_ENTRY_NOT_FOUND"
        )


class DocumentNumberRequiredError(ValidationError):
    """Document number missing from metadata."""

    def __init__(self):
        super().__init__(
            code="DOCUMENT_NUMBER_REQUIRED",
            message="Document number is required"
        )


class LanguageVariantRequiredError(ValidationError):
    """Entry would be left without any language variant."""

    def __init__(self):
        super().__init__(
            code="LANGUAGE_VARIANT_REQUIRED",
            message="At least one language variant is required"
        )


class VariantIndexError(ValidationError):
    """Language variant index out of range."""

    def __init__(self, index: int, count: int):
        super().__init__(
            code="VARIANT_INDEX_OUT_OF_RANGE",
            message=f"No language variant at index {index}",
            details={"index": index, "variant_count": count}
        )


# ===================
# UPLOAD ERRORS
# ===================

class FileIndexError(ValidationError):
    """Selected file index out of range."""

    def __init__(self, index: int, count: int):
        super().__init__(
            code="FILE_INDEX_OUT_OF_RANGE",
            message=f"No selected file at index {index}",
            details={"index": index, "file_count": count}
        )


class NoFilesSelectedError(ValidationError):
    """Upload attempted without any file."""

    def __init__(self):
        super().__init__(
            code="NO_FILES_SELECTED",
            message="At least one file is required"
        )


class FileMetadataIncompleteError(ValidationError):
    """One or more files lack language, manual type or release date."""

    def __init__(self, incomplete: list[dict]):
        super().__init__(
            code="FILE_METADATA_INCOMPLETE",
            message=f"{len(incomplete)} file(s) need language, manual type and release date",
            details={"files": incomplete}
        )


class InvalidUploadStateError(ConflictError):
    """Upload wizard step called out of order."""

    def __init__(self, current_state: str, action: str):
        super().__init__(
            code="INVALID_UPLOAD_STATE",
            message=f"Cannot {action} while upload is {current_state}",
            details={"current_state": current_state, "action": action}
        )


# ===================
# PROJECT ERRORS
# ===================

class ProjectNumberRequiredError(ValidationError):
    """Project number missing or blank."""

    def __init__(self):
        super().__init__(
            code="PROJECT_NUMBER_REQUIRED",
            message="Project number is required"
        )
