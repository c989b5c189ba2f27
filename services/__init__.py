"""
Business logic services.

Each service handles one domain area.
"""

from services.catalog_cache import CatalogCache, get_catalog_cache
from services.catalog_service import CatalogService, get_catalog_service
from services.edit_service import EditCoordinator, get_edit_coordinator
from services.project_service import ProjectService, get_project_service
from services.upload_service import UploadCoordinator, UploadSession, get_upload_coordinator

__all__ = [
    "CatalogCache",
    "get_catalog_cache",
    "CatalogService",
    "get_catalog_service",
    "EditCoordinator",
    "get_edit_coordinator",
    "ProjectService",
    "get_project_service",
    "UploadCoordinator",
    "UploadSession",
    "get_upload_coordinator",
]
