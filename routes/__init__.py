"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.documents import router as documents_router
from routes.projects import router as projects_router
from routes.reference import router as reference_router
from routes.storage import router as storage_router

__all__ = [
    "documents_router",
    "projects_router",
    "reference_router",
    "storage_router",
]
