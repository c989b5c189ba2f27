"""
Project grouping and creation.

Projects exist only as a shared projectno on catalog entries. Creating a
project re-saves each selected entry with that number.
"""

from typing import Optional
import structlog

from exceptions import CatalogEntryNotFoundError, ProjectNumberRequiredError, ValidationError
from models.catalog import CatalogEntry, EditResult
from models.project import ProjectCreate, ProjectGroup
from services.catalog_service import CatalogService, get_catalog_service
from services.edit_service import EditCoordinator, get_edit_coordinator

logger = structlog.get_logger(__name__)

NO_PROJECT = "none"


def group_by_project(entries: list[CatalogEntry]) -> list[ProjectGroup]:
    """Group entries with a projectno, in order of first appearance."""
    groups: dict[str, list[CatalogEntry]] = {}
    for entry in entries:
        if entry.projectno:
            groups.setdefault(entry.projectno, []).append(entry)

    return [
        ProjectGroup(projectno=projectno, documents=documents, project_data=documents[0])
        for projectno, documents in groups.items()
    ]


class ProjectService:
    """Project views and the create-project flow."""

    def __init__(
        self,
        catalog: Optional[CatalogService] = None,
        editor: Optional[EditCoordinator] = None
    ):
        self.catalog = catalog or get_catalog_service()
        self.editor = editor or get_edit_coordinator()

    async def get_projects(self) -> list[ProjectGroup]:
        return group_by_project(await self.catalog.get_all())

    async def get_project_numbers(self) -> list[str]:
        """Choices for the upload form: "none" followed by known numbers."""
        numbers = []
        for entry in await self.catalog.get_all():
            if entry.projectno and entry.projectno not in numbers:
                numbers.append(entry.projectno)
        return [NO_PROJECT, *numbers]

    async def search_documents(self, documentno: str) -> list[CatalogEntry]:
        """Candidate entries for a project; blank search finds nothing."""
        if not documentno.strip():
            return []
        return await self.catalog.search(documentno)

    async def create_project(self, data: ProjectCreate) -> EditResult:
        """
        Tag the selected entries with data.projectno.

        Entries are read fresh from the table; a document number selected
        twice is tagged once.

        Raises:
            ProjectNumberRequiredError: Blank project number
            ValidationError: No documents selected
            CatalogEntryNotFoundError: A selected entry no longer exists
        """
        if not data.projectno.strip():
            raise ProjectNumberRequiredError()
        if not data.documents:
            raise ValidationError("Select at least one document", code="NO_DOCUMENTS_SELECTED")

        current = {
            (entry.partition_key, entry.row_key): entry
            for entry in await self.catalog.get_all(fresh=True)
        }

        selected: list[CatalogEntry] = []
        seen_documentnos: set[str] = set()
        for key in data.documents:
            entry = current.get((key.partition_key, key.row_key))
            if entry is None:
                raise CatalogEntryNotFoundError(key.partition_key, key.row_key)
            if entry.documentno in seen_documentnos:
                continue
            seen_documentnos.add(entry.documentno)
            selected.append(entry)

        logger.info("creating_project", projectno=data.projectno, documents=len(selected))
        return await self.editor.assign_project(selected, data.projectno)


# Singleton instance
_project_service: Optional[ProjectService] = None


def get_project_service() -> ProjectService:
    """Get or create ProjectService instance."""
    global _project_service
    if _project_service is None:
        _project_service = ProjectService()
    return _project_service
