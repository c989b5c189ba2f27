"""
Unit tests for ProjectService.

Run: pytest tests/unit/test_project_service.py -v
"""

import pytest

from exceptions import CatalogEntryNotFoundError, ProjectNumberRequiredError, ValidationError
from models.project import EntryKey, ProjectCreate
from services.catalog_service import CatalogService
from services.edit_service import EditCoordinator
from services.project_service import ProjectService, group_by_project

from tests.factories import CatalogRowFactory, CatalogEntryFactory


@pytest.fixture
def service(fake_store, catalog_cache):
    return ProjectService(
        catalog=CatalogService(store=fake_store, cache=catalog_cache),
        editor=EditCoordinator(store=fake_store, cache=catalog_cache),
    )


def key_of(row: dict) -> EntryKey:
    return EntryKey(partition_key=row["PartitionKey"], row_key=row["RowKey"])


class TestGroupByProject:
    """Tests for group_by_project()"""

    def test_groups_in_first_seen_order(self):
        entries = [
            CatalogEntryFactory.create(documentno="A", projectno="P-2"),
            CatalogEntryFactory.create(documentno="B", projectno=""),
            CatalogEntryFactory.create(documentno="C", projectno="P-1"),
            CatalogEntryFactory.create(documentno="D", projectno="P-2"),
        ]

        groups = group_by_project(entries)

        assert [g.projectno for g in groups] == ["P-2", "P-1"]
        assert [e.documentno for e in groups[0].documents] == ["A", "D"]
        assert groups[0].project_data.documentno == "A"


class TestProjectServiceQueries:
    """Tests for project listing and search"""

    @pytest.mark.asyncio
    async def test_project_numbers_start_with_none(self, service, fake_store):
        fake_store.rows = [
            CatalogRowFactory.create(projectno="P-9"),
            CatalogRowFactory.create(projectno="P-9"),
            CatalogRowFactory.create(projectno="P-3"),
        ]

        numbers = await service.get_project_numbers()

        assert numbers == ["none", "P-9", "P-3"]

    @pytest.mark.asyncio
    async def test_blank_search_finds_nothing(self, service, fake_store):
        fake_store.rows = CatalogRowFactory.create_batch(2)

        assert await service.search_documents("  ") == []
        assert fake_store.calls == []


class TestProjectServiceCreate:
    """Tests for ProjectService.create_project()"""

    @pytest.mark.asyncio
    async def test_tags_selected_entries(self, service, fake_store):
        # Arrange
        rows = [CatalogRowFactory.create(documentno=f"IM-{i}") for i in range(3)]
        fake_store.rows = rows

        # Act
        result = await service.create_project(
            ProjectCreate(projectno="P-5", documents=[key_of(rows[0]), key_of(rows[2])])
        )

        # Assert
        assert result.success
        assert [row["projectno"] for row in fake_store.rows] == ["P-5", "", "P-5"]

    @pytest.mark.asyncio
    async def test_duplicate_document_number_tagged_once(self, service, fake_store):
        rows = [
            CatalogRowFactory.create(documentno="IM-1"),
            CatalogRowFactory.create(documentno="IM-1"),
        ]
        fake_store.rows = rows

        await service.create_project(
            ProjectCreate(projectno="P-5", documents=[key_of(rows[0]), key_of(rows[1])])
        )

        assert len(fake_store.calls_to("update_entry")) == 1

    @pytest.mark.asyncio
    async def test_blank_project_number_raises(self, service, fake_store):
        with pytest.raises(ProjectNumberRequiredError):
            await service.create_project(ProjectCreate(projectno=" ", documents=[]))
        assert fake_store.calls == []

    @pytest.mark.asyncio
    async def test_no_documents_raises(self, service, fake_store):
        with pytest.raises(ValidationError) as exc_info:
            await service.create_project(ProjectCreate(projectno="P-1", documents=[]))
        assert exc_info.value.code == "NO_DOCUMENTS_SELECTED"

    @pytest.mark.asyncio
    async def test_unknown_entry_raises(self, service, fake_store):
        fake_store.rows = CatalogRowFactory.create_batch(1)

        with pytest.raises(CatalogEntryNotFoundError):
            await service.create_project(
                ProjectCreate(projectno="P-1", documents=[EntryKey(partition_key="arc", row_key="gone")])
            )
        assert fake_store.calls_to("update_entry") == []
