"""
Shared test fixtures.

Storage is replaced by FakeRemoteStore, an in-memory stand-in for
AzureStorageClient that records every call and can be told to fail.
"""

import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest
from typing import Generator
from urllib.parse import quote

from exceptions import RemoteStoreError
from integrations.azure_storage import blob_name_from

PUBLIC_BASE_URL = "https://manuals.blob.core.windows.net/instructionmanuals"
RESTRICTED_BASE_URL = "https://manuals.blob.core.windows.net/servicemanuals"


# ===================
# FAKE REMOTE STORE
# ===================

class FakeRemoteStore:
    """
    In-memory remote store.

    Failure switches:
        fail_uploads: filenames whose upload fails
        fail_create: create_entry fails
        fail_updates: row keys whose update fails ("*" for all)
        fail_deletes: blob names whose delete fails ("*" for all)
    """

    def __init__(self, rows: list = None):
        self.rows = [dict(row) for row in rows or []]
        self.blobs: dict[str, bool] = {}
        self.calls: list[tuple] = []

        self.fail_uploads: set[str] = set()
        self.fail_create = False
        self.fail_updates: set[str] = set()
        self.fail_deletes: set[str] = set()
        self.fail_list = False

        # Hook run after each successful upload (e.g. to cancel mid-batch)
        self.after_upload = None
        # Coroutine awaited inside each delete, before it completes
        self.before_delete = None

    @staticmethod
    def _error(operation: str, message: str = "Server busy") -> RemoteStoreError:
        return RemoteStoreError(operation, message, upstream_status=503)

    def calls_to(self, operation: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == operation]

    async def list_entries(self) -> list[dict]:
        self.calls.append(("list_entries",))
        if self.fail_list:
            raise self._error("list_entries")
        return [dict(row) for row in self.rows]

    async def create_entry(self, entity: dict) -> None:
        self.calls.append(("create_entry", dict(entity)))
        if self.fail_create:
            raise self._error("create_entry", "The table is being deleted")
        self.rows.append(dict(entity))

    async def update_entry(self, entity: dict) -> None:
        self.calls.append(("update_entry", dict(entity)))
        if "*" in self.fail_updates or entity.get("RowKey") in self.fail_updates:
            raise self._error("update_entry", "Precondition failed")
        self.rows = [
            dict(entity)
            if (row.get("PartitionKey"), row.get("RowKey"))
            == (entity.get("PartitionKey"), entity.get("RowKey"))
            else row
            for row in self.rows
        ]

    async def upload_file(
        self,
        filename: str,
        content: bytes,
        content_type: str = None,
        public: bool = True
    ) -> str:
        self.calls.append(("upload_file", filename, public))
        if filename in self.fail_uploads:
            raise self._error("upload_file")
        base = PUBLIC_BASE_URL if public else RESTRICTED_BASE_URL
        url = f"{base}/{quote(filename)}"
        self.blobs[url] = public
        if self.after_upload is not None:
            self.after_upload(filename)
        return url

    async def delete_file(self, identifier: str, public: bool = True) -> bool:
        name = blob_name_from(identifier)
        self.calls.append(("delete_file", name, public))
        if self.before_delete is not None:
            await self.before_delete(name)
        if "*" in self.fail_deletes or name in self.fail_deletes:
            raise self._error("delete_file")
        base = PUBLIC_BASE_URL if public else RESTRICTED_BASE_URL
        self.blobs.pop(f"{base}/{quote(name)}", None)
        return True


# ===================
# FIXTURES
# ===================

@pytest.fixture
def fake_store() -> FakeRemoteStore:
    """
    Empty in-memory remote store.

    Usage:
        def test_something(fake_store):
            fake_store.rows = [CatalogRowFactory.create()]
    """
    return FakeRemoteStore()


@pytest.fixture
def catalog_cache(fake_store):
    """CatalogCache reading from fake_store."""
    from services.catalog_cache import CatalogCache

    return CatalogCache(fetch=fake_store.list_entries, ttl_seconds=300)


@pytest.fixture
def storage_settings():
    """Settings with every storage endpoint configured."""
    from config.settings import Settings

    return Settings(
        _env_file=None,
        azure_blob_public_url=PUBLIC_BASE_URL,
        azure_blob_public_sas="?sv=2022-11-02&sig=public",
        azure_blob_restricted_url=RESTRICTED_BASE_URL,
        azure_blob_restricted_sas="sv=2022-11-02&sig=restricted",
        azure_table_url="https://manuals.table.core.windows.net/manuals",
        azure_table_sas="?sv=2022-11-02&sig=table",
    )


@pytest.fixture
def mock_storage(fake_store, catalog_cache, monkeypatch) -> Generator:
    """
    Route every service singleton to fake_store and catalog_cache.

    Usage:
        def test_something(mock_storage):
            mock_storage.rows = [...]
            # get_catalog_service() etc. now use the fake store
    """
    monkeypatch.setattr("integrations.azure_storage._remote_store", fake_store)
    monkeypatch.setattr("services.catalog_cache._catalog_cache", catalog_cache)
    monkeypatch.setattr("services.catalog_service._catalog_service", None)
    monkeypatch.setattr("services.edit_service._edit_coordinator", None)
    monkeypatch.setattr("services.upload_service._upload_coordinator", None)
    monkeypatch.setattr("services.project_service._project_service", None)
    yield fake_store


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client(mock_storage, monkeypatch):
    """
    Create FastAPI test client backed by the fake store.

    Usage:
        def test_endpoint(test_client, mock_storage):
            mock_storage.rows = [...]
            response = test_client.get("/api/documents")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from config.settings import settings
    from main import app

    monkeypatch.setattr(settings, "api_key", None)
    return TestClient(app)
