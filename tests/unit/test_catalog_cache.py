"""
Unit tests for CatalogCache.

Run: pytest tests/unit/test_catalog_cache.py -v
"""

import pytest

from services.catalog_cache import CatalogCache
from exceptions import RemoteStoreError

from tests.factories import CatalogRowFactory


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


class TestCatalogCacheGet:
    """Tests for CatalogCache.get()"""

    @pytest.mark.asyncio
    async def test_first_get_fetches(self, fake_store, clock):
        """Should fetch from the store when empty."""
        # Arrange
        fake_store.rows = CatalogRowFactory.create_batch(2)
        cache = CatalogCache(fake_store.list_entries, ttl_seconds=60, clock=clock)

        # Act
        rows = await cache.get()

        # Assert
        assert len(rows) == 2
        assert len(fake_store.calls_to("list_entries")) == 1

    @pytest.mark.asyncio
    async def test_fresh_value_served_without_fetch(self, fake_store, clock):
        """Should not refetch inside the freshness window."""
        # Arrange
        cache = CatalogCache(fake_store.list_entries, ttl_seconds=60, clock=clock)
        await cache.get()
        clock.now += 59

        # Act
        await cache.get()

        # Assert
        assert len(fake_store.calls_to("list_entries")) == 1
        assert cache.is_fresh

    @pytest.mark.asyncio
    async def test_stale_value_refetched(self, fake_store, clock):
        """Should refetch once the window has passed."""
        # Arrange
        cache = CatalogCache(fake_store.list_entries, ttl_seconds=60, clock=clock)
        await cache.get()
        clock.now += 60

        # Act
        await cache.get()

        # Assert
        assert len(fake_store.calls_to("list_entries")) == 2

    @pytest.mark.asyncio
    async def test_fetch_error_propagates_and_caches_nothing(self, fake_store, clock):
        """A failed fetch should raise and leave the cache empty."""
        # Arrange
        fake_store.fail_list = True
        cache = CatalogCache(fake_store.list_entries, ttl_seconds=60, clock=clock)

        # Act & Assert
        with pytest.raises(RemoteStoreError):
            await cache.get()
        assert not cache.is_fresh


class TestCatalogCacheInvalidate:
    """Tests for CatalogCache.invalidate()"""

    @pytest.mark.asyncio
    async def test_invalidate_forces_fetch(self, fake_store, clock):
        """Next get() after invalidate() should see new rows."""
        # Arrange
        cache = CatalogCache(fake_store.list_entries, ttl_seconds=60, clock=clock)
        await cache.get()
        fake_store.rows = [CatalogRowFactory.create(documentno="NEW-1")]

        # Act
        cache.invalidate()
        rows = await cache.get()

        # Assert
        assert rows[0]["documentno"] == "NEW-1"
        assert len(fake_store.calls_to("list_entries")) == 2

    @pytest.mark.asyncio
    async def test_mutating_result_does_not_change_cache(self, fake_store, clock):
        """Callers get a copy; appending to it leaves the cached rows alone."""
        # Arrange
        fake_store.rows = CatalogRowFactory.create_batch(1)
        cache = CatalogCache(fake_store.list_entries, ttl_seconds=60, clock=clock)
        first = await cache.get()

        # Act
        first.append(CatalogRowFactory.create())
        second = await cache.get()

        # Assert
        assert len(second) == 1
        assert len(fake_store.calls_to("list_entries")) == 1

    def test_empty_cache_is_not_fresh(self, fake_store, clock):
        """A never-filled cache should not count as fresh."""
        cache = CatalogCache(fake_store.list_entries, ttl_seconds=60, clock=clock)
        assert not cache.is_fresh
