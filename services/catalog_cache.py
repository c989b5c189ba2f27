"""
In-memory cache of the catalog listing.

Holds the last successful table fetch with a freshness window. Writers
call invalidate() after every successful create/update so the next read
sees their change. Single process, single event loop.
"""

import time
from typing import Awaitable, Callable, Optional
import structlog

from config.settings import settings
from integrations.azure_storage import get_remote_store

logger = structlog.get_logger(__name__)

DEFAULT_TTL_SECONDS = 300


class CatalogCache:
    """
    Read-through cache for one value: the list of raw catalog rows.

    Never a source of truth for writes; callers editing an entry work on
    their own copy and persist through the remote store.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[list[dict]]],
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        self._fetch = fetch
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._rows: Optional[list[dict]] = None
        self._fetched_at: float = 0.0

    @property
    def is_fresh(self) -> bool:
        """Whether a cached value exists and is inside the freshness window."""
        return (
            self._rows is not None
            and self._clock() - self._fetched_at < self.ttl_seconds
        )

    async def get(self) -> list[dict]:
        """Return a copy of the cached rows, fetching when empty or stale."""
        if self.is_fresh:
            logger.debug("catalog_cache_hit", rows=len(self._rows))
            return list(self._rows)

        logger.debug("catalog_cache_miss")
        rows = await self._fetch()
        self._rows = rows
        self._fetched_at = self._clock()
        logger.info("catalog_cache_refreshed", rows=len(rows))
        return list(rows)

    def invalidate(self) -> None:
        """Drop the cached value so the next get() fetches."""
        self._rows = None
        self._fetched_at = 0.0
        logger.debug("catalog_cache_invalidated")


# Singleton instance
_catalog_cache: Optional[CatalogCache] = None


def get_catalog_cache() -> CatalogCache:
    """Get or create the process-wide CatalogCache."""
    global _catalog_cache
    if _catalog_cache is None:
        _catalog_cache = CatalogCache(
            fetch=get_remote_store().list_entries,
            ttl_seconds=settings.catalog_cache_ttl_seconds,
        )
    return _catalog_cache
