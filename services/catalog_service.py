"""
Catalog browsing service.

Read side of the dashboard: list, search and paginate catalog entries
from the cached table listing.
"""

from typing import Optional
import structlog

from config.settings import settings
from exceptions import CatalogEntryNotFoundError
from integrations.azure_storage import AzureStorageClient, get_remote_store
from models.catalog import CatalogEntry, DocumentListResponse
from services.catalog_cache import CatalogCache, get_catalog_cache
from services.catalog_formatter import normalize_all

logger = structlog.get_logger(__name__)


def filter_by_document_number(entries: list[CatalogEntry], term: str) -> list[CatalogEntry]:
    """Case-insensitive substring match on documentno; blank term keeps all."""
    needle = term.strip().lower()
    if not needle:
        return entries
    return [entry for entry in entries if needle in entry.documentno.lower()]


class CatalogService:
    """
    Catalog read operations.

    Listing goes through the cache. Lookups that feed a write pass
    fresh=True to read the table directly.
    """

    def __init__(
        self,
        store: Optional[AzureStorageClient] = None,
        cache: Optional[CatalogCache] = None
    ):
        self.store = store or get_remote_store()
        self.cache = cache or get_catalog_cache()

    async def get_all(self, fresh: bool = False) -> list[CatalogEntry]:
        """All entries, normalized."""
        rows = await self.store.list_entries() if fresh else await self.cache.get()
        return normalize_all(rows)

    async def search(self, term: str) -> list[CatalogEntry]:
        """Entries whose document number contains term."""
        return filter_by_document_number(await self.get_all(), term)

    async def get_page(
        self,
        search: Optional[str] = None,
        page: int = 1,
        page_size: Optional[int] = None
    ) -> DocumentListResponse:
        """
        One page of the (optionally filtered) listing.

        Args:
            search: Document number filter
            page: 1-based page number
            page_size: Entries per page (settings default when omitted)

        Returns:
            DocumentListResponse; an out-of-range page has empty data
        """
        page_size = page_size or settings.documents_page_size
        entries = filter_by_document_number(await self.get_all(), search or "")

        total = len(entries)
        start = (page - 1) * page_size
        data = entries[start:start + page_size]

        logger.debug(
            "catalog_page_served",
            search=search,
            page=page,
            page_size=page_size,
            total=total
        )

        return DocumentListResponse(
            data=data,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=(total + page_size - 1) // page_size
        )

    async def get_entry(
        self,
        partition_key: str,
        row_key: str,
        fresh: bool = False
    ) -> CatalogEntry:
        """
        Find one entry by its table keys.

        Raises:
            CatalogEntryNotFoundError: No such entry
        """
        for entry in await self.get_all(fresh=fresh):
            if entry.partition_key == partition_key and entry.row_key == row_key:
                return entry
        raise CatalogEntryNotFoundError(partition_key, row_key)


# Singleton instance
_catalog_service: Optional[CatalogService] = None


def get_catalog_service() -> CatalogService:
    """Get or create CatalogService instance."""
    global _catalog_service
    if _catalog_service is None:
        _catalog_service = CatalogService()
    return _catalog_service
