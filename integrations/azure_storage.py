"""
Azure Blob and Table Storage client.

Talks to the storage REST APIs directly with SAS tokens kept server-side,
so browser clients never see credentials. Two blob containers exist:
public manuals and restricted (service) manuals; a call always targets
exactly one of them.
"""

from typing import Optional
from urllib.parse import quote, unquote, urlsplit
from email.utils import formatdate
import httpx
import structlog

from config.settings import Settings, settings as app_settings
from config.catalog import ODATA_NO_METADATA, TABLE_PAGE_SIZE
from exceptions import ConfigurationError, RemoteStoreError, ValidationError

logger = structlog.get_logger(__name__)


def blob_name_from(identifier: str) -> str:
    """
    Derive the blob name from a full blob URL or a bare name.

    The name is the final path segment, percent-decoded:
        "https://acct.blob.core.windows.net/manuals/IM%2001.pdf" → "IM 01.pdf"
        "IM 01.pdf" → "IM 01.pdf"

    Args:
        identifier: Blob URL or blob name

    Returns:
        Blob name
    """
    path = urlsplit(identifier).path if "://" in identifier else identifier
    segment = path.split("/")[-1]
    return unquote(segment or path)


def _with_sas(url: str, sas: str) -> str:
    """Append a SAS token, tolerating tokens stored with or without '?'."""
    return f"{url}{sas if sas.startswith('?') else '?' + sas}"


def _entity_key(value: str) -> str:
    """Escape a PartitionKey/RowKey value for an OData key predicate."""
    return quote(value.replace("'", "''"), safe="")


def _upstream_message(response: httpx.Response) -> str:
    """Best-effort human message from an Azure error response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        odata_error = body.get("odata.error") or body.get("error") or {}
        message = odata_error.get("message") if isinstance(odata_error, dict) else None
        if isinstance(message, dict):
            message = message.get("value")
        if message:
            return str(message)
    text = response.text.strip()
    if text:
        return text[:500]
    return response.reason_phrase or f"HTTP {response.status_code}"


class AzureStorageClient:
    """
    Remote store for catalog rows and manual files.

    Every public method is a coroutine. Failures raise:
        ConfigurationError: endpoint or SAS missing (before any request)
        RemoteStoreError: non-success status or transport failure
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = config or app_settings
        self._transport = transport

    # ===================
    # ENDPOINTS
    # ===================

    def _table_endpoint(self) -> tuple[str, str]:
        url = self.settings.azure_table_url
        sas = self.settings.azure_table_sas
        if not url or not sas:
            missing = [
                name for name, value in (
                    ("azure_table_url", url),
                    ("azure_table_sas", sas),
                ) if not value
            ]
            logger.error("table_storage_not_configured", missing=missing)
            raise ConfigurationError("Azure Table Storage", missing)
        return url.rstrip("/"), sas

    def _container_endpoint(self, public: bool) -> tuple[str, str]:
        if public:
            url = self.settings.azure_blob_public_url
            sas = self.settings.azure_blob_public_sas
            prefix = "azure_blob_public"
        else:
            url = self.settings.azure_blob_restricted_url
            sas = self.settings.azure_blob_restricted_sas
            prefix = "azure_blob_restricted"
        if not url or not sas:
            missing = [
                name for name, value in (
                    (f"{prefix}_url", url),
                    (f"{prefix}_sas", sas),
                ) if not value
            ]
            logger.error("blob_storage_not_configured", public=public, missing=missing)
            raise ConfigurationError("Azure Blob Storage", missing)
        return url.rstrip("/"), sas

    # ===================
    # TRANSPORT
    # ===================

    async def _send(
        self,
        operation: str,
        method: str,
        url: str,
        **kwargs
    ) -> httpx.Response:
        """Send one request; raise RemoteStoreError unless it succeeded."""
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.storage_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(
                "remote_store_unreachable",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__
            )
            raise RemoteStoreError(operation, f"Storage request failed: {e}") from e

        if not response.is_success:
            message = _upstream_message(response)
            logger.error(
                "remote_store_call_failed",
                operation=operation,
                status=response.status_code,
                message=message
            )
            raise RemoteStoreError(operation, message, upstream_status=response.status_code)

        return response

    # ===================
    # TABLE
    # ===================

    async def list_entries(self) -> list[dict]:
        """
        Fetch catalog rows (first page, up to 1000 rows).

        Returns:
            Raw table entities; encoded fields are left as stored
        """
        base_url, sas = self._table_endpoint()
        response = await self._send(
            "list_entries",
            "GET",
            f"{_with_sas(base_url, sas)}&$top={TABLE_PAGE_SIZE}",
            headers={"Accept": ODATA_NO_METADATA, "Cache-Control": "no-cache"},
        )
        try:
            body = response.json()
        except ValueError:
            logger.error(
                "table_response_not_json",
                status=response.status_code,
                content_type=response.headers.get("Content-Type")
            )
            raise RemoteStoreError(
                "list_entries",
                "Invalid table response",
                upstream_status=response.status_code
            )
        rows = body.get("value", []) if isinstance(body, dict) else []
        logger.debug("catalog_rows_fetched", count=len(rows))
        return rows

    async def create_entry(self, entity: dict) -> None:
        """Insert a new catalog row."""
        base_url, sas = self._table_endpoint()
        await self._send(
            "create_entry",
            "POST",
            _with_sas(base_url, sas),
            json=entity,
            headers={
                "Accept": ODATA_NO_METADATA,
                "Content-Type": ODATA_NO_METADATA,
                "Prefer": "return-no-content",
            },
        )
        logger.info(
            "catalog_entry_created",
            partition_key=entity.get("PartitionKey"),
            row_key=entity.get("RowKey")
        )

    async def update_entry(self, entity: dict) -> None:
        """Replace a catalog row addressed by PartitionKey + RowKey."""
        base_url, sas = self._table_endpoint()
        partition_key = str(entity.get("PartitionKey", ""))
        row_key = str(entity.get("RowKey", ""))
        entity_url = (
            f"{base_url}(PartitionKey='{_entity_key(partition_key)}',"
            f"RowKey='{_entity_key(row_key)}')"
        )
        await self._send(
            "update_entry",
            "PUT",
            _with_sas(entity_url, sas),
            json=entity,
            headers={
                "Accept": ODATA_NO_METADATA,
                "Content-Type": ODATA_NO_METADATA,
                "Prefer": "return-no-content",
            },
        )
        logger.info("catalog_entry_updated", partition_key=partition_key, row_key=row_key)

    # ===================
    # BLOB
    # ===================

    async def upload_file(
        self,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
        public: bool = True
    ) -> str:
        """
        Upload a file as a block blob named after the file.

        The blob name is the last path segment of filename, percent-decoded
        ("a%20b.pdf" is stored as "a b.pdf"). An existing blob with the same
        name is overwritten.

        Returns:
            Blob URL without SAS token
        """
        name = blob_name_from(filename)
        if not name:
            raise ValidationError("File name is required", code="FILE_NAME_REQUIRED")
        base_url, sas = self._container_endpoint(public)
        blob_url = f"{base_url}/{quote(name)}"

        logger.debug("uploading_blob", blob=name, public=public, size_bytes=len(content))

        await self._send(
            "upload_file",
            "PUT",
            _with_sas(blob_url, sas),
            content=content,
            headers={
                "x-ms-blob-type": "BlockBlob",
                "Content-Type": content_type or "application/octet-stream",
            },
        )
        logger.info("blob_uploaded", blob=name, public=public)
        return blob_url

    async def delete_file(self, identifier: str, public: bool = True) -> bool:
        """
        Delete a blob by URL or name.

        Returns:
            True once the blob is deleted
        """
        name = blob_name_from(identifier)
        if not name:
            raise ValidationError("Blob name is required", code="BLOB_NAME_REQUIRED")
        base_url, sas = self._container_endpoint(public)

        await self._send(
            "delete_file",
            "DELETE",
            _with_sas(f"{base_url}/{quote(name)}", sas),
            headers={"x-ms-date": formatdate(usegmt=True)},
        )
        logger.info("blob_deleted", blob=name, public=public)
        return True


# Singleton instance
_remote_store: Optional[AzureStorageClient] = None


def get_remote_store() -> AzureStorageClient:
    """Get or create AzureStorageClient instance."""
    global _remote_store
    if _remote_store is None:
        _remote_store = AzureStorageClient()
    return _remote_store
