"""
Storage configuration checks.

The catalog has no database connection of its own: rows live in Azure
Table Storage and files in two Azure Blob containers, all reached over
HTTPS with SAS tokens. This module reports which of those are configured.
"""

import structlog

from config.settings import settings

logger = structlog.get_logger(__name__)


def check_storage_configuration() -> dict:
    """
    Report which storage endpoints have both a URL and a SAS token.

    Does not contact Azure; only the presence of configuration is checked.

    Returns:
        dict: Status ("healthy" / "degraded") plus one flag per endpoint
    """
    endpoints = {
        "table": settings.table_configured,
        "public_blob": settings.blob_configured(public=True),
        "restricted_blob": settings.blob_configured(public=False),
    }
    missing = [name for name, ok in endpoints.items() if not ok]

    if missing:
        logger.warning("storage_not_fully_configured", missing=missing)

    return {
        "status": "healthy" if not missing else "degraded",
        **endpoints,
    }
