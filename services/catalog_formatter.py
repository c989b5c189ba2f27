"""
Catalog row formatting.

The table stores languagevariants, market and manualtype as JSON text,
while older rows (and rows written by other tools) may hold them as
structured values. normalize() turns any of these shapes into a
CatalogEntry; to_storage_row() is its inverse at the write boundary.
"""

import json
from typing import Any, Iterable, Union
import structlog

from models.catalog import CatalogEntry, LanguageVariant, Market

logger = structlog.get_logger(__name__)

TEXT_FIELDS = (
    "documentno",
    "familyname",
    "manualtitle",
    "productcategory",
    "productgin",
    "projectno",
    "serialno",
    "subcategory",
)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _decode(value: Any, field: str, row_key: str) -> Any:
    """Decode a JSON-encoded field; structured values pass through."""
    if not isinstance(value, str):
        return value
    if not value.strip():
        return None
    try:
        return json.loads(value)
    except ValueError:
        logger.warning("catalog_field_not_json", field=field, row_key=row_key)
        return None


def _manual_types(value: Any, row_key: str = "") -> list[str]:
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped.startswith("["):
            # Legacy rows hold a single bare code such as "IM"
            return [stripped] if stripped else []
        value = _decode(stripped, "manualtype", row_key)
    if isinstance(value, list):
        return [str(code) for code in value]
    return []


def _language_variants(value: Any, row_key: str) -> list[LanguageVariant]:
    if not isinstance(value, list):
        return []
    variants = []
    for item in value:
        if isinstance(item, LanguageVariant):
            variants.append(item.model_copy(deep=True))
        elif isinstance(item, dict):
            variants.append(LanguageVariant(
                lang=_text(item.get("lang")),
                url=_text(item.get("url")),
                manualtype=_manual_types(item.get("manualtype"), row_key),
                releasedate=item.get("releasedate") or None,
            ))
    return variants


def _market(value: Any) -> Market:
    if isinstance(value, Market):
        return value.model_copy()
    if isinstance(value, dict):
        return Market(**{region: bool(value.get(region, False)) for region in Market.model_fields})
    return Market()


def normalize(raw: Union[dict, CatalogEntry]) -> CatalogEntry:
    """
    Convert a raw table row into a CatalogEntry.

    - Missing text fields become "", booleans False, lists []
    - languagevariants / market / manualtype are decoded when stored as JSON
    - An already-normalized CatalogEntry comes back unchanged

    Args:
        raw: Table entity dict or CatalogEntry

    Returns:
        CatalogEntry with structured variants and market flags
    """
    if isinstance(raw, CatalogEntry):
        return raw.model_copy(deep=True)

    row_key = _text(raw.get("RowKey"))

    return CatalogEntry(
        partition_key=_text(raw.get("PartitionKey")),
        row_key=row_key,
        **{field: _text(raw.get(field)) for field in TEXT_FIELDS},
        manualtype=_manual_types(raw.get("manualtype"), row_key),
        releasedate=raw.get("releasedate") or None,
        public=bool(raw.get("public") or False),
        languagevariants=_language_variants(
            _decode(raw.get("languagevariants"), "languagevariants", row_key),
            row_key,
        ),
        market=_market(_decode(raw.get("market"), "market", row_key)),
    )


def normalize_all(rows: Iterable[Union[dict, CatalogEntry]]) -> list[CatalogEntry]:
    """Normalize every row, preserving order."""
    return [normalize(row) for row in rows]


def to_storage_row(entry: CatalogEntry) -> dict:
    """
    Encode a CatalogEntry as a table entity.

    languagevariants, market and manualtype become JSON text; keys use
    the table's PartitionKey / RowKey names.
    """
    return {
        "PartitionKey": entry.partition_key,
        "RowKey": entry.row_key,
        **{field: getattr(entry, field) for field in TEXT_FIELDS},
        "manualtype": json.dumps(entry.manualtype),
        "releasedate": entry.releasedate,
        "public": entry.public,
        "languagevariants": json.dumps(
            [variant.model_dump() for variant in entry.languagevariants]
        ),
        "market": json.dumps(entry.market.model_dump()),
    }
