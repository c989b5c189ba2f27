"""
Test data factories.

Uses factory pattern to generate consistent test data.
"""

import json
from typing import Optional
from uuid import uuid4

from models.catalog import CatalogEntry, LanguageVariant, Market
from models.upload import FileMetadata, PendingUpload

BLOB_BASE_URL = "https://manuals.blob.core.windows.net/instructionmanuals"


class CatalogRowFactory:
    """
    Factory for raw catalog table rows (JSON-encoded fields, as stored).

    Usage:
        # Create with defaults
        row = CatalogRowFactory.create()

        # Create with overrides
        row = CatalogRowFactory.create(documentno="IM-0042", projectno="P-1")

        # Create multiple
        rows = CatalogRowFactory.create_batch(5)
    """

    _counter = 0

    @classmethod
    def _next_counter(cls) -> int:
        cls._counter += 1
        return cls._counter

    @classmethod
    def create(
        cls,
        row_key: Optional[str] = None,
        partition_key: str = "arc",
        documentno: Optional[str] = None,
        projectno: str = "",
        public: bool = True,
        languages: tuple = ("en-GB",),
        market: Optional[dict] = None,
        **overrides
    ) -> dict:
        """
        Create a single table row dict.

        Args:
            row_key: RowKey (auto-generated if not provided)
            partition_key: Product category code
            documentno: Document number (auto-generated if not provided)
            projectno: Project number ("" for none)
            public: Stored visibility flag
            languages: One language variant per code
            market: Region flags (EU only if not provided)

        Returns:
            Row dict with languagevariants / market / manualtype as JSON text
        """
        counter = cls._next_counter()
        documentno = documentno or f"IM-{counter:04d}"
        variants = [
            {
                "lang": lang,
                "url": f"{BLOB_BASE_URL}/{documentno}_{lang}.pdf",
                "manualtype": ["IM"],
                "releasedate": "2024-03-01",
            }
            for lang in languages
        ]
        row = {
            "PartitionKey": partition_key,
            "RowKey": row_key or str(uuid4()),
            "documentno": documentno,
            "familyname": "Warrior",
            "manualtitle": f"Manual {counter}",
            "manualtype": json.dumps(["IM"]),
            "productcategory": partition_key,
            "productgin": f"0700{counter:06d}",
            "projectno": projectno,
            "releasedate": "2024-03-01",
            "serialno": "",
            "subcategory": "",
            "public": public,
            "languagevariants": json.dumps(variants),
            "market": json.dumps(market or {"EU": True}),
        }
        row.update(overrides)
        return row

    @classmethod
    def create_batch(cls, count: int, **overrides) -> list:
        """Create multiple rows."""
        return [cls.create(**overrides) for _ in range(count)]

    @classmethod
    def reset_counter(cls):
        """Reset the counter (call in test setup if needed)."""
        cls._counter = 0


class CatalogEntryFactory:
    """Factory for normalized CatalogEntry objects."""

    @classmethod
    def create(
        cls,
        languages: tuple = ("en-GB",),
        public: bool = True,
        **overrides
    ) -> CatalogEntry:
        """Create a CatalogEntry with one variant per language code."""
        documentno = overrides.pop("documentno", "IM-0100")
        fields = {
            "partition_key": "arc",
            "row_key": str(uuid4()),
            "documentno": documentno,
            "familyname": "Warrior",
            "manualtitle": "Warrior 400i",
            "manualtype": ["IM"],
            "productcategory": "arc",
            "public": public,
            "languagevariants": [
                LanguageVariant(
                    lang=lang,
                    url=f"{BLOB_BASE_URL}/{documentno}_{lang}.pdf",
                    manualtype=["IM"],
                    releasedate="2024-03-01",
                )
                for lang in languages
            ],
            "market": Market(EU=True),
        }
        fields.update(overrides)
        return CatalogEntry(**fields)


class PendingUploadFactory:
    """Factory for selected files awaiting upload."""

    _counter = 0

    @classmethod
    def create(
        cls,
        filename: Optional[str] = None,
        lang: str = "en-GB",
        manualtype: Optional[list] = None,
        releasedate: Optional[str] = "2024-03-01",
        public: bool = True,
        regions: Optional[Market] = None,
        annotated: bool = True
    ) -> PendingUpload:
        """
        Create a PendingUpload.

        Args:
            annotated: False leaves the per-file metadata empty
        """
        cls._counter += 1
        metadata = FileMetadata(
            lang=lang,
            manualtype=manualtype if manualtype is not None else ["IM"],
            releasedate=releasedate,
            regions=regions or Market(EU=True),
        ) if annotated else FileMetadata()
        return PendingUpload(
            filename=filename or f"manual_{cls._counter}.pdf",
            content=b"%PDF-1.7 test",
            public=public,
            metadata=metadata,
        )

    @classmethod
    def create_batch(cls, count: int, **overrides) -> list:
        """Create multiple annotated uploads with distinct filenames."""
        return [cls.create(**overrides) for _ in range(count)]
