"""
Catalog schemas.

Field names follow the catalog table's column names (documentno,
languagevariants, ...) so rows map onto models without renaming. Only the
table keys get Python names, with the storage names as aliases.
"""

from typing import Optional
from pydantic import ConfigDict, Field

from models.base import BaseSchema


class Market(BaseSchema):
    """
    Market region flags.

    All seven regions are always present; unknown regions are rejected.
    """
    model_config = ConfigDict(extra="forbid")

    EU: bool = False
    NA: bool = False
    SA: bool = False
    ME: bool = False
    AS: bool = False
    AU: bool = False
    IN: bool = False

    def regions(self) -> list[str]:
        """Codes of the regions that are switched on."""
        return [code for code, enabled in self.model_dump().items() if enabled]


class LanguageVariant(BaseSchema):
    """One language/file combination of a catalog entry."""

    lang: str = Field("", description="Language code, e.g. en-GB")
    url: str = Field("", description="Blob URL of the PDF")
    manualtype: list[str] = Field(
        default_factory=list,
        description="Manual type codes, e.g. ['IM']"
    )
    releasedate: Optional[str] = Field(None, description="Release date (ISO)")


class CatalogEntry(BaseSchema):
    """
    One document in the catalog, as used everywhere inside the service.

    languagevariants and market are always structured here; the JSON
    encoding used by the table exists only at the storage boundary.
    """

    partition_key: str = Field("", alias="PartitionKey", description="Product category code")
    row_key: str = Field("", alias="RowKey", description="Unique entry id")
    documentno: str = ""
    familyname: str = ""
    manualtitle: str = ""
    manualtype: list[str] = Field(default_factory=list)
    productcategory: str = ""
    productgin: str = ""
    projectno: str = ""
    releasedate: Optional[str] = None
    serialno: str = ""
    subcategory: str = ""
    public: bool = False
    languagevariants: list[LanguageVariant] = Field(default_factory=list)
    market: Market = Field(default_factory=Market)


class DocumentMetadata(BaseSchema):
    """Document-level metadata collected in the first upload step."""

    documentno: str = ""
    familyname: str = ""
    manualtitle: str = ""
    productcategory: str = ""
    productgin: str = ""
    serialno: str = ""
    projectno: str = ""
    subcategory: str = ""
    public: bool = True


class DocumentListResponse(BaseSchema):
    """List of catalog entries with pagination."""

    data: list[CatalogEntry]
    total: int
    page: int
    page_size: int
    total_pages: int


class EditResult(BaseSchema):
    """Outcome of an edit, variant delete or project assignment."""

    success: bool
    message: str
    entry: Optional[CatalogEntry] = None
