"""
Project schemas.

A project is not stored on its own: it is the set of catalog entries
sharing a projectno.
"""

from pydantic import Field

from models.base import BaseSchema
from models.catalog import CatalogEntry


class EntryKey(BaseSchema):
    """Table keys identifying one catalog entry."""

    partition_key: str = Field(..., alias="PartitionKey")
    row_key: str = Field(..., alias="RowKey")


class ProjectCreate(BaseSchema):
    """Tag existing entries with a shared project number."""

    projectno: str = Field("", description="Project number to assign")
    documents: list[EntryKey] = Field(
        default_factory=list,
        description="Entries to tag"
    )


class ProjectGroup(BaseSchema):
    """Entries sharing one project number."""

    projectno: str
    documents: list[CatalogEntry]
    project_data: CatalogEntry = Field(..., description="First entry of the group")
