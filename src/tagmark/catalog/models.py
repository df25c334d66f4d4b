"""Record and document models for tag and bookmark catalogs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SCHEMA_VERSION = 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CatalogBaseModel(BaseModel):
    """Shared configuration for catalog Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class FileRecord(CatalogBaseModel):
    """A tagged file.

    Attributes:
        name: File name, unique within one tag bucket.
        path: Absolute filesystem path of the file.
        created_at: When the file was first tagged.
        tags: Tag names the record belongs to.
    """

    name: str
    path: str
    created_at: datetime = Field(default_factory=_utcnow)
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def _collapse_duplicate_tags(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))


class BookmarkRecord(CatalogBaseModel):
    """A bookmarked directory.

    Attributes:
        alias: Globally unique short name.
        folder_path: Absolute path of the bookmarked directory.
        created_at: When the bookmark was added.
        last_accessed: When the bookmark was last opened, if ever.
    """

    alias: str
    folder_path: str
    created_at: datetime = Field(default_factory=_utcnow)
    last_accessed: Optional[datetime] = None


class TagCatalogDocument(CatalogBaseModel):
    """On-disk shape of a tag catalog."""

    schema_version: int = SCHEMA_VERSION
    tags: List[str] = Field(default_factory=list)
    tag_map: Dict[str, List[FileRecord]] = Field(default_factory=dict)


class BookmarkCatalogDocument(CatalogBaseModel):
    """On-disk shape of a bookmark catalog."""

    schema_version: int = SCHEMA_VERSION
    aliases: List[str] = Field(default_factory=list)
    bookmarks: Dict[str, BookmarkRecord] = Field(default_factory=dict)


__all__ = [
    "SCHEMA_VERSION",
    "CatalogBaseModel",
    "FileRecord",
    "BookmarkRecord",
    "TagCatalogDocument",
    "BookmarkCatalogDocument",
]
