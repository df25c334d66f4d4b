"""In-memory tag and bookmark catalogs."""

from .bookmarks import BookmarkCatalog, validate_alias
from .errors import (
    CatalogError,
    CatalogIntegrityError,
    DuplicateAliasError,
    InvalidAliasError,
    InvalidPathError,
    NotFoundError,
)
from .models import SCHEMA_VERSION, BookmarkRecord, FileRecord
from .ordered import OrderedKeyMap
from .tags import InsertReport, TagCatalog

__all__ = [
    "BookmarkCatalog",
    "BookmarkRecord",
    "CatalogError",
    "CatalogIntegrityError",
    "DuplicateAliasError",
    "FileRecord",
    "InsertReport",
    "InvalidAliasError",
    "InvalidPathError",
    "NotFoundError",
    "OrderedKeyMap",
    "SCHEMA_VERSION",
    "TagCatalog",
    "validate_alias",
]
