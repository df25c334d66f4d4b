"""Bookmark catalog: directories addressed by short aliases."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Callable, List, Optional

from .errors import CatalogIntegrityError, DuplicateAliasError, InvalidAliasError, NotFoundError
from .models import BookmarkCatalogDocument, BookmarkRecord
from .ordered import OrderedKeyMap

_SEPARATORS = frozenset(sep for sep in ("/", os.sep, os.altsep) if sep)


def validate_alias(alias: str) -> str:
    """Return ``alias`` unchanged if it can be used as a bookmark key.

    Raises:
        InvalidAliasError: If the alias is empty or contains a path separator.
    """
    if not alias:
        raise InvalidAliasError("Alias must not be empty.")
    if any(sep in alias for sep in _SEPARATORS):
        raise InvalidAliasError(f"Alias '{alias}' must not contain a path separator.")
    return alias


class BookmarkCatalog:
    """Bookmarks keyed by alias, with aliases kept in sorted order."""

    def __init__(self) -> None:
        self._entries: OrderedKeyMap[BookmarkRecord] = OrderedKeyMap(sorted_keys=True)

    def __len__(self) -> int:
        return len(self._entries)

    def aliases(self) -> List[str]:
        return self._entries.keys()

    def get(self, alias: str) -> Optional[BookmarkRecord]:
        return self._entries.get(alias)

    def exists(self, alias: str) -> bool:
        return alias in self._entries

    def insert(self, record: BookmarkRecord) -> None:
        """Add a new bookmark.

        Raises:
            InvalidAliasError: If the record's alias is not usable.
            DuplicateAliasError: If the alias is already taken.
        """
        validate_alias(record.alias)
        if record.alias in self._entries:
            raise DuplicateAliasError(f"Alias '{record.alias}' already exists.")
        self._entries.add(record.alias, record.model_copy(deep=True))

    def remove(self, alias: str) -> None:
        self._entries.pop(alias)

    def rename(self, old: str, new: str) -> None:
        """Move the bookmark stored under ``old`` to ``new``.

        Renaming an alias to itself succeeds without changes.

        Raises:
            InvalidAliasError: If ``new`` is not usable.
            DuplicateAliasError: If ``new`` belongs to another bookmark.
            NotFoundError: If ``old`` does not exist.
        """
        if old == new:
            return
        validate_alias(new)
        if new in self._entries:
            raise DuplicateAliasError(f"Alias '{new}' already exists.")
        if old not in self._entries:
            raise NotFoundError(f"Alias '{old}' not found.")
        record = self._entries.rename(old, new)
        record.alias = new

    def touch_access(self, alias: str, now: Optional[datetime] = None) -> None:
        record = self._entries.get(alias)
        if record is None:
            return
        record.last_accessed = now or datetime.now(timezone.utc)

    def stale_aliases(self, is_dir: Callable[[str], bool] = os.path.isdir) -> List[str]:
        """Return aliases whose folder no longer exists."""
        return [alias for alias, record in self._entries.items() if not is_dir(record.folder_path)]

    def to_document(self) -> BookmarkCatalogDocument:
        return BookmarkCatalogDocument(
            aliases=self._entries.keys(),
            bookmarks={
                alias: record.model_copy(deep=True) for alias, record in self._entries.items()
            },
        )

    @classmethod
    def from_document(cls, document: BookmarkCatalogDocument) -> "BookmarkCatalog":
        """Build a catalog from its persisted document.

        Raises:
            CatalogIntegrityError: If the document breaks a catalog invariant.
        """
        for alias, record in document.bookmarks.items():
            if record.alias != alias:
                raise CatalogIntegrityError(
                    f"Bookmark stored under '{alias}' is named '{record.alias}'."
                )
        catalog = cls()
        catalog._entries = OrderedKeyMap.from_parts(
            document.aliases, document.bookmarks, sorted_keys=True
        )
        return catalog


__all__ = ["BookmarkCatalog", "validate_alias"]
