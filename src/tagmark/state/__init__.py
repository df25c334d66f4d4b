"""Persistence helpers for tagmark catalogs."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Generic, TypeVar

from tagmark.catalog import BookmarkCatalog, TagCatalog

from .codec import BookmarkCatalogCodec, CatalogCodec, TagCatalogCodec
from .errors import DecodeError, EncodeError, StateError

LOGGER = logging.getLogger(__name__)

C = TypeVar("C")


class CatalogStore(Generic[C]):
    """Load and persist one catalog file.

    Every save replaces the whole file: the encoded catalog is written to a
    temporary sibling and moved over the target.
    """

    def __init__(self, path: Path, codec: CatalogCodec[C]) -> None:
        """Initialize the store.

        Args:
            path: Location of the catalog file.
            codec: Codec translating the catalog to and from bytes.
        """
        self._path = path.expanduser()
        self._codec = codec

    @property
    def path(self) -> Path:
        """Return the resolved catalog file path."""
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def ensure_exists(self) -> Path:
        """Create the catalog file holding an empty catalog if it is missing.

        Returns:
            Path: Location of the catalog file.

        Raises:
            EncodeError: If the empty catalog cannot be written.
        """
        if not self.exists():
            LOGGER.info("Creating empty %s at %s", self._codec.kind, self._path)
            self.save(self._codec.empty())
        return self._path

    def load(self) -> C:
        """Read and decode the catalog, creating an empty one first if needed.

        Returns:
            C: Catalog held in the file.

        Raises:
            DecodeError: If the file cannot be read or parsed.
        """
        self.ensure_exists()
        try:
            data = self._path.read_bytes()
        except OSError as exc:
            raise DecodeError(f"Unable to read {self._path}: {exc}") from exc
        LOGGER.debug("Loaded %d bytes from %s", len(data), self._path)
        return self._codec.decode(data)

    def save(self, catalog: C) -> None:
        """Encode ``catalog`` and replace the file contents with it.

        Raises:
            EncodeError: If encoding or writing fails.
        """
        data = self._codec.encode(catalog)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(data)
            os.replace(tmp, self._path)
        except OSError as exc:
            if tmp.exists():
                tmp.unlink()
            raise EncodeError(f"Unable to write {self._path}: {exc}") from exc
        LOGGER.debug("Wrote %d bytes to %s", len(data), self._path)


def tag_store(path: Path) -> CatalogStore[TagCatalog]:
    return CatalogStore(path, TagCatalogCodec())


def bookmark_store(path: Path) -> CatalogStore[BookmarkCatalog]:
    return CatalogStore(path, BookmarkCatalogCodec())


__all__ = [
    "CatalogStore",
    "CatalogCodec",
    "TagCatalogCodec",
    "BookmarkCatalogCodec",
    "tag_store",
    "bookmark_store",
    "StateError",
    "DecodeError",
    "EncodeError",
]
