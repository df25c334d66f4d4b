"""Byte-level encoding of catalogs.

Catalogs are stored as UTF-8 JSON documents carrying a ``schema_version``
field. Decoding rejects unknown versions and documents whose indexes disagree.
"""

from __future__ import annotations

import json
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from tagmark.catalog import BookmarkCatalog, CatalogIntegrityError, TagCatalog
from tagmark.catalog.models import SCHEMA_VERSION, BookmarkCatalogDocument, TagCatalogDocument

from .errors import DecodeError, EncodeError

C = TypeVar("C")


class CatalogCodec(Generic[C]):
    """Translate one catalog type to and from bytes."""

    kind = "catalog"

    def empty(self) -> C:
        raise NotImplementedError

    def encode(self, catalog: C) -> bytes:
        """Serialize ``catalog``.

        Raises:
            EncodeError: If the catalog cannot be serialized.
        """
        try:
            document = self._to_document(catalog)
            payload = document.model_dump(mode="json")
            return json.dumps(payload, indent=2, sort_keys=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise EncodeError(f"Unable to encode {self.kind}: {exc}") from exc

    def decode(self, data: bytes) -> C:
        """Deserialize a catalog previously produced by :meth:`encode`.

        Raises:
            DecodeError: If the payload is malformed, from an unsupported schema
                version, or inconsistent.
        """
        try:
            raw: Any = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DecodeError(f"Invalid {self.kind} data: {exc}") from exc

        if not isinstance(raw, dict):
            raise DecodeError(f"Invalid {self.kind} data: expected a mapping at the top level.")
        version = raw.get("schema_version")
        if version != SCHEMA_VERSION:
            raise DecodeError(f"Unsupported {self.kind} schema version: {version!r}")

        try:
            return self._from_raw(raw)
        except ValidationError as exc:
            raise DecodeError(f"Invalid {self.kind} data: {exc}") from exc
        except CatalogIntegrityError as exc:
            raise DecodeError(f"Inconsistent {self.kind}: {exc}") from exc

    def _to_document(self, catalog: C) -> BaseModel:
        raise NotImplementedError

    def _from_raw(self, raw: dict[str, Any]) -> C:
        raise NotImplementedError


class TagCatalogCodec(CatalogCodec[TagCatalog]):
    kind = "tag catalog"

    def empty(self) -> TagCatalog:
        return TagCatalog()

    def _to_document(self, catalog: TagCatalog) -> BaseModel:
        return catalog.to_document()

    def _from_raw(self, raw: dict[str, Any]) -> TagCatalog:
        return TagCatalog.from_document(TagCatalogDocument.model_validate(raw))


class BookmarkCatalogCodec(CatalogCodec[BookmarkCatalog]):
    kind = "bookmark catalog"

    def empty(self) -> BookmarkCatalog:
        return BookmarkCatalog()

    def _to_document(self, catalog: BookmarkCatalog) -> BaseModel:
        return catalog.to_document()

    def _from_raw(self, raw: dict[str, Any]) -> BookmarkCatalog:
        return BookmarkCatalog.from_document(BookmarkCatalogDocument.model_validate(raw))


__all__ = ["CatalogCodec", "TagCatalogCodec", "BookmarkCatalogCodec"]
