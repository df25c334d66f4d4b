"""Tag catalog: files grouped under user-defined tags."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .errors import CatalogIntegrityError
from .models import FileRecord, TagCatalogDocument
from .ordered import OrderedKeyMap


@dataclass
class InsertReport:
    """Outcome of inserting a file into its tags.

    Attributes:
        added: Tags that received a copy of the record.
        skipped: Tags that already held a file with the same name.
    """

    added: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class TagCatalog:
    """Tags in insertion order, each holding a bucket of file records.

    Every tag present in the order has a non-empty bucket, and file names are
    unique within a bucket. A record tagged with several tags is stored as an
    independent copy in each bucket.
    """

    def __init__(self) -> None:
        self._buckets: OrderedKeyMap[List[FileRecord]] = OrderedKeyMap()

    def __len__(self) -> int:
        return len(self._buckets)

    def tags(self) -> List[str]:
        """Return tag names in insertion order."""
        return self._buckets.keys()

    def files_of(self, tag: str) -> Optional[List[FileRecord]]:
        """Return the records tagged with ``tag``, or None for unknown tags."""
        bucket = self._buckets.get(tag)
        if bucket is None:
            return None
        return list(bucket)

    def find_file(self, tag: str, file_name: str) -> Optional[FileRecord]:
        for record in self._buckets.get(tag) or []:
            if record.name == file_name:
                return record
        return None

    def insert_file(self, record: FileRecord) -> InsertReport:
        """Add ``record`` to every tag it lists.

        Each tag is handled on its own: a tag whose bucket already holds a file
        with the same name is skipped while the remaining tags still receive the
        record.

        Args:
            record: File record carrying the tags to file it under.

        Returns:
            InsertReport: Tags that received the record and tags that were skipped.
        """
        report = InsertReport()
        for tag in record.tags:
            bucket, _ = self._buckets.setdefault(tag, list)
            if any(existing.name == record.name for existing in bucket):
                report.skipped.append(tag)
                continue
            bucket.append(record.model_copy(deep=True))
            report.added.append(tag)
        return report

    def remove_tag(self, tag: str) -> None:
        self._buckets.pop(tag)

    def remove_file(self, tag: str, file_name: str) -> None:
        """Remove ``file_name`` from ``tag`` only, dropping the tag once empty."""
        bucket = self._buckets.get(tag)
        if bucket is None:
            return
        bucket[:] = [record for record in bucket if record.name != file_name]
        if not bucket:
            self.remove_tag(tag)

    def to_document(self) -> TagCatalogDocument:
        return TagCatalogDocument(
            tags=self._buckets.keys(),
            tag_map={
                tag: [record.model_copy(deep=True) for record in bucket]
                for tag, bucket in self._buckets.items()
            },
        )

    @classmethod
    def from_document(cls, document: TagCatalogDocument) -> "TagCatalog":
        """Build a catalog from its persisted document.

        Raises:
            CatalogIntegrityError: If the document breaks a catalog invariant.
        """
        for tag, bucket in document.tag_map.items():
            if not bucket:
                raise CatalogIntegrityError(f"Tag '{tag}' has no files.")
            names = [record.name for record in bucket]
            if len(set(names)) != len(names):
                raise CatalogIntegrityError(f"Tag '{tag}' lists the same file more than once.")
        catalog = cls()
        catalog._buckets = OrderedKeyMap.from_parts(
            document.tags,
            {tag: list(bucket) for tag, bucket in document.tag_map.items()},
        )
        return catalog


__all__ = ["TagCatalog", "InsertReport"]
