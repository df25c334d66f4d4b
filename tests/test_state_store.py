"""Catalog store and codec tests."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from tagmark import state
from tagmark.catalog import BookmarkCatalog, BookmarkRecord, FileRecord, TagCatalog
from tagmark.state import (
    BookmarkCatalogCodec,
    DecodeError,
    EncodeError,
    TagCatalogCodec,
    bookmark_store,
    tag_store,
)


def _tag_catalog() -> TagCatalog:
    """Return a tag catalog with overlapping tags.

    Returns:
        TagCatalog: Catalog holding two files across three tags.
    """
    catalog = TagCatalog()
    catalog.insert_file(FileRecord(name="a.txt", path="/data/a.txt", tags=["work", "home"]))
    catalog.insert_file(FileRecord(name="b.txt", path="/data/b.txt", tags=["archive", "work"]))
    return catalog


def _bookmark_catalog() -> BookmarkCatalog:
    catalog = BookmarkCatalog()
    catalog.insert(BookmarkRecord(alias="proj", folder_path="/srv/proj"))
    catalog.insert(BookmarkRecord(alias="docs", folder_path="/srv/docs"))
    catalog.touch_access("docs", now=datetime(2024, 1, 2, tzinfo=timezone.utc))
    return catalog


def test_tag_codec_round_trip() -> None:
    """Ensure encoding then decoding keeps tags, order, and bucket contents."""
    codec = TagCatalogCodec()
    catalog = _tag_catalog()

    decoded = codec.decode(codec.encode(catalog))

    assert decoded.tags() == catalog.tags()
    for tag in catalog.tags():
        assert decoded.files_of(tag) == catalog.files_of(tag)


def test_bookmark_codec_round_trip() -> None:
    """Ensure encoding then decoding keeps aliases and records, including access times."""
    codec = BookmarkCatalogCodec()
    catalog = _bookmark_catalog()

    decoded = codec.decode(codec.encode(catalog))

    assert decoded.aliases() == ["docs", "proj"]
    for alias in catalog.aliases():
        assert decoded.get(alias) == catalog.get(alias)


def test_empty_catalog_round_trip() -> None:
    codec = TagCatalogCodec()

    decoded = codec.decode(codec.encode(codec.empty()))

    assert decoded.tags() == []


def test_encoded_payload_carries_schema_version() -> None:
    payload = json.loads(TagCatalogCodec().encode(_tag_catalog()))

    assert payload["schema_version"] == 1
    assert payload["tags"] == ["work", "home", "archive"]


@pytest.mark.parametrize(
    "data",
    [
        b"not json",
        b"\xff\xfe",
        b"[]",
        b'{"schema_version": 99, "tags": [], "tag_map": {}}',
        b'{"schema_version": 1, "tags": ["work"], "tag_map": {}}',
        b'{"schema_version": 1, "tags": [], "tag_map": {}, "unexpected": true}',
    ],
)
def test_decode_rejects_bad_payloads(data: bytes) -> None:
    """Verify malformed, unknown-version, or inconsistent data raises DecodeError."""
    with pytest.raises(DecodeError):
        TagCatalogCodec().decode(data)


def test_load_creates_empty_catalog(tmp_path: Path) -> None:
    """Ensure loading a missing store writes and returns an empty catalog.

    Args:
        tmp_path: Temporary directory provided by pytest.
    """
    store = tag_store(tmp_path / "root" / "tagfile")

    catalog = store.load()

    assert store.path.exists()
    assert catalog.tags() == []


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    """Ensure save followed by load returns the same bookmarks.

    Args:
        tmp_path: Temporary directory provided by pytest.
    """
    store = bookmark_store(tmp_path / "bookmarks")
    catalog = _bookmark_catalog()

    store.save(catalog)
    loaded = store.load()

    assert loaded.aliases() == catalog.aliases()
    assert loaded.get("docs") == catalog.get("docs")
    assert not (tmp_path / "bookmarks.tmp").exists()


def test_save_replaces_previous_contents(tmp_path: Path) -> None:
    store = tag_store(tmp_path / "tagfile")
    store.save(_tag_catalog())

    store.save(TagCatalog())

    assert store.load().tags() == []


def test_load_invalid_data_raises(tmp_path: Path) -> None:
    """Ensure a corrupt file raises DecodeError on load.

    Args:
        tmp_path: Temporary directory provided by pytest.
    """
    path = tmp_path / "tagfile"
    path.write_bytes(b"garbage")

    with pytest.raises(DecodeError):
        tag_store(path).load()


def test_save_into_unwritable_location_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")

    with pytest.raises(EncodeError):
        tag_store(blocker / "tagfile").save(TagCatalog())


def test_failed_replace_removes_temporary_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    store = tag_store(tmp_path / "tagfile")

    def _fail(src: object, dst: object) -> None:
        raise PermissionError("read-only target")

    monkeypatch.setattr(state.os, "replace", _fail)

    with pytest.raises(EncodeError):
        store.save(_tag_catalog())

    assert not (tmp_path / "tagfile.tmp").exists()
    assert not (tmp_path / "tagfile").exists()
