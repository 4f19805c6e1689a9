"""Unit tests for Storage over the local filesystem and memory backends."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from notebook_repo.storage import EntryKind, Storage, StorageEntry


def _sorted(entries: list[StorageEntry]) -> list[tuple[str, str, EntryKind]]:
    return sorted((e.name, e.path, e.kind) for e in entries)


class TestStorageFromUri:
    """Test Storage.from_uri() factory method."""

    def test_from_uri_local_path(self, tmp_path: Path):
        storage = Storage.from_uri(str(tmp_path))
        assert storage.scheme == "file"
        assert storage.url_for() == f"file://{tmp_path.resolve()}"

    def test_from_uri_file_scheme(self, tmp_path: Path):
        storage = Storage.from_uri(f"file://{tmp_path}")
        assert storage.scheme == "file"
        assert storage.url_for("a/b") == f"file://{tmp_path.resolve() / 'a' / 'b'}"

    def test_from_uri_missing_local_root_is_allowed(self, tmp_path: Path):
        storage = Storage.from_uri(str(tmp_path / "not-yet"))
        assert storage.scheme == "file"

    def test_from_uri_local_file_error(self):
        with tempfile.NamedTemporaryFile() as tmpfile:
            with pytest.raises(ValueError, match="must point to a directory"):
                Storage.from_uri(tmpfile.name)

    def test_from_uri_memory(self):
        storage = Storage.from_uri("memory://share")
        assert storage.scheme == "memory"
        assert storage.url_for("a") == "memory://share/a"

    def test_from_uri_unsupported_scheme(self):
        with pytest.raises(ValueError, match="Unsupported URI scheme: s3"):
            Storage.from_uri("s3://bucket/folder")

    def test_with_base_composes(self):
        storage = Storage.from_uri("memory://").with_base("zeppelin").with_base("alice/notebook")
        assert storage.url_for() == "memory://zeppelin/alice/notebook"


class TestStorageEntry:
    def test_kind_properties(self):
        container = StorageEntry(name="abc", path="abc", kind=EntryKind.CONTAINER)
        leaf = StorageEntry(name="note.json", path="abc/note.json", kind=EntryKind.LEAF)
        assert container.is_container and not container.is_leaf
        assert leaf.is_leaf and not leaf.is_container


class TestBackends:
    """Behaviour shared by every backend (parametrized storage fixture)."""

    @pytest.mark.asyncio
    async def test_write_and_read(self, storage: Storage):
        await storage.write_bytes("abc/note.json", b"{}")
        assert await storage.read_bytes("abc/note.json") == b"{}"

    @pytest.mark.asyncio
    async def test_write_replaces_full_content(self, storage: Storage):
        await storage.write_bytes("abc/note.json", b"a much longer first version")
        await storage.write_bytes("abc/note.json", b"short")
        assert await storage.read_bytes("abc/note.json") == b"short"

    @pytest.mark.asyncio
    async def test_read_missing(self, storage: Storage):
        with pytest.raises(FileNotFoundError):
            await storage.read_bytes("missing/note.json")

    @pytest.mark.asyncio
    async def test_list_missing_container(self, storage: Storage):
        assert await storage.list_entries("nowhere") == []

    @pytest.mark.asyncio
    async def test_list_direct_children_only(self, storage: Storage):
        await storage.write_bytes("abc/note.json", b"1")
        await storage.write_bytes("abc/deep/x.bin", b"2")
        await storage.write_bytes("readme.md", b"3")
        await storage.ensure_container("empty")

        assert _sorted(await storage.list_entries()) == [
            ("abc", "abc", EntryKind.CONTAINER),
            ("empty", "empty", EntryKind.CONTAINER),
            ("readme.md", "readme.md", EntryKind.LEAF),
        ]
        assert _sorted(await storage.list_entries("abc")) == [
            ("deep", "abc/deep", EntryKind.CONTAINER),
            ("note.json", "abc/note.json", EntryKind.LEAF),
        ]

    @pytest.mark.asyncio
    async def test_list_paths_relative_to_base(self, storage: Storage):
        scoped = storage.with_base("alice/notebook")
        await scoped.write_bytes("abc/note.json", b"{}")
        assert _sorted(await scoped.list_entries()) == [("abc", "abc", EntryKind.CONTAINER)]
        assert await storage.exists("alice/notebook/abc/note.json")

    @pytest.mark.asyncio
    async def test_ensure_container_idempotent(self, storage: Storage):
        await storage.ensure_container("alice/notebook")
        await storage.ensure_container("alice/notebook")
        assert await storage.exists("alice/notebook")
        assert _sorted(await storage.list_entries("alice")) == [("notebook", "alice/notebook", EntryKind.CONTAINER)]

    @pytest.mark.asyncio
    async def test_delete_leaf(self, storage: Storage):
        await storage.write_bytes("abc/note.json", b"{}")
        await storage.delete_if_exists(StorageEntry(name="note.json", path="abc/note.json", kind=EntryKind.LEAF))
        assert not await storage.exists("abc/note.json")
        assert await storage.exists("abc")

    @pytest.mark.asyncio
    async def test_delete_empty_container(self, storage: Storage):
        await storage.ensure_container("abc")
        await storage.delete_if_exists(StorageEntry(name="abc", path="abc", kind=EntryKind.CONTAINER))
        assert not await storage.exists("abc")

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, storage: Storage):
        await storage.delete_if_exists(StorageEntry(name="x", path="x", kind=EntryKind.LEAF))
        await storage.delete_if_exists(StorageEntry(name="y", path="y", kind=EntryKind.CONTAINER))

    @pytest.mark.asyncio
    async def test_delete_non_empty_container_fails(self, storage: Storage):
        await storage.write_bytes("abc/note.json", b"{}")
        with pytest.raises(OSError):
            await storage.delete_if_exists(StorageEntry(name="abc", path="abc", kind=EntryKind.CONTAINER))
        assert await storage.exists("abc/note.json")

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, storage: Storage):
        storage.close()
        storage.close()


class TestLocalLayout:
    @pytest.mark.asyncio
    async def test_files_land_on_disk(self, tmp_path: Path):
        storage = Storage.from_uri(str(tmp_path)).with_base("zeppelin")
        await storage.write_bytes("alice/notebook/abc/note.json", b"{}")
        assert (tmp_path / "zeppelin" / "alice" / "notebook" / "abc" / "note.json").read_bytes() == b"{}"

    @pytest.mark.asyncio
    async def test_ensure_container_creates_missing_root(self, tmp_path: Path):
        storage = Storage.from_uri(str(tmp_path / "new-root"))
        await storage.ensure_container()
        assert (tmp_path / "new-root").is_dir()

    @pytest.mark.asyncio
    async def test_read_container_as_leaf_fails(self, tmp_path: Path):
        storage = Storage.from_uri(str(tmp_path))
        await storage.ensure_container("abc/note.json")
        with pytest.raises(OSError):
            await storage.read_bytes("abc/note.json")
