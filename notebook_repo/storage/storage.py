"""Storage abstraction for directory-tree shaped backends.

@public

Provides async container/leaf operations over the local filesystem, Google
Cloud Storage and an in-process memory store with a unified API. Every
backend reports failures as ``OSError`` (``FileNotFoundError`` for missing
entries) so callers never see vendor SDK exceptions.

No operation retries internally; transient faults surface immediately.
"""

from __future__ import annotations

import asyncio
import dataclasses
import errno
import os
from contextlib import contextmanager
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Iterator, Protocol

from google.api_core.exceptions import GoogleAPIError, NotFound
from google.auth.exceptions import GoogleAuthError
from prefect.utilities.asyncutils import run_sync_in_worker_thread
from prefect_gcp.cloud_storage import GcpCredentials, GcsBucket

from notebook_repo.logging import get_pipeline_logger
from notebook_repo.settings import settings

logger = get_pipeline_logger(__name__)


class EntryKind(StrEnum):
    """Kind of a storage tree node."""

    CONTAINER = "container"
    LEAF = "leaf"


@dataclass(frozen=True)
class StorageEntry:
    """A node in the storage tree.

    @public

    Attributes:
        name: Last path segment
        path: Relative path (POSIX-style, no leading slash) from the owning Storage base
        kind: CONTAINER for directories, LEAF for byte content
    """

    name: str
    path: str
    kind: EntryKind

    @property
    def is_container(self) -> bool:
        return self.kind is EntryKind.CONTAINER

    @property
    def is_leaf(self) -> bool:
        return self.kind is EntryKind.LEAF


def _norm_rel(path: str) -> str:
    """Normalize path to POSIX-style relative format.

    Returns:
        Normalized relative path string.
    """
    if not path:
        return ""
    parts = [p for p in path.replace("\\", "/").split("/") if p not in ("", ".")]
    clean: list[str] = []
    for p in parts:
        if p == ".." and clean:
            clean.pop()
        elif p != "..":
            clean.append(p)
    return "/".join(clean)


def _join_rel(*parts: str) -> str:
    """Join and normalize path parts.

    Returns:
        Joined and normalized path string.
    """
    valid_parts = [_norm_rel(p) for p in parts if p]
    return _norm_rel("/".join(valid_parts)) if valid_parts else ""


class StorageBackend(Protocol):
    """Capabilities every storage backend provides. Keys are relative to the backend root."""

    def url_for(self, key: str) -> str: ...
    async def exists(self, key: str) -> bool: ...
    async def list_entries(self, key: str) -> list[StorageEntry]: ...
    async def read_bytes(self, key: str) -> bytes: ...
    async def write_bytes(self, key: str, data: bytes) -> None: ...
    async def ensure_container(self, key: str) -> None: ...
    async def delete_if_exists(self, entry: StorageEntry) -> None: ...
    def close(self) -> None: ...


class _FileBackend:
    """Local filesystem backend using threaded blocking I/O."""

    def __init__(self, root: Path):
        self.root = root

    def _abs(self, key: str) -> Path:
        return self.root / _norm_rel(key)

    def url_for(self, key: str) -> str:
        return f"file://{self._abs(key)}"

    async def exists(self, key: str) -> bool:
        p = self._abs(key)
        return await asyncio.to_thread(p.exists)

    async def list_entries(self, key: str) -> list[StorageEntry]:
        base = self._abs(key)

        def _scan() -> list[StorageEntry]:
            items: list[StorageEntry] = []
            try:
                with os.scandir(base) as it:
                    for entry in it:
                        kind = EntryKind.CONTAINER if entry.is_dir() else EntryKind.LEAF
                        items.append(StorageEntry(name=entry.name, path=_join_rel(key, entry.name), kind=kind))
            except (FileNotFoundError, NotADirectoryError):
                return []
            return items

        return await asyncio.to_thread(_scan)

    async def read_bytes(self, key: str) -> bytes:
        p = self._abs(key)
        return await asyncio.to_thread(p.read_bytes)

    async def write_bytes(self, key: str, data: bytes) -> None:
        p = self._abs(key)

        def _write() -> None:
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_bytes(data)

        await asyncio.to_thread(_write)

    async def ensure_container(self, key: str) -> None:
        p = self._abs(key)
        await asyncio.to_thread(p.mkdir, parents=True, exist_ok=True)

    async def delete_if_exists(self, entry: StorageEntry) -> None:
        p = self._abs(entry.path)

        def _delete() -> None:
            if entry.is_leaf:
                p.unlink(missing_ok=True)
                return
            try:
                p.rmdir()
            except FileNotFoundError:
                return

        await asyncio.to_thread(_delete)

    def close(self) -> None:
        """Nothing to release for local files."""


class _MemoryBackend:
    """Dict-based backend for tests and throwaway repositories.

    Storage layout: leaf contents keyed by path + the set of container paths ("" is the root).
    """

    def __init__(self) -> None:
        self._leaves: dict[str, bytes] = {}
        self._containers: set[str] = {""}

    def _add_containers(self, key: str) -> None:
        parts = key.split("/") if key else []
        for i in range(1, len(parts) + 1):
            path = "/".join(parts[:i])
            if path in self._leaves:
                raise NotADirectoryError(errno.ENOTDIR, "Not a directory", path)
            self._containers.add(path)

    def _children(self, key: str) -> list[StorageEntry]:
        prefix = f"{key}/" if key else ""
        out: list[StorageEntry] = []
        for path in self._containers:
            if path and path != key and path.startswith(prefix) and "/" not in path[len(prefix) :]:
                out.append(StorageEntry(name=path[len(prefix) :], path=path, kind=EntryKind.CONTAINER))
        for path in self._leaves:
            if path.startswith(prefix) and "/" not in path[len(prefix) :]:
                out.append(StorageEntry(name=path[len(prefix) :], path=path, kind=EntryKind.LEAF))
        return out

    def url_for(self, key: str) -> str:
        return f"memory://{_norm_rel(key)}"

    async def exists(self, key: str) -> bool:
        key = _norm_rel(key)
        return key in self._leaves or key in self._containers

    async def list_entries(self, key: str) -> list[StorageEntry]:
        key = _norm_rel(key)
        if key not in self._containers:
            return []
        return self._children(key)

    async def read_bytes(self, key: str) -> bytes:
        key = _norm_rel(key)
        if key not in self._leaves:
            raise FileNotFoundError(errno.ENOENT, "No such leaf", key)
        return self._leaves[key]

    async def write_bytes(self, key: str, data: bytes) -> None:
        key = _norm_rel(key)
        if key in self._containers:
            raise IsADirectoryError(errno.EISDIR, "Is a container", key)
        parent = key.rpartition("/")[0]
        self._add_containers(parent)
        self._leaves[key] = bytes(data)

    async def ensure_container(self, key: str) -> None:
        self._add_containers(_norm_rel(key))

    async def delete_if_exists(self, entry: StorageEntry) -> None:
        key = _norm_rel(entry.path)
        if entry.is_leaf:
            self._leaves.pop(key, None)
            return
        if key not in self._containers:
            return
        if self._children(key):
            raise OSError(errno.ENOTEMPTY, "Container not empty", key)
        self._containers.discard(key)

    def close(self) -> None:
        """Nothing to release; contents live as long as the backend object."""


@contextmanager
def _gcs_errors(key: str) -> Iterator[None]:
    """Translate Google client errors into OSError."""
    try:
        yield
    except NotFound as e:
        raise FileNotFoundError(errno.ENOENT, f"No such object: {e}", key) from e
    except (GoogleAPIError, GoogleAuthError) as e:
        raise OSError(f"GCS operation on '{key}' failed: {e}") from e


class _GCSBackend:
    """Google Cloud Storage backend using Prefect GcsBucket block.

    GCS has no real directories: a container is any prefix that has objects
    below it. ``GcsBucket.list_blobs`` drops zero-byte ``name/`` placeholder
    objects, so an empty container is never listed; deleting a container
    still removes its placeholder when one exists.
    """

    def __init__(self, bucket_block: GcsBucket):
        self.block = bucket_block

    def _with_bucket_folder(self, path: str) -> str:
        """Compose the full object path including the block's bucket_folder.

        Returns:
            Full object path with bucket folder prefix.
        """
        folder = self.block.bucket_folder or ""
        if folder and not folder.endswith("/"):
            folder = folder + "/"
        if folder and path.startswith(folder):
            return path
        return f"{folder}{path}" if folder else path

    def url_for(self, key: str) -> str:
        return f"gs://{self.block.bucket}/{self._with_bucket_folder(_norm_rel(key))}".rstrip("/")

    async def exists(self, key: str) -> bool:
        key = _norm_rel(key)
        with _gcs_errors(key):
            bucket = await self.block.get_bucket()  # type: ignore
            blob = bucket.blob(self._with_bucket_folder(key))
            if await run_sync_in_worker_thread(blob.exists):
                return True
            return bool(await self.list_entries(key))

    async def list_entries(self, key: str) -> list[StorageEntry]:
        key = _norm_rel(key)
        with _gcs_errors(key):
            blobs = await self.block.list_blobs(key)  # type: ignore
        effective_root = self._with_bucket_folder(key).rstrip("/")
        children: dict[str, EntryKind] = {}

        for blob in blobs:
            full = blob.name
            if effective_root:
                if not full.startswith(effective_root + "/"):
                    continue  # sibling sharing the prefix, e.g. "abc" vs "abc123"
                rel = full[len(effective_root) + 1 :]
            else:
                rel = full
            if not rel:
                continue
            first, sep, _ = rel.partition("/")
            if sep:
                children[first] = EntryKind.CONTAINER
            else:
                children.setdefault(first, EntryKind.LEAF)

        return [StorageEntry(name=name, path=_join_rel(key, name), kind=kind) for name, kind in children.items()]

    async def read_bytes(self, key: str) -> bytes:
        key = _norm_rel(key)
        with _gcs_errors(key):
            return await self.block.read_path(key)  # type: ignore

    async def write_bytes(self, key: str, data: bytes) -> None:
        key = _norm_rel(key)
        with _gcs_errors(key):
            await self.block.write_path(key, data)  # type: ignore

    async def ensure_container(self, key: str) -> None:
        """Prefixes exist implicitly once an object is written below them."""

    async def delete_if_exists(self, entry: StorageEntry) -> None:
        key = _norm_rel(entry.path)
        name = self._with_bucket_folder(key)
        if entry.is_container:
            name = name.rstrip("/") + "/"
        with _gcs_errors(key):
            bucket = await self.block.get_bucket()  # type: ignore
            blob = bucket.blob(name)
            try:
                await run_sync_in_worker_thread(blob.delete)
            except NotFound:
                return

    def close(self) -> None:
        """The bucket block opens clients per call; nothing is held."""


def _local_root(path: str) -> Path:
    root = Path(path).expanduser().resolve()
    if root.exists() and not root.is_dir():
        raise ValueError(f"Local storage root must point to a directory: {root}")
    return root


def _gcs_bucket_block(bucket_name: str, gcs_block: str | None, service_account_file: str | None) -> GcsBucket:
    block_name = settings.gcs_block if gcs_block is None else gcs_block
    key_file = settings.gcs_service_account_file if service_account_file is None else service_account_file
    if block_name:
        bucket_block = GcsBucket.load(block_name)
        if bucket_block.bucket != bucket_name:  # type: ignore
            logger.warning(
                f"GcsBucket block '{block_name}' points to bucket '{bucket_block.bucket}' "  # type: ignore
                f"but URI requested '{bucket_name}'. Using block's bucket."
            )
        return bucket_block  # type: ignore

    if key_file:
        credentials = GcpCredentials(service_account_file=Path(key_file))
    else:
        credentials = GcpCredentials()
    return GcsBucket(bucket=bucket_name, bucket_folder="", gcp_credentials=credentials)


class Storage:
    """Unified async storage interface over container/leaf trees.

    @public

    Supports:
        - Local filesystem (file:// or plain paths)
        - Google Cloud Storage (gs:// URIs via Prefect GcsBucket)
        - In-process memory (memory://)

    Examples:
        >>> storage = Storage.from_uri("./data")
        >>> storage = Storage.from_uri("gs://bucket/prefix")
        >>>
        >>> notebooks = storage.with_base("zeppelin/alice/notebook")
        >>> for entry in await notebooks.list_entries():
        ...     print(entry.name, entry.kind)
    """

    def __init__(self, scheme: str, backend: StorageBackend, base_prefix: str = ""):
        self.scheme = scheme
        self._backend = backend
        self._base = _norm_rel(base_prefix)

    @staticmethod
    def from_uri(
        uri: str,
        *,
        gcs_block: str | None = None,
        service_account_file: str | None = None,
    ) -> Storage:
        """Create Storage instance from URI.

        Args:
            uri: Storage URI (file://, gs://, memory:// or a plain path)
            gcs_block: Prefect GcsBucket block name for GCS (None falls back to settings.gcs_block)
            service_account_file: Service account key for GCS when no block is used
                (None falls back to settings.gcs_service_account_file)

        Returns:
            Storage instance configured for the URI

        Raises:
            ValueError: If the URI scheme is unsupported, a local root is a file
                or the GcsBucket block cannot be loaded
            GoogleAuthError: If GCS credentials cannot be resolved
        """
        if "://" not in uri:
            return Storage("file", _FileBackend(_local_root(uri)))

        scheme, rest = uri.split("://", 1)
        if scheme == "file":
            return Storage("file", _FileBackend(_local_root(rest)))

        if scheme == "memory":
            return Storage("memory", _MemoryBackend(), rest)

        if scheme != "gs":
            raise ValueError(f"Unsupported URI scheme: {scheme}. Use file://, gs:// or memory://")

        bucket_name, _, prefix = rest.partition("/")
        backend = _GCSBackend(_gcs_bucket_block(bucket_name, gcs_block, service_account_file))
        return Storage("gs", backend, prefix)

    def with_base(self, subpath: str) -> Storage:
        """Create a new Storage instance rooted at a subdirectory, sharing the backend.

        Args:
            subpath: Subdirectory path (use "" for the same root)
        """
        return Storage(self.scheme, self._backend, _join_rel(self._base, subpath))

    def _rel_to_root(self, path: str) -> str:
        return _join_rel(self._base, path)

    def url_for(self, path: str = "") -> str:
        """Get the full URL for a storage path."""
        return self._backend.url_for(self._rel_to_root(path))

    async def exists(self, path: str) -> bool:
        """Check whether a leaf or container exists at path."""
        return await self._backend.exists(self._rel_to_root(path))

    async def list_entries(self, path: str = "") -> list[StorageEntry]:
        """List direct children of a container, in no particular order.

        Returns:
            Entries with paths relative to this Storage's base; empty if the
            container does not exist.
        """
        items = await self._backend.list_entries(self._rel_to_root(path))
        return [StorageEntry(name=it.name, path=_join_rel(path, it.name), kind=it.kind) for it in items]

    async def read_bytes(self, path: str) -> bytes:
        """Read leaf contents.

        Raises:
            FileNotFoundError: If no leaf exists at path.
        """
        return await self._backend.read_bytes(self._rel_to_root(path))

    async def write_bytes(self, path: str, data: bytes) -> None:
        """Replace the full contents of a leaf, creating it if needed."""
        await self._backend.write_bytes(self._rel_to_root(path), data)

    async def ensure_container(self, path: str = "") -> None:
        """Create a container and its parents. Safe to call repeatedly."""
        await self._backend.ensure_container(self._rel_to_root(path))

    async def delete_if_exists(self, entry: StorageEntry) -> None:
        """Delete a single leaf or empty container. Missing entries are a no-op.

        Raises:
            OSError: If a container still has children or the backend fails.
        """
        await self._backend.delete_if_exists(dataclasses.replace(entry, path=self._rel_to_root(entry.path)))

    def close(self) -> None:
        """Release backend client resources. Idempotent."""
        self._backend.close()
