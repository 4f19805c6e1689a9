"""Storage module for notebook_repo.

@public
"""

from notebook_repo.storage.storage import EntryKind, Storage, StorageBackend, StorageEntry

__all__ = ["Storage", "StorageBackend", "StorageEntry", "EntryKind"]
