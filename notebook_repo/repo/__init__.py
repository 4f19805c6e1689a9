"""Notebook repository protocol and the storage-backed implementation."""

from ._paths import NOTE_FILE, NOTEBOOK_DIR, ensure_notebook_root, note_file, notebook_root
from .factory import create_notebook_repo
from .protocol import EMPTY_REVISION, AuthenticationInfo, NotebookRepo, NotebookRepoSettingsInfo, Revision
from .storage_repo import StorageNotebookRepo

__all__ = [
    "EMPTY_REVISION",
    "NOTEBOOK_DIR",
    "NOTE_FILE",
    "AuthenticationInfo",
    "NotebookRepo",
    "NotebookRepoSettingsInfo",
    "Revision",
    "StorageNotebookRepo",
    "create_notebook_repo",
    "ensure_notebook_root",
    "note_file",
    "notebook_root",
]
