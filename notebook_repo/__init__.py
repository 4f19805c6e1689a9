"""notebook-repo - hierarchical notebook storage over directory-tree backends.

@public

Persists notes (ordered paragraphs plus metadata) as
``{root}/{user?}/notebook/{note_id}/note.json`` on the local filesystem,
Google Cloud Storage or an in-process memory store, and restores them with
stale PENDING/RUNNING paragraphs marked ABORT.

Quick Start:
    >>> from notebook_repo import Note, Paragraph, JobStatus, create_notebook_repo
    >>>
    >>> repo = await create_notebook_repo()
    >>> await repo.save(Note(id="abc123", paragraphs=[Paragraph(text="%sh ls")]))
    >>> note = await repo.get("abc123")
    >>> [info.id for info in await repo.list_notes()]
    ['abc123']

Environment Variables:
    - NOTEBOOK_STORAGE_URI: ./notebooks, file:///srv/notebooks, gs://bucket/prefix, memory://
    - NOTEBOOK_SHARE: Root container name (default "zeppelin")
    - NOTEBOOK_USER: Optional per-user scope segment
    - NOTEBOOK_ENCODING: Encoding of stored notes (default UTF-8)
"""

from .exceptions import (
    BackendUnavailableError,
    DeserializationError,
    NotebookIOError,
    NotebookRepoError,
    NoteNotFoundError,
    SerializationError,
)
from .logging import LoggingConfig, get_pipeline_logger, setup_logging
from .notes import JobStatus, Note, NoteInfo, NoteSerializer, Paragraph
from .repo import (
    EMPTY_REVISION,
    AuthenticationInfo,
    NotebookRepo,
    NotebookRepoSettingsInfo,
    Revision,
    StorageNotebookRepo,
    create_notebook_repo,
)
from .settings import Settings
from .storage import EntryKind, Storage, StorageEntry

__version__ = "0.1.0"

__all__ = [
    "BackendUnavailableError",
    "DeserializationError",
    "EMPTY_REVISION",
    "AuthenticationInfo",
    "EntryKind",
    "JobStatus",
    "LoggingConfig",
    "Note",
    "NoteInfo",
    "NoteNotFoundError",
    "NoteSerializer",
    "NotebookIOError",
    "NotebookRepo",
    "NotebookRepoError",
    "NotebookRepoSettingsInfo",
    "Paragraph",
    "Revision",
    "SerializationError",
    "Settings",
    "Storage",
    "StorageEntry",
    "StorageNotebookRepo",
    "create_notebook_repo",
    "get_pipeline_logger",
    "setup_logging",
]
