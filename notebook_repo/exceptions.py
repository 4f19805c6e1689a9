"""Exception hierarchy for notebook-repo.

This module defines the exception hierarchy used throughout the notebook-repo library.
All exceptions inherit from NotebookRepoError, providing a consistent error handling interface.
"""


class NotebookRepoError(Exception):
    """Base exception for all notebook-repo errors."""


class BackendUnavailableError(NotebookRepoError):
    """Raised when the storage backend cannot be reached while building a repository."""


class NotebookIOError(NotebookRepoError):
    """Raised when reading, writing or deleting a note fails in the storage backend.

    Attributes:
        note_id: Id of the note the failing operation targeted ("" for the notebook root).
        operation: Short verb describing the operation, e.g. "reading" or "deleting".
    """

    def __init__(self, message: str, *, note_id: str = "", operation: str = ""):
        super().__init__(message)
        self.note_id = note_id
        self.operation = operation


class NoteNotFoundError(NotebookIOError):
    """Raised when the persisted note file does not exist."""


class SerializationError(NotebookRepoError):
    """Raised when a note cannot be encoded for storage."""


class DeserializationError(NotebookRepoError):
    """Raised when persisted note content is malformed, truncated or has the wrong schema."""
