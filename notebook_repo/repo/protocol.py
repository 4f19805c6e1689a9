"""Notebook repository protocol and the value types it exchanges.

Revision and settings operations are part of the contract so that backends
with and without version control are interchangeable.
"""

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from notebook_repo.notes import Note, NoteInfo


class AuthenticationInfo(BaseModel):
    """Caller identity passed through every repository operation."""

    model_config = ConfigDict(frozen=True)

    user: str = "anonymous"
    roles: frozenset[str] = frozenset()


class Revision(BaseModel):
    """A stored checkpoint of a note."""

    model_config = ConfigDict(frozen=True)

    id: str
    message: str = ""
    time: int = 0  # epoch seconds

    @property
    def is_empty(self) -> bool:
        return not self.id


EMPTY_REVISION = Revision(id="", message="", time=0)
"""Returned by backends that cannot checkpoint."""


class NotebookRepoSettingsInfo(BaseModel):
    """A user-editable backend setting, as shown in a settings form."""

    name: str
    type: str = "INPUT"
    value: list[dict[str, str]] = Field(default_factory=list)
    selected: str = ""


@runtime_checkable
class NotebookRepo(Protocol):
    """Protocol for notebook storage backends.

    Implementations: StorageNotebookRepo (local filesystem, GCS, memory).
    """

    async def list_notes(self, subject: AuthenticationInfo | None = None) -> list[NoteInfo]:
        """Summaries of every readable note. Unreadable notes are skipped, not raised."""
        ...

    async def get(self, note_id: str, subject: AuthenticationInfo | None = None) -> Note:
        """Load a note. Running paragraphs come back as ABORT."""
        ...

    async def get_revision(self, note_id: str, revision_id: str, subject: AuthenticationInfo | None = None) -> Note | None:
        """Load a note as of a revision. None when unavailable."""
        ...

    async def save(self, note: Note, subject: AuthenticationInfo | None = None) -> None:
        """Replace the stored content of a note."""
        ...

    async def remove(self, note_id: str, subject: AuthenticationInfo | None = None) -> None:
        """Delete a note and everything stored under it. Safe to retry."""
        ...

    def close(self) -> None:
        """Release backend resources. Idempotent."""
        ...

    async def checkpoint(self, note_id: str, checkpoint_msg: str, subject: AuthenticationInfo | None = None) -> Revision:
        """Record a revision. EMPTY_REVISION when unsupported."""
        ...

    async def revision_history(self, note_id: str, subject: AuthenticationInfo | None = None) -> list[Revision]:
        """Revisions of a note, newest first."""
        ...

    async def get_settings(self, subject: AuthenticationInfo | None = None) -> list[NotebookRepoSettingsInfo]:
        """Backend settings editable by the caller."""
        ...

    async def update_settings(self, settings: dict[str, str], subject: AuthenticationInfo | None = None) -> None:
        """Apply backend settings."""
        ...

    async def set_note_revision(self, note_id: str, revision_id: str, subject: AuthenticationInfo | None = None) -> Note | None:
        """Restore a note to a revision and return it. None when unsupported."""
        ...
