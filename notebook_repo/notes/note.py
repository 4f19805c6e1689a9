"""In-memory note model.

A note is an ordered list of paragraphs (units of work) plus note-level
metadata. Fields this package does not know about are kept verbatim so a
note written by a newer execution engine survives a load/save cycle.
"""

from enum import StrEnum
from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from notebook_repo.notes._dates import NoteTimestamp


class JobStatus(StrEnum):
    """Lifecycle status of a paragraph."""

    READY = "READY"
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    FINISHED = "FINISHED"
    ERROR = "ERROR"
    ABORT = "ABORT"
    UNKNOWN = "UNKNOWN"

    @property
    def is_running(self) -> bool:
        """True for states that only make sense while an engine process is alive."""
        return self in (JobStatus.PENDING, JobStatus.RUNNING)


# Statuses written by other engines are kept as plain strings rather than rejected.
ParagraphStatus = Annotated[JobStatus | str, Field(union_mode="left_to_right")]


class Paragraph(BaseModel):
    """A single unit of work inside a note.

    Persisted keys are camelCase (``dateStarted``); Python field names are
    accepted on construction as well.
    """

    model_config = ConfigDict(
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    id: str = ""
    title: str | None = None
    text: str | None = None
    user: str | None = None
    status: ParagraphStatus = JobStatus.READY
    date_created: NoteTimestamp = None
    date_updated: NoteTimestamp = None
    date_started: NoteTimestamp = None
    date_finished: NoteTimestamp = None
    config: dict[str, Any] = Field(default_factory=dict)
    settings: dict[str, Any] = Field(default_factory=dict)
    results: dict[str, Any] | None = None
    error_message: str | None = None


class Note(BaseModel):
    """A persisted notebook document.

    ``id`` doubles as the storage directory name and cannot be reassigned.
    """

    model_config = ConfigDict(
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    id: str = Field(min_length=1, frozen=True)
    name: str = ""
    paragraphs: list[Paragraph] = Field(default_factory=list)
    config: dict[str, Any] = Field(default_factory=dict)
    info: dict[str, Any] = Field(default_factory=dict)


class NoteInfo(BaseModel):
    """Lightweight note summary returned by listings."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    config: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_note(cls, note: Note) -> Self:
        """Keep only the summary fields of a fully loaded note."""
        return cls(id=note.id, name=note.name, config=dict(note.config))
