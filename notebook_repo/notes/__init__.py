"""Note model and serialization."""

from ._dates import LEGACY_TIMESTAMP_FORMATS, NoteTimestamp, parse_note_timestamp
from .note import JobStatus, Note, NoteInfo, Paragraph
from .serializer import NoteSerializer, sanitize_statuses

__all__ = [
    "LEGACY_TIMESTAMP_FORMATS",
    "JobStatus",
    "Note",
    "NoteInfo",
    "NoteSerializer",
    "NoteTimestamp",
    "Paragraph",
    "parse_note_timestamp",
    "sanitize_statuses",
]
