"""Note serialization to and from pretty-printed JSON bytes.

Loading always runs the status sanitizer: a paragraph that was PENDING or
RUNNING when it was saved belonged to an engine process that no longer
exists, so it comes back as ABORT.
"""

import codecs

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from notebook_repo.exceptions import DeserializationError, SerializationError
from notebook_repo.notes._dates import LEGACY_TIMESTAMP_FORMATS
from notebook_repo.notes.note import JobStatus, Note

__all__ = ["NoteSerializer", "sanitize_statuses"]


def sanitize_statuses(note: Note) -> int:
    """Rewrite PENDING and RUNNING paragraphs to ABORT in place. Other statuses, known or not, are kept.

    Returns:
        Number of paragraphs rewritten.
    """
    rewritten = 0
    for paragraph in note.paragraphs:
        if isinstance(paragraph.status, JobStatus) and paragraph.status.is_running:
            paragraph.status = JobStatus.ABORT
            rewritten += 1
    return rewritten


class NoteSerializer:
    """Encode notes as indented camelCase JSON in a configurable text encoding.

    Args:
        encoding: Codec name used for the persisted bytes.
        indent: JSON indentation; keeps stored notes readable and diff-friendly.
        timestamp_formats: strptime formats accepted for legacy date strings.

    Raises:
        LookupError: If ``encoding`` is not a known codec.
    """

    def __init__(
        self,
        encoding: str = "UTF-8",
        *,
        indent: int = 2,
        timestamp_formats: tuple[str, ...] = LEGACY_TIMESTAMP_FORMATS,
    ) -> None:
        codecs.lookup(encoding)
        self.encoding = encoding
        self.indent = indent
        self.timestamp_formats = timestamp_formats

    def serialize(self, note: Note) -> bytes:
        """Encode the full note.

        Raises:
            SerializationError: If metadata is not JSON-encodable or the text
                cannot be represented in the configured encoding.
        """
        try:
            text = note.model_dump_json(indent=self.indent, by_alias=True)
        except PydanticSerializationError as e:
            raise SerializationError(f"Cannot serialize note {note.id}: {e}") from e
        try:
            return text.encode(self.encoding)
        except UnicodeEncodeError as e:
            raise SerializationError(f"Cannot encode note {note.id} as {self.encoding}: {e}") from e

    def deserialize(self, data: bytes) -> Note:
        """Decode a note and sanitize paragraph statuses.

        Raises:
            DeserializationError: On undecodable bytes, malformed or truncated
                JSON, or content that does not match the note schema.
        """
        try:
            text = data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise DeserializationError(f"Note content is not valid {self.encoding}: {e}") from e
        try:
            note = Note.model_validate_json(text, context={"timestamp_formats": self.timestamp_formats})
        except ValidationError as e:
            raise DeserializationError(f"Malformed note content: {e}") from e
        sanitize_statuses(note)
        return note
