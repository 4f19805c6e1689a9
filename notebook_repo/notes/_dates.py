"""Timestamp codec for note and paragraph date fields.

Notes written by older releases stored dates as numeric epochs or in
locale-style strings such as "Jan 5, 2017 10:11:12 AM". All of them decode
into ``datetime``; encoding always produces ISO-8601.
"""

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BeforeValidator, ValidationInfo

__all__ = ["LEGACY_TIMESTAMP_FORMATS", "NoteTimestamp", "parse_note_timestamp"]

LEGACY_TIMESTAMP_FORMATS: tuple[str, ...] = (
    "%b %d, %Y %I:%M:%S %p",
    "%b %d, %Y %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
)

# Epoch values at or above this magnitude are milliseconds (year 5138 in seconds).
_EPOCH_MILLIS_THRESHOLD = 1e11


def parse_note_timestamp(value: Any, formats: tuple[str, ...] = LEGACY_TIMESTAMP_FORMATS) -> datetime | None:
    """Decode a persisted timestamp.

    Accepts None, datetime, numeric epoch (seconds or milliseconds), ISO-8601
    strings and any of ``formats``. Empty strings decode to None.

    Raises:
        ValueError: If the value has an unsupported type or no format matches.
    """
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Unsupported timestamp value: {value!r}")
    if isinstance(value, int | float):
        seconds = value / 1000 if abs(value) >= _EPOCH_MILLIS_THRESHOLD else value
        return datetime.fromtimestamp(seconds, tz=UTC)
    if not isinstance(value, str):
        raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")

    text = value.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"Unrecognized timestamp format: {value!r}")


def _validate_timestamp(value: Any, info: ValidationInfo) -> datetime | None:
    formats = LEGACY_TIMESTAMP_FORMATS
    if info.context and "timestamp_formats" in info.context:
        formats = tuple(info.context["timestamp_formats"])
    return parse_note_timestamp(value, formats)


NoteTimestamp = Annotated[datetime | None, BeforeValidator(_validate_timestamp)]
"""Optional datetime field that also accepts legacy epoch and string encodings."""
