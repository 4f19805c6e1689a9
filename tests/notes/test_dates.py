"""Tests for the note timestamp codec."""

from datetime import UTC, datetime

import pytest

from notebook_repo.notes import parse_note_timestamp

EXPECTED_UTC = datetime(2017, 1, 5, 10, 11, 12, tzinfo=UTC)


class TestParseNoteTimestamp:
    def test_none_and_datetime_pass_through(self):
        now = datetime(2024, 3, 1, 12, 0)
        assert parse_note_timestamp(None) is None
        assert parse_note_timestamp(now) is now

    def test_epoch_seconds(self):
        assert parse_note_timestamp(1483611072) == EXPECTED_UTC

    def test_epoch_milliseconds(self):
        assert parse_note_timestamp(1483611072000) == EXPECTED_UTC

    def test_epoch_float(self):
        assert parse_note_timestamp(1483611072.0) == EXPECTED_UTC

    def test_iso_with_z_suffix(self):
        assert parse_note_timestamp("2017-01-05T10:11:12Z") == EXPECTED_UTC

    def test_iso_naive(self):
        assert parse_note_timestamp("2017-01-05T10:11:12") == datetime(2017, 1, 5, 10, 11, 12)

    def test_legacy_twelve_hour_format(self):
        assert parse_note_timestamp("Jan 5, 2017 10:11:12 AM") == datetime(2017, 1, 5, 10, 11, 12)
        assert parse_note_timestamp("Jan 5, 2017 10:11:12 PM") == datetime(2017, 1, 5, 22, 11, 12)

    def test_legacy_twenty_four_hour_format(self):
        assert parse_note_timestamp("Jan 05, 2017 22:11:12") == datetime(2017, 1, 5, 22, 11, 12)

    def test_blank_string_is_none(self):
        assert parse_note_timestamp("") is None
        assert parse_note_timestamp("   ") is None

    def test_custom_formats(self):
        assert parse_note_timestamp("05/01/2017", ("%d/%m/%Y",)) == datetime(2017, 1, 5)

    def test_custom_formats_replace_defaults(self):
        with pytest.raises(ValueError, match="Unrecognized timestamp format"):
            parse_note_timestamp("Jan 5, 2017 10:11:12 AM", ("%d/%m/%Y",))

    def test_unrecognized_string(self):
        with pytest.raises(ValueError, match="Unrecognized timestamp format"):
            parse_note_timestamp("yesterday")

    @pytest.mark.parametrize("value", [True, [1], {"t": 1}])
    def test_unsupported_types(self, value):
        with pytest.raises(ValueError):
            parse_note_timestamp(value)
