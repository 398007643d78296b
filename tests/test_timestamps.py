"""Tests for millisecond/timestamp conversions."""

import pytest

from caption_cleaner.core.timestamps import (
    FormatError,
    format_srt_timestamp,
    format_vtt_timestamp,
    ms_to_timestamp,
    parse_vtt_timestamp,
)


class TestParseVttTimestamp:
    """Tests for parse_vtt_timestamp."""

    def test_full_form(self):
        assert parse_vtt_timestamp("01:02:03.456") == 3723456

    def test_minutes_form(self):
        assert parse_vtt_timestamp("02:03.456") == 123456

    def test_srt_comma(self):
        assert parse_vtt_timestamp("00:00:01,250") == 1250

    def test_surrounding_whitespace(self):
        assert parse_vtt_timestamp("  00:00:00.001 ") == 1

    @pytest.mark.parametrize("value", [
        "", "abc", "00:00:01", "00:60:00.000", "00:00:61.000", "1:2:3.4", None,
    ])
    def test_malformed_raises(self, value):
        with pytest.raises(FormatError):
            parse_vtt_timestamp(value)

    def test_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_vtt_timestamp("nope")


class TestFormatTimestamps:
    """Tests for the WebVTT/SRT formatters and their round-trip."""

    def test_vtt(self):
        assert format_vtt_timestamp(3723456) == "01:02:03.456"

    def test_srt(self):
        assert format_srt_timestamp(3723456) == "01:02:03,456"

    def test_zero(self):
        assert format_vtt_timestamp(0) == "00:00:00.000"

    @pytest.mark.parametrize("value", [
        "00:00:00.000", "00:00:59.999", "00:59:59.999", "12:34:56.789", "99:00:00.001",
    ])
    def test_round_trip(self, value):
        assert format_vtt_timestamp(parse_vtt_timestamp(value)) == value


class TestMsToTimestamp:
    """Tests for the lossy display label."""

    def test_under_an_hour(self):
        assert ms_to_timestamp(62500) == "1:02"

    def test_seconds_only(self):
        assert ms_to_timestamp(5999) == "0:05"

    def test_over_an_hour(self):
        assert ms_to_timestamp(3723456) == "1:02:03"

    def test_is_lossy(self):
        assert ms_to_timestamp(1999) == ms_to_timestamp(1000)
