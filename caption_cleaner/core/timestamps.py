"""Millisecond ⇄ timestamp conversions for display, WebVTT, and SRT.

WHY: Caption files carry times as strings ("00:01:02.500" in WebVTT,
"00:01:02,500" in SRT) while every algorithm works in integer
milliseconds, and the transcript view shows short "1:02" labels.

HOW: Parsing is a single anchored regex; formatting is integer division.

RULES:
- parse_vtt_timestamp accepts HH:MM:SS.mmm and MM:SS.mmm; "," may replace "."
- format_vtt_timestamp(parse_vtt_timestamp(s)) == s for HH:MM:SS.mmm input
- ms_to_timestamp is a lossy display format (floors to whole seconds)
- Malformed strings raise FormatError, never return a guess
"""

from __future__ import annotations

import re

_TIMESTAMP_RE = re.compile(r"^(?:(\d+):)?(\d{1,2}):(\d{2})[.,](\d{3})$")


class FormatError(ValueError):
    """Raised when a timestamp string matches no supported shape.

    RULES:
    - Aborts only the cue being parsed; callers skip that cue
    """


def parse_vtt_timestamp(value: str) -> int:
    """Parse a WebVTT/SRT timestamp into integer milliseconds.

    Args:
        value: "HH:MM:SS.mmm", "MM:SS.mmm", or the SRT comma variants.

    Returns:
        Milliseconds from the start of the track.

    Raises:
        FormatError: If the string has any other shape.
    """
    match = _TIMESTAMP_RE.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise FormatError("Invalid caption timestamp: {!r}".format(value))

    hours, minutes, seconds, millis = match.groups()
    if int(minutes) > 59 or int(seconds) > 59:
        raise FormatError("Invalid caption timestamp: {!r}".format(value))
    return (
        (int(hours or 0) * 3600 + int(minutes) * 60 + int(seconds)) * 1000
        + int(millis)
    )


def _split_ms(ms: int) -> tuple:
    ms = max(0, int(ms))
    hours, rem = divmod(ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    seconds, millis = divmod(rem, 1000)
    return hours, minutes, seconds, millis


def format_vtt_timestamp(ms: int) -> str:
    """Format milliseconds as a WebVTT timestamp (HH:MM:SS.mmm)."""
    hours, minutes, seconds, millis = _split_ms(ms)
    return "{:02d}:{:02d}:{:02d}.{:03d}".format(hours, minutes, seconds, millis)


def format_srt_timestamp(ms: int) -> str:
    """Format milliseconds as an SRT timestamp (HH:MM:SS,mmm)."""
    hours, minutes, seconds, millis = _split_ms(ms)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, seconds, millis)


def ms_to_timestamp(ms: int) -> str:
    """Convert milliseconds to a display label: H:MM:SS, or M:SS under an hour.

    RULES:
    - Truncates to whole seconds (floor), never rounds
    - The leading field is not padded ("0:05", "1:02:03")
    """
    hours, minutes, seconds, _ = _split_ms(ms)
    if hours > 0:
        return "{}:{:02d}:{:02d}".format(hours, minutes, seconds)
    return "{}:{:02d}".format(minutes, seconds)
