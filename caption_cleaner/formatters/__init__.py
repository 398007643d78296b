"""Transcript export registry: pluggable format hub.

WHY: The CLI and the HTTP API need a single lookup to find the right
formatter by name, and one function that turns a cue list into a
downloadable file.

HOW: FORMATTERS maps format keys to formatter *classes* (not instances).
export_transcript() picks one, formats the cues, and names the file.

RULES:
- Keys are the lowercase file extensions: "vtt", "srt", "txt"
- Values are BaseFormatter subclasses (not instances)
- Exporting zero cues is an error, never an empty file
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

from caption_cleaner.core.ir import Cue
from caption_cleaner.formatters.plain_text import PlainTextFormatter
from caption_cleaner.formatters.srt import SRTFormatter
from caption_cleaner.formatters.webvtt import WebVTTFormatter

if TYPE_CHECKING:
    from caption_cleaner.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "vtt": WebVTTFormatter,
    "srt": SRTFormatter,
    "txt": PlainTextFormatter,
}

DEFAULT_FORMAT = "vtt"


class EmptyTranscriptError(ValueError):
    """Raised when asked to export a transcript with no cues."""


@dataclass
class ExportResult:
    """A transcript serialized for download.

    Attributes:
        filename: Base name plus the format's extension, e.g. "talk.srt".
        content: The file content.
        media_type: MIME type for the Content-Type header.
    """

    filename: str
    content: str
    media_type: str


def export_transcript(
    cues: List[Cue],
    fmt: str = DEFAULT_FORMAT,
    filename: str = "transcript",
) -> ExportResult:
    """Serialize cues to one of the registered formats.

    Args:
        cues: Normalized cues.
        fmt: Key in FORMATTERS ("vtt", "srt" or "txt").
        filename: Base filename without extension.

    Returns:
        ExportResult with the full filename, content, and MIME type.

    Raises:
        EmptyTranscriptError: If cues is empty.
        ValueError: If fmt is not a registered format.
    """
    if not cues:
        raise EmptyTranscriptError("No transcript data available")

    formatter_cls = FORMATTERS.get((fmt or "").lower())
    if formatter_cls is None:
        raise ValueError(
            "Unknown export format: '{}'. Available: {}".format(
                fmt, ", ".join(sorted(FORMATTERS))
            )
        )

    output = formatter_cls().format(cues)
    stem = filename or "transcript"
    if stem.lower().endswith(output.suffix):
        stem = stem[: -len(output.suffix)]
    return ExportResult(
        filename=stem + output.suffix,
        content=output.content,
        media_type=output.media_type,
    )
