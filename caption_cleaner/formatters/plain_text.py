"""Plain text transcript formatter.

WHY: Readers who want the words without timecodes (notes, search,
summaries) need the transcript as plain text.

RULES:
- One cue per line, in order, joined with "\\n"
- No trailing newline
- Output suffix: ".txt"
- Media type: "text/plain"
"""

from __future__ import annotations

from typing import List

from caption_cleaner.core.ir import Cue
from caption_cleaner.formatters.base import BaseFormatter, FormatterOutput


class PlainTextFormatter(BaseFormatter):
    """Formatter that writes cue texts one per line."""

    suffix = ".txt"
    media_type = "text/plain"

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, cues: List[Cue]) -> FormatterOutput:
        return self._output("\n".join(cue.text for cue in cues))
