"""SubRip (SRT) export formatter.

WHY: SRT is the caption format editing tools and video platforms accept
most widely.

HOW: Same numbered blocks as WebVTT, without a header, and with a comma
before the milliseconds.

RULES:
- Indexes are 1-based
- Multi-line cue text is written as-is
- Output suffix: ".srt"
- Media type: "text/srt"
"""

from __future__ import annotations

from typing import List

from caption_cleaner.core.ir import Cue
from caption_cleaner.core.timestamps import format_srt_timestamp
from caption_cleaner.formatters.base import BaseFormatter, FormatterOutput


class SRTFormatter(BaseFormatter):
    """Formatter that writes an SRT file."""

    suffix = ".srt"
    media_type = "text/srt"

    @property
    def name(self) -> str:
        return "SubRip"

    def format(self, cues: List[Cue]) -> FormatterOutput:
        blocks = []
        for index, cue in enumerate(cues, start=1):
            blocks.append("{index}\n{start} --> {end}\n{text}\n\n".format(
                index=index,
                start=format_srt_timestamp(cue.start_ms),
                end=format_srt_timestamp(cue.end_ms),
                text=cue.text,
            ))
        return self._output("".join(blocks))
