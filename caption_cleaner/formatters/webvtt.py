"""WebVTT export formatter.

WHY: WebVTT is what browsers and most web players load as a caption
track, and re-importing an exported file through the parser must give
back the same cues.

HOW: "WEBVTT" header and a blank line, then one numbered block per cue:
index, "HH:MM:SS.mmm --> HH:MM:SS.mmm", text, blank line.

RULES:
- Indexes are 1-based; the parser treats them as cue identifiers
- Multi-line cue text is written on one line (lines joined with a
  space), which is also how the parser reads a multi-line cue back
- Output suffix: ".vtt"
- Media type: "text/vtt"
"""

from __future__ import annotations

from typing import List

from caption_cleaner.core.ir import Cue
from caption_cleaner.core.timestamps import format_vtt_timestamp
from caption_cleaner.formatters.base import BaseFormatter, FormatterOutput


def _single_line(cue: Cue) -> str:
    return " ".join(line.strip() for line in cue.lines if line.strip())


class WebVTTFormatter(BaseFormatter):
    """Formatter that writes a numbered WebVTT file."""

    suffix = ".vtt"
    media_type = "text/vtt"

    @property
    def name(self) -> str:
        return "WebVTT"

    def format(self, cues: List[Cue]) -> FormatterOutput:
        blocks = ["WEBVTT\n\n"]
        for index, cue in enumerate(cues, start=1):
            blocks.append("{index}\n{start} --> {end}\n{text}\n\n".format(
                index=index,
                start=format_vtt_timestamp(cue.start_ms),
                end=format_vtt_timestamp(cue.end_ms),
                text=_single_line(cue),
            ))
        return self._output("".join(blocks))
