"""SubRip (SRT) parser.

WHY: yt-dlp and most desktop tools export YouTube captions as SRT, and
the deduplicator works line by line, so SRT cues must keep their line
breaks instead of being flattened like WebVTT cue text.

HOW: Find every "H:MM:SS,mmm --> H:MM:SS,mmm" line and collect the lines
after it as the cue text until the next timing line. The numeric index
line that precedes each timing line is dropped.

RULES:
- Multi-line cue text is joined with "\\n"
- Blank lines are ignored (they only separate blocks)
- A timing line with unparseable timestamps is skipped with its text
"""

from __future__ import annotations

import logging
import re
from typing import List

from caption_cleaner.core.ir import Cue
from caption_cleaner.core.timestamps import FormatError, parse_vtt_timestamp

logger = logging.getLogger(__name__)

_TIMING_RE = re.compile(r"(\d+:\d+:\d+[,.]\d+)\s*-->\s*(\d+:\d+:\d+[,.]\d+)")
_INDEX_RE = re.compile(r"^\d+$")


def parse_srt(raw: str) -> List[Cue]:
    """Parse SRT text into cues, keeping multi-line text.

    Args:
        raw: SRT file content.

    Returns:
        Cues in file order. Empty list when nothing could be parsed.
    """
    if not isinstance(raw, str):
        return []

    lines = [
        line.strip()
        for line in raw.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        if line.strip()
    ]

    cues: List[Cue] = []
    i = 0
    while i < len(lines):
        match = _TIMING_RE.search(lines[i])
        if match is None:
            i += 1
            continue

        i += 1
        text_lines: List[str] = []
        while i < len(lines) and not _TIMING_RE.search(lines[i]):
            is_next_index = (
                _INDEX_RE.match(lines[i])
                and i + 1 < len(lines)
                and _TIMING_RE.search(lines[i + 1])
            )
            if not is_next_index:
                text_lines.append(lines[i])
            i += 1

        try:
            start_ms = parse_vtt_timestamp(match.group(1))
            end_ms = parse_vtt_timestamp(match.group(2))
        except FormatError as exc:
            logger.debug("Skipping SRT cue with bad timing: %s", exc)
            continue
        cues.append(Cue(start_ms=start_ms, end_ms=end_ms, text="\n".join(text_lines)))

    logger.debug("Parsed %d SRT cues", len(cues))
    return cues
