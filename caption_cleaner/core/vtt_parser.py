"""WebVTT caption parser with simple / word-by-word track classification.

WHY: Caption tracks come from many upstream sources (YouTube timedtext,
Sieve, yt-dlp dumps) and few of them are strictly valid WebVTT. The parser
must recover every usable cue and tell the rest of the pipeline whether
the track uses YouTube's rolling word-by-word format.

HOW: Skip the header up to the first timing line, then scan line by line.
A line containing "-->" opens a cue; the text lines after it are joined
with single spaces. Rolling tracks are recognized by embedded
<HH:MM:SS.mmm> sub-timestamps, <c> spans, or align:/position: settings.

RULES:
- Never raises: malformed input yields an empty CaptionTrack
- A timing line that fails to parse drops only that cue and its text
- Cue settings after the end timestamp are discarded
- A line between a blank line and a timing line is a cue identifier;
  text directly followed by a timing line still belongs to its cue
- NOTE comment blocks are ignored
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from caption_cleaner.core.ir import CaptionTrack, Cue, TrackKind
from caption_cleaner.core.timestamps import FormatError, parse_vtt_timestamp

logger = logging.getLogger(__name__)

TIMING_SEPARATOR = "-->"

# Word-by-word markers: <00:00:01.234> sub-timestamps and <c> spans.
_SUB_TIMESTAMP_RE = re.compile(r"<\d\d:\d\d:\d\d\.\d{3}>")
_SETTINGS_MARKERS = ("align:", "position:")


def has_word_markers(text: str) -> bool:
    """True if cue text carries rolling-caption markup."""
    return "<c>" in text or bool(_SUB_TIMESTAMP_RE.search(text))


def _is_note_start(line: str) -> bool:
    return line == "NOTE" or line.startswith("NOTE ") or line.startswith("NOTE\t")


def parse_vtt(raw: str) -> CaptionTrack:
    """Parse raw WebVTT text into a CaptionTrack.

    Args:
        raw: The caption file content as a string.

    Returns:
        CaptionTrack whose cues keep their raw text (markup included).
        The track is empty when no cue could be recovered.
    """
    if not isinstance(raw, str) or TIMING_SEPARATOR not in raw:
        return CaptionTrack()

    lines = raw.replace("\r\n", "\n").replace("\r", "\n").strip().split("\n")

    start_index = 0
    while start_index < len(lines) and TIMING_SEPARATOR not in lines[start_index]:
        start_index += 1

    cues: List[Cue] = []
    has_settings = False
    has_markers = False

    # The open cue: (start_ms, end_ms, text parts), or None after a bad timing line
    current: Optional[tuple] = None
    in_note = False

    def _flush() -> None:
        if current is not None:
            start_ms, end_ms, parts = current
            cues.append(Cue(start_ms=start_ms, end_ms=end_ms, text=" ".join(parts)))

    for i in range(start_index, len(lines)):
        line = lines[i].strip()

        if not line:
            in_note = False
            continue
        if in_note:
            continue

        if TIMING_SEPARATOR in line:
            if any(marker in line for marker in _SETTINGS_MARKERS):
                has_settings = True

            _flush()
            current = None

            start_raw, _, end_field = line.partition(TIMING_SEPARATOR)
            end_tokens = end_field.split()
            try:
                start_ms = parse_vtt_timestamp(start_raw.strip())
                end_ms = parse_vtt_timestamp(end_tokens[0] if end_tokens else "")
            except FormatError as exc:
                logger.debug("Skipping cue with bad timing line %r: %s", line, exc)
                continue
            current = (start_ms, end_ms, [])
            continue

        if not lines[i - 1].strip() and _is_note_start(line):
            in_note = True
            continue

        # Cue identifier: a block's first line when a timing line follows
        if (
            not lines[i - 1].strip()
            and i + 1 < len(lines)
            and TIMING_SEPARATOR in lines[i + 1]
        ):
            continue

        if current is None:
            continue

        if has_word_markers(line):
            has_markers = True
        current[2].append(line)

    _flush()

    kind = TrackKind.WORD_BY_WORD if (has_markers or has_settings) else TrackKind.SIMPLE
    logger.debug("Parsed %d cues (%s)", len(cues), kind.value)
    return CaptionTrack(cues=cues, kind=kind)
