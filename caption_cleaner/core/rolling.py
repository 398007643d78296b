"""Rolling-cue reducer for YouTube word-by-word captions ("Algo 1").

WHY: YouTube's auto-generated captions are "rolling": each cue repeats
the text of the previous cue and appends the newly spoken words, each new
word wrapped as <HH:MM:SS.mmm><c> word</c>. Displaying cues as-is repeats
every word up to N times. Only the incremental content of each cue is
worth keeping.

HOW: The new words of a cue are exactly the runs that start at an
embedded sub-timestamp and contain a <c> span. Text before the first
sub-timestamp repeats the previous cue, except that its last word is
often the one new token YouTube did not wrap yet, so that word is kept.
The kept pieces are then stripped of markup.

RULES:
- Cues without an embedded sub-timestamp or without <c> carry nothing new
- Only the last word of the pre-timestamp prefix survives (a tuned
  heuristic, kept exactly as observed to work on YouTube output)
- Output text has no sub-timestamps, no <c> tags, single spaces, no edges
- preserve_styling keeps only <b> <i> <u> <em> <strong>
- Cues whose cleaned text is empty are dropped; timing is never changed
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import replace
from typing import List, Optional

from caption_cleaner.core.ir import Cue

logger = logging.getLogger(__name__)

_SUB_TIMESTAMP = r"<\d\d:\d\d:\d\d\.\d+>"
_SUB_TIMESTAMP_RE = re.compile(_SUB_TIMESTAMP)
# A sub-timestamp, then text holding a <c> span, up to the next sub-timestamp.
_CONTENT_SEGMENT_RE = re.compile(
    _SUB_TIMESTAMP + r"([^<]*</?c>.*?)(?=" + _SUB_TIMESTAMP + r"|$)"
)
_C_TAG_RE = re.compile(r"</?c>")
_ANY_TAG_RE = re.compile(r"</?[a-z][^>]*>", re.IGNORECASE)
_TAG_WITH_ATTRS_RE = re.compile(r"</?([a-z][a-z0-9]*)\b[^>]*>", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")

ALLOWED_STYLING_TAGS = frozenset({"b", "i", "u", "em", "strong"})


def clean_cue_text(text: str, preserve_styling: bool = False) -> str:
    """Remove sub-timestamps and <c> tags, then normalize whitespace.

    Without preserve_styling every remaining HTML-like tag is removed too.
    """
    if not text:
        return ""
    cleaned = _SUB_TIMESTAMP_RE.sub("", text)
    cleaned = _C_TAG_RE.sub("", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()
    if not preserve_styling:
        cleaned = _ANY_TAG_RE.sub("", cleaned)
        cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()
    return cleaned


def filter_styling_tags(text: str) -> str:
    """Decode HTML entities and keep only allow-listed styling tags."""
    if not text:
        return ""
    decoded = html.unescape(text)

    def _keep_allowed(match: "re.Match[str]") -> str:
        if match.group(1).lower() in ALLOWED_STYLING_TAGS:
            return match.group(0)
        return ""

    return _TAG_WITH_ATTRS_RE.sub(_keep_allowed, decoded)


def extract_new_text(text: str) -> Optional[str]:
    """Return the raw incremental content of one rolling cue.

    Returns None when the cue carries no new content. The result still
    holds markup; clean_cue_text() removes it.
    """
    if not text or not text.strip() or "<c>" not in text:
        return None

    first_timestamp = _SUB_TIMESTAMP_RE.search(text)
    if first_timestamp is None:
        return None

    segments = [m.group(0) for m in _CONTENT_SEGMENT_RE.finditer(text)]
    if not segments:
        return None

    pieces: List[str] = []
    prefix = text[:first_timestamp.start()].strip()
    if prefix:
        # Everything but the last word repeats the previous cue
        pieces.append(prefix.rsplit(" ", 1)[-1])
    pieces.extend(segments)
    return "".join(pieces)


def reduce_rolling_cues(cues: List[Cue], preserve_styling: bool = False) -> List[Cue]:
    """Keep only the newly revealed words of each rolling cue.

    Args:
        cues: Cues of a word-by-word track, raw text with markup.
        preserve_styling: Keep <b> <i> <u> <em> <strong> for rendering.

    Returns:
        New cues with cleaned incremental text; input is not modified.
    """
    result: List[Cue] = []
    for cue in cues:
        raw = extract_new_text(cue.text)
        if raw is None:
            continue

        if preserve_styling:
            text = filter_styling_tags(clean_cue_text(raw, preserve_styling=True))
        else:
            text = html.unescape(clean_cue_text(raw))
        text = text.strip()

        if text:
            result.append(replace(cue, text=text))

    logger.debug("Rolling reducer kept %d of %d cues", len(result), len(cues))
    return result
