"""Intermediate representation dataclasses for caption tracks.

WHY: Caption data arrives as WebVTT text, SRT text, or JSON segments from
transcript APIs. The parsers, the two normalization passes, and every
formatter need one well-typed cue shape so they can be chained freely.

HOW: Three types form the model:
  Cue          : one timed caption unit (integer milliseconds + text)
  TrackKind    : how a track was produced ("simple", "word-by-word", ...)
  CaptionTrack : an ordered list of cues plus its TrackKind

RULES:
- Times are integer milliseconds; display strings are derived, never stored
- Cue is frozen; algorithms build new cues with dataclasses.replace()
- Array order is chronological order; there is no separate sort key
- TrackKind is computed once at parse time and never changes afterwards
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List

from caption_cleaner.core.timestamps import ms_to_timestamp


class TrackKind(str, enum.Enum):
    """Classification of a caption track.

    RULES:
    - simple: disjoint, single-utterance cues (manual captions)
    - word-by-word: rolling cues with embedded sub-timestamps (YouTube ASR)
    - auto_generated: segments from a structured transcript API
    """

    SIMPLE = "simple"
    WORD_BY_WORD = "word-by-word"
    AUTO_GENERATED = "auto_generated"


@dataclass(frozen=True)
class Cue:
    """A single timed caption unit.

    RULES:
    - start_ms >= 0; end_ms >= start_ms after normalization (raw input may
      violate this; the deduplicator repairs it)
    - text may hold sub-timestamps and inline markup before normalization,
      plain trimmed text after; "\\n" separates lines of a multi-line cue
    """

    start_ms: int
    end_ms: int
    text: str

    @property
    def start_time(self) -> str:
        return ms_to_timestamp(self.start_ms)

    @property
    def end_time(self) -> str:
        return ms_to_timestamp(self.end_ms)

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms

    @property
    def lines(self) -> List[str]:
        return self.text.split("\n")

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    def to_display_dict(self) -> Dict[str, Any]:
        """Serialize for the transcript view and storage collaborators."""
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "startMs": self.start_ms,
            "endMs": self.end_ms,
            "text": self.text,
        }


@dataclass
class CaptionTrack:
    """A parsed caption track.

    WHY: The parser never raises on bad input; an empty track is its
    failure signal. is_empty gives callers one explicit check for it.
    """

    cues: List[Cue] = field(default_factory=list)
    kind: TrackKind = TrackKind.SIMPLE

    @property
    def is_empty(self) -> bool:
        return not self.cues
