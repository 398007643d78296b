"""Normalization pipeline: raw captions in, clean display cues out.

WHY: Every surface (HTTP API, CLI) needs the same sequence: parse, pick
the pass that fits the track, deduplicate, and fail clearly when nothing
usable is left. Keeping that sequence here stops the surfaces from
drifting apart.

HOW:
  word-by-word VTT -> rolling reducer -> deduplicator
  simple VTT       -> markup cleanup  -> deduplicator
  SRT              -> deduplicator
  API segments     -> schema check (already disjoint, no dedup)

RULES:
- An empty result raises NoTranscriptError; it is never returned
- transcript_type reports how the track was produced
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List

from caption_cleaner.core.dedup import deduplicate_cues
from caption_cleaner.core.ir import Cue, TrackKind
from caption_cleaner.core.rolling import (
    clean_cue_text,
    filter_styling_tags,
    reduce_rolling_cues,
)
from caption_cleaner.core.segments import cues_from_segments
from caption_cleaner.core.srt_parser import parse_srt
from caption_cleaner.core.vtt_parser import parse_vtt

logger = logging.getLogger(__name__)


class NoTranscriptError(Exception):
    """Raised when normalization leaves no usable cue."""


@dataclass
class NormalizedTranscript:
    """Clean cues plus how the track was produced."""

    cues: List[Cue] = field(default_factory=list)
    transcript_type: TrackKind = TrackKind.SIMPLE

    def to_display_list(self) -> List[Dict[str, Any]]:
        return [cue.to_display_dict() for cue in self.cues]


def _clean_simple_cues(cues: List[Cue], preserve_styling: bool) -> List[Cue]:
    cleaned: List[Cue] = []
    for cue in cues:
        if preserve_styling:
            text = filter_styling_tags(clean_cue_text(cue.text, preserve_styling=True))
        else:
            text = html.unescape(clean_cue_text(cue.text))
        text = text.strip()
        if text:
            cleaned.append(replace(cue, text=text))
    return cleaned


def _finish(cues: List[Cue], kind: TrackKind, source: str) -> NormalizedTranscript:
    if not cues:
        raise NoTranscriptError("No usable captions found in {}".format(source))
    logger.info("Normalized %s: %d cues (%s)", source, len(cues), kind.value)
    return NormalizedTranscript(cues=cues, transcript_type=kind)


def normalize_vtt(
    raw: str,
    preserve_styling: bool = False,
    deduplicate: bool = True,
) -> NormalizedTranscript:
    """Parse and clean a WebVTT caption file.

    Args:
        raw: WebVTT file content.
        preserve_styling: Keep <b> <i> <u> <em> <strong> in cue text.
        deduplicate: Run the deduplicator after the first pass.

    Raises:
        NoTranscriptError: If no cue survives parsing and cleanup.
    """
    track = parse_vtt(raw)
    if track.is_empty:
        raise NoTranscriptError("No captions found in WebVTT input")

    if track.kind == TrackKind.WORD_BY_WORD:
        cues = reduce_rolling_cues(track.cues, preserve_styling=preserve_styling)
    else:
        cues = _clean_simple_cues(track.cues, preserve_styling)

    if deduplicate:
        cues = deduplicate_cues(cues)
    return _finish(cues, track.kind, "WebVTT input")


def normalize_srt(raw: str, deduplicate: bool = True) -> NormalizedTranscript:
    """Parse and deduplicate an SRT caption file.

    Raises:
        NoTranscriptError: If the input holds no cue with text.
    """
    cues = [cue for cue in parse_srt(raw) if cue.text.strip()]
    if deduplicate:
        cues = deduplicate_cues(cues)
    return _finish(cues, TrackKind.SIMPLE, "SRT input")


def normalize_segments(
    segments: Iterable[Dict[str, Any]],
    transcript_type: TrackKind = TrackKind.AUTO_GENERATED,
) -> NormalizedTranscript:
    """Turn structured provider segments into a normalized transcript.

    Raises:
        NoTranscriptError: If no segment is valid.
    """
    cues = cues_from_segments(segments)
    return _finish(cues, TrackKind(transcript_type), "transcript segments")
