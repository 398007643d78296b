"""Structured transcript segments: JSON Schema and conversion to cues.

WHY: Transcript APIs and the browser client send segments as JSON
objects rather than caption files. They are checked against one schema
before entering the pipeline, so a single malformed item cannot break a
whole transcript.

HOW: SEGMENT_SCHEMA describes one {startMs, endMs, text} object. Each item
is validated on its own with jsonschema; invalid items are logged and
dropped.

RULES:
- startMs and endMs are non-negative integers, text is a string
- Items with empty or whitespace-only text are dropped
- Item order is preserved
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

import jsonschema
from jsonschema.exceptions import best_match

from caption_cleaner.core.ir import Cue

logger = logging.getLogger(__name__)

SEGMENT_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Transcript segment",
    "type": "object",
    "required": ["startMs", "endMs", "text"],
    "properties": {
        "startMs": {"type": "integer", "minimum": 0},
        "endMs": {"type": "integer", "minimum": 0},
        "text": {"type": "string"},
    },
}

_VALIDATOR = jsonschema.Draft7Validator(SEGMENT_SCHEMA)


def cues_from_segments(segments: Iterable[Dict[str, Any]]) -> List[Cue]:
    """Validate segments and convert the usable ones to cues.

    Args:
        segments: Objects shaped like {"startMs": 0, "endMs": 1200, "text": "hi"}.
            Extra keys (startTime, endTime, ...) are ignored.

    Returns:
        One Cue per valid, non-empty segment.
    """
    cues: List[Cue] = []
    dropped = 0
    for index, segment in enumerate(segments):
        error = best_match(_VALIDATOR.iter_errors(segment))
        if error is not None:
            logger.warning("Dropping segment %d: %s", index, error.message)
            dropped += 1
            continue

        text = segment["text"].strip()
        if not text:
            dropped += 1
            continue
        cues.append(Cue(
            start_ms=int(segment["startMs"]), end_ms=int(segment["endMs"]), text=text
        ))

    logger.debug("Accepted %d segments, dropped %d", len(cues), dropped)
    return cues
