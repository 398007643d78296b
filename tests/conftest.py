"""Shared test fixtures for the caption_cleaner test suite.

WHY: Several test modules need the same caption samples: a rolling
word-by-word YouTube track, a plain WebVTT track, and an SRT dump with
repeated lines. Centralizing them here keeps every test on the same data.

RULES:
- Samples mirror real YouTube output shapes (sub-timestamps, <c> spans,
  align:/position: settings)
- Fixtures return fresh copies so tests can modify them freely
"""

from typing import Any, Dict, List

import pytest

from caption_cleaner.core.ir import Cue


# ---------------------------------------------------------------------------
# Sample caption files
# ---------------------------------------------------------------------------

ROLLING_VTT = """WEBVTT
Kind: captions
Language: en

00:00:00.000 --> 00:00:02.000 align:start position:0%
hello<00:00:00.500><c> world</c>

00:00:02.000 --> 00:00:04.000 align:start position:0%
hello world<00:00:02.500><c> how</c><00:00:03.000><c> are</c>

00:00:04.000 --> 00:00:04.010 align:start position:0%
hello world how are

00:00:04.010 --> 00:00:06.000 align:start position:0%
how are<00:00:04.500><c> you</c><00:00:05.000><c> today</c>
"""

SIMPLE_VTT = """WEBVTT

1
00:00:01.000 --> 00:00:03.500
Welcome to the <b>show</b>

2
00:00:04.000 --> 00:00:06.000
Tonight we talk &amp; laugh
"""

SRT_WITH_REPEATS = """1
00:00:00,000 --> 00:00:01,000
the cat

2
00:00:00,900 --> 00:00:02,000
cat sat

3
00:00:02,500 --> 00:00:05,000
on the mat
and slept
"""

SAMPLE_SEGMENTS: List[Dict[str, Any]] = [
    {"startMs": 0, "endMs": 1500, "text": "hello there"},
    {"startMs": 1500, "endMs": 3200, "text": "general kenobi"},
    {"startMs": 3200, "endMs": 4000, "text": "  "},
]


@pytest.fixture
def rolling_vtt():
    """A YouTube auto-caption track in rolling word-by-word format."""
    return ROLLING_VTT


@pytest.fixture
def simple_vtt():
    """A manual WebVTT track with cue identifiers and inline markup."""
    return SIMPLE_VTT


@pytest.fixture
def srt_with_repeats():
    """An SRT dump whose second cue repeats the end of the first."""
    return SRT_WITH_REPEATS


@pytest.fixture
def sample_segments():
    """Structured transcript segments as sent by the browser client."""
    return [dict(segment) for segment in SAMPLE_SEGMENTS]


@pytest.fixture
def clean_cues():
    """Disjoint, single-line cues ready for export."""
    return [
        Cue(start_ms=0, end_ms=1500, text="hello there"),
        Cue(start_ms=1500, end_ms=3200, text="general kenobi"),
        Cue(start_ms=3661001, end_ms=3662500, text="an hour later"),
    ]
