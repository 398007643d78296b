"""Configuration constants, merge thresholds, and .env loading.

WHY: Centralizes every configurable value so it is easy to find, update,
and override. The deduplicator's heuristic thresholds were tuned by hand
against real YouTube auto-captions; they live here as named constants
rather than literals buried in the merge loop.

HOW: python-dotenv loads the .env file on import. Constants are defined as
module-level values with os.getenv() overrides. Loader functions give a
clear error when a required key is missing.

RULES:
- Merge thresholds are tunable heuristics, not protocol constants
- API keys are loaded from .env via python-dotenv, never hardcoded
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os
from typing import Tuple

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Deduplicator thresholds
# ---------------------------------------------------------------------------

FLICKER_MAX_DURATION_MS = int(os.getenv("CAPTION_FLICKER_MAX_MS", "150"))
"""Cues shorter than this whose text repeats the previous cue are flicker."""

SHORT_CUE_MAX_WORDS = int(os.getenv("CAPTION_SHORT_CUE_MAX_WORDS", "2"))
"""Cues with at most this many words are fragments merged into a neighbor."""

TITLE_MIN_CHARS = int(os.getenv("CAPTION_TITLE_MIN_CHARS", "2"))
"""A short single-line cue longer than this is folded forward as a heading."""

# ---------------------------------------------------------------------------
# Transcript providers
# ---------------------------------------------------------------------------

TRANSCRIPT_PROVIDER = os.getenv("TRANSCRIPT_PROVIDER", "youtube-transcript")
DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en")
PROVIDER_TIMEOUT_S = float(os.getenv("PROVIDER_TIMEOUT_S", "30"))
SUPADATA_BASE_URL = os.getenv("SUPADATA_BASE_URL", "https://api.supadata.ai/v1")
OXYLABS_REALTIME_URL = os.getenv("OXYLABS_REALTIME_URL", "https://realtime.oxylabs.io/v1/queries")

# ---------------------------------------------------------------------------
# Video metadata (YouTube Data API v3)
# ---------------------------------------------------------------------------

YOUTUBE_DATA_API_URL = os.getenv("YOUTUBE_DATA_API_URL", "https://www.googleapis.com/youtube/v3")
YOUTUBE_DATA_PAGE_SIZE = 50
"""playlistItems page size; also the most IDs one videos lookup accepts."""

# ---------------------------------------------------------------------------
# Persistence (Supabase REST)
# ---------------------------------------------------------------------------

SUPABASE_URL = os.getenv("SUPABASE_URL", "").strip()
SUPABASE_TRANSCRIPTS_TABLE = os.getenv("SUPABASE_TRANSCRIPTS_TABLE", "transcripts")

# ---------------------------------------------------------------------------
# Supported inputs
# ---------------------------------------------------------------------------

SUPPORTED_CAPTION_FORMATS: set[str] = {".vtt", ".srt", ".json"}
"""Caption file extensions accepted by the CLI (lowercase, with dot)."""


def load_supadata_key() -> str:
    """Load the Supadata API key from the environment.

    RULES:
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("SUPADATA_API_KEY", "").strip()
    if not key:
        raise ValueError(
            "Supadata API key not configured. "
            "Add SUPADATA_API_KEY to the .env file in the app folder."
        )
    return key


def load_supabase_key() -> str:
    """Load the Supabase anon key used for transcript storage.

    RULES:
    - Raises ValueError if the key is missing or empty
    """
    key = os.getenv("SUPABASE_ANON_KEY", "").strip()
    if not key:
        raise ValueError(
            "Supabase key not configured. "
            "Add SUPABASE_ANON_KEY to the .env file to enable transcript storage."
        )
    return key


def load_oxylabs_credentials() -> Tuple[str, str]:
    """Load the Oxylabs Realtime API username and password.

    RULES:
    - Raises ValueError unless both OXYLABS_USERNAME and OXYLABS_PASSWORD are set
    """
    username = os.getenv("OXYLABS_USERNAME", "").strip()
    password = os.getenv("OXYLABS_PASSWORD", "").strip()
    if not username or not password:
        raise ValueError(
            "Oxylabs credentials not configured. "
            "Add OXYLABS_USERNAME and OXYLABS_PASSWORD to the .env file."
        )
    return username, password


def load_youtube_data_key() -> str:
    """Load the YouTube Data API v3 key used for video and playlist metadata."""
    key = os.getenv("YOUTUBE_DATA_v3_KEY", "").strip()
    if not key:
        raise ValueError(
            "YouTube API key not configured. "
            "Add YOUTUBE_DATA_v3_KEY to the .env file."
        )
    return key
