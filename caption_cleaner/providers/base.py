"""Transcript provider interface, result container, and error type.

WHY: Transcripts can come from several upstream services (the scraping
youtube-transcript-api library, the Supadata REST API, Oxylabs). The
HTTP layer must not care which one is configured.

HOW: Each provider subclasses BaseProvider, reports whether it is usable
via is_configured(), and returns a ProviderResult of display segments.
Every failure is raised as ProviderError with a stable code the server
maps to an HTTP status.

RULES:
- Segments are display dicts: startTime, endTime, startMs, endMs, text
- Segments with empty text are never returned
- An empty transcript is a ProviderError("NO_TRANSCRIPT"), not a result
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from caption_cleaner.core.ir import Cue, TrackKind

NOT_CONFIGURED = "NOT_CONFIGURED"
NO_TRANSCRIPT = "NO_TRANSCRIPT"
RATE_LIMITED = "RATE_LIMITED"
VIDEO_UNAVAILABLE = "VIDEO_UNAVAILABLE"
AUTH_FAILED = "AUTH_FAILED"
BAD_REQUEST = "BAD_REQUEST"
NOT_FOUND = "NOT_FOUND"
TIMEOUT = "TIMEOUT"
PROVIDER_ERROR = "PROVIDER_ERROR"


class ProviderError(Exception):
    """Raised when a provider cannot deliver a transcript.

    WHY: Callers need a typed exception that carries a machine-readable
    code next to the user-facing message.

    RULES:
    - Always include code and message
    - code is one of the module-level constants
    """

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__("{}: {}".format(code, message))


@dataclass
class ProviderResult:
    """Segments fetched from one provider."""

    segments: List[Dict[str, Any]] = field(default_factory=list)
    language: str = "en"
    transcript_type: str = TrackKind.AUTO_GENERATED.value
    provider: str = ""


def make_segment(start_ms: int, end_ms: int, text: str) -> Optional[Dict[str, Any]]:
    """Build one display segment, or None when the text is blank."""
    text = (text or "").strip()
    if not text:
        return None
    return Cue(start_ms=int(start_ms), end_ms=int(end_ms), text=text).to_display_dict()


class BaseProvider(ABC):
    """Abstract base for transcript providers.

    To add a new provider:
    1. Create a new file in providers/
    2. Subclass BaseProvider and implement name and fetch_transcript()
    3. Register it in PROVIDERS in providers/__init__.py
    4. Set TRANSCRIPT_PROVIDER=<name> in .env
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key, e.g. 'supadata'."""

    def is_configured(self) -> bool:
        """True if the provider has everything it needs (API keys, ...)."""
        return True

    @abstractmethod
    async def fetch_transcript(self, video_id: str, language: str = "en") -> ProviderResult:
        """Fetch the transcript of one video.

        Args:
            video_id: The YouTube video ID.
            language: Preferred caption language code.

        Returns:
            ProviderResult with at least one segment.

        Raises:
            ProviderError: On any failure, including an empty transcript.
        """
