"""Transcript provider backed by the youtube-transcript-api package.

WHY: Works without any API key, so it is the default provider.

HOW: YouTubeTranscriptApi().fetch() is a blocking HTTP call; it runs in a
worker thread via asyncio.to_thread so the event loop stays free. The raw
items ({text, start, duration} in seconds) are converted to millisecond
display segments.

RULES:
- A new YouTubeTranscriptApi instance per request
- Library exceptions are mapped to ProviderError codes
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List

from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    RequestBlocked,
    TranscriptsDisabled,
    VideoUnavailable,
    YouTubeTranscriptApi,
)

from caption_cleaner.providers.base import (
    NO_TRANSCRIPT,
    PROVIDER_ERROR,
    RATE_LIMITED,
    VIDEO_UNAVAILABLE,
    BaseProvider,
    ProviderError,
    ProviderResult,
    make_segment,
)

logger = logging.getLogger(__name__)

_RATE_LIMIT_HINTS = ("too many requests", "rate limit")


def _fetch_raw(video_id: str, language: str) -> List[Dict[str, Any]]:
    return YouTubeTranscriptApi().fetch(video_id, languages=[language]).to_raw_data()


def _to_segments(raw_items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    segments = []
    for item in raw_items:
        start_ms = int(round(float(item.get("start") or 0) * 1000))
        duration_ms = int(round(float(item.get("duration") or 0) * 1000))
        segment = make_segment(start_ms, start_ms + duration_ms, item.get("text", ""))
        if segment is not None:
            segments.append(segment)
    return segments


class YoutubeTranscriptProvider(BaseProvider):
    """Scrapes YouTube's own caption tracks. Needs no configuration."""

    @property
    def name(self) -> str:
        return "youtube-transcript"

    async def fetch_transcript(self, video_id: str, language: str = "en") -> ProviderResult:
        logger.info("Fetching transcript for %s (%s) via youtube-transcript-api", video_id, language)
        try:
            raw_items = await asyncio.to_thread(_fetch_raw, video_id, language)
        except (NoTranscriptFound, TranscriptsDisabled) as exc:
            raise ProviderError(NO_TRANSCRIPT, "No transcript available for this video") from exc
        except VideoUnavailable as exc:
            raise ProviderError(VIDEO_UNAVAILABLE, "Video is unavailable or does not exist") from exc
        except RequestBlocked as exc:
            raise ProviderError(RATE_LIMITED, "Too many requests. Please try again shortly.") from exc
        except CouldNotRetrieveTranscript as exc:
            message = str(exc)
            if any(hint in message.lower() for hint in _RATE_LIMIT_HINTS):
                raise ProviderError(
                    RATE_LIMITED, "Too many requests. Please try again shortly."
                ) from exc
            logger.warning("youtube-transcript-api failed for %s: %s", video_id, message)
            raise ProviderError(PROVIDER_ERROR, "Failed to fetch transcript") from exc

        segments = _to_segments(raw_items or [])
        if not segments:
            raise ProviderError(NO_TRANSCRIPT, "No transcript available for this video")

        logger.info("Fetched %d segments for %s", len(segments), video_id)
        return ProviderResult(segments=segments, language=language, provider=self.name)
