"""Transcript provider backed by the Oxylabs Realtime scraper API.

WHY: Oxylabs fetches the transcript through its own proxy pool, so it
still works when YouTube blocks the server's IP for direct scraping.

HOW: One POST per attempt to the Realtime endpoint with HTTP Basic auth
and source "youtube_transcript". Auto-generated captions are asked for
first, then uploader-provided ones, then whatever Oxylabs picks; the
first attempt that yields segments wins. Segments come back as YouTube
transcriptSegmentRenderer entries, sometimes JSON-encoded as a string.

RULES:
- Credentials from OXYLABS_USERNAME / OXYLABS_PASSWORD (.env)
- Job status 612/613 means "no captions for this origin", not an error
- Timeout: PROVIDER_TIMEOUT_S (30 s default) -> ProviderError("TIMEOUT")
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from caption_cleaner import config
from caption_cleaner.core.ir import TrackKind
from caption_cleaner.providers.base import (
    AUTH_FAILED,
    BAD_REQUEST,
    NO_TRANSCRIPT,
    NOT_CONFIGURED,
    NOT_FOUND,
    PROVIDER_ERROR,
    RATE_LIMITED,
    TIMEOUT,
    BaseProvider,
    ProviderError,
    ProviderResult,
    make_segment,
)

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    400: (BAD_REQUEST, "Invalid video URL. Please check and try again."),
    401: (AUTH_FAILED, "Transcript service unavailable"),
    403: (AUTH_FAILED, "Transcript service unavailable"),
    404: (NOT_FOUND, "No transcript available for this video"),
    422: (PROVIDER_ERROR, "Something went wrong. Please try again."),
    429: (RATE_LIMITED, "Service is busy. Please try again in a moment."),
    500: (PROVIDER_ERROR, "Transcript service temporarily unavailable."),
    524: (TIMEOUT, "Request timed out. Please try again."),
}

_FAILED_JOB_STATUSES = (612, 613)

# (transcript_origin sent to Oxylabs, TrackKind reported for the result)
_ORIGINS: List[Tuple[Optional[str], TrackKind]] = [
    ("auto_generated", TrackKind.AUTO_GENERATED),
    ("uploader_provided", TrackKind.SIMPLE),
    (None, TrackKind.AUTO_GENERATED),
]


def parse_segments(content: Any) -> List[Dict[str, Any]]:
    """Convert transcriptSegmentRenderer entries to display segments.

    Text runs are concatenated and whitespace collapsed. Entries without
    a renderer, without text, or with unparseable times are skipped.
    """
    if isinstance(content, str):
        try:
            content = json.loads(content)
        except ValueError:
            logger.debug("Oxylabs content is not JSON, ignoring it")
            return []
    if not isinstance(content, list):
        return []

    segments = []
    for entry in content:
        if not isinstance(entry, dict):
            continue
        renderer = entry.get("transcriptSegmentRenderer")
        if not isinstance(renderer, dict):
            continue
        runs = (renderer.get("snippet") or {}).get("runs") or []
        text = " ".join("".join(str(run.get("text", "")) for run in runs).split())
        try:
            start_ms = int(renderer.get("startMs"))
            end_ms = int(renderer.get("endMs"))
        except (TypeError, ValueError):
            continue
        segment = make_segment(start_ms, end_ms, text)
        if segment is not None:
            segments.append(segment)
    return segments


class OxylabsProvider(BaseProvider):
    """Fetches transcripts through realtime.oxylabs.io."""

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._credentials = (username, password) if username and password else None
        self._url = url or config.OXYLABS_REALTIME_URL
        self._timeout = timeout or config.PROVIDER_TIMEOUT_S
        self._transport = transport

    @property
    def name(self) -> str:
        return "oxylabs"

    def _resolve_credentials(self) -> Optional[Tuple[str, str]]:
        if self._credentials:
            return self._credentials
        try:
            return config.load_oxylabs_credentials()
        except ValueError:
            return None

    def is_configured(self) -> bool:
        return self._resolve_credentials() is not None

    async def fetch_transcript(self, video_id: str, language: str = "en") -> ProviderResult:
        credentials = self._resolve_credentials()
        if credentials is None:
            raise ProviderError(NOT_CONFIGURED, "Transcript service unavailable")

        async with httpx.AsyncClient(
            auth=httpx.BasicAuth(*credentials),
            timeout=httpx.Timeout(self._timeout),
            transport=self._transport,
        ) as client:
            for origin, kind in _ORIGINS:
                logger.info(
                    "Fetching transcript for %s (%s, origin=%s) via Oxylabs",
                    video_id, language, origin or "any",
                )
                segments = await self._fetch_with_origin(client, video_id, language, origin)
                if segments:
                    logger.info("Fetched %d segments for %s", len(segments), video_id)
                    return ProviderResult(
                        segments=segments,
                        language=language,
                        transcript_type=kind.value,
                        provider=self.name,
                    )

        raise ProviderError(NO_TRANSCRIPT, "No transcript available for this video")

    async def _fetch_with_origin(
        self,
        client: httpx.AsyncClient,
        video_id: str,
        language: str,
        origin: Optional[str],
    ) -> List[Dict[str, Any]]:
        context = [{"key": "language_code", "value": language}]
        if origin:
            context.append({"key": "transcript_origin", "value": origin})

        try:
            resp = await client.post(
                self._url,
                json={"source": "youtube_transcript", "query": video_id, "context": context},
            )
        except httpx.TimeoutException as exc:
            raise ProviderError(TIMEOUT, "Request timed out. Please try again.") from exc
        except httpx.HTTPError as exc:
            raise ProviderError(PROVIDER_ERROR, "Could not reach Oxylabs: {}".format(exc)) from exc

        if resp.status_code != 200:
            code, message = _STATUS_CODES.get(
                resp.status_code, (PROVIDER_ERROR, "An unexpected error occurred.")
            )
            logger.warning("Oxylabs returned %d: %s", resp.status_code, resp.text[:200])
            raise ProviderError(code, message)

        try:
            results = resp.json().get("results") or []
        except (ValueError, AttributeError) as exc:
            raise ProviderError(PROVIDER_ERROR, "Oxylabs returned invalid JSON") from exc
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            return []

        result = results[0]
        if result.get("status_code") in _FAILED_JOB_STATUSES:
            logger.debug("Oxylabs job failed with status %s", result.get("status_code"))
            return []
        return parse_segments(result.get("content"))
