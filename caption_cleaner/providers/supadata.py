"""Transcript provider backed by the Supadata REST API.

WHY: A hosted API is more reliable than scraping when YouTube blocks the
server's IP. It needs an API key.

HOW: Uses httpx.AsyncClient for a single POST to /youtube/transcript with
the x-api-key header. The response shape is not fixed, so the segment
list is looked up under several keys and each item's field names are
normalized.

RULES:
- API key from SUPADATA_API_KEY (.env), never hardcoded
- Timeout: PROVIDER_TIMEOUT_S (30 s default) -> ProviderError("TIMEOUT")
- HTTP status codes map to ProviderError codes (see _STATUS_CODES)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from caption_cleaner import config
from caption_cleaner.providers.base import (
    AUTH_FAILED,
    BAD_REQUEST,
    NO_TRANSCRIPT,
    NOT_CONFIGURED,
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
    400: (BAD_REQUEST, "Invalid request. Please check the video ID."),
    401: (AUTH_FAILED, "Invalid API key. Please check your SUPADATA_API_KEY."),
    403: (AUTH_FAILED, "Access denied. Please check your API key permissions."),
    404: (NO_TRANSCRIPT, "No transcript available for this video"),
    429: (RATE_LIMITED, "Rate limit exceeded. Please try again later."),
}

# Keys under which the API has been seen to return the segment list
_LIST_KEYS = ("data", "transcript", "segments")


def _first(item: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = item.get(key)
        if value:
            return value
    return None


def parse_segments(data: Any) -> List[Dict[str, Any]]:
    """Find the segment list in a Supadata response and normalize it.

    Accepts a bare list or a dict holding the list under data, transcript
    or segments. Items may use text/content/transcript for the text and
    startMs/start_ms/offset/start with endMs/end_ms or duration/dur.
    """
    items: Optional[List[Any]] = None
    if isinstance(data, list):
        items = data
    elif isinstance(data, dict):
        for key in _LIST_KEYS:
            if isinstance(data.get(key), list):
                items = data[key]
                break

    if items is None:
        logger.warning("Unknown Supadata response format: %s", type(data).__name__)
        return []

    segments = []
    for item in items:
        if not isinstance(item, dict):
            continue
        text = _first(item, "text", "content", "transcript") or ""
        start_ms = int(float(_first(item, "startMs", "start_ms", "offset", "start") or 0))
        duration = int(float(_first(item, "duration", "dur") or 0))
        end_ms = int(float(_first(item, "endMs", "end_ms") or start_ms + duration))
        segment = make_segment(start_ms, end_ms, str(text))
        if segment is not None:
            segments.append(segment)
    return segments


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        return body.get("message") or body.get("error")
    return None


class SupadataProvider(BaseProvider):
    """Fetches transcripts from api.supadata.ai."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = (base_url or config.SUPADATA_BASE_URL).rstrip("/")
        self._timeout = timeout or config.PROVIDER_TIMEOUT_S
        self._transport = transport

    @property
    def name(self) -> str:
        return "supadata"

    def _resolve_key(self) -> Optional[str]:
        if self._api_key:
            return self._api_key
        try:
            return config.load_supadata_key()
        except ValueError:
            return None

    def is_configured(self) -> bool:
        return self._resolve_key() is not None

    async def fetch_transcript(self, video_id: str, language: str = "en") -> ProviderResult:
        api_key = self._resolve_key()
        if api_key is None:
            raise ProviderError(
                NOT_CONFIGURED,
                "Transcript service unavailable. Please configure SUPADATA_API_KEY.",
            )

        logger.info("Fetching transcript for %s (%s) via Supadata", video_id, language)
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                headers={"x-api-key": api_key},
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            ) as client:
                resp = await client.post(
                    "/youtube/transcript",
                    json={"video_id": video_id, "language": language},
                )
        except httpx.TimeoutException as exc:
            raise ProviderError(TIMEOUT, "Request timed out. Please try again.") from exc
        except httpx.HTTPError as exc:
            raise ProviderError(PROVIDER_ERROR, "Could not reach Supadata: {}".format(exc)) from exc

        if resp.status_code != 200:
            code, default_message = _STATUS_CODES.get(
                resp.status_code,
                (PROVIDER_ERROR, "Supadata service temporarily unavailable. Please try again."),
            )
            detail = _error_message(resp)
            logger.warning("Supadata returned %d: %s", resp.status_code, detail)
            message = detail if code in (BAD_REQUEST, NO_TRANSCRIPT) and detail else default_message
            raise ProviderError(code, message)

        try:
            data = resp.json()
        except ValueError as exc:
            raise ProviderError(PROVIDER_ERROR, "Supadata returned invalid JSON") from exc

        segments = parse_segments(data)
        if not segments:
            raise ProviderError(NO_TRANSCRIPT, "No transcript available for this video")

        logger.info("Fetched %d segments for %s", len(segments), video_id)
        return ProviderResult(segments=segments, language=language, provider=self.name)
