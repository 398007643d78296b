"""Download a raw caption file (WebVTT) from a URL.

WHY: Some clients already hold a direct timedtext/Sieve caption URL and
only need the server to fetch and normalize it.

RULES:
- Only http and https URLs are fetched
- Non-2xx responses raise ProviderError (404 -> NOT_FOUND)
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

from caption_cleaner import config
from caption_cleaner.providers.base import (
    BAD_REQUEST,
    NOT_FOUND,
    PROVIDER_ERROR,
    RATE_LIMITED,
    TIMEOUT,
    ProviderError,
)

logger = logging.getLogger(__name__)


async def fetch_caption_text(
    url: str,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """GET a caption file and return its text.

    Args:
        url: Absolute http(s) URL of the caption file.
        timeout: Seconds before giving up, PROVIDER_TIMEOUT_S by default.
        transport: Optional httpx transport (tests use httpx.MockTransport).

    Raises:
        ProviderError: BAD_REQUEST for an unusable URL, NOT_FOUND,
            RATE_LIMITED, TIMEOUT, or PROVIDER_ERROR for other failures.
    """
    if urlparse(url or "").scheme not in ("http", "https"):
        raise ProviderError(BAD_REQUEST, "URL must start with http:// or https://")

    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout or config.PROVIDER_TIMEOUT_S),
            follow_redirects=True,
            transport=transport,
        ) as client:
            resp = await client.get(url)
    except httpx.TimeoutException as exc:
        raise ProviderError(TIMEOUT, "Timed out fetching caption file") from exc
    except httpx.HTTPError as exc:
        raise ProviderError(PROVIDER_ERROR, "Failed to fetch caption file: {}".format(exc)) from exc

    if resp.status_code == 404:
        raise ProviderError(NOT_FOUND, "Caption file not found")
    if resp.status_code == 429:
        raise ProviderError(RATE_LIMITED, "Too many requests. Please try again shortly.")
    if resp.status_code >= 400:
        raise ProviderError(
            PROVIDER_ERROR,
            "Failed to fetch caption file: {} {}".format(resp.status_code, resp.reason_phrase),
        )

    logger.debug("Fetched %d characters of captions from %s", len(resp.text), url)
    return resp.text
