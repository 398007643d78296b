"""Best-effort transcript persistence to Supabase.

WHY: Fetched transcripts are archived so they can be browsed later, but
archiving is a side effect: a storage outage must never fail or slow
down a transcript request.

HOW: TranscriptStore inserts one row {youtube_url, transcript_content}
into the Supabase REST endpoint /rest/v1/<table> with httpx.AsyncClient.
store_transcript_quietly() wraps it for FastAPI BackgroundTasks: every
failure is logged and dropped.

RULES:
- Disabled (no request at all) when SUPABASE_URL or SUPABASE_ANON_KEY is unset
- TranscriptStore.insert() raises StorageError; the quiet wrapper never raises
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from caption_cleaner import config

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when Supabase rejects or cannot receive a transcript row."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__("Supabase error {}: {}".format(status_code, message))


class TranscriptStore:
    """Minimal Supabase REST client for the transcripts table.

    RULES:
    - Use as: async with TranscriptStore() as store: await store.insert(...)
    - url/api_key default to SUPABASE_URL / SUPABASE_ANON_KEY from .env
    """

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        table: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._url = (url or config.SUPABASE_URL).rstrip("/")
        self._api_key = api_key or config.load_supabase_key()
        self._table = table or config.SUPABASE_TRANSCRIPTS_TABLE
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "TranscriptStore":
        self._client = httpx.AsyncClient(
            base_url=self._url,
            headers={
                "apikey": self._api_key,
                "Authorization": "Bearer {}".format(self._api_key),
                "Prefer": "return=minimal",
            },
            timeout=httpx.Timeout(config.PROVIDER_TIMEOUT_S),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(
                "TranscriptStore must be used as an async context manager: "
                "async with TranscriptStore() as store: ..."
            )
        return self._client

    async def insert(self, youtube_url: str, segments: List[Dict[str, Any]]) -> None:
        """Insert one transcript row.

        Raises:
            StorageError: On any non-2xx response.
        """
        client = self._ensure_client()
        resp = await client.post(
            "/rest/v1/{}".format(self._table),
            json=[{"youtube_url": youtube_url, "transcript_content": segments}],
        )
        if resp.status_code not in (200, 201, 204):
            raise StorageError(resp.status_code, resp.text)
        logger.info("Stored transcript for %s (%d segments)", youtube_url, len(segments))


def storage_enabled() -> bool:
    """True when both the Supabase URL and key are configured."""
    if not config.SUPABASE_URL:
        return False
    try:
        config.load_supabase_key()
    except ValueError:
        return False
    return True


async def store_transcript_quietly(
    youtube_url: str,
    segments: List[Dict[str, Any]],
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """Persist a transcript, logging instead of raising on failure.

    Returns:
        True if the row was stored, False if storage is disabled or failed.
    """
    if not storage_enabled():
        logger.debug("Transcript storage disabled, skipping %s", youtube_url)
        return False
    try:
        async with TranscriptStore(transport=transport) as store:
            await store.insert(youtube_url, segments)
    except (StorageError, httpx.HTTPError):
        logger.exception("Failed to store transcript for %s", youtube_url)
        return False
    return True
