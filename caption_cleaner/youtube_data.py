"""YouTube Data API v3 client for video and playlist metadata.

WHY: The browser client shows a title, thumbnail and view counts next to
each transcript, and expands a playlist URL into its videos so they can
be transcribed one by one. Neither is in the caption track itself.

HOW: YouTubeDataClient wraps httpx.AsyncClient against
https://www.googleapis.com/youtube/v3. A video is one GET /videos with
part=snippet,statistics. A playlist is walked page by page through
GET /playlistItems (50 items per page); the video IDs of each page are
then looked up in a single GET /videos call.

RULES:
- Use as: async with YouTubeDataClient() as client: ...
- API key from YOUTUBE_DATA_v3_KEY (.env); missing key raises ValueError
- Failures raise ProviderError so the server maps them like provider errors
- Counts are ints, or None when the owner hides them
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from caption_cleaner import config
from caption_cleaner.providers.base import (
    AUTH_FAILED,
    BAD_REQUEST,
    NOT_FOUND,
    PROVIDER_ERROR,
    RATE_LIMITED,
    TIMEOUT,
    ProviderError,
)

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    400: BAD_REQUEST,
    401: AUTH_FAILED,
    403: AUTH_FAILED,
    404: NOT_FOUND,
    429: RATE_LIMITED,
}

_THUMBNAIL_SIZES = ("high", "medium", "default")


@dataclass
class VideoMetadata:
    """Snippet and statistics of one video."""

    video_id: str
    title: str = ""
    description: str = ""
    published_at: Optional[str] = None
    channel_title: Optional[str] = None
    channel_id: Optional[str] = None
    thumbnail_url: Optional[str] = None
    view_count: Optional[int] = None
    like_count: Optional[int] = None
    comment_count: Optional[int] = None


def _count(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _thumbnail(snippet: Dict[str, Any]) -> Optional[str]:
    thumbnails = snippet.get("thumbnails") or {}
    for size in _THUMBNAIL_SIZES:
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return None


def parse_video(item: Dict[str, Any]) -> VideoMetadata:
    """Build VideoMetadata from one item of a /videos response."""
    snippet = item.get("snippet") or {}
    statistics = item.get("statistics") or {}
    return VideoMetadata(
        video_id=item.get("id", ""),
        title=snippet.get("title", ""),
        description=snippet.get("description", ""),
        published_at=snippet.get("publishedAt"),
        channel_title=snippet.get("channelTitle"),
        channel_id=snippet.get("channelId"),
        thumbnail_url=_thumbnail(snippet),
        view_count=_count(statistics.get("viewCount")),
        like_count=_count(statistics.get("likeCount")),
        comment_count=_count(statistics.get("commentCount")),
    )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or "Unknown error"
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return body["error"].get("message") or "Unknown error"
    return "Unknown error"


class YouTubeDataClient:
    """Async client for the videos and playlistItems endpoints."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key or config.load_youtube_data_key()
        self._base_url = (base_url or config.YOUTUBE_DATA_API_URL).rstrip("/")
        self._timeout = timeout or config.PROVIDER_TIMEOUT_S
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "YouTubeDataClient":
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
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
                "YouTubeDataClient must be used as an async context manager: "
                "async with YouTubeDataClient() as client: ..."
            )
        return self._client

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        client = self._ensure_client()
        try:
            resp = await client.get(path, params=dict(params, key=self._api_key))
        except httpx.TimeoutException as exc:
            raise ProviderError(TIMEOUT, "YouTube API request timed out") from exc
        except httpx.HTTPError as exc:
            raise ProviderError(PROVIDER_ERROR, "Could not reach the YouTube API: {}".format(exc)) from exc

        if resp.status_code != 200:
            message = _error_message(resp)
            logger.warning("YouTube API %s returned %d: %s", path, resp.status_code, message)
            raise ProviderError(
                _STATUS_CODES.get(resp.status_code, PROVIDER_ERROR),
                "YouTube API error: {}".format(message),
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise ProviderError(PROVIDER_ERROR, "YouTube API returned invalid JSON") from exc
        return data if isinstance(data, dict) else {}

    async def _videos(self, video_ids: List[str]) -> List[VideoMetadata]:
        data = await self._get(
            "/videos", {"part": "snippet,statistics", "id": ",".join(video_ids)}
        )
        return [parse_video(item) for item in data.get("items") or []]

    async def get_video_metadata(self, video_id: str) -> VideoMetadata:
        """Fetch snippet and statistics of one video.

        Raises:
            ProviderError: NOT_FOUND when the video does not exist or is
                private, or any error of the underlying request.
        """
        videos = await self._videos([video_id])
        if not videos:
            raise ProviderError(NOT_FOUND, "Video not found")
        return videos[0]

    async def list_playlist_videos(self, playlist_id: str) -> List[VideoMetadata]:
        """Fetch every video of a playlist, in playlist order.

        Deleted and private entries have no /videos item and are left out.
        """
        videos: List[VideoMetadata] = []
        page_token: Optional[str] = None
        while True:
            params = {
                "part": "snippet",
                "maxResults": config.YOUTUBE_DATA_PAGE_SIZE,
                "playlistId": playlist_id,
            }
            if page_token:
                params["pageToken"] = page_token
            page = await self._get("/playlistItems", params)

            video_ids = [
                ((item.get("snippet") or {}).get("resourceId") or {}).get("videoId")
                for item in page.get("items") or []
            ]
            video_ids = [video_id for video_id in video_ids if video_id]
            if video_ids:
                videos.extend(await self._videos(video_ids))

            page_token = page.get("nextPageToken")
            if not page_token:
                break

        logger.info("Playlist %s has %d videos", playlist_id, len(videos))
        return videos
