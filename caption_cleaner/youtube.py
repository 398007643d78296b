"""YouTube URL validation and video/playlist ID extraction.

RULES:
- youtube.com: /playlist?list= is a playlist, watch?v=&list= is a video
  in a playlist, watch?v= is a single video
- youtu.be/<id> is a single video
- Any other host, or a youtube.com URL without v/list, is invalid
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, urlparse

logger = logging.getLogger(__name__)


@dataclass
class YouTubeUrl:
    """Result of parse_youtube_url().

    Attributes:
        is_valid: True if the URL points at a video or playlist.
        kind: "video", "playlist", "video_in_playlist" or "invalid".
        video_id: The v= (or youtu.be path) ID, if any.
        playlist_id: The list= ID, if any.
        message: Why the URL was rejected, None when valid.
    """

    is_valid: bool
    kind: str
    video_id: Optional[str] = None
    playlist_id: Optional[str] = None
    message: Optional[str] = None


def _invalid(message: str) -> YouTubeUrl:
    return YouTubeUrl(is_valid=False, kind="invalid", message=message)


def parse_youtube_url(url: str) -> YouTubeUrl:
    """Classify a YouTube URL and pull out its IDs."""
    try:
        parsed = urlparse((url or "").strip())
    except ValueError:
        return _invalid("Invalid URL format")

    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return _invalid("Invalid URL format")

    hostname = parsed.hostname.lower()
    if hostname == "youtu.be" or hostname.endswith(".youtu.be"):
        video_id = parsed.path.lstrip("/").split("/")[0]
        if not video_id:
            return _invalid("Invalid YouTube URL format")
        return YouTubeUrl(is_valid=True, kind="video", video_id=video_id)

    if hostname != "youtube.com" and not hostname.endswith(".youtube.com"):
        return _invalid("Not a YouTube URL")

    params = parse_qs(parsed.query)
    video_id = params.get("v", [None])[0]
    playlist_id = params.get("list", [None])[0]

    if parsed.path == "/playlist" and playlist_id:
        return YouTubeUrl(is_valid=True, kind="playlist", playlist_id=playlist_id)
    if video_id and playlist_id:
        return YouTubeUrl(
            is_valid=True,
            kind="video_in_playlist",
            video_id=video_id,
            playlist_id=playlist_id,
        )
    if video_id:
        return YouTubeUrl(is_valid=True, kind="video", video_id=video_id)

    logger.debug("Rejected YouTube URL without video or playlist: %s", url)
    return _invalid("Invalid YouTube URL format")
