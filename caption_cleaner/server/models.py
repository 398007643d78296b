"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation.

HOW: Each endpoint has its own request and/or response model. Enums
represent closed sets like export formats. All models include Field
descriptions for rich OpenAPI docs. JSON field names follow the browser
client (camelCase: startMs, transcriptType, ...).

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Enum values match internal keys exactly (FORMATTERS, TrackKind)
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ExportFormat(str, Enum):
    """Export format identifiers.

    RULES:
    - Values match keys in caption_cleaner.formatters.FORMATTERS exactly
    """

    vtt = "vtt"
    srt = "srt"
    txt = "txt"


class CaptionFormat(str, Enum):
    """Raw caption formats accepted by POST /normalize."""

    vtt = "vtt"
    srt = "srt"


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


class Segment(BaseModel):
    """One normalized transcript cue."""

    startTime: str = Field(default="", description="Display start label, e.g. '1:02'.")
    endTime: str = Field(default="", description="Display end label, e.g. '1:05'.")
    startMs: int = Field(ge=0, description="Start time in milliseconds.")
    endMs: int = Field(ge=0, description="End time in milliseconds.")
    text: str = Field(description="Cue text.")


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class TranscriptRequest(BaseModel):
    """Body of POST /transcripts."""

    url: str = Field(description="YouTube video URL (youtube.com/watch?v=... or youtu.be/...).")
    language: str = Field(default="en", description="Preferred caption language code.")
    provider: Optional[str] = Field(
        default=None,
        description="Transcript provider name. Defaults to the TRANSCRIPT_PROVIDER setting.",
    )


class NormalizeRequest(BaseModel):
    """Body of POST /normalize."""

    model_config = ConfigDict(populate_by_name=True)

    content: str = Field(description="Raw caption file content.")
    format: CaptionFormat = Field(default=CaptionFormat.vtt, description="Caption format of content.")
    preserve_styling: bool = Field(
        default=False,
        alias="preserveStyling",
        description="Keep <b> <i> <u> <em> <strong> tags in cue text (WebVTT only).",
    )
    deduplicate: bool = Field(
        default=True,
        description="Merge flicker, repeated lines and fragments after parsing.",
    )


class ExportRequest(BaseModel):
    """Body of POST /export."""

    segments: List[Segment] = Field(description="Normalized cues to export.")
    format: ExportFormat = Field(default=ExportFormat.vtt, description="Export format.")
    filename: str = Field(default="transcript", description="Base filename without extension.")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TranscriptResponse(BaseModel):
    """Normalized transcript returned by /transcripts and /normalize."""

    segments: List[Segment] = Field(description="Normalized cues in chronological order.")
    language: Optional[str] = Field(default=None, description="Caption language code.")
    transcriptType: str = Field(
        description="How the track was produced: simple, word-by-word or auto_generated.",
    )
    provider: Optional[str] = Field(default=None, description="Provider that fetched the transcript.")

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "segments": [
                    {
                        "startTime": "0:00",
                        "endTime": "0:02",
                        "startMs": 0,
                        "endMs": 2000,
                        "text": "hello world",
                    }
                ],
                "language": "en",
                "transcriptType": "auto_generated",
                "provider": "youtube-transcript",
            }
        ]
    }}


class FetchVttResponse(BaseModel):
    """Response of GET /fetch-vtt."""

    content: List[Segment] = Field(description="Normalized cues.")
    rawContent: str = Field(description="The caption file exactly as downloaded.")
    transcriptType: str = Field(description="simple or word-by-word.")


class FormatInfo(BaseModel):
    """Description of an available export format."""

    key: str = Field(description="Format identifier used in API requests.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File extension produced (e.g. '.vtt').")
    media_type: str = Field(description="MIME type of the exported file.")


class ProviderInfo(BaseModel):
    """Description of a registered transcript provider."""

    name: str = Field(description="Provider name used in API requests.")
    configured: bool = Field(description="True if the provider has its API keys.")
    default: bool = Field(description="True for the provider used when none is given.")


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    """

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})


class VideoMetadata(BaseModel):
    """Snippet and statistics of one YouTube video."""

    title: str = Field(description="Video title.")
    description: str = Field(default="", description="Video description.")
    publishedAt: Optional[str] = Field(default=None, description="Publish time (RFC 3339).")
    channelTitle: Optional[str] = Field(default=None, description="Name of the uploading channel.")
    thumbnailUrl: Optional[str] = Field(
        default=None,
        description="Largest available thumbnail (high, medium, then default).",
    )
    viewCount: Optional[int] = Field(default=None, description="View count, if public.")
    likeCount: Optional[int] = Field(default=None, description="Like count, if public.")
    commentCount: Optional[int] = Field(default=None, description="Comment count, if public.")


class VideoMetadataResponse(BaseModel):
    """Response of GET /video-metadata."""

    metadata: VideoMetadata = Field(description="Metadata of the requested video.")


class PlaylistVideo(VideoMetadata):
    """One video of a playlist."""

    id: str = Field(description="YouTube video ID.")
    channelId: Optional[str] = Field(default=None, description="ID of the uploading channel.")


class PlaylistVideosResponse(BaseModel):
    """Response of GET /playlist-videos."""

    videos: List[PlaylistVideo] = Field(description="Playlist videos in playlist order.")
