"""FastAPI application with transcript API routes and OpenAPI docs.

WHY: The browser client and other tools (curl, n8n) need an HTTP API to
fetch a YouTube transcript, clean up a caption file they already have,
and download the result as VTT, SRT or plain text. FastAPI provides
automatic OpenAPI documentation, request validation, and background
task support.

HOW: A single FastAPI app exposes 9 endpoints grouped by tags.
POST /transcripts asks the configured provider for a video's transcript,
normalizes it, and archives it to Supabase in the background. The other
endpoints normalize raw captions, look up video and playlist metadata
through the YouTube Data API, export cues, and describe the service.

RULES:
- All endpoints have OpenAPI descriptions on every parameter and response
- Error responses use a consistent ErrorResponse schema
- ProviderError codes map to HTTP statuses via _PROVIDER_STATUS
- Persistence uses FastAPI BackgroundTasks and never fails a request
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import logging
from typing import Annotated, List

from fastapi import BackgroundTasks, FastAPI, HTTPException, Query
from fastapi.responses import Response

from caption_cleaner import __version__, config
from caption_cleaner.core.ir import Cue
from caption_cleaner.core.pipeline import (
    NoTranscriptError,
    normalize_segments,
    normalize_srt,
    normalize_vtt,
)
from caption_cleaner.formatters import FORMATTERS, EmptyTranscriptError, export_transcript
from caption_cleaner.providers import get_provider, list_providers
from caption_cleaner.providers.base import ProviderError
from caption_cleaner.providers.caption_url import fetch_caption_text
from caption_cleaner.server.models import (
    CaptionFormat,
    ErrorResponse,
    ExportRequest,
    FetchVttResponse,
    FormatInfo,
    HealthResponse,
    NormalizeRequest,
    PlaylistVideo,
    PlaylistVideosResponse,
    ProviderInfo,
    TranscriptRequest,
    TranscriptResponse,
    VideoMetadata,
    VideoMetadataResponse,
)
from caption_cleaner.storage import store_transcript_quietly
from caption_cleaner.youtube import parse_youtube_url
from caption_cleaner.youtube_data import YouTubeDataClient

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Caption Cleaner API",
    description=(
        "REST API for fetching YouTube transcripts, cleaning up rolling "
        "auto-captions and overlapping cues, and exporting the result as "
        "WebVTT, SRT or plain text."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

_PROVIDER_STATUS = {
    "BAD_REQUEST": 400,
    "NOT_FOUND": 404,
    "NO_TRANSCRIPT": 404,
    "VIDEO_UNAVAILABLE": 404,
    "RATE_LIMITED": 429,
    "NOT_CONFIGURED": 503,
    "AUTH_FAILED": 503,
    "TIMEOUT": 504,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _provider_http_error(exc: ProviderError) -> HTTPException:
    """Convert a ProviderError to an HTTPException with the mapped status."""
    status = _PROVIDER_STATUS.get(exc.code, 500)
    return HTTPException(status_code=status, detail=exc.message)


def _no_transcript(exc: NoTranscriptError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(exc))


def _data_client() -> YouTubeDataClient:
    try:
        return YouTubeDataClient()
    except ValueError as exc:
        logger.error("YouTube Data API unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="YouTube API key not configured")


# ---------------------------------------------------------------------------
# Endpoints: Transcripts
# ---------------------------------------------------------------------------


@app.post(
    "/transcripts",
    response_model=TranscriptResponse,
    tags=["transcripts"],
    summary="Fetch a YouTube video's transcript",
    description=(
        "Validates the YouTube URL, fetches the transcript from the selected "
        "provider, and returns normalized segments. The transcript is archived "
        "in the background when storage is configured."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL or unknown provider"},
        404: {"model": ErrorResponse, "description": "No transcript for this video"},
        429: {"model": ErrorResponse, "description": "Provider rate limit reached"},
        503: {"model": ErrorResponse, "description": "Provider not configured"},
        504: {"model": ErrorResponse, "description": "Provider timed out"},
    },
)
async def create_transcript(
    body: TranscriptRequest,
    background_tasks: BackgroundTasks,
) -> TranscriptResponse:
    if not body.url:
        raise HTTPException(status_code=400, detail="YouTube URL is required")

    parsed = parse_youtube_url(body.url)
    if not parsed.is_valid:
        raise HTTPException(status_code=400, detail=parsed.message or "Invalid YouTube URL")
    if parsed.kind == "playlist":
        raise HTTPException(
            status_code=400,
            detail="Playlist URLs are not transcribed directly. List the videos with GET /playlist-videos.",
        )
    if not parsed.video_id:
        raise HTTPException(status_code=400, detail="Could not extract video ID from URL")

    try:
        provider = get_provider(body.provider)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    if not provider.is_configured():
        logger.error("Provider %s is not configured", provider.name)
        raise HTTPException(status_code=503, detail="Transcript service unavailable")

    try:
        result = await provider.fetch_transcript(parsed.video_id, body.language)
    except ProviderError as exc:
        logger.warning("Provider %s failed: %s", provider.name, exc)
        raise _provider_http_error(exc)

    try:
        transcript = normalize_segments(result.segments, result.transcript_type)
    except NoTranscriptError as exc:
        raise _no_transcript(exc)

    segments = transcript.to_display_list()
    background_tasks.add_task(store_transcript_quietly, body.url, segments)

    return TranscriptResponse(
        segments=segments,
        language=result.language,
        transcriptType=transcript.transcript_type.value,
        provider=result.provider,
    )


@app.get(
    "/fetch-vtt",
    response_model=FetchVttResponse,
    tags=["transcripts"],
    summary="Fetch and normalize a WebVTT file by URL",
    description=(
        "Downloads a caption file, detects whether it is a simple or a rolling "
        "word-by-word track, and returns the normalized cues with the raw file."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid URL"},
        404: {"model": ErrorResponse, "description": "File not found or holds no captions"},
        504: {"model": ErrorResponse, "description": "Caption host timed out"},
    },
)
async def fetch_vtt(
    url: Annotated[str, Query(description="Absolute URL of the WebVTT file.")] = "",
) -> FetchVttResponse:
    if not url:
        raise HTTPException(status_code=400, detail="URL is required")

    try:
        raw = await fetch_caption_text(url)
    except ProviderError as exc:
        raise _provider_http_error(exc)

    try:
        transcript = normalize_vtt(raw)
    except NoTranscriptError as exc:
        raise _no_transcript(exc)

    return FetchVttResponse(
        content=transcript.to_display_list(),
        rawContent=raw,
        transcriptType=transcript.transcript_type.value,
    )


@app.post(
    "/normalize",
    response_model=TranscriptResponse,
    tags=["transcripts"],
    summary="Normalize raw captions",
    description=(
        "Cleans up a WebVTT or SRT file sent in the request body: rolling "
        "auto-captions are reduced to their new words, repeated lines and "
        "fragments are merged, and overlapping timings are repaired."
    ),
    responses={
        404: {"model": ErrorResponse, "description": "No usable captions in content"},
    },
)
async def normalize(body: NormalizeRequest) -> TranscriptResponse:
    try:
        if body.format == CaptionFormat.srt:
            transcript = normalize_srt(body.content, deduplicate=body.deduplicate)
        else:
            transcript = normalize_vtt(
                body.content,
                preserve_styling=body.preserve_styling,
                deduplicate=body.deduplicate,
            )
    except NoTranscriptError as exc:
        raise _no_transcript(exc)

    return TranscriptResponse(
        segments=transcript.to_display_list(),
        transcriptType=transcript.transcript_type.value,
    )


# ---------------------------------------------------------------------------
# Endpoints: Video metadata
# ---------------------------------------------------------------------------


@app.get(
    "/video-metadata",
    response_model=VideoMetadataResponse,
    tags=["metadata"],
    summary="Look up a video's title, thumbnail and statistics",
    description="Reads the video's snippet and statistics from the YouTube Data API v3.",
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid YouTube URL"},
        404: {"model": ErrorResponse, "description": "Video not found"},
        503: {"model": ErrorResponse, "description": "YouTube API key not configured"},
    },
)
async def video_metadata(
    url: Annotated[str, Query(description="YouTube video URL (youtube.com/watch?v=... or youtu.be/...).")] = "",
) -> VideoMetadataResponse:
    if not url:
        raise HTTPException(status_code=400, detail="Missing YouTube video URL")

    parsed = parse_youtube_url(url)
    if not parsed.video_id:
        raise HTTPException(
            status_code=400,
            detail="Invalid YouTube URL: {}".format(parsed.message or "Could not extract video ID from URL"),
        )

    try:
        async with _data_client() as client:
            video = await client.get_video_metadata(parsed.video_id)
    except ProviderError as exc:
        raise _provider_http_error(exc)

    return VideoMetadataResponse(metadata=VideoMetadata(
        title=video.title,
        description=video.description,
        publishedAt=video.published_at,
        channelTitle=video.channel_title,
        thumbnailUrl=video.thumbnail_url,
        viewCount=video.view_count,
        likeCount=video.like_count,
        commentCount=video.comment_count,
    ))


@app.get(
    "/playlist-videos",
    response_model=PlaylistVideosResponse,
    tags=["metadata"],
    summary="List the videos of a playlist",
    description=(
        "Walks every page of the playlist through the YouTube Data API v3 and "
        "returns each video's snippet and statistics, in playlist order."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Missing playlist ID"},
        404: {"model": ErrorResponse, "description": "Playlist not found"},
        503: {"model": ErrorResponse, "description": "YouTube API key not configured"},
    },
)
async def playlist_videos(
    playlist_id: Annotated[str, Query(alias="playlistId", description="YouTube playlist ID (the list= parameter).")] = "",
) -> PlaylistVideosResponse:
    if not playlist_id:
        raise HTTPException(status_code=400, detail="Missing playlist ID")

    try:
        async with _data_client() as client:
            videos = await client.list_playlist_videos(playlist_id)
    except ProviderError as exc:
        raise _provider_http_error(exc)

    return PlaylistVideosResponse(videos=[
        PlaylistVideo(
            id=video.video_id,
            title=video.title,
            description=video.description,
            publishedAt=video.published_at,
            channelTitle=video.channel_title,
            channelId=video.channel_id,
            thumbnailUrl=video.thumbnail_url,
            viewCount=video.view_count,
            likeCount=video.like_count,
            commentCount=video.comment_count,
        )
        for video in videos
    ])


# ---------------------------------------------------------------------------
# Endpoints: Export
# ---------------------------------------------------------------------------


@app.post(
    "/export",
    tags=["export"],
    summary="Download cues as VTT, SRT or plain text",
    description=(
        "Serializes the given segments and returns them as a file attachment "
        "with the format's MIME type."
    ),
    responses={
        200: {"description": "The exported file", "content": {"text/vtt": {}, "text/srt": {}, "text/plain": {}}},
        400: {"model": ErrorResponse, "description": "No segments to export"},
    },
)
async def export(body: ExportRequest) -> Response:
    cues = [
        Cue(start_ms=segment.startMs, end_ms=segment.endMs, text=segment.text)
        for segment in body.segments
    ]
    try:
        result = export_transcript(cues, body.format.value, body.filename)
    except EmptyTranscriptError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={"Content-Disposition": 'attachment; filename="{}"'.format(result.filename)},
    )


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["export"],
    summary="List available export formats",
    description="Returns all export formats with their identifiers, names, suffixes and MIME types.",
)
async def list_formats() -> List[FormatInfo]:
    result = []
    for key, formatter_cls in sorted(FORMATTERS.items()):
        formatter = formatter_cls()
        result.append(FormatInfo(
            key=key,
            name=formatter.name,
            suffix=formatter.suffix,
            media_type=formatter.media_type,
        ))
    return result


# ---------------------------------------------------------------------------
# Endpoints: Providers and health
# ---------------------------------------------------------------------------


@app.get(
    "/providers",
    response_model=List[ProviderInfo],
    tags=["transcripts"],
    summary="List transcript providers",
    description="Returns every registered provider and whether it is configured.",
)
async def providers() -> List[ProviderInfo]:
    return [
        ProviderInfo(
            name=name,
            configured=get_provider(name).is_configured(),
            default=name == config.TRANSCRIPT_PROVIDER,
        )
        for name in list_providers()
    ]


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the caption-cleaner-api console script."""
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=8000)
