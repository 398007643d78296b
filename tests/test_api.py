"""Tests for the FastAPI caption API.

WHY: Validates every endpoint: happy paths, error cases, and the mapping
from provider failures to HTTP statuses. Uses FastAPI TestClient for
synchronous in-process testing.

HOW: Transcript providers and the caption downloader are patched where
the app imports them, so no test reaches YouTube, Supadata or Supabase.
The YouTube Data API client is swapped for one bound to an
httpx.MockTransport.
Storage is replaced with an AsyncMock so tests can check that the
background archive task was scheduled.

RULES:
- All tests use the FastAPI TestClient (synchronous)
- No external service is ever called
- Each test is independent; patches are scoped to the test
"""

from __future__ import annotations

import functools
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from caption_cleaner import __version__
from caption_cleaner.providers.base import (
    NO_TRANSCRIPT,
    NOT_FOUND,
    RATE_LIMITED,
    TIMEOUT,
    ProviderError,
    ProviderResult,
)
from caption_cleaner.server.app import app
from caption_cleaner.youtube_data import YouTubeDataClient

VIDEO_URL = "https://www.youtube.com/watch?v=abc123"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def store_mock():
    """Replace background storage so nothing is written."""
    with patch("caption_cleaner.server.app.store_transcript_quietly", new=AsyncMock(return_value=True)) as mock:
        yield mock


def _fake_provider(result=None, error=None, configured=True):
    provider = MagicMock()
    provider.name = "fake"
    provider.is_configured.return_value = configured
    provider.fetch_transcript = AsyncMock(return_value=result, side_effect=error)
    return provider


# ---------------------------------------------------------------------------
# POST /transcripts
# ---------------------------------------------------------------------------


class TestCreateTranscript:
    """Tests for POST /transcripts."""

    def test_returns_normalized_segments(self, client, store_mock, sample_segments):
        provider = _fake_provider(ProviderResult(
            segments=sample_segments, language="en", provider="fake",
        ))
        with patch("caption_cleaner.server.app.get_provider", return_value=provider):
            resp = client.post("/transcripts", json={"url": VIDEO_URL})

        assert resp.status_code == 200
        body = resp.json()
        assert [s["text"] for s in body["segments"]] == ["hello there", "general kenobi"]
        assert body["segments"][0]["startTime"] == "0:00"
        assert body["transcriptType"] == "auto_generated"
        assert body["provider"] == "fake"
        provider.fetch_transcript.assert_awaited_once_with("abc123", "en")

    def test_archives_in_background(self, client, store_mock, sample_segments):
        provider = _fake_provider(ProviderResult(segments=sample_segments, provider="fake"))
        with patch("caption_cleaner.server.app.get_provider", return_value=provider):
            resp = client.post("/transcripts", json={"url": VIDEO_URL})

        assert resp.status_code == 200
        store_mock.assert_called_once()
        url, segments = store_mock.call_args.args
        assert url == VIDEO_URL
        assert segments == resp.json()["segments"]

    def test_provider_and_language_forwarded(self, client, store_mock, sample_segments):
        provider = _fake_provider(ProviderResult(segments=sample_segments, language="sv"))
        with patch("caption_cleaner.server.app.get_provider", return_value=provider) as get:
            resp = client.post(
                "/transcripts",
                json={"url": "https://youtu.be/xyz", "language": "sv", "provider": "supadata"},
            )
        assert resp.status_code == 200
        get.assert_called_once_with("supadata")
        provider.fetch_transcript.assert_awaited_once_with("xyz", "sv")
        assert resp.json()["language"] == "sv"

    @pytest.mark.parametrize("url", [
        "",
        "https://vimeo.com/123",
        "https://www.youtube.com/playlist?list=PL123",
    ])
    def test_bad_url_returns_400(self, client, store_mock, url):
        resp = client.post("/transcripts", json={"url": url})
        assert resp.status_code == 400
        assert resp.json()["detail"]
        store_mock.assert_not_called()

    def test_playlist_url_points_to_playlist_videos(self, client, store_mock):
        resp = client.post("/transcripts", json={"url": "https://www.youtube.com/playlist?list=PL123"})
        assert resp.status_code == 400
        assert "/playlist-videos" in resp.json()["detail"]

    def test_missing_url_field_returns_422(self, client):
        resp = client.post("/transcripts", json={})
        assert resp.status_code == 422

    def test_unknown_provider_returns_400(self, client, store_mock):
        resp = client.post("/transcripts", json={"url": VIDEO_URL, "provider": "nope"})
        assert resp.status_code == 400
        assert "Unknown transcript provider" in resp.json()["detail"]

    def test_unconfigured_provider_returns_503(self, client, store_mock):
        provider = _fake_provider(configured=False)
        with patch("caption_cleaner.server.app.get_provider", return_value=provider):
            resp = client.post("/transcripts", json={"url": VIDEO_URL})
        assert resp.status_code == 503
        provider.fetch_transcript.assert_not_called()

    @pytest.mark.parametrize("code,status", [
        (NO_TRANSCRIPT, 404),
        (RATE_LIMITED, 429),
        (TIMEOUT, 504),
        ("SOMETHING_ELSE", 500),
    ])
    def test_provider_errors_mapped(self, client, store_mock, code, status):
        provider = _fake_provider(error=ProviderError(code, "upstream said no"))
        with patch("caption_cleaner.server.app.get_provider", return_value=provider):
            resp = client.post("/transcripts", json={"url": VIDEO_URL})
        assert resp.status_code == status
        assert resp.json()["detail"] == "upstream said no"
        store_mock.assert_not_called()

    def test_blank_segments_return_404(self, client, store_mock):
        provider = _fake_provider(ProviderResult(segments=[{"startMs": 0, "endMs": 10, "text": " "}]))
        with patch("caption_cleaner.server.app.get_provider", return_value=provider):
            resp = client.post("/transcripts", json={"url": VIDEO_URL})
        assert resp.status_code == 404
        store_mock.assert_not_called()


# ---------------------------------------------------------------------------
# GET /fetch-vtt
# ---------------------------------------------------------------------------


class TestFetchVtt:
    """Tests for GET /fetch-vtt."""

    def test_rolling_track_normalized(self, client, rolling_vtt):
        with patch(
            "caption_cleaner.server.app.fetch_caption_text",
            new=AsyncMock(return_value=rolling_vtt),
        ) as fetch:
            resp = client.get("/fetch-vtt", params={"url": "https://captions.test/a.vtt"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["transcriptType"] == "word-by-word"
        assert body["rawContent"] == rolling_vtt
        assert " ".join(s["text"] for s in body["content"]) == "hello world how are you today"
        fetch.assert_awaited_once_with("https://captions.test/a.vtt")

    def test_missing_url_returns_400(self, client):
        resp = client.get("/fetch-vtt")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "URL is required"

    def test_not_found(self, client):
        with patch(
            "caption_cleaner.server.app.fetch_caption_text",
            new=AsyncMock(side_effect=ProviderError(NOT_FOUND, "Caption file not found")),
        ):
            resp = client.get("/fetch-vtt", params={"url": "https://captions.test/gone.vtt"})
        assert resp.status_code == 404

    def test_empty_file_returns_404(self, client):
        with patch(
            "caption_cleaner.server.app.fetch_caption_text",
            new=AsyncMock(return_value="WEBVTT\n\n"),
        ):
            resp = client.get("/fetch-vtt", params={"url": "https://captions.test/empty.vtt"})
        assert resp.status_code == 404


# ---------------------------------------------------------------------------
# GET /video-metadata and GET /playlist-videos
# ---------------------------------------------------------------------------


def _data_api_transport(handler):
    """Point the app's YouTube Data API client at an httpx.MockTransport."""
    return patch(
        "caption_cleaner.server.app.YouTubeDataClient",
        new=functools.partial(YouTubeDataClient, api_key="data-key", transport=httpx.MockTransport(handler)),
    )


def _video_item(video_id):
    return {
        "id": video_id,
        "snippet": {
            "title": "Video " + video_id,
            "description": "",
            "publishedAt": "2024-03-01T10:00:00Z",
            "channelTitle": "Channel",
            "channelId": "UC123",
            "thumbnails": {"high": {"url": "https://i.ytimg.test/{}/hq.jpg".format(video_id)}},
        },
        "statistics": {"viewCount": "5", "likeCount": "2", "commentCount": "1"},
    }


class TestVideoMetadata:
    """Tests for GET /video-metadata."""

    def test_returns_metadata(self, client):
        captured = []

        def handler(request):
            captured.append(request)
            return httpx.Response(200, json={"items": [_video_item("xyz")]})

        with _data_api_transport(handler):
            resp = client.get("/video-metadata", params={"url": "https://youtu.be/xyz"})

        assert resp.status_code == 200
        assert resp.json()["metadata"] == {
            "title": "Video xyz",
            "description": "",
            "publishedAt": "2024-03-01T10:00:00Z",
            "channelTitle": "Channel",
            "thumbnailUrl": "https://i.ytimg.test/xyz/hq.jpg",
            "viewCount": 5,
            "likeCount": 2,
            "commentCount": 1,
        }
        assert captured[0].url.params["id"] == "xyz"

    def test_missing_url_returns_400(self, client):
        resp = client.get("/video-metadata")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Missing YouTube video URL"

    def test_playlist_url_returns_400(self, client):
        resp = client.get("/video-metadata", params={"url": "https://www.youtube.com/playlist?list=PL1"})
        assert resp.status_code == 400

    def test_unknown_video_returns_404(self, client):
        with _data_api_transport(lambda request: httpx.Response(200, json={"items": []})):
            resp = client.get("/video-metadata", params={"url": VIDEO_URL})
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Video not found"

    def test_missing_key_returns_503(self, client, monkeypatch):
        monkeypatch.delenv("YOUTUBE_DATA_v3_KEY", raising=False)
        resp = client.get("/video-metadata", params={"url": VIDEO_URL})
        assert resp.status_code == 503
        assert resp.json()["detail"] == "YouTube API key not configured"


class TestPlaylistVideos:
    """Tests for GET /playlist-videos."""

    def test_lists_every_page(self, client):
        pages = {
            None: {"items": [{"snippet": {"resourceId": {"videoId": "v1"}}}], "nextPageToken": "p2"},
            "p2": {"items": [{"snippet": {"resourceId": {"videoId": "v2"}}}]},
        }

        def handler(request):
            if request.url.path.endswith("/playlistItems"):
                return httpx.Response(200, json=pages[request.url.params.get("pageToken")])
            return httpx.Response(200, json={"items": [_video_item(request.url.params["id"])]})

        with _data_api_transport(handler):
            resp = client.get("/playlist-videos", params={"playlistId": "PL123"})

        assert resp.status_code == 200
        videos = resp.json()["videos"]
        assert [v["id"] for v in videos] == ["v1", "v2"]
        assert videos[0]["channelId"] == "UC123"
        assert videos[1]["title"] == "Video v2"

    def test_missing_playlist_id_returns_400(self, client):
        resp = client.get("/playlist-videos")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Missing playlist ID"

    def test_api_error_mapped(self, client):
        body = {"error": {"message": "Playlist not found"}}
        with _data_api_transport(lambda request: httpx.Response(404, json=body)):
            resp = client.get("/playlist-videos", params={"playlistId": "PLnope"})
        assert resp.status_code == 404
        assert resp.json()["detail"] == "YouTube API error: Playlist not found"


# ---------------------------------------------------------------------------
# POST /normalize
# ---------------------------------------------------------------------------


class TestNormalize:
    """Tests for POST /normalize."""

    def test_vtt(self, client, simple_vtt):
        resp = client.post("/normalize", json={"content": simple_vtt})
        assert resp.status_code == 200
        body = resp.json()
        assert body["transcriptType"] == "simple"
        assert body["segments"][0]["text"] == "Welcome to the show"
        assert body["provider"] is None

    def test_preserve_styling_alias(self, client, simple_vtt):
        resp = client.post("/normalize", json={"content": simple_vtt, "preserveStyling": True})
        assert resp.json()["segments"][0]["text"] == "Welcome to the <b>show</b>"

    def test_srt(self, client, srt_with_repeats):
        resp = client.post("/normalize", json={"content": srt_with_repeats, "format": "srt"})
        assert resp.status_code == 200
        assert [s["text"] for s in resp.json()["segments"]] == [
            "the cat", "sat", "on the mat\nand slept",
        ]

    def test_srt_without_dedup(self, client, srt_with_repeats):
        resp = client.post(
            "/normalize",
            json={"content": srt_with_repeats, "format": "srt", "deduplicate": False},
        )
        assert resp.json()["segments"][1]["text"] == "cat sat"

    def test_no_captions_returns_404(self, client):
        resp = client.post("/normalize", json={"content": "WEBVTT\n\n"})
        assert resp.status_code == 404

    def test_unknown_format_returns_422(self, client):
        resp = client.post("/normalize", json={"content": "x", "format": "ass"})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# POST /export
# ---------------------------------------------------------------------------


class TestExport:
    """Tests for POST /export."""

    SEGMENTS = [
        {"startMs": 0, "endMs": 1500, "text": "hello there"},
        {"startMs": 1500, "endMs": 3200, "text": "general kenobi"},
    ]

    def test_vtt_attachment(self, client):
        resp = client.post("/export", json={"segments": self.SEGMENTS, "filename": "talk"})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/vtt")
        assert resp.headers["content-disposition"] == 'attachment; filename="talk.vtt"'
        assert resp.text.startswith("WEBVTT\n\n1\n00:00:00.000 --> 00:00:01.500\nhello there\n")

    def test_srt(self, client):
        resp = client.post("/export", json={"segments": self.SEGMENTS, "format": "srt"})
        assert resp.headers["content-disposition"] == 'attachment; filename="transcript.srt"'
        assert "00:00:01,500 --> 00:00:03,200" in resp.text

    def test_txt(self, client):
        resp = client.post("/export", json={"segments": self.SEGMENTS, "format": "txt"})
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.text == "hello there\ngeneral kenobi"

    def test_empty_returns_400(self, client):
        resp = client.post("/export", json={"segments": []})
        assert resp.status_code == 400

    def test_unknown_format_returns_422(self, client):
        resp = client.post("/export", json={"segments": self.SEGMENTS, "format": "docx"})
        assert resp.status_code == 422

    def test_negative_time_returns_422(self, client):
        resp = client.post("/export", json={"segments": [{"startMs": -5, "endMs": 10, "text": "x"}]})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# GET /formats, /providers, /health
# ---------------------------------------------------------------------------


class TestServiceInfo:
    """Tests for the descriptive endpoints."""

    def test_formats(self, client):
        resp = client.get("/formats")
        assert resp.status_code == 200
        body = resp.json()
        assert [f["key"] for f in body] == ["srt", "txt", "vtt"]
        vtt = body[2]
        assert vtt["suffix"] == ".vtt"
        assert vtt["media_type"] == "text/vtt"

    def test_providers(self, client, monkeypatch):
        monkeypatch.delenv("SUPADATA_API_KEY", raising=False)
        monkeypatch.delenv("OXYLABS_USERNAME", raising=False)
        monkeypatch.setattr("caption_cleaner.config.TRANSCRIPT_PROVIDER", "youtube-transcript")
        resp = client.get("/providers")
        assert resp.status_code == 200
        assert resp.json() == [
            {"name": "youtube-transcript", "configured": True, "default": True},
            {"name": "supadata", "configured": False, "default": False},
            {"name": "oxylabs", "configured": False, "default": False},
        ]

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "version": __version__}

    def test_openapi_lists_endpoints(self, client):
        paths = client.get("/openapi.json").json()["paths"]
        for path in (
            "/transcripts", "/fetch-vtt", "/video-metadata", "/playlist-videos",
            "/normalize", "/export", "/formats", "/providers", "/health",
        ):
            assert path in paths
