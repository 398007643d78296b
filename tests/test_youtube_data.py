"""Tests for the YouTube Data API client.

WHY: Playlist expansion has to follow nextPageToken to the end and batch
the video lookups per page; a missed page silently drops videos.

HOW: Requests go to httpx.MockTransport handlers that answer by path and
record every request for inspection.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from caption_cleaner.providers.base import AUTH_FAILED, NOT_FOUND, TIMEOUT, ProviderError
from caption_cleaner.youtube_data import YouTubeDataClient, parse_video


def video_item(video_id, title="A video", views="1200"):
    return {
        "id": video_id,
        "snippet": {
            "title": title,
            "description": "about " + video_id,
            "publishedAt": "2024-03-01T10:00:00Z",
            "channelTitle": "Channel",
            "channelId": "UC123",
            "thumbnails": {
                "default": {"url": "https://i.ytimg.test/{}/default.jpg".format(video_id)},
                "medium": {"url": "https://i.ytimg.test/{}/mq.jpg".format(video_id)},
            },
        },
        "statistics": {"viewCount": views, "likeCount": "30", "commentCount": "4"},
    }


def playlist_item(video_id):
    return {"snippet": {"resourceId": {"kind": "youtube#video", "videoId": video_id}}}


def _run(coro_fn, transport, api_key="data-key"):
    async def run():
        async with YouTubeDataClient(
            api_key=api_key,
            base_url="https://data.test/youtube/v3",
            transport=transport,
        ) as client:
            return await coro_fn(client)

    return asyncio.run(run())


class TestParseVideo:
    """Tests for parse_video."""

    def test_fields(self):
        video = parse_video(video_item("abc123"))
        assert video.video_id == "abc123"
        assert video.title == "A video"
        assert video.channel_id == "UC123"
        assert video.thumbnail_url == "https://i.ytimg.test/abc123/mq.jpg"
        assert (video.view_count, video.like_count, video.comment_count) == (1200, 30, 4)

    def test_hidden_statistics_are_none(self):
        item = video_item("abc123")
        item["statistics"] = {"viewCount": "10"}
        video = parse_video(item)
        assert video.view_count == 10
        assert video.like_count is None
        assert video.comment_count is None

    def test_no_thumbnails(self):
        item = video_item("abc123")
        del item["snippet"]["thumbnails"]
        assert parse_video(item).thumbnail_url is None


class TestGetVideoMetadata:
    """Tests for YouTubeDataClient.get_video_metadata."""

    def test_request_and_result(self):
        captured = []

        def handler(request):
            captured.append(request)
            return httpx.Response(200, json={"items": [video_item("abc123")]})

        video = _run(lambda c: c.get_video_metadata("abc123"), httpx.MockTransport(handler))

        request = captured[0]
        assert request.url.path == "/youtube/v3/videos"
        assert request.url.params["id"] == "abc123"
        assert request.url.params["part"] == "snippet,statistics"
        assert request.url.params["key"] == "data-key"
        assert video.title == "A video"

    def test_no_items_is_not_found(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"items": []}))
        with pytest.raises(ProviderError) as excinfo:
            _run(lambda c: c.get_video_metadata("gone"), transport)
        assert excinfo.value.code == NOT_FOUND
        assert excinfo.value.message == "Video not found"

    def test_api_error_message_kept(self):
        body = {"error": {"code": 403, "message": "API key not valid."}}
        transport = httpx.MockTransport(lambda request: httpx.Response(403, json=body))
        with pytest.raises(ProviderError) as excinfo:
            _run(lambda c: c.get_video_metadata("abc123"), transport)
        assert excinfo.value.code == AUTH_FAILED
        assert excinfo.value.message == "YouTube API error: API key not valid."

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ProviderError) as excinfo:
            _run(lambda c: c.get_video_metadata("abc123"), httpx.MockTransport(handler))
        assert excinfo.value.code == TIMEOUT


class TestListPlaylistVideos:
    """Tests for YouTubeDataClient.list_playlist_videos."""

    def test_follows_pages(self):
        captured = []
        pages = {
            None: {"items": [playlist_item("v1"), playlist_item("v2")], "nextPageToken": "p2"},
            "p2": {"items": [playlist_item("v3")]},
        }

        def handler(request):
            captured.append(request)
            if request.url.path.endswith("/playlistItems"):
                return httpx.Response(200, json=pages[request.url.params.get("pageToken")])
            ids = request.url.params["id"].split(",")
            return httpx.Response(200, json={"items": [video_item(i) for i in ids]})

        videos = _run(lambda c: c.list_playlist_videos("PL123"), httpx.MockTransport(handler))

        assert [v.video_id for v in videos] == ["v1", "v2", "v3"]
        playlist_requests = [r for r in captured if r.url.path.endswith("/playlistItems")]
        assert [r.url.params.get("pageToken") for r in playlist_requests] == [None, "p2"]
        assert playlist_requests[0].url.params["maxResults"] == "50"
        assert playlist_requests[0].url.params["playlistId"] == "PL123"
        video_requests = [r for r in captured if r.url.path.endswith("/videos")]
        assert [r.url.params["id"] for r in video_requests] == ["v1,v2", "v3"]

    def test_empty_page_skips_video_lookup(self):
        captured = []

        def handler(request):
            captured.append(request)
            return httpx.Response(200, json={"items": []})

        assert _run(lambda c: c.list_playlist_videos("PL123"), httpx.MockTransport(handler)) == []
        assert len(captured) == 1

    def test_missing_playlist(self):
        body = {"error": {"code": 404, "message": "The playlist identified with the request's playlistId parameter cannot be found."}}
        transport = httpx.MockTransport(lambda request: httpx.Response(404, json=body))
        with pytest.raises(ProviderError) as excinfo:
            _run(lambda c: c.list_playlist_videos("PLnope"), transport)
        assert excinfo.value.code == NOT_FOUND


class TestClientSetup:
    """Key loading and context manager use."""

    def test_missing_key_raises(self, monkeypatch):
        monkeypatch.delenv("YOUTUBE_DATA_v3_KEY", raising=False)
        with pytest.raises(ValueError, match="YOUTUBE_DATA_v3_KEY"):
            YouTubeDataClient()

    def test_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("YOUTUBE_DATA_v3_KEY", "env-key")
        assert YouTubeDataClient()._api_key == "env-key"

    def test_requires_context_manager(self):
        client = YouTubeDataClient(api_key="data-key")
        with pytest.raises(RuntimeError, match="async context manager"):
            asyncio.run(client.get_video_metadata("abc123"))
