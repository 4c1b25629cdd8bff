"""
Tests for the YouTube integration.

Tests cover:
- Channel, playlist and video resolvers through a ResolutionSession
- Uploads pagination and page bounds
- Get / list / update video actions
"""

import httpx
import pytest

from wakflo.config import ConnectorSettings
from wakflo.integrations import youtube
from wakflo.sdk.context import PerformContext
from wakflo.sdk.errors import DecodeError, NotFoundError, PartialResultError, PreconditionError
from wakflo.sdk.resolution import ResolutionSession

V3 = "/youtube/v3"

CHANNEL = {
    "id": "UC1",
    "snippet": {"title": "My Channel", "customUrl": "@mine"},
    "statistics": {"subscriberCount": "1200"},
    "contentDetails": {"relatedPlaylists": {"uploads": "UU1"}},
}

UPLOAD_PAGES = {
    None: (["v1", "v2"], "p2"),
    "p2": (["v3", "v4"], "p3"),
    "p3": (["v5"], None),
}


def _video(video_id, **snippet):
    return {
        "id": video_id,
        "snippet": {"title": f"Video {video_id}", "channelId": "UC1", **snippet},
        "statistics": {"viewCount": "10"},
        "status": {"privacyStatus": "private", "embeddable": True},
    }


def _uploads(request):
    token = request.url.params.get("pageToken")
    ids, next_token = UPLOAD_PAGES[token]
    body = {
        "items": [
            {"snippet": {"title": f"Video {i}", "resourceId": {"videoId": i}}} for i in ids
        ]
    }
    if next_token:
        body["nextPageToken"] = next_token
    return httpx.Response(200, json=body)


@pytest.fixture
def youtube_vendor(vendor):
    vendor.add("GET", f"{V3}/channels", {"items": [CHANNEL]})
    vendor.add_handler("GET", f"{V3}/playlistItems", _uploads)
    return vendor


def _integration(youtube_vendor, **settings):
    return youtube.create_integration(ConnectorSettings(**settings), youtube_vendor.transport)


# =============================================================================
# Dynamic Fields
# =============================================================================


class TestYouTubeResolvers:
    """Tests for dynamic channel, playlist and video fields."""

    @pytest.mark.asyncio
    async def test_video_field_follows_every_upload_page(self, youtube_vendor, oauth):
        """Test that three upload pages become one option list after a channel lookup."""
        action = _integration(youtube_vendor).action("youtube_update_video")
        session = ResolutionSession(action.properties(), oauth, integration="youtube")
        session.set_value("channel_id", "UC1")

        response = await session.resolve("video_id")

        assert response.ids == ["v1", "v2", "v3", "v4", "v5"]
        assert response.truncated is False
        assert len(youtube_vendor.calls(f"{V3}/channels")) == 1
        assert len(youtube_vendor.calls(f"{V3}/playlistItems")) == 3
        first = youtube_vendor.calls(f"{V3}/playlistItems")[0]
        assert first.url.params["playlistId"] == "UU1"
        assert "pageToken" not in first.url.params

    @pytest.mark.asyncio
    async def test_page_bound_truncates(self, youtube_vendor, oauth):
        """Test that max_pages caps the uploads requests."""
        action = _integration(youtube_vendor, max_pages=2).action("youtube_update_video")
        session = ResolutionSession(action.properties(), oauth)
        session.set_value("channel_id", "UC1")

        response = await session.resolve("video_id")

        assert response.ids == ["v1", "v2", "v3", "v4"]
        assert response.truncated is True
        assert len(youtube_vendor.calls(f"{V3}/playlistItems")) == 2

    @pytest.mark.asyncio
    async def test_failing_second_page_is_partial(self, vendor, oauth):
        """Test that a failure on page two never yields a short list."""

        def flaky(request):
            if request.url.params.get("pageToken"):
                return httpx.Response(500, json={"error": "backend"})
            return _uploads(request)

        vendor.add("GET", f"{V3}/channels", {"items": [CHANNEL]})
        vendor.add_handler("GET", f"{V3}/playlistItems", flaky)
        action = _integration(vendor).action("youtube_update_video")
        session = ResolutionSession(action.properties(), oauth)

        with pytest.raises(PartialResultError) as exc_info:
            await session.resolve("video_id")

        assert exc_info.value.collected == 2

    @pytest.mark.asyncio
    async def test_malformed_second_page_is_partial(self, vendor, oauth):
        """Test that a wrong-shaped page two is a PartialResultError over a DecodeError."""

        def malformed(request):
            if request.url.params.get("pageToken"):
                return httpx.Response(200, json=[{"unexpected": True}])
            return _uploads(request)

        vendor.add("GET", f"{V3}/channels", {"items": [CHANNEL]})
        vendor.add_handler("GET", f"{V3}/playlistItems", malformed)
        action = _integration(vendor).action("youtube_update_video")
        session = ResolutionSession(action.properties(), oauth)

        with pytest.raises(PartialResultError) as exc_info:
            await session.resolve("video_id")

        assert exc_info.value.collected == 2
        assert isinstance(exc_info.value.cause, DecodeError)

    @pytest.mark.asyncio
    async def test_malformed_channel_is_decode_error(self, vendor, oauth):
        """Test that a channel item without an id raises DecodeError."""
        vendor.add("GET", f"{V3}/channels", {"items": [{"snippet": {"title": "No id"}}]})
        action = _integration(vendor).action("youtube_list_videos")
        session = ResolutionSession(action.properties(), oauth)

        with pytest.raises(DecodeError, match="Channel") as exc_info:
            await session.resolve("channel_id")

        assert exc_info.value.operation == "list_channels"

    @pytest.mark.asyncio
    async def test_unknown_channel(self, vendor, oauth):
        """Test that a channel without uploads is reported by ID."""
        vendor.add("GET", f"{V3}/channels", {"items": []})
        action = _integration(vendor).action("youtube_update_video")
        session = ResolutionSession(action.properties(), oauth)
        session.set_value("channel_id", "UCmissing")

        with pytest.raises(NotFoundError, match="'UCmissing'"):
            await session.resolve("video_id")

    @pytest.mark.asyncio
    async def test_channels_carry_extras(self, youtube_vendor, oauth):
        """Test channel options and the mine=true filter."""
        action = _integration(youtube_vendor).action("youtube_list_videos")
        session = ResolutionSession(action.properties(), oauth)

        response = await session.resolve("channel_id")

        assert response.to_dict()["items"] == [
            {"customUrl": "@mine", "subscribers": "1200", "id": "UC1", "name": "My Channel"}
        ]
        assert youtube_vendor.calls(f"{V3}/channels")[0].url.params["mine"] == "true"

    @pytest.mark.asyncio
    async def test_playlists_refresh_on_channel(self, vendor, oauth):
        """Test that changing the channel re-queries playlists for that channel."""
        vendor.add(
            "GET",
            f"{V3}/playlists",
            {"items": [{"id": "PL1", "snippet": {"title": "Favourites"}}]},
        )
        action = _integration(vendor).action("youtube_list_videos")
        session = ResolutionSession(action.properties(), oauth)

        await session.resolve("playlist_id")
        assert session.set_value("channel_id", "UC2") == ["playlist_id"]
        await session.resolve("playlist_id")

        first, second = vendor.calls(f"{V3}/playlists")
        assert first.url.params["mine"] == "true"
        assert second.url.params["channelId"] == "UC2"


# =============================================================================
# Actions
# =============================================================================


class TestGetVideo:
    """Tests for GetVideoAction."""

    @pytest.mark.asyncio
    async def test_by_id(self, vendor, oauth):
        """Test fetching a public video by ID."""
        vendor.add("GET", f"{V3}/videos", {"items": [_video("abc")]})
        ctx = PerformContext(input={"video_id": "abc", "parts": "basic"}, auth=oauth)

        result = await _integration(vendor).action("youtube_get_video").perform(ctx)

        assert result["id"] == "abc"
        assert result["viewCount"] == "10"
        assert vendor.calls(f"{V3}/videos")[0].url.params["part"] == "snippet,statistics"

    @pytest.mark.asyncio
    async def test_not_found(self, vendor, oauth):
        """Test that an empty result names the video."""
        vendor.add("GET", f"{V3}/videos", {"items": []})
        ctx = PerformContext(input={"video_id": "gone"}, auth=oauth)

        with pytest.raises(NotFoundError, match="'gone'"):
            await _integration(vendor).action("youtube_get_video").perform(ctx)

    @pytest.mark.asyncio
    async def test_own_channel_requires_selection(self, vendor, oauth):
        """Test that the video selector is required when browsing your own channel."""
        ctx = PerformContext(input={"search_own_channel": True}, auth=oauth)

        with pytest.raises(PreconditionError, match="own_video_id"):
            await _integration(vendor).action("youtube_get_video").perform(ctx)

        assert vendor.requests == []


class TestListVideos:
    """Tests for ListVideosAction."""

    @pytest.mark.asyncio
    async def test_requires_criteria(self, vendor, oauth):
        """Test that at least one filter is needed."""
        with pytest.raises(PreconditionError, match="search criterion"):
            await _integration(vendor).action("youtube_list_videos").perform(
                PerformContext(input={}, auth=oauth)
            )

    @pytest.mark.asyncio
    async def test_search(self, vendor, oauth):
        """Test search followed by a details lookup."""
        vendor.add(
            "GET",
            f"{V3}/search",
            {
                "items": [{"id": {"videoId": "s1"}}, {"id": {"videoId": "s2"}}],
                "nextPageToken": "NEXT",
                "pageInfo": {"totalResults": 40},
            },
        )
        vendor.add("GET", f"{V3}/videos", {"items": [_video("s1"), _video("s2")]})
        ctx = PerformContext(input={"search_query": "cats", "max_results": 2}, auth=oauth)

        result = await _integration(vendor).action("youtube_list_videos").perform(ctx)

        assert [v["id"] for v in result["videos"]] == ["s1", "s2"]
        assert result["nextPageToken"] == "NEXT"
        assert result["totalResults"] == 40
        search = vendor.calls(f"{V3}/search")[0].url.params
        assert search["q"] == "cats"
        assert "channelId" not in search
        assert vendor.calls(f"{V3}/videos")[0].url.params["id"] == "s1,s2"


class TestUpdateVideo:
    """Tests for UpdateVideoAction."""

    @pytest.mark.asyncio
    async def test_keeps_unchanged_snippet_fields(self, vendor, oauth):
        """Test that only submitted fields change and privacy is merged into status."""
        current = _video("abc", description="Old description", tags=["a"], categoryId="10")
        vendor.add("GET", f"{V3}/videos", {"items": [current]})
        vendor.add("PUT", f"{V3}/videos", _video("abc", title="New title"))
        ctx = PerformContext(
            input={
                "channel_id": "UC1",
                "video_id": "abc",
                "title": "New title",
                "privacy_status": "public",
            },
            auth=oauth,
        )

        result = await _integration(vendor).action("youtube_update_video").perform(ctx)

        body = vendor.last_json(f"{V3}/videos")
        assert body["snippet"] == {
            "title": "New title",
            "description": "Old description",
            "categoryId": "10",
            "tags": ["a"],
        }
        assert body["status"] == {"privacyStatus": "public", "embeddable": True}
        put = vendor.calls(f"{V3}/videos", method="PUT")[0]
        assert put.url.params["part"] == "snippet,status"
        assert result["title"] == "New title"
