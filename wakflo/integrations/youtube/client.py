"""
YouTube Data API client.

Usage:
    async with YouTubeClient(config, auth) as client:
        channels = await client.list_channels(mine=True)
        page = await client.list_playlist_items(uploads_id, page_token=None)

API Reference:
    https://developers.google.com/youtube/v3/docs
"""

from __future__ import annotations

import logging
from typing import Any

from wakflo.integrations.youtube.schemas import (
    Channel,
    ListResponse,
    Playlist,
    PlaylistItem,
    Video,
)
from wakflo.sdk.client import BearerTokenClient, ModelT
from wakflo.sdk.errors import NotFoundError

logger = logging.getLogger(__name__)

PAGE_SIZE = 50


class YouTubeClient(BearerTokenClient):
    """
    Async client for the YouTube Data API.

    The client handles:
    - Authentication via the OAuth bearer token
    - Page tokens (callers drive pagination, one page per call)
    - Error mapping to VendorError subtypes
    """

    @property
    def name(self) -> str:
        return "youtube"

    def _items(self, model: type[ModelT], data: Any, operation: str) -> list[ModelT]:
        envelope = self.parse(ListResponse, data, operation=operation)
        return self.parse_many(model, envelope.items, operation=operation)

    # =========================================================================
    # Channels
    # =========================================================================

    async def list_channels(
        self,
        *,
        mine: bool = False,
        channel_id: str | None = None,
        part: str = "snippet,statistics",
    ) -> list[Channel]:
        params: dict[str, Any] = {"part": part, "maxResults": PAGE_SIZE}
        if channel_id:
            params["id"] = channel_id
        else:
            params["mine"] = "true" if mine else None

        data = await self.get_json(
            "/channels", params=params, operation="list_channels", resource_id=channel_id
        )
        return self._items(Channel, data, "list_channels")

    async def uploads_playlist_id(self, channel_id: str | None = None) -> str:
        """
        Uploads playlist of a channel, or of the user's own channel.

        Raises:
            NotFoundError: Channel does not exist or has no uploads playlist
        """
        channels = await self.list_channels(
            mine=channel_id is None,
            channel_id=channel_id,
            part="contentDetails",
        )
        if not channels or not channels[0].uploads_playlist_id:
            if channel_id:
                raise NotFoundError(
                    f"no channel found with ID '{channel_id}'",
                    self.name,
                    operation="uploads_playlist_id",
                    resource_id=channel_id,
                )
            raise NotFoundError(
                "the connected account has no YouTube channel",
                self.name,
                operation="uploads_playlist_id",
            )
        return channels[0].uploads_playlist_id

    # =========================================================================
    # Playlists
    # =========================================================================

    async def list_playlists(self, channel_id: str | None = None) -> list[Playlist]:
        """Playlists of a channel; the user's own playlists when channel_id is None."""
        params: dict[str, Any] = {"part": "snippet,contentDetails", "maxResults": PAGE_SIZE}
        if channel_id:
            params["channelId"] = channel_id
        else:
            params["mine"] = "true"

        data = await self.get_json(
            "/playlists", params=params, operation="list_playlists", resource_id=channel_id
        )
        return self._items(Playlist, data, "list_playlists")

    async def list_playlist_items(
        self,
        playlist_id: str,
        *,
        page_token: str | None = None,
        max_results: int = PAGE_SIZE,
    ) -> tuple[list[PlaylistItem], str | None]:
        """One page of a playlist. Returns (items, next_page_token)."""
        data = await self.get_json(
            "/playlistItems",
            params={
                "part": "snippet",
                "playlistId": playlist_id,
                "maxResults": max_results,
                "pageToken": page_token,
            },
            operation="list_playlist_items",
            resource_id=playlist_id,
        )
        envelope = self.parse(ListResponse, data, operation="list_playlist_items")
        items = self.parse_many(PlaylistItem, envelope.items, operation="list_playlist_items")
        return items, envelope.next_page_token

    # =========================================================================
    # Videos
    # =========================================================================

    async def get_videos(self, video_ids: list[str], part: str) -> list[Video]:
        data = await self.get_json(
            "/videos",
            params={"part": part, "id": ",".join(video_ids)},
            operation="get_videos",
            resource_id=",".join(video_ids),
        )
        return self._items(Video, data, "get_videos")

    async def get_video(self, video_id: str, part: str) -> Video:
        """
        Raises:
            NotFoundError: No video with this id is visible to the user
        """
        videos = await self.get_videos([video_id], part)
        if not videos:
            raise NotFoundError(
                f"no video found with ID '{video_id}'",
                self.name,
                operation="get_video",
                resource_id=video_id,
            )
        return videos[0]

    async def search_videos(self, params: dict[str, Any]) -> ListResponse:
        data = await self.get_json(
            "/search",
            params={"part": "snippet", "type": "video", **params},
            operation="search_videos",
        )
        return self.parse(ListResponse, data, operation="search_videos")

    async def update_video(self, video: dict[str, Any], part: str) -> Video:
        data = await self.request_json(
            "PUT",
            "/videos",
            params={"part": part},
            json=video,
            operation="update_video",
            resource_id=video.get("id"),
        )
        return self.parse(Video, data, operation="update_video")
