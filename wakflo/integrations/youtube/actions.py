"""YouTube actions."""

from __future__ import annotations

import logging
from typing import Any

from wakflo.integrations.youtube.client import YouTubeClient
from wakflo.integrations.youtube.options import (
    YouTubeOptions,
    register_channel_field,
    register_playlist_field,
    register_video_field,
)
from wakflo.integrations.youtube.schemas import (
    GetVideoProps,
    ListVideosProps,
    PrivacyStatus,
    UpdateVideoProps,
    Video,
)
from wakflo.sdk.action import Action, ActionMetadata
from wakflo.sdk.client import ClientConfig
from wakflo.sdk.context import PerformContext
from wakflo.sdk.errors import PreconditionError
from wakflo.sdk.form import FormSchema, Option, new_form

logger = logging.getLogger(__name__)

VIDEO_LIST_PARTS = "snippet,statistics,contentDetails"

_VIDEO_SAMPLE = {
    "id": "dQw4w9WgXcQ",
    "title": "Sample Video Title",
    "description": "Sample video description",
    "channel": {"id": "UCuAXFkgsw1L7xaCfnd5JJOw", "title": "Sample Channel"},
    "publishedAt": "2023-01-01T00:00:00Z",
    "duration": "PT3M32S",
    "viewCount": "1000000",
    "likeCount": "50000",
    "commentCount": "5000",
}

_CATEGORIES = (
    Option("1", "Film & Animation"),
    Option("2", "Autos & Vehicles"),
    Option("10", "Music"),
    Option("15", "Pets & Animals"),
    Option("17", "Sports"),
    Option("20", "Gaming"),
    Option("22", "People & Blogs"),
    Option("23", "Comedy"),
    Option("24", "Entertainment"),
    Option("25", "News & Politics"),
    Option("26", "Howto & Style"),
    Option("27", "Education"),
    Option("28", "Science & Technology"),
)


class _YouTubeAction(Action):
    integration = "youtube"

    def __init__(self, config: ClientConfig, options: YouTubeOptions | None = None):
        self.config = config
        self.options = options or YouTubeOptions(config)

    def _client(self, ctx: PerformContext) -> YouTubeClient:
        return YouTubeClient(self.config, ctx.auth_context(self.integration))


class GetVideoAction(_YouTubeAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="youtube_get_video",
            display_name="Get YouTube Video",
            description=(
                "Get detailed information about a specific YouTube video by its ID. You can "
                "look up any public video or select one from your own channel."
            ),
            sample_output=_VIDEO_SAMPLE,
            icon="youtube",
        )

    def properties(self) -> FormSchema:
        form = new_form("youtube_get_video", "Get YouTube Video")
        form.checkbox_field("search_own_channel", "Search Only My Channel").default_value(
            False
        ).help_text("Check this to pick from your own channel's videos")
        register_channel_field(form, self.options).visible_when_equals("search_own_channel", True)
        form.text_field("video_id", "Video ID").placeholder("dQw4w9WgXcQ").help_text(
            "The ID from youtube.com/watch?v=VIDEO_ID"
        ).required().visible_when_equals("search_own_channel", False)
        register_video_field(
            form, self.options, name="own_video_id", label="Select Video", required=True
        ).visible_when_equals("search_own_channel", True)
        form.select_field("parts", "Data Parts").add_options(
            Option("basic", "Basic (snippet, statistics)"),
            Option("detailed", "Detailed (snippet, statistics, contentDetails, status)"),
            Option("full", "Full (all available data)"),
        ).default_value("detailed")
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, GetVideoProps)
        video_id = props.target_video_id
        if not video_id:
            raise PreconditionError(
                (
                    "select a video from your channel"
                    if props.search_own_channel
                    else "video ID is required"
                ),
                self.integration,
                operation=self.operation_id,
            )

        async with self._client(ctx) as client:
            video = await client.get_video(video_id, props.parts.parts)
        return video.to_output()


class ListVideosAction(_YouTubeAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="youtube_list_videos",
            display_name="List YouTube Videos",
            description=(
                "Search and retrieve videos by search query, channel, playlist or "
                "specific video IDs."
            ),
            sample_output={
                "videos": [_VIDEO_SAMPLE],
                "nextPageToken": "CAoQAA",
                "totalResults": 100,
            },
            icon="youtube",
        )

    def properties(self) -> FormSchema:
        form = new_form("youtube_list_videos", "List YouTube Videos")
        form.text_field("search_query", "Search Query").placeholder("Enter search keywords")
        register_channel_field(form, self.options, label="Channel ID")
        register_playlist_field(form, self.options, label="Playlist ID")
        form.text_field("video_ids", "Video IDs").placeholder("videoId1,videoId2").help_text(
            "Comma-separated list of specific video IDs to retrieve"
        )
        form.number_field("max_results", "Max Results").default_value(25).min_value(1).max_value(50)
        form.select_field("order", "Sort Order").add_options(
            Option("relevance", "Relevance"),
            Option("date", "Date"),
            Option("rating", "Rating"),
            Option("title", "Title"),
            Option("viewCount", "View Count"),
        )
        form.select_field("video_duration", "Video Duration").add_options(
            Option("any", "Any"),
            Option("short", "Short (< 4 minutes)"),
            Option("medium", "Medium (4-20 minutes)"),
            Option("long", "Long (> 20 minutes)"),
        )
        form.select_field("video_type", "Video Type").add_options(
            Option("any", "Any"),
            Option("episode", "Episode"),
            Option("movie", "Movie"),
        )
        form.date_time_field("published_after", "Published After").placeholder(
            "2023-01-01T00:00:00Z"
        )
        form.date_time_field("published_before", "Published Before").placeholder(
            "2023-12-31T23:59:59Z"
        )
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, ListVideosProps)
        if not props.has_criteria:
            raise PreconditionError(
                "at least one search criterion must be provided "
                "(search query, channel ID, playlist ID, or video IDs)",
                self.integration,
                operation=self.operation_id,
            )

        next_page_token: str | None = None
        async with self._client(ctx) as client:
            if props.video_id_list:
                videos = await client.get_videos(props.video_id_list, VIDEO_LIST_PARTS)
                total = len(videos)
            elif props.playlist_id:
                items, next_page_token = await client.list_playlist_items(
                    props.playlist_id, max_results=props.max_results
                )
                ids = [item.video_id for item in items if item.video_id]
                videos = await client.get_videos(ids, VIDEO_LIST_PARTS) if ids else []
                total = len(videos)
            else:
                videos, next_page_token, total = await self._search(client, props)

        result: dict[str, Any] = {
            "videos": [video.to_output() for video in videos],
            "totalResults": total,
        }
        if next_page_token:
            result["nextPageToken"] = next_page_token
        return result

    async def _search(
        self, client: YouTubeClient, props: ListVideosProps
    ) -> tuple[list[Video], str | None, int]:
        envelope = await client.search_videos(
            {
                "q": props.search_query,
                "channelId": props.channel_id,
                "maxResults": props.max_results,
                "order": props.order,
                "videoDuration": props.video_duration,
                "videoType": props.video_type,
                "publishedAfter": props.published_after,
                "publishedBefore": props.published_before,
            }
        )
        ids = [item.get("id", {}).get("videoId") for item in envelope.items]
        ids = [video_id for video_id in ids if video_id]
        videos = await client.get_videos(ids, VIDEO_LIST_PARTS) if ids else []
        return videos, envelope.next_page_token, envelope.total_results


class UpdateVideoAction(_YouTubeAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="youtube_update_video",
            display_name="Update YouTube Video",
            description=(
                "Update the title, description, tags, category or privacy of a YouTube video."
            ),
            sample_output={
                "id": "dQw4w9WgXcQ",
                "title": "Updated Video Title",
                "description": "Updated video description",
                "tags": ["tag1", "tag2"],
                "categoryId": "22",
                "status": {"privacyStatus": "public"},
            },
            icon="youtube",
        )

    def properties(self) -> FormSchema:
        form = new_form("youtube_update_video", "Update YouTube Video")
        register_channel_field(form, self.options, required=True)
        register_video_field(form, self.options, required=True)
        form.text_field("title", "Title").max_length(100)
        form.textarea_field("description", "Description").max_length(5000)
        form.textarea_field("tags", "Tags").help_text("Comma-separated tags")
        form.select_field("category_id", "Category").add_options(*_CATEGORIES)
        form.select_field("privacy_status", "Privacy Status").add_options(
            Option(PrivacyStatus.PUBLIC.value, "Public"),
            Option(PrivacyStatus.UNLISTED.value, "Unlisted"),
            Option(PrivacyStatus.PRIVATE.value, "Private"),
        )
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, UpdateVideoProps)

        async with self._client(ctx) as client:
            current = await client.get_video(props.video_id, "snippet,status")

            # videos.update replaces whole parts, so unchanged snippet fields are resent
            description = props.description
            if description is None:
                description = current.snippet.description
            snippet: dict[str, Any] = {
                "title": props.title or current.snippet.title,
                "description": description,
                "categoryId": props.category_id or current.snippet.category_id or "22",
                "tags": props.tag_list if props.tag_list is not None else current.snippet.tags,
            }
            body: dict[str, Any] = {"id": props.video_id, "snippet": snippet}
            part = "snippet"
            if props.privacy_status is not None:
                body["status"] = {**current.status, "privacyStatus": props.privacy_status.value}
                part = "snippet,status"

            updated = await client.update_video(body, part)

        logger.info(f"[youtube] Updated video {props.video_id}")
        return {
            "id": updated.id,
            "title": updated.snippet.title,
            "description": updated.snippet.description,
            "tags": updated.snippet.tags,
            "categoryId": updated.snippet.category_id,
            "status": updated.status,
        }
