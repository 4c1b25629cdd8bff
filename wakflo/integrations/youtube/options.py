"""
Dynamic select fields for YouTube.

    channel   the user's own channels (searchable)
    playlist  playlists of the selected channel; the user's own when no
              channel is selected (refresh_on channel_id)
    video     uploads of the selected channel, or of the user's own
              channel, across pages (refresh_on channel_id)
"""

from __future__ import annotations

import logging

from wakflo.integrations.youtube.client import YouTubeClient
from wakflo.sdk.client import ClientConfig
from wakflo.sdk.context import DynamicFieldContext
from wakflo.sdk.form import FieldBuilder, FormBuilder
from wakflo.sdk.options import DynamicOption, DynamicOptionsResponse, OptionsBuilder, collect_pages

logger = logging.getLogger(__name__)


class YouTubeOptions:
    """Resolvers bound to one client configuration."""

    def __init__(self, config: ClientConfig):
        self.config = config

    async def channels(self, ctx: DynamicFieldContext) -> DynamicOptionsResponse:
        async with YouTubeClient(self.config, ctx.auth) as client:
            channels = await client.list_channels(mine=True)

        options = []
        for channel in channels:
            extra = {}
            if channel.snippet.custom_url:
                extra["customUrl"] = channel.snippet.custom_url
            if channel.statistics.get("subscriberCount"):
                extra["subscribers"] = channel.statistics["subscriberCount"]
            options.append(DynamicOption(id=channel.id, name=channel.snippet.title, extra=extra))
        return ctx.respond(options)

    async def playlists(self, ctx: DynamicFieldContext) -> DynamicOptionsResponse:
        channel_id = ctx.value("channel_id")
        async with YouTubeClient(self.config, ctx.auth) as client:
            playlists = await client.list_playlists(channel_id)

        options = []
        for playlist in playlists:
            extra = {}
            if playlist.content_details.get("itemCount"):
                extra["videoCount"] = playlist.content_details["itemCount"]
            if playlist.snippet.channel_title:
                extra["channel"] = playlist.snippet.channel_title
            options.append(DynamicOption(id=playlist.id, name=playlist.snippet.title, extra=extra))
        return ctx.respond(options)

    async def videos(self, ctx: DynamicFieldContext) -> DynamicOptionsResponse:
        channel_id = ctx.value("channel_id")
        async with YouTubeClient(self.config, ctx.auth) as client:
            uploads_id = await client.uploads_playlist_id(channel_id)

            async def fetch_page(cursor: str | None) -> tuple[list[DynamicOption], str | None]:
                items, next_token = await client.list_playlist_items(uploads_id, page_token=cursor)
                page = [
                    DynamicOption(
                        id=item.video_id,
                        name=item.snippet.title,
                        extra={"publishedAt": item.snippet.published_at},
                    )
                    for item in items
                    if item.video_id
                ]
                return page, next_token

            collected = await collect_pages(
                fetch_page,
                integration="youtube",
                operation="list_videos",
                max_pages=self.config.max_pages,
            )

        logger.debug(
            f"[youtube] Collected {len(collected.items)} videos from "
            f"{collected.pages_fetched} pages of {uploads_id}"
        )
        response = ctx.respond(collected.items)
        if collected.truncated:
            return DynamicOptionsResponse.from_items(response.items, truncated=True)
        return response


# =============================================================================
# Field Registration
# =============================================================================


def register_channel_field(
    form: FormBuilder,
    options: YouTubeOptions,
    name: str = "channel_id",
    label: str = "Channel",
    required: bool = False,
) -> FieldBuilder:
    descriptor = OptionsBuilder().resolver(options.channels).with_search().build()
    return (
        form.select_field(name, label)
        .placeholder("Select a channel")
        .required(required)
        .with_dynamic_options(descriptor)
        .help_text("Select the YouTube channel to use")
    )


def register_playlist_field(
    form: FormBuilder,
    options: YouTubeOptions,
    name: str = "playlist_id",
    label: str = "Playlist",
    required: bool = False,
) -> FieldBuilder:
    descriptor = (
        OptionsBuilder()
        .resolver(options.playlists)
        .field_reference("channel_id")
        .refresh_on("channel_id")
        .with_search()
        .build()
    )
    return (
        form.select_field(name, label)
        .placeholder("Select a playlist")
        .required(required)
        .with_dynamic_options(descriptor)
        .help_text("Select a YouTube playlist")
    )


def register_video_field(
    form: FormBuilder,
    options: YouTubeOptions,
    name: str = "video_id",
    label: str = "Video",
    required: bool = False,
) -> FieldBuilder:
    descriptor = (
        OptionsBuilder()
        .resolver(options.videos)
        .field_reference("channel_id")
        .refresh_on("channel_id")
        .with_search()
        .with_pagination(50)
        .build()
    )
    return (
        form.select_field(name, label)
        .placeholder("Select a video")
        .required(required)
        .with_dynamic_options(descriptor)
        .help_text("Select a video from the channel's uploads")
    )
