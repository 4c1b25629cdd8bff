"""
YouTube Integration for Wakflo.

Provides:
- Video lookup, listing and metadata updates
- Dynamic channel, playlist and video selectors

Usage:
    from wakflo.integrations import youtube

    integration = youtube.create_integration(settings)
    action = integration.action("youtube_get_video")

API Reference:
    https://developers.google.com/youtube/v3/docs
"""

from __future__ import annotations

import httpx

from wakflo.config import ConnectorSettings
from wakflo.integrations.youtube.actions import GetVideoAction, ListVideosAction, UpdateVideoAction
from wakflo.integrations.youtube.client import YouTubeClient
from wakflo.integrations.youtube.options import YouTubeOptions
from wakflo.sdk.auth import oauth2_auth
from wakflo.sdk.integration import Integration

YOUTUBE_AUTH = oauth2_auth(
    "youtube-auth",
    "YouTube OAuth",
    authorization_url="https://accounts.google.com/o/oauth2/auth",
    token_url="https://oauth2.googleapis.com/token",
    scopes=[
        "https://www.googleapis.com/auth/youtube",
        "https://www.googleapis.com/auth/youtube.force-ssl",
        "https://www.googleapis.com/auth/youtube.readonly",
        "https://www.googleapis.com/auth/youtube.upload",
    ],
)


def create_integration(
    settings: ConnectorSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Integration:
    config = settings.client_config(settings.youtube_base_url, transport)
    options = YouTubeOptions(config)
    return Integration(
        name="youtube",
        display_name="YouTube",
        description="Manage videos, playlists and channels on YouTube.",
        auth=YOUTUBE_AUTH,
        actions=(
            GetVideoAction(config, options),
            ListVideosAction(config, options),
            UpdateVideoAction(config, options),
        ),
        categories=("social-media", "video"),
    )


__all__ = [
    "YOUTUBE_AUTH",
    "GetVideoAction",
    "ListVideosAction",
    "UpdateVideoAction",
    "YouTubeClient",
    "YouTubeOptions",
    "create_integration",
]
