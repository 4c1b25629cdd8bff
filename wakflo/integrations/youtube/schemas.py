"""
Pydantic schemas for the YouTube Data API v3.

Vendor resources are parsed leniently (unknown keys ignored, missing
sections defaulted) since the API omits parts that were not requested.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Enums
# =============================================================================


class VideoParts(str, Enum):
    """How much of a video resource to fetch."""

    BASIC = "basic"
    DETAILED = "detailed"
    FULL = "full"

    @property
    def parts(self) -> str:
        return {
            VideoParts.BASIC: "snippet,statistics",
            VideoParts.DETAILED: "snippet,statistics,contentDetails,status",
            VideoParts.FULL: "snippet,statistics,contentDetails,status,topicDetails,player",
        }[self]


class PrivacyStatus(str, Enum):
    PUBLIC = "public"
    UNLISTED = "unlisted"
    PRIVATE = "private"


# =============================================================================
# Vendor Resources
# =============================================================================


class _Resource(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Snippet(_Resource):
    title: str = ""
    description: str = ""
    channel_id: str = Field("", alias="channelId")
    channel_title: str = Field("", alias="channelTitle")
    published_at: str | None = Field(None, alias="publishedAt")
    tags: list[str] = Field(default_factory=list)
    category_id: str | None = Field(None, alias="categoryId")
    custom_url: str | None = Field(None, alias="customUrl")
    thumbnails: dict[str, Any] = Field(default_factory=dict)
    resource_id: dict[str, Any] = Field(default_factory=dict, alias="resourceId")


class Channel(_Resource):
    id: str
    snippet: Snippet = Field(default_factory=Snippet)
    statistics: dict[str, Any] = Field(default_factory=dict)
    content_details: dict[str, Any] = Field(default_factory=dict, alias="contentDetails")

    @property
    def uploads_playlist_id(self) -> str | None:
        return self.content_details.get("relatedPlaylists", {}).get("uploads")


class Playlist(_Resource):
    id: str
    snippet: Snippet = Field(default_factory=Snippet)
    content_details: dict[str, Any] = Field(default_factory=dict, alias="contentDetails")


class PlaylistItem(_Resource):
    id: str = ""
    snippet: Snippet = Field(default_factory=Snippet)

    @property
    def video_id(self) -> str | None:
        return self.snippet.resource_id.get("videoId")


class Video(_Resource):
    id: str
    snippet: Snippet = Field(default_factory=Snippet)
    statistics: dict[str, Any] = Field(default_factory=dict)
    content_details: dict[str, Any] = Field(default_factory=dict, alias="contentDetails")
    status: dict[str, Any] = Field(default_factory=dict)

    def to_output(self) -> dict[str, Any]:
        """Flatten to the action output shape."""
        result: dict[str, Any] = {
            "id": self.id,
            "title": self.snippet.title,
            "description": self.snippet.description,
            "channel": {"id": self.snippet.channel_id, "title": self.snippet.channel_title},
            "publishedAt": self.snippet.published_at,
            "thumbnails": self.snippet.thumbnails,
        }
        if self.snippet.tags:
            result["tags"] = self.snippet.tags
        if self.content_details.get("duration"):
            result["duration"] = self.content_details["duration"]
        for key in ("viewCount", "likeCount", "commentCount"):
            if key in self.statistics:
                result[key] = self.statistics[key]
        if self.status:
            result["status"] = self.status
        return result


class ListResponse(_Resource):
    """Envelope shared by every list endpoint."""

    items: list[dict[str, Any]] = Field(default_factory=list)
    next_page_token: str | None = Field(None, alias="nextPageToken")
    page_info: dict[str, Any] = Field(default_factory=dict, alias="pageInfo")

    @property
    def total_results(self) -> int:
        return int(self.page_info.get("totalResults", len(self.items)))


# =============================================================================
# Action Inputs
# =============================================================================


class GetVideoProps(BaseModel):
    search_own_channel: bool = False
    video_id: str | None = None
    own_video_id: str | None = None
    parts: VideoParts = VideoParts.DETAILED

    @property
    def target_video_id(self) -> str | None:
        return self.own_video_id if self.search_own_channel else self.video_id


class ListVideosProps(BaseModel):
    search_query: str | None = None
    channel_id: str | None = None
    playlist_id: str | None = None
    video_ids: str | None = None
    max_results: int = Field(25, ge=1, le=50)
    order: str | None = None
    video_duration: str | None = None
    video_type: str | None = None
    published_after: str | None = None
    published_before: str | None = None

    @field_validator("max_results", mode="before")
    @classmethod
    def default_max_results(cls, value: Any) -> Any:
        return 25 if value in (None, "", 0) else value

    @property
    def video_id_list(self) -> list[str]:
        if not self.video_ids:
            return []
        return [v.strip() for v in self.video_ids.split(",") if v.strip()]

    @property
    def has_criteria(self) -> bool:
        return bool(self.search_query or self.channel_id or self.playlist_id or self.video_id_list)


class UpdateVideoProps(BaseModel):
    channel_id: str | None = None
    video_id: str
    title: str | None = None
    description: str | None = None
    tags: str | None = None
    category_id: str | None = None
    privacy_status: PrivacyStatus | None = None

    @property
    def tag_list(self) -> list[str] | None:
        if self.tags is None:
            return None
        return [t.strip() for t in self.tags.split(",") if t.strip()]
