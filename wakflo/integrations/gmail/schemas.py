"""
Pydantic schemas for the Gmail API v1.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


# =============================================================================
# Vendor Resources
# =============================================================================


class _Resource(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Header(_Resource):
    name: str
    value: str = ""


class MessagePartBody(_Resource):
    attachment_id: str | None = Field(None, alias="attachmentId")
    size: int = 0


class MessagePart(_Resource):
    part_id: str | None = Field(None, alias="partId")
    mime_type: str | None = Field(None, alias="mimeType")
    filename: str = ""
    headers: list[Header] = Field(default_factory=list)
    body: MessagePartBody = Field(default_factory=MessagePartBody)
    parts: list[MessagePart] = Field(default_factory=list)

    def attachments(self) -> list[dict[str, Any]]:
        """Attachments found in this part and all nested parts, depth first."""
        found = []
        if self.filename and self.body.attachment_id:
            found.append(
                {
                    "attachmentId": self.body.attachment_id,
                    "filename": self.filename,
                    "mimeType": self.mime_type,
                    "size": self.body.size,
                }
            )
        for part in self.parts:
            found.extend(part.attachments())
        return found


class MessageRef(_Resource):
    id: str
    thread_id: str | None = Field(None, alias="threadId")


class MessageList(_Resource):
    messages: list[MessageRef] = Field(default_factory=list)
    next_page_token: str | None = Field(None, alias="nextPageToken")
    result_size_estimate: int = Field(0, alias="resultSizeEstimate")


class Message(_Resource):
    id: str
    thread_id: str | None = Field(None, alias="threadId")
    label_ids: list[str] = Field(default_factory=list, alias="labelIds")
    snippet: str = ""
    internal_date: int | None = Field(None, alias="internalDate")
    size_estimate: int | None = Field(None, alias="sizeEstimate")
    payload: MessagePart = Field(default_factory=MessagePart)

    def header(self, name: str) -> str:
        """Value of the first header with this name, case-insensitive."""
        wanted = name.lower()
        for h in self.payload.headers:
            if h.name.lower() == wanted:
                return h.value
        return ""

    @property
    def received_at(self) -> datetime | None:
        if self.internal_date is None:
            return None
        return datetime.fromtimestamp(self.internal_date / 1000, tz=timezone.utc)

    def to_summary(self) -> dict[str, Any]:
        return {"id": self.id, "threadId": self.thread_id, "subject": self.header("Subject")}

    def to_output(self) -> dict[str, Any]:
        attachments = self.payload.attachments()
        return {
            "id": self.id,
            "threadId": self.thread_id,
            "subject": self.header("Subject"),
            "from": self.header("From"),
            "to": self.header("To"),
            "cc": self.header("Cc"),
            "date": self.header("Date"),
            "snippet": self.snippet,
            "labels": self.label_ids,
            "hasAttachments": bool(attachments),
            "attachments": attachments,
            "isStarred": "STARRED" in self.label_ids,
            "isImportant": "IMPORTANT" in self.label_ids,
            "isUnread": "UNREAD" in self.label_ids,
            "sizeEstimate": self.size_estimate,
        }


# =============================================================================
# Action Inputs
# =============================================================================


class ListMailsProps(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    label: str = Field(..., min_length=1)
    page_size: int = Field(DEFAULT_PAGE_SIZE, alias="pageSize")
    page_token: str | None = Field(None, alias="pageToken")

    @field_validator("page_size", mode="before")
    @classmethod
    def clamp_page_size(cls, value: Any) -> int:
        """Unparseable or non-positive sizes fall back to the default; large ones are capped."""
        try:
            size = int(value)
        except (TypeError, ValueError):
            return DEFAULT_PAGE_SIZE
        if size <= 0:
            return DEFAULT_PAGE_SIZE
        return min(size, MAX_PAGE_SIZE)

    @property
    def query(self) -> str:
        return f"in:{self.label.strip().lower()}"


def _split_addresses(value: str | None) -> list[str]:
    if not value:
        return []
    return [address.strip() for address in value.split(",") if address.strip()]


class SendEmailProps(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to: str = Field(..., min_length=1)
    subject: str = ""
    body: str = ""
    cc: str | None = None
    bcc: str | None = None
    is_html: bool = Field(False, alias="isHtml")

    @property
    def to_list(self) -> list[str]:
        return _split_addresses(self.to)

    @property
    def cc_list(self) -> list[str]:
        return _split_addresses(self.cc)

    @property
    def bcc_list(self) -> list[str]:
        return _split_addresses(self.bcc)


class TriggerMode(str, Enum):
    NEW_EMAIL = "new_email"
    SEARCH_MATCH = "search_match"
    NEW_ATTACHMENT = "new_attachment"
    NEW_LABELED = "new_labeled"
    NEW_STARRED = "new_starred"
    NEW_CONVERSATION = "new_conversation"


class NewEmailProps(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mode: TriggerMode = TriggerMode.NEW_EMAIL
    search_query: str | None = Field(None, alias="searchQuery")
    label: str | None = None
    subject: str | None = None
    sender: str | None = Field(None, alias="from")
    include_spam: bool = Field(False, alias="includeSpam")
    include_trash: bool = Field(False, alias="includeTrash")
    max_results: int = Field(DEFAULT_PAGE_SIZE, alias="maxResults", ge=1, le=500)

    @field_validator("mode", "max_results", mode="before")
    @classmethod
    def empty_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or value == "" or value == 0:
            return cls.model_fields[info.field_name].default
        return value

    def query(self, since: datetime) -> str:
        """Gmail search query for messages after since, narrowed by mode and filters."""
        parts = [f"after:{int(since.timestamp())}"]
        if self.mode == TriggerMode.SEARCH_MATCH and self.search_query:
            parts.append(self.search_query)
        elif self.mode == TriggerMode.NEW_ATTACHMENT:
            parts.append("has:attachment")
        elif self.mode == TriggerMode.NEW_LABELED and self.label:
            parts.append(f"label:{self.label}")
        elif self.mode == TriggerMode.NEW_STARRED:
            parts.append("is:starred")
        if self.subject:
            parts.append(f"subject:{self.subject}")
        if self.sender:
            parts.append(f"from:{self.sender}")
        return " ".join(parts)
