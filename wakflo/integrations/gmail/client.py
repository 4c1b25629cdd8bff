"""
Gmail REST API client.

API Reference:
    https://developers.google.com/gmail/api/reference/rest
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from wakflo.integrations.gmail.schemas import Message, MessageList
from wakflo.sdk.client import BearerTokenClient
from wakflo.sdk.errors import NotFoundError

logger = logging.getLogger(__name__)

# Concurrent message fetches per batch
FETCH_BATCH_SIZE = 25


class GmailClient(BearerTokenClient):
    """Async client for the Gmail API, scoped to the authenticated user."""

    @property
    def name(self) -> str:
        return "gmail"

    async def list_messages(
        self,
        query: str | None = None,
        *,
        max_results: int = 50,
        page_token: str | None = None,
        include_spam_trash: bool = False,
    ) -> MessageList:
        params = {
            "q": query,
            "maxResults": max_results,
            "pageToken": page_token,
            "includeSpamTrash": "true" if include_spam_trash else None,
        }
        data = await self.get_json("/users/me/messages", params=params, operation="list_messages")
        return self.parse(MessageList, data, operation="list_messages")

    async def get_message(
        self,
        message_id: str,
        *,
        message_format: str = "full",
        metadata_headers: Sequence[str] = (),
    ) -> Message:
        params: dict[str, Any] = {"format": message_format}
        if metadata_headers:
            params["metadataHeaders"] = list(metadata_headers)
        try:
            data = await self.get_json(
                f"/users/me/messages/{message_id}",
                params=params,
                operation="get_message",
                resource_id=message_id,
            )
        except NotFoundError as e:
            raise NotFoundError(
                f"no message found with ID '{message_id}'",
                self.name,
                operation="get_message",
                resource_id=message_id,
                status_code=404,
            ) from e
        return self.parse(Message, data, operation="get_message")

    async def get_messages(
        self,
        message_ids: Sequence[str],
        *,
        message_format: str = "full",
        metadata_headers: Sequence[str] = (),
    ) -> list[Message]:
        """
        Fetch several messages, FETCH_BATCH_SIZE at a time.

        Order matches message_ids. The first failure propagates.
        """
        messages: list[Message] = []
        for start in range(0, len(message_ids), FETCH_BATCH_SIZE):
            batch = message_ids[start : start + FETCH_BATCH_SIZE]
            tasks = [
                self.get_message(
                    mid, message_format=message_format, metadata_headers=metadata_headers
                )
                for mid in batch
            ]
            messages.extend(await asyncio.gather(*tasks))
        return messages

    async def send_message(self, raw: str) -> dict[str, Any]:
        return await self.post_json(
            "/users/me/messages/send", json={"raw": raw}, operation="send_message"
        )
