"""Gmail triggers."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from wakflo.integrations.gmail.client import GmailClient
from wakflo.integrations.gmail.schemas import NewEmailProps, TriggerMode
from wakflo.sdk.action import Trigger, TriggerMetadata, TriggerType
from wakflo.sdk.client import ClientConfig
from wakflo.sdk.context import ExecuteContext
from wakflo.sdk.form import FormSchema, Option, new_form

logger = logging.getLogger(__name__)

# Look-back window on the first run
INITIAL_LOOKBACK = timedelta(hours=24)

MODE_OPTIONS = (
    Option(TriggerMode.NEW_EMAIL.value, "New Email"),
    Option(TriggerMode.SEARCH_MATCH.value, "New Email Matching Search"),
    Option(TriggerMode.NEW_ATTACHMENT.value, "New Attachment"),
    Option(TriggerMode.NEW_LABELED.value, "New Labeled Email"),
    Option(TriggerMode.NEW_STARRED.value, "New Starred Email"),
    Option(TriggerMode.NEW_CONVERSATION.value, "New Conversation"),
)


class NewEmailTrigger(Trigger):
    """Polls the mailbox with a search query bounded by the last run."""

    integration = "gmail"

    def __init__(self, config: ClientConfig):
        self.config = config

    def metadata(self) -> TriggerMetadata:
        return TriggerMetadata(
            id="new_email",
            display_name="Gmail Trigger",
            description=(
                "Triggers on new emails, attachments, labels, stars or custom searches."
            ),
            type=TriggerType.POLLING,
            sample_output={
                "emails": [
                    {
                        "id": "12345abcde",
                        "threadId": "thread123",
                        "subject": "Important Message",
                        "from": "sender@example.com",
                        "snippet": "This is the beginning of the email...",
                        "labels": ["INBOX", "IMPORTANT"],
                        "hasAttachments": False,
                    }
                ]
            },
        )

    def properties(self) -> FormSchema:
        form = new_form("google-mail-trigger", "Gmail Trigger Configuration")
        form.select_field("mode", "Trigger Mode").required().add_options(
            *MODE_OPTIONS
        ).default_value(TriggerMode.NEW_EMAIL.value)
        form.text_field("searchQuery", "Search Query").placeholder(
            "is:unread has:attachment from:important@example.com"
        ).required().visible_when_equals("mode", TriggerMode.SEARCH_MATCH.value)
        form.text_field("label", "Label").placeholder("INBOX").required().visible_when_equals(
            "mode", TriggerMode.NEW_LABELED.value
        )
        form.text_field("subject", "Subject Filter")
        form.text_field("from", "From Filter")
        form.checkbox_field("includeSpam", "Include Spam").default_value(False)
        form.checkbox_field("includeTrash", "Include Trash").default_value(False)
        form.number_field("maxResults", "Max Results").default_value(50).min_value(1).max_value(500)
        return form.build()

    async def execute(self, ctx: ExecuteContext) -> dict[str, Any]:
        props = self.decode_input(ctx, NewEmailProps)
        since = ctx.last_run or datetime.now(timezone.utc) - INITIAL_LOOKBACK
        query = props.query(since)

        async with GmailClient(self.config, ctx.auth_context(self.integration)) as client:
            listing = await client.list_messages(
                query,
                max_results=props.max_results,
                include_spam_trash=props.include_spam or props.include_trash,
            )
            messages = await client.get_messages([ref.id for ref in listing.messages])

        emails = []
        seen_threads: set[str] = set()
        for message in messages:
            if props.mode == TriggerMode.NEW_CONVERSATION:
                if message.thread_id in seen_threads:
                    continue
                seen_threads.add(message.thread_id)
            output = message.to_output()
            if props.mode == TriggerMode.NEW_ATTACHMENT and not output["hasAttachments"]:
                continue
            emails.append(output)

        logger.debug(f"[gmail] {len(emails)} of {len(messages)} messages matched '{query}'")
        return {"emails": emails}
