"""Gmail actions."""

from __future__ import annotations

import base64
import logging
from email.message import EmailMessage
from typing import Any

from wakflo.integrations.gmail.client import GmailClient
from wakflo.integrations.gmail.schemas import ListMailsProps, SendEmailProps
from wakflo.sdk.action import Action, ActionMetadata
from wakflo.sdk.client import ClientConfig
from wakflo.sdk.context import PerformContext
from wakflo.sdk.form import FormSchema, new_form

logger = logging.getLogger(__name__)


def build_raw_message(props: SendEmailProps) -> str:
    """RFC 2822 message encoded as base64url, as messages.send expects."""
    message = EmailMessage()
    message["To"] = ", ".join(props.to_list)
    message["Subject"] = props.subject
    if props.cc_list:
        message["Cc"] = ", ".join(props.cc_list)
    if props.bcc_list:
        message["Bcc"] = ", ".join(props.bcc_list)
    message.set_content(props.body, subtype="html" if props.is_html else "plain")
    return base64.urlsafe_b64encode(message.as_bytes()).decode("ascii")


class _GmailAction(Action):
    integration = "gmail"

    def __init__(self, config: ClientConfig):
        self.config = config

    def _client(self, ctx: PerformContext) -> GmailClient:
        return GmailClient(self.config, ctx.auth_context(self.integration))


class ListMailsAction(_GmailAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="list_mails",
            display_name="List Mails",
            description="Retrieve a page of emails with ID, thread ID and subject.",
            sample_output={
                "emails": [
                    {"id": "18abc123def", "threadId": "18abc123def", "subject": "Meeting Tomorrow"}
                ],
                "nextPageToken": "CAIQABiAwtjX7",
                "resultSizeEstimate": 1500,
                "hasMore": True,
                "pageSize": 50,
            },
        )

    def properties(self) -> FormSchema:
        form = new_form("list_mails", "List Mails")
        form.text_field("label", "Label").required().placeholder("inbox").help_text(
            "The mail label to read from (e.g. inbox, sent, drafts, spam, trash)"
        )
        form.number_field("pageSize", "Page Size").placeholder("50").help_text(
            "Number of emails per page (default 50, max 200)"
        )
        form.text_field("pageToken", "Page Token").help_text(
            "Token for fetching the next page of results"
        )
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, ListMailsProps)
        async with self._client(ctx) as client:
            listing = await client.list_messages(
                props.query, max_results=props.page_size, page_token=props.page_token
            )
            messages = await client.get_messages(
                [ref.id for ref in listing.messages],
                message_format="metadata",
                metadata_headers=("Subject",),
            )
        return {
            "emails": [m.to_summary() for m in messages],
            "nextPageToken": listing.next_page_token,
            "resultSizeEstimate": listing.result_size_estimate,
            "hasMore": bool(listing.next_page_token),
            "pageSize": props.page_size,
        }


class SendEmailAction(_GmailAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="send_email",
            display_name="Send Email",
            description="Send an email from the connected Gmail account.",
            sample_output={"id": "18abc123def", "threadId": "18abc123def", "labelIds": ["SENT"]},
        )

    def properties(self) -> FormSchema:
        form = new_form("send_email", "Send Email")
        form.text_field("to", "To").required().help_text("Comma-separated recipients")
        form.text_field("subject", "Subject").required()
        form.textarea_field("body", "Body").required()
        form.checkbox_field("isHtml", "HTML body").default_value(False)
        form.text_field("cc", "Cc")
        form.text_field("bcc", "Bcc")
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, SendEmailProps)
        raw = build_raw_message(props)
        async with self._client(ctx) as client:
            sent = await client.send_message(raw)
        logger.info(f"[gmail] Sent message {sent.get('id')} to {len(props.to_list)} recipients")
        return sent
