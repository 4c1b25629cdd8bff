"""
Gmail Integration for Wakflo.

Provides:
- Listing and sending email
- A polling trigger for new, matching, labeled or starred email

API Reference:
    https://developers.google.com/gmail/api/reference/rest
"""

from __future__ import annotations

import httpx

from wakflo.config import ConnectorSettings
from wakflo.integrations.gmail.actions import ListMailsAction, SendEmailAction, build_raw_message
from wakflo.integrations.gmail.client import GmailClient
from wakflo.integrations.gmail.triggers import NewEmailTrigger
from wakflo.sdk.auth import oauth2_auth
from wakflo.sdk.integration import Integration

GMAIL_AUTH = oauth2_auth(
    "google-mail-auth",
    "Gmail OAuth",
    authorization_url="https://accounts.google.com/o/oauth2/auth",
    token_url="https://oauth2.googleapis.com/token",
    scopes=[
        "https://www.googleapis.com/auth/gmail.readonly",
        "https://www.googleapis.com/auth/gmail.send",
    ],
)


def create_integration(
    settings: ConnectorSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Integration:
    config = settings.client_config(settings.gmail_base_url, transport)
    return Integration(
        name="gmail",
        display_name="Gmail",
        description="Read, send and watch email in Gmail.",
        auth=GMAIL_AUTH,
        actions=(ListMailsAction(config), SendEmailAction(config)),
        triggers=(NewEmailTrigger(config),),
        categories=("communication", "email"),
    )


__all__ = [
    "GMAIL_AUTH",
    "GmailClient",
    "ListMailsAction",
    "NewEmailTrigger",
    "SendEmailAction",
    "build_raw_message",
    "create_integration",
]
