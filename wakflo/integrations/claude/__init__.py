"""
Claude Integration for Wakflo.

Provides chat, summarization and translation actions on Anthropic's
Messages API, through the official anthropic SDK.
"""

from __future__ import annotations

import httpx

from wakflo.config import ConnectorSettings
from wakflo.integrations.claude.actions import (
    ChatClaudeAction,
    SummarizeTextAction,
    TranslateTextAction,
)
from wakflo.integrations.claude.client import ClaudeClient, translate_error
from wakflo.sdk.auth import AuthStrategy, custom_auth
from wakflo.sdk.form import new_form
from wakflo.sdk.integration import Integration


_auth_form = new_form("claude-auth", "Claude API Key")
_auth_form.password_field("apiKey", "API Key").required().help_text(
    "Your Anthropic API key, from console.anthropic.com"
)

CLAUDE_AUTH = custom_auth(_auth_form, strategy=AuthStrategy.API_KEY)


def create_integration(
    settings: ConnectorSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Integration:
    config = settings.client_config(settings.claude_base_url or "", transport)
    return Integration(
        name="claude",
        display_name="Claude",
        description="Chat, summarize and translate text with Anthropic's Claude models.",
        auth=CLAUDE_AUTH,
        actions=(
            ChatClaudeAction(config),
            SummarizeTextAction(config),
            TranslateTextAction(config),
        ),
        categories=("artificial-intelligence",),
    )


__all__ = [
    "CLAUDE_AUTH",
    "ChatClaudeAction",
    "ClaudeClient",
    "SummarizeTextAction",
    "TranslateTextAction",
    "create_integration",
    "translate_error",
]
