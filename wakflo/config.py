"""
Connector runtime settings.

Settings are read once from WAKFLO_* environment variables and passed
explicitly into each integration; nothing below reads the environment
at call time.
"""

from __future__ import annotations

import os
from functools import lru_cache

import httpx
from pydantic import BaseModel, Field

from wakflo.sdk.client import ClientConfig


class ConnectorSettings(BaseModel):
    """
    Settings shared by every integration.

    Vendor base URLs are overridable so tests and sandboxes can point a
    connector at a different host.
    """

    # Service
    environment: str = "development"
    log_level: str = "INFO"

    # Outbound HTTP
    http_timeout: float = Field(30.0, gt=0, description="Per-request timeout in seconds")
    max_pages: int = Field(10, ge=1, description="Upper bound on requests per paginated fetch")
    log_requests: bool = False
    log_responses: bool = False
    user_agent: str = "wakflo-connectors/0.1"

    # Vendors
    shopify_api_version: str = "2024-04"
    youtube_base_url: str = "https://www.googleapis.com/youtube/v3"
    todoist_base_url: str = "https://api.todoist.com/rest/v2"
    clickup_base_url: str = "https://api.clickup.com/api"
    gmail_base_url: str = "https://gmail.googleapis.com/gmail/v1"
    claude_base_url: str | None = Field(None, description="Override for the Anthropic API host")

    def client_config(
        self,
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ClientConfig:
        """Build the ClientConfig handed to a vendor client or resolver."""
        return ClientConfig(
            base_url=base_url,
            timeout=self.http_timeout,
            max_pages=self.max_pages,
            log_requests=self.log_requests,
            log_responses=self.log_responses,
            user_agent=self.user_agent,
            transport=transport,
        )


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@lru_cache()
def get_settings() -> ConnectorSettings:
    """
    Get connector settings from environment.

    Uses lru_cache for singleton pattern.
    """
    return ConnectorSettings(
        # Service
        environment=os.getenv("WAKFLO_ENVIRONMENT", "development"),
        log_level=os.getenv("WAKFLO_LOG_LEVEL", "INFO"),
        # Outbound HTTP
        http_timeout=float(os.getenv("WAKFLO_HTTP_TIMEOUT", "30")),
        max_pages=int(os.getenv("WAKFLO_MAX_PAGES", "10")),
        log_requests=_flag("WAKFLO_LOG_REQUESTS"),
        log_responses=_flag("WAKFLO_LOG_RESPONSES"),
        user_agent=os.getenv("WAKFLO_USER_AGENT", "wakflo-connectors/0.1"),
        # Vendors
        shopify_api_version=os.getenv("WAKFLO_SHOPIFY_API_VERSION", "2024-04"),
        youtube_base_url=os.getenv(
            "WAKFLO_YOUTUBE_BASE_URL", "https://www.googleapis.com/youtube/v3"
        ),
        todoist_base_url=os.getenv("WAKFLO_TODOIST_BASE_URL", "https://api.todoist.com/rest/v2"),
        clickup_base_url=os.getenv("WAKFLO_CLICKUP_BASE_URL", "https://api.clickup.com/api"),
        gmail_base_url=os.getenv("WAKFLO_GMAIL_BASE_URL", "https://gmail.googleapis.com/gmail/v1"),
        claude_base_url=os.getenv("WAKFLO_CLAUDE_BASE_URL") or None,
    )
