"""
Claude client built on the official anthropic SDK.

The SDK's own retries are disabled; every call is a single attempt and
SDK exceptions are translated into the connector error hierarchy.
"""

from __future__ import annotations

import logging
from typing import Any

import anthropic
import httpx

from wakflo.integrations.claude.schemas import Completion
from wakflo.sdk.client import ClientConfig, parse_retry_after
from wakflo.sdk.context import AuthContext
from wakflo.sdk.errors import (
    AuthenticationError,
    ConnectorError,
    NotFoundError,
    RateLimitError,
    ValidationError,
    VendorError,
)

logger = logging.getLogger(__name__)

INTEGRATION = "claude"


def translate_error(error: anthropic.APIError, operation: str | None = None) -> ConnectorError:
    """Map an anthropic SDK exception onto a VendorError subclass."""
    if isinstance(error, anthropic.APIConnectionError):
        return VendorError(
            f"could not reach the Claude API: {error}",
            INTEGRATION,
            operation=operation,
            retryable=True,
        )

    if not isinstance(error, anthropic.APIStatusError):
        return VendorError(str(error), INTEGRATION, operation=operation)

    context = {
        "operation": operation,
        "status_code": error.status_code,
        "response_body": error.response.text[:500],
    }
    if isinstance(error, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
        message = f"authentication failed: {error.message}"
        return AuthenticationError(message, INTEGRATION, **context)
    if isinstance(error, anthropic.RateLimitError):
        return RateLimitError(
            "rate limit exceeded",
            INTEGRATION,
            retry_after=parse_retry_after(error.response.headers.get("retry-after")),
            **context,
        )
    if isinstance(error, anthropic.NotFoundError):
        return NotFoundError(f"resource not found: {error.message}", INTEGRATION, **context)
    if isinstance(error, (anthropic.BadRequestError, anthropic.UnprocessableEntityError)):
        return ValidationError(f"validation error: {error.message}", INTEGRATION, **context)
    return VendorError(
        f"request failed: {error.message}",
        INTEGRATION,
        retryable=error.status_code >= 500,
        **context,
    )


class ClaudeClient:
    """Async wrapper around anthropic.AsyncAnthropic for one invocation."""

    def __init__(self, config: ClientConfig, auth: AuthContext):
        self.config = config
        api_key = auth.require_extra("apiKey", INTEGRATION, label="Claude API key")
        self._client = anthropic.AsyncAnthropic(
            api_key=api_key,
            base_url=config.base_url or None,
            timeout=config.timeout,
            max_retries=0,
            http_client=httpx.AsyncClient(transport=config.transport, timeout=config.timeout),
        )

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float | None = None,
        operation: str | None = None,
    ) -> Completion:
        """
        Send a single-turn user message.

        Raises:
            VendorError: The API rejected the request or was unreachable
        """
        kwargs: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system
        if temperature is not None:
            kwargs["temperature"] = temperature

        if self.config.log_requests:
            logger.debug(f"[claude] messages.create model={model} max_tokens={max_tokens}")

        try:
            message = await self._client.messages.create(**kwargs)
        except anthropic.APIError as e:
            raise translate_error(e, operation) from e

        text = "".join(block.text for block in message.content if block.type == "text")
        return Completion(
            text=text,
            model=message.model,
            stop_reason=message.stop_reason,
            input_tokens=message.usage.input_tokens,
            output_tokens=message.usage.output_tokens,
        )

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> ClaudeClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
