"""
Base HTTP client for vendor APIs.

Every connector talks to its vendor through a VendorClient subclass, so
status-code mapping, request logging and JSON decoding behave the same
way across integrations.

Design Principles:
1. Async-first: All I/O operations are async
2. Single attempt: no retry or backoff; the platform owns retry policy
3. Typed failures: non-2xx responses become VendorError subclasses
4. Testable: an httpx transport can be injected through ClientConfig

Status mapping:
    401 / 403   AuthenticationError
    404         NotFoundError
    429         RateLimitError (retry_after from the Retry-After header)
    400 / 422   ValidationError
    other       VendorError (retryable flag set for 5xx)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from wakflo.sdk.errors import (
    AuthenticationError,
    DecodeError,
    NotFoundError,
    RateLimitError,
    ValidationError,
    VendorError,
)

if TYPE_CHECKING:
    from wakflo.sdk.context import AuthContext

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Connection settings for a vendor client."""

    base_url: str = ""
    timeout: float = 30.0

    # Upper bound on requests made by one paginated fetch
    max_pages: int = 10

    # Observability
    log_requests: bool = False
    log_responses: bool = False

    user_agent: str = "wakflo-connectors"
    transport: httpx.AsyncBaseTransport | None = None


# =============================================================================
# Base Client
# =============================================================================


class VendorClient(ABC):
    """
    Abstract base class for vendor API clients.

    Provides common functionality:
    - HTTP client management
    - Authentication header injection
    - Error handling and mapping
    - Request/response logging

    Subclasses must implement:
    - name: Integration identifier
    - _auth_headers(): Return authentication headers
    """

    def __init__(self, config: ClientConfig):
        self.config = config
        self._client: httpx.AsyncClient | None = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this integration."""
        ...

    @abstractmethod
    def _auth_headers(self) -> dict[str, str]:
        """Return authentication headers for requests."""
        ...

    def _base_url(self) -> str:
        return self.config.base_url

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url(),
                timeout=self.config.timeout,
                transport=self.config.transport,
                headers={
                    "Accept": "application/json",
                    "User-Agent": self.config.user_agent,
                    **self._auth_headers(),
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
        operation: str | None = None,
        resource_id: str | None = None,
    ) -> httpx.Response:
        """
        Execute a single HTTP request.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            path: URL path (appended to base_url)
            params: Query parameters; None values are dropped
            json: JSON body
            headers: Additional headers
            operation: Operation name for error context
            resource_id: Resource identifier for error context

        Returns:
            httpx.Response with a 2xx status

        Raises:
            VendorError: On any non-2xx status, timeout or network error
        """
        client = await self._get_client()
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        if self.config.log_requests:
            logger.debug(f"[{self.name}] {method} {path} params={params} body={json}")

        try:
            response = await client.request(
                method=method,
                url=path,
                params=params,
                json=json,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            raise VendorError(
                f"request timeout: {e}",
                self.name,
                operation=operation,
                resource_id=resource_id,
                retryable=True,
            ) from e
        except httpx.NetworkError as e:
            raise VendorError(
                f"network error: {e}",
                self.name,
                operation=operation,
                resource_id=resource_id,
                retryable=True,
            ) from e

        if self.config.log_responses:
            logger.debug(
                f"[{self.name}] Response: status={response.status_code} "
                f"body={response.text[:500] if response.text else 'empty'}"
            )

        self._check_response(response, operation=operation, resource_id=resource_id)
        return response

    async def request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        """request() followed by json()."""
        response = await self.request(method, path, **kwargs)
        return self.json(response, operation=kwargs.get("operation"))

    async def get_json(self, path: str, **kwargs: Any) -> Any:
        return await self.request_json("GET", path, **kwargs)

    async def post_json(self, path: str, **kwargs: Any) -> Any:
        return await self.request_json("POST", path, **kwargs)

    def json(self, response: httpx.Response, *, operation: str | None = None) -> Any:
        """
        Decode a successful response body.

        Raises:
            DecodeError: Body is not valid JSON
        """
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(
                f"could not decode response from {response.request.url.path}: {e}",
                self.name,
                operation=operation,
                status_code=response.status_code,
                response_body=response.text[:500],
            ) from e

    def unwrap(self, data: Any, key: str, *, operation: str | None = None) -> Any:
        """
        Return data[key] from a decoded envelope.

        Raises:
            DecodeError: The envelope is not an object or lacks the key
        """
        if not isinstance(data, dict) or key not in data:
            raise DecodeError(
                f"response is missing the '{key}' field",
                self.name,
                operation=operation,
            )
        return data[key]

    def parse(self, model: type[ModelT], data: Any, *, operation: str | None = None) -> ModelT:
        """
        Validate a decoded body against a response model.

        Raises:
            DecodeError: The body does not have the model's shape
        """
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}"
                for err in e.errors()
            )
            raise DecodeError(
                f"unexpected {model.__name__} response: {problems}",
                self.name,
                operation=operation,
            ) from e

    def parse_many(
        self, model: type[ModelT], data: Any, *, operation: str | None = None
    ) -> list[ModelT]:
        """parse() for each element of a JSON array."""
        if not isinstance(data, list):
            raise DecodeError(
                f"expected a list of {model.__name__}, got {type(data).__name__}",
                self.name,
                operation=operation,
            )
        return [self.parse(model, item, operation=operation) for item in data]

    def _check_response(
        self,
        response: httpx.Response,
        *,
        operation: str | None = None,
        resource_id: str | None = None,
    ) -> None:
        """
        Check response for errors and raise appropriate exceptions.

        Raises:
            AuthenticationError: For 401/403
            RateLimitError: For 429
            NotFoundError: For 404
            ValidationError: For 400/422
            VendorError: For other errors
        """
        if response.is_success:
            return

        status = response.status_code
        body = response.text
        context = {
            "operation": operation,
            "resource_id": resource_id,
            "status_code": status,
            "response_body": body,
        }

        if status == 401 or status == 403:
            raise AuthenticationError(f"authentication failed: {body}", self.name, **context)

        if status == 429:
            raise RateLimitError(
                "rate limit exceeded",
                self.name,
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
                **context,
            )

        if status == 404:
            raise NotFoundError(f"resource not found: {body}", self.name, **context)

        if status == 400 or status == 422:
            raise ValidationError(f"validation error: {body}", self.name, **context)

        raise VendorError(
            f"request failed: {body}",
            self.name,
            retryable=status >= 500,
            **context,
        )

    async def __aenter__(self) -> VendorClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class BearerTokenClient(VendorClient):
    """VendorClient authenticated with the invocation's OAuth access token."""

    def __init__(self, config: ClientConfig, auth: AuthContext):
        super().__init__(config)
        self._auth = auth

    def _auth_headers(self) -> dict[str, str]:
        return self._auth.bearer_headers(self.name)


def parse_retry_after(value: str | None) -> float | None:
    """
    Seconds to wait from a Retry-After header.

    The header is either delay-seconds or an HTTP-date (RFC 9110); a
    date in the past gives 0. Unparseable values give None.
    """
    if not value:
        return None
    value = value.strip()
    try:
        return max(float(value), 0.0)
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring unparseable Retry-After header: {value!r}")
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max((when - datetime.now(timezone.utc)).total_seconds(), 0.0)
