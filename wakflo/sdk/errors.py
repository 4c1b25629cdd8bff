"""
Error taxonomy for Wakflo connectors.

Every failure that crosses an action, trigger or dynamic-field resolver
boundary is one of these exceptions. Messages are plain English and name
the identifier involved so the hosting platform can show them verbatim.

Hierarchy:
    ConnectorError
    ├── PreconditionError      missing credential or input (before any I/O)
    ├── VendorError            vendor rejected the request (non-2xx / SDK error)
    │   ├── AuthenticationError   401 / 403
    │   ├── NotFoundError         404
    │   ├── RateLimitError        429
    │   └── ValidationError       400 / 422
    ├── DecodeError            vendor success response was malformed
    └── PartialResultError     a multi-page fetch failed part way through

    SchemaError                programmer error in a form declaration
    RegistryError              programmer error in integration registration

Nothing in this package retries. RateLimitError.retry_after and the
retryable flag are informational for the hosting platform.
"""

from __future__ import annotations

from typing import Any


class ConnectorError(Exception):
    """Base exception for connector errors."""

    def __init__(
        self,
        message: str,
        integration: str,
        *,
        operation: str | None = None,
        resource_id: str | None = None,
        status_code: int | None = None,
        response_body: str | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.integration = integration
        self.operation = operation
        self.resource_id = resource_id
        self.status_code = status_code
        self.response_body = response_body
        self.retryable = retryable

    def __str__(self) -> str:
        parts = [f"[{self.integration}] {self.message}"]
        if self.status_code:
            parts.append(f"(status={self.status_code})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for the platform's error surface."""
        result: dict[str, Any] = {
            "type": type(self).__name__,
            "integration": self.integration,
            "message": self.message,
        }
        if self.operation:
            result["operation"] = self.operation
        if self.resource_id:
            result["resourceId"] = self.resource_id
        if self.status_code:
            result["statusCode"] = self.status_code
        return result


class PreconditionError(ConnectorError):
    """Raised when a required credential or input is missing."""

    def __init__(self, message: str, integration: str, **kwargs):
        super().__init__(message, integration, retryable=False, **kwargs)


ConfigurationError = PreconditionError


class VendorError(ConnectorError):
    """Raised when the vendor API rejects a request."""


class AuthenticationError(VendorError):
    """Raised when authentication fails (401/403)."""

    def __init__(self, message: str, integration: str, **kwargs):
        super().__init__(message, integration, retryable=False, **kwargs)


class NotFoundError(VendorError):
    """Raised when a resource is not found (404)."""

    def __init__(self, message: str, integration: str, **kwargs):
        super().__init__(message, integration, retryable=False, **kwargs)


class RateLimitError(VendorError):
    """Raised when the vendor rate limit is exceeded (429)."""

    def __init__(
        self,
        message: str,
        integration: str,
        *,
        retry_after: float | None = None,
        **kwargs,
    ):
        super().__init__(message, integration, retryable=True, **kwargs)
        self.retry_after = retry_after


class ValidationError(VendorError):
    """Raised when the vendor refuses the request payload (400/422)."""

    def __init__(
        self,
        message: str,
        integration: str,
        *,
        validation_errors: list[dict[str, Any]] | None = None,
        **kwargs,
    ):
        super().__init__(message, integration, retryable=False, **kwargs)
        self.validation_errors = validation_errors or []


class DecodeError(ConnectorError):
    """Raised when a successful vendor response cannot be decoded."""

    def __init__(self, message: str, integration: str, **kwargs):
        super().__init__(message, integration, retryable=False, **kwargs)


class PartialResultError(ConnectorError):
    """
    Raised when a paginated fetch fails after some pages were collected.

    The collected items are deliberately not returned: a partial option
    list must never be cached as if it were complete.
    """

    def __init__(
        self,
        message: str,
        integration: str,
        *,
        collected: int = 0,
        pages_fetched: int = 0,
        cause: BaseException | None = None,
        **kwargs,
    ):
        super().__init__(message, integration, **kwargs)
        self.collected = collected
        self.pages_fetched = pages_fetched
        self.cause = cause


class SchemaError(Exception):
    """Raised when a form schema is declared incorrectly."""


class RegistryError(Exception):
    """Raised on invalid integration registration or lookup."""
