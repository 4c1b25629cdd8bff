"""
Per-invocation contexts.

A context is created by the hosting platform immediately before an
action, trigger or dynamic-field resolver runs, and discarded when it
returns. Contexts are never shared between concurrent invocations.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, TypeVar
from uuid import UUID, uuid4

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from wakflo.observability import JSONLogger
from wakflo.sdk.errors import PreconditionError
from wakflo.sdk.options import DynamicOption, DynamicOptionsResponse

if TYPE_CHECKING:
    from wakflo.observability import StructuredLogger

ModelT = TypeVar("ModelT", bound=BaseModel)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Auth
# =============================================================================


@dataclass(frozen=True, slots=True)
class AuthContext:
    """
    Resolved credentials for one invocation.

    access_token carries OAuth / bearer tokens; extra carries custom auth
    fields such as an API key or a shop domain.
    """

    access_token: str | None = None
    token_type: str = "Bearer"
    expires_at: datetime | None = None
    extra: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_satisfied(self) -> bool:
        return bool(self.access_token) or any(self.extra.values())

    def require_token(self, integration: str) -> str:
        """Return the access token or raise PreconditionError."""
        if not self.access_token:
            raise PreconditionError(
                "no access token is available; connect your account and try again",
                integration,
            )
        return self.access_token

    def require_extra(self, key: str, integration: str, *, label: str | None = None) -> str:
        """Return a custom auth field or raise PreconditionError."""
        value = (self.extra.get(key) or "").strip()
        if not value:
            raise PreconditionError(
                f"the {label or key} credential is missing; add it to the connection "
                f"and try again",
                integration,
            )
        return value

    def bearer_headers(self, integration: str) -> dict[str, str]:
        return {"Authorization": f"{self.token_type} {self.require_token(integration)}"}

    def __repr__(self) -> str:
        # Credentials never appear in logs or tracebacks
        return f"AuthContext(token_type={self.token_type!r}, has_token={bool(self.access_token)})"


def decode_model(
    values: Mapping[str, Any],
    model: type[ModelT],
    integration: str,
    operation: str | None,
) -> ModelT:
    try:
        return model.model_validate(dict(values))
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'input'}: {err['msg']}"
            for err in e.errors()
        )
        raise PreconditionError(
            f"invalid input: {problems}",
            integration,
            operation=operation,
        ) from e


# =============================================================================
# Dynamic Fields
# =============================================================================


@dataclass(frozen=True, slots=True)
class DynamicFieldContext:
    """
    Context for one dynamic-field resolution.

    input holds only the values of the fields the descriptor declared as
    references. Absent or empty values mean "no filter", never an error.
    """

    auth: AuthContext
    field_name: str = ""
    input: Mapping[str, Any] = field(default_factory=dict)
    search: str | None = None

    def value(self, name: str) -> Any:
        """Current value of a referenced field, or None when unset or empty."""
        found = self.input.get(name)
        if isinstance(found, str) and not found.strip():
            return None
        return found

    def input_as(self, model: type[ModelT], integration: str) -> ModelT:
        return decode_model(
            {k: v for k, v in self.input.items() if self.value(k) is not None},
            model,
            integration,
            self.field_name or None,
        )

    def respond(
        self,
        items: Iterable[DynamicOption | Mapping[str, Any]],
        total: int | None = None,
    ) -> DynamicOptionsResponse:
        """Shape resolver results, applying the search filter when given."""
        response = DynamicOptionsResponse.from_items(items, total)
        if not self.search:
            return response
        needle = self.search.strip().lower()
        matched = [option for option in response.items if needle in option.name.lower()]
        return DynamicOptionsResponse.from_items(matched, len(matched))


# =============================================================================
# Perform / Execute
# =============================================================================


@dataclass
class PerformContext:
    """
    Context for one action invocation.

    Provides:
    - Raw submitted input (decoded by Action.decode_input)
    - Resolved auth credentials
    - Platform metadata (e.g. lastRun for polling triggers)
    - A structured logger scoped to the invocation
    """

    input: Mapping[str, Any] = field(default_factory=dict)
    auth: AuthContext | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    invocation_id: UUID = field(default_factory=uuid4)
    started_at: datetime = field(default_factory=_utc_now)
    logger: StructuredLogger | None = None

    def __post_init__(self) -> None:
        if self.logger is None:
            self.logger = JSONLogger(name="wakflo.invocation", request_id=str(self.invocation_id))

    def auth_context(self, integration: str) -> AuthContext:
        """Return the auth context or raise PreconditionError when absent."""
        if self.auth is None or not self.auth.is_satisfied:
            raise PreconditionError(
                "this step requires a connected account but none was provided",
                integration,
            )
        return self.auth

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    @property
    def elapsed_ms(self) -> float:
        return (_utc_now() - self.started_at).total_seconds() * 1000


@dataclass
class ExecuteContext(PerformContext):
    """Context for one trigger run."""

    @property
    def last_run(self) -> datetime | None:
        """
        Timestamp of the previous successful run, as UTC.

        Accepts a datetime or an ISO 8601 string in metadata["lastRun"].

        Raises:
            PreconditionError: lastRun is neither
        """
        raw = self.metadata.get("lastRun")
        if raw is None or raw == "":
            return None
        value = raw
        if isinstance(raw, str):
            try:
                value = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
            except ValueError as e:
                raise PreconditionError(
                    f"invalid lastRun value {raw!r}: expected an ISO 8601 timestamp",
                    "wakflo",
                    operation="last_run",
                ) from e
        if not isinstance(value, datetime):
            raise PreconditionError(
                f"invalid lastRun value {raw!r}: expected an ISO 8601 timestamp",
                "wakflo",
                operation="last_run",
            )
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


@dataclass(frozen=True, slots=True)
class LifecycleContext:
    """Context for trigger start/stop hooks."""

    auth: AuthContext | None = None
    input: Mapping[str, Any] = field(default_factory=dict)
    webhook_url: str | None = None
