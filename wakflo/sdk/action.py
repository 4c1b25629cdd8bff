"""
Action and Trigger contract.

Every connector operation is a small, stateless class implementing one
of these ABCs:

- Action: a single-call operation ("Create Order")
- Trigger: a polling operation reporting vendor resources created or
  changed since the last run

Contract:
    - metadata(): identity and documentation, pure and stable
    - properties(): the input FormSchema, pure (dynamic fields are
      declared here, resolved later by the platform)
    - auth(): None to inherit the connector's auth
    - perform(ctx) / execute(ctx): the only methods that talk to the
      vendor; raise ConnectorError subclasses on failure

Example:
    class GetOrderAction(Action):
        def metadata(self) -> ActionMetadata:
            return ActionMetadata(id="get_order", display_name="Get Order", ...)

        def properties(self) -> FormSchema:
            form = new_form("get_order", "Get Order")
            form.number_field("order_id", "Order ID").required()
            return form.build()

        async def perform(self, ctx: PerformContext) -> JSON:
            props = self.decode_input(ctx, GetOrderProps)
            ...
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

from wakflo.observability import InvocationLogger
from wakflo.sdk.context import decode_model
from wakflo.sdk.errors import PreconditionError

if TYPE_CHECKING:
    from wakflo.sdk.auth import AuthMetadata
    from wakflo.sdk.context import ExecuteContext, LifecycleContext, PerformContext
    from wakflo.sdk.form import FormSchema

JSON = Any
ModelT = TypeVar("ModelT", bound=BaseModel)


# =============================================================================
# Metadata
# =============================================================================


class ActionType(str, Enum):
    ACTION = "action"
    BRANCH = "branch"


class TriggerType(str, Enum):
    POLLING = "polling"
    WEBHOOK = "webhook"
    SCHEDULED = "scheduled"
    EVENT = "event"


@dataclass(frozen=True, slots=True)
class ActionSettings:
    """
    Error-handling flags honoured by the platform.

    These are declarations only; this package never retries or skips.
    """

    continue_on_error: bool = False
    retry_on_error: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "continueOnError": self.continue_on_error,
            "retryOnError": self.retry_on_error,
        }


@dataclass(frozen=True, slots=True)
class ActionMetadata:
    """Identity and documentation for an action."""

    id: str
    display_name: str
    description: str
    documentation: str = ""
    sample_output: JSON = field(default_factory=dict)
    settings: ActionSettings = field(default_factory=ActionSettings)
    type: ActionType = ActionType.ACTION
    icon: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "description": self.description,
            "documentation": self.documentation,
            "sampleOutput": self.sample_output,
            "settings": self.settings.to_dict(),
            "type": self.type.value,
            "icon": self.icon,
        }


@dataclass(frozen=True, slots=True)
class TriggerMetadata:
    """Identity and documentation for a trigger."""

    id: str
    display_name: str
    description: str
    type: TriggerType = TriggerType.POLLING
    documentation: str = ""
    sample_output: JSON = field(default_factory=dict)
    icon: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "description": self.description,
            "type": self.type.value,
            "documentation": self.documentation,
            "sampleOutput": self.sample_output,
            "icon": self.icon,
        }


# =============================================================================
# Contract
# =============================================================================


class _Operation(ABC):
    """Behaviour shared by actions and triggers."""

    #: Integration name used in error messages; set by each connector.
    integration: str = "wakflo"

    @abstractmethod
    def properties(self) -> FormSchema:
        """Input form for this operation."""
        ...

    def auth(self) -> AuthMetadata | None:
        """Override connector-level auth. None inherits it."""
        return None

    def decode_input(self, ctx: PerformContext, model: type[ModelT]) -> ModelT:
        """
        Decode raw input into the operation's typed props.

        Raises PreconditionError, before any network call, if a field the
        schema marks required is absent or if the input does not validate.
        """
        missing = self.properties().missing_required(ctx.input)
        if missing:
            raise PreconditionError(
                f"missing required input: {', '.join(missing)}",
                self.integration,
                operation=self.operation_id,
            )
        return decode_model(ctx.input, model, self.integration, self.operation_id)

    @property
    @abstractmethod
    def operation_id(self) -> str: ...

    def to_manifest(self) -> dict[str, Any]:
        manifest = {
            **self._metadata_dict(),
            "properties": self.properties().to_dict(),
        }
        override = self.auth()
        if override is not None:
            manifest["auth"] = override.to_dict()
        return manifest

    @abstractmethod
    def _metadata_dict(self) -> dict[str, Any]: ...


class Action(_Operation):
    """Base class for all connector actions."""

    @abstractmethod
    def metadata(self) -> ActionMetadata:
        """Identity and documentation. Must be stable across calls."""
        ...

    @abstractmethod
    async def perform(self, ctx: PerformContext) -> JSON:
        """
        Run the action against the vendor.

        Args:
            ctx: Invocation context with raw input and auth

        Returns:
            JSON-like result

        Raises:
            PreconditionError: Missing credential or input
            VendorError: Vendor rejected the request
            DecodeError: Vendor response was malformed
        """
        ...

    @property
    def operation_id(self) -> str:
        return self.metadata().id

    def _metadata_dict(self) -> dict[str, Any]:
        return self.metadata().to_dict()

    def __repr__(self) -> str:
        return f"<Action {self.integration}.{self.operation_id}>"


class Trigger(_Operation):
    """Base class for all connector triggers."""

    @abstractmethod
    def metadata(self) -> TriggerMetadata:
        ...

    @abstractmethod
    async def execute(self, ctx: ExecuteContext) -> JSON:
        """
        Report vendor resources created or changed since ctx.last_run.

        Raises the same errors as Action.perform.
        """
        ...

    @property
    def trigger_type(self) -> TriggerType:
        return self.metadata().type

    async def start(self, ctx: LifecycleContext) -> None:
        """Acquire persistent resources (webhook subscriptions). No-op by default."""
        return None

    async def stop(self, ctx: LifecycleContext) -> None:
        """Release resources acquired by start(). No-op by default."""
        return None

    def sample_data(self) -> JSON:
        return self.metadata().sample_output

    @property
    def operation_id(self) -> str:
        return self.metadata().id

    def _metadata_dict(self) -> dict[str, Any]:
        return self.metadata().to_dict()

    def __repr__(self) -> str:
        return f"<Trigger {self.integration}.{self.operation_id}>"


# =============================================================================
# Invocation
# =============================================================================


async def run_action(action: Action, ctx: PerformContext) -> JSON:
    """
    Invoke an action with lifecycle logging.

    Errors propagate unchanged after being logged.
    """
    log = InvocationLogger(ctx.logger, action.integration, action.operation_id)
    log.started()
    start = time.perf_counter()
    try:
        result = await action.perform(ctx)
    except Exception as e:
        log.failed(e, (time.perf_counter() - start) * 1000)
        raise
    log.completed((time.perf_counter() - start) * 1000)
    return result


async def run_trigger(trigger: Trigger, ctx: ExecuteContext) -> JSON:
    """Invoke a trigger with lifecycle logging."""
    log = InvocationLogger(ctx.logger, trigger.integration, trigger.operation_id, kind="trigger")
    log.started(last_run=ctx.last_run)
    start = time.perf_counter()
    try:
        result = await trigger.execute(ctx)
    except Exception as e:
        log.failed(e, (time.perf_counter() - start) * 1000)
        raise
    log.completed((time.perf_counter() - start) * 1000)
    return result
