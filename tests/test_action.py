"""
Tests for the Action / Trigger contract.

Tests cover:
- decode_input preconditions before any network call
- run_action / run_trigger lifecycle logging
- Manifests
- ExecuteContext.last_run parsing
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from wakflo.sdk.action import (
    Action,
    ActionMetadata,
    Trigger,
    TriggerMetadata,
    run_action,
    run_trigger,
)
from wakflo.sdk.auth import AuthStrategy, custom_auth
from wakflo.sdk.context import AuthContext, ExecuteContext, PerformContext
from wakflo.sdk.errors import NotFoundError, PreconditionError
from wakflo.sdk.form import new_form


class EchoProps(BaseModel):
    message: str
    times: int = 1


class EchoAction(Action):
    integration = "echo"

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.performed = 0

    def metadata(self) -> ActionMetadata:
        return ActionMetadata(id="echo", display_name="Echo", description="Repeat a message.")

    def properties(self):
        form = new_form("echo", "Echo")
        form.text_field("message", "Message").required()
        form.number_field("times", "Times").default_value(1)
        return form.build()

    async def perform(self, ctx: PerformContext):
        props = self.decode_input(ctx, EchoProps)
        self.performed += 1
        if self.error is not None:
            raise self.error
        return {"echo": props.message * props.times}


class TickTrigger(Trigger):
    integration = "echo"

    def metadata(self) -> TriggerMetadata:
        return TriggerMetadata(id="tick", display_name="Tick", description="Report the last run.")

    def properties(self):
        return new_form("tick", "Tick").build()

    async def execute(self, ctx: ExecuteContext):
        return {"since": ctx.last_run.isoformat() if ctx.last_run else None}


# =============================================================================
# decode_input
# =============================================================================


class TestDecodeInput:
    """Tests for input decoding."""

    @pytest.mark.asyncio
    async def test_missing_required_raises_precondition(self):
        """Test that a missing required field fails before perform does any work."""
        action = EchoAction()
        ctx = PerformContext(input={"times": 2})

        with pytest.raises(PreconditionError, match="missing required input: message") as exc_info:
            await action.perform(ctx)

        assert action.performed == 0
        assert exc_info.value.operation == "echo"
        assert exc_info.value.integration == "echo"

    @pytest.mark.asyncio
    async def test_invalid_type_raises_precondition(self):
        """Test that pydantic failures surface as PreconditionError."""
        action = EchoAction()
        ctx = PerformContext(input={"message": "hi", "times": "many"})

        with pytest.raises(PreconditionError, match="times"):
            await action.perform(ctx)

    @pytest.mark.asyncio
    async def test_valid_input(self):
        """Test a successful perform."""
        result = await EchoAction().perform(PerformContext(input={"message": "ab", "times": 2}))

        assert result == {"echo": "abab"}


# =============================================================================
# Invocation
# =============================================================================


class TestRunAction:
    """Tests for run_action lifecycle logging."""

    @pytest.mark.asyncio
    async def test_logs_started_and_completed(self):
        """Test that a successful run logs two lifecycle events."""
        log = MagicMock()
        ctx = PerformContext(input={"message": "hi"}, logger=log)

        result = await run_action(EchoAction(), ctx)

        assert result == {"echo": "hi"}
        messages = [c.args[0] for c in log.info.call_args_list]
        assert messages == ["Action started", "Action completed"]
        assert log.info.call_args_list[1].kwargs["operation"] == "echo"

    @pytest.mark.asyncio
    async def test_failure_is_logged_and_propagated(self):
        """Test that errors propagate unchanged after logging."""
        log = MagicMock()
        error = NotFoundError("no order found with ID '1'", "echo", status_code=404)
        ctx = PerformContext(input={"message": "hi"}, logger=log)

        with pytest.raises(NotFoundError) as exc_info:
            await run_action(EchoAction(error=error), ctx)

        assert exc_info.value is error
        log.error.assert_called_once()
        assert log.error.call_args.kwargs["error_type"] == "NotFoundError"

    @pytest.mark.asyncio
    async def test_run_trigger_passes_last_run(self):
        """Test trigger invocation with a lastRun timestamp."""
        log = MagicMock()
        ctx = ExecuteContext(metadata={"lastRun": "2024-05-01T10:00:00Z"}, logger=log)

        result = await run_trigger(TickTrigger(), ctx)

        assert result == {"since": "2024-05-01T10:00:00+00:00"}
        assert log.info.call_args_list[0].args[0] == "Trigger started"


# =============================================================================
# Contexts
# =============================================================================


class TestExecuteContext:
    """Tests for ExecuteContext.last_run."""

    def test_absent_last_run(self):
        """Test that a first run has no lastRun."""
        assert ExecuteContext().last_run is None
        assert ExecuteContext(metadata={"lastRun": ""}).last_run is None

    def test_naive_datetime_is_utc(self):
        """Test that naive datetimes are treated as UTC."""
        ctx = ExecuteContext(metadata={"lastRun": datetime(2024, 1, 1, 12, 0)})

        assert ctx.last_run == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_offset_string_is_normalised(self):
        """Test that offsets are converted to UTC."""
        ctx = ExecuteContext(metadata={"lastRun": "2024-01-01T12:00:00+02:00"})

        assert ctx.last_run == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["yesterday", "2024-13-45T00:00:00Z", 1714521600])
    def test_malformed_last_run(self, value):
        """Test that an unreadable lastRun is a PreconditionError naming the value."""
        ctx = ExecuteContext(metadata={"lastRun": value})

        with pytest.raises(PreconditionError, match=repr(value)):
            ctx.last_run

    @pytest.mark.asyncio
    async def test_malformed_last_run_fails_the_trigger(self):
        """Test that run_trigger surfaces the bad lastRun as a PreconditionError."""
        ctx = ExecuteContext(metadata={"lastRun": "not-a-date"}, logger=MagicMock())

        with pytest.raises(PreconditionError, match="'not-a-date'") as exc_info:
            await run_trigger(TickTrigger(), ctx)

        assert isinstance(exc_info.value.__cause__, ValueError)


class TestAuthContext:
    """Tests for AuthContext."""

    def test_auth_context_requires_credentials(self):
        """Test that PerformContext.auth_context rejects empty auth."""
        with pytest.raises(PreconditionError, match="connected account"):
            PerformContext(auth=AuthContext()).auth_context("echo")

    def test_require_extra_names_the_credential(self):
        """Test the message for a missing custom field."""
        auth = AuthContext(extra={"domain": "shop"})

        with pytest.raises(PreconditionError, match="Access token"):
            auth.require_extra("token", "shopify", label="Access token")

    def test_repr_hides_token(self):
        """Test that credentials never appear in repr."""
        assert "secret" not in repr(AuthContext(access_token="secret"))


# =============================================================================
# Manifest
# =============================================================================


class TestManifest:
    """Tests for operation manifests."""

    def test_action_manifest(self):
        """Test the manifest of an action."""
        manifest = EchoAction().to_manifest()

        assert manifest["id"] == "echo"
        assert manifest["displayName"] == "Echo"
        assert manifest["properties"]["fields"][0]["name"] == "message"
        assert "auth" not in manifest

    def test_auth_override_in_manifest(self):
        """Test that an action-level auth override is serialised."""
        form = new_form("key", "Key")
        form.password_field("apiKey", "API key").required()
        override = custom_auth(form, strategy=AuthStrategy.API_KEY)

        class KeyedEcho(EchoAction):
            def auth(self):
                return override

        manifest = KeyedEcho().to_manifest()

        assert manifest["auth"]["strategy"] == "api_key"
        assert manifest["auth"]["required"] is True

    def test_trigger_type_defaults_to_polling(self):
        """Test trigger metadata defaults."""
        assert TickTrigger().trigger_type.value == "polling"
        assert repr(TickTrigger()) == "<Trigger echo.tick>"
