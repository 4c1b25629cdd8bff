"""
Wakflo connectors - vendor integrations for the Wakflo workflow platform.

Each integration exposes a uniform set of actions (single-call
operations) and triggers (polling operations) built on the SDK in
wakflo.sdk:

- **Action/Trigger Contract**: metadata, input form, auth and perform/execute
- **Form Schema**: declarative fields with validation and visibility rules
- **Dynamic Fields**: select options computed by calling back into the vendor,
  with dependency-aware invalidation

Quick Start:
    >>> from wakflo.config import get_settings
    >>> from wakflo.integrations import register_integrations
    >>> from wakflo.sdk import AuthContext, PerformContext, run_action
    >>>
    >>> registry = register_integrations(get_settings())
    >>> action = registry.action("shopify", "get_order")
    >>> ctx = PerformContext(input={"orderId": 1001}, auth=AuthContext(extra={...}))
    >>> order = await run_action(action, ctx)
"""

__version__ = "0.1.0"

from wakflo.sdk import (
    Action,
    AuthContext,
    ConnectorError,
    ExecuteContext,
    PerformContext,
    Trigger,
)

__all__ = [
    "Action",
    "AuthContext",
    "ConnectorError",
    "ExecuteContext",
    "PerformContext",
    "Trigger",
]
