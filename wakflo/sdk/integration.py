"""
Integration declarations and the registry that holds them.

An Integration groups the actions and triggers of one vendor behind a
shared auth declaration. The registry is filled once at startup, frozen,
and then only read.

Usage:
    registry = IntegrationRegistry()
    registry.register(shopify.create_integration(settings))
    registry.freeze()

    action = registry.action("shopify", "get_order")
    result = await run_action(action, ctx)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from wakflo.sdk.action import Action, Trigger
from wakflo.sdk.auth import NO_AUTH, AuthMetadata
from wakflo.sdk.errors import RegistryError, SchemaError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Integration:
    """One vendor connector: auth plus its actions and triggers."""

    name: str
    display_name: str
    description: str
    auth: AuthMetadata = NO_AUTH
    actions: Sequence[Action] = ()
    triggers: Sequence[Trigger] = ()
    categories: Sequence[str] = field(default_factory=tuple)
    version: str = "0.1.0"

    def __post_init__(self) -> None:
        for kind, operations in (("action", self.actions), ("trigger", self.triggers)):
            seen: set[str] = set()
            for op in operations:
                if op.operation_id in seen:
                    raise SchemaError(
                        f"integration '{self.name}' declares {kind} '{op.operation_id}' twice"
                    )
                seen.add(op.operation_id)

    def action(self, action_id: str) -> Action | None:
        for action in self.actions:
            if action.operation_id == action_id:
                return action
        return None

    def trigger(self, trigger_id: str) -> Trigger | None:
        for trigger in self.triggers:
            if trigger.operation_id == trigger_id:
                return trigger
        return None

    def to_manifest(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "description": self.description,
            "version": self.version,
            "categories": list(self.categories),
            "auth": self.auth.to_dict(),
            "actions": [a.to_manifest() for a in self.actions],
            "triggers": [t.to_manifest() for t in self.triggers],
        }


class IntegrationRegistry:
    """
    Registry of available integrations.

    Integrations are registered once at startup; after freeze() the
    registry is read-only and safe to share between invocations.
    """

    def __init__(self) -> None:
        self._integrations: dict[str, Integration] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, integration: Integration) -> None:
        """
        Register an integration.

        Raises:
            RegistryError: If frozen or the name is already registered
        """
        if self._frozen:
            raise RegistryError(
                f"cannot register '{integration.name}': registry is frozen"
            )
        if not integration.name:
            raise RegistryError(f"integration must have a valid name: {integration!r}")
        if integration.name in self._integrations:
            raise RegistryError(f"integration '{integration.name}' already registered")

        self._integrations[integration.name] = integration
        logger.info(
            f"[registry] Registered integration: {integration.name} "
            f"({len(integration.actions)} actions, {len(integration.triggers)} triggers)"
        )

    def freeze(self) -> IntegrationRegistry:
        self._frozen = True
        return self

    def get(self, name: str) -> Integration | None:
        return self._integrations.get(name)

    def get_required(self, name: str) -> Integration:
        """
        Get an integration by name, raising if not found.

        Raises:
            RegistryError: If integration not found
        """
        integration = self._integrations.get(name)
        if integration is None:
            available = list(self._integrations.keys())
            raise RegistryError(f"integration '{name}' not found. Available: {available}")
        return integration

    def action(self, integration: str, action_id: str) -> Action:
        found = self.get_required(integration).action(action_id)
        if found is None:
            raise RegistryError(f"integration '{integration}' has no action '{action_id}'")
        return found

    def trigger(self, integration: str, trigger_id: str) -> Trigger:
        found = self.get_required(integration).trigger(trigger_id)
        if found is None:
            raise RegistryError(f"integration '{integration}' has no trigger '{trigger_id}'")
        return found

    def list_names(self) -> list[str]:
        return list(self._integrations.keys())

    def to_manifest(self) -> list[dict[str, Any]]:
        return [integration.to_manifest() for integration in self._integrations.values()]

    def __len__(self) -> int:
        return len(self._integrations)

    def __contains__(self, name: str) -> bool:
        return name in self._integrations

    def __repr__(self) -> str:
        return f"<IntegrationRegistry integrations={list(self._integrations.keys())}>"
