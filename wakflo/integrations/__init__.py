"""
Wakflo connector integrations.

Each subpackage exposes create_integration(settings, transport=None)
returning an Integration. register_integrations() builds all of them
into a frozen registry:

    from wakflo.config import get_settings
    from wakflo.integrations import register_integrations

    registry = register_integrations(get_settings())
    action = registry.action("shopify", "get_order")
"""

from __future__ import annotations

import logging

import httpx

from wakflo.config import ConnectorSettings
from wakflo.integrations import claude, clickup, gmail, shopify, todoist, youtube
from wakflo.sdk.integration import IntegrationRegistry

logger = logging.getLogger(__name__)

ALL_INTEGRATIONS = (claude, clickup, gmail, shopify, todoist, youtube)


def register_integrations(
    settings: ConnectorSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> IntegrationRegistry:
    """Build every integration and return them in a frozen registry."""
    registry = IntegrationRegistry()
    for module in ALL_INTEGRATIONS:
        registry.register(module.create_integration(settings, transport))
    logger.info(f"[registry] {len(registry)} integrations ready: {', '.join(registry.list_names())}")
    return registry.freeze()


__all__ = ["ALL_INTEGRATIONS", "register_integrations"]
