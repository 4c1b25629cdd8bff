"""
Shopify Integration for Wakflo.

Authenticates with a custom connection holding the shop domain and an
Admin API access token:

    AuthContext(extra={"domain": "my-shop", "token": "shpat_..."})

API Reference:
    https://shopify.dev/docs/api/admin-rest
"""

from __future__ import annotations

import httpx

from wakflo.config import ConnectorSettings
from wakflo.integrations.shopify.actions import (
    CreateCustomerAction,
    CreateTransactionAction,
    GetCustomerOrdersAction,
    GetOrderAction,
    ListOrdersAction,
)
from wakflo.integrations.shopify.client import ShopifyClient
from wakflo.integrations.shopify.triggers import NewCustomerTrigger, NewOrderTrigger
from wakflo.sdk.auth import custom_auth
from wakflo.sdk.form import new_form
from wakflo.sdk.integration import Integration

_auth_form = new_form("shopify-auth", "Shopify")
_auth_form.text_field("domain", "Shop domain").required().placeholder("my-shop").help_text(
    "The part before .myshopify.com"
)
_auth_form.password_field("token", "Admin API access token").required()

SHOPIFY_AUTH = custom_auth(_auth_form)


def create_integration(
    settings: ConnectorSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Integration:
    # Base URL is derived per connection from the shop domain
    config = settings.client_config("", transport)
    version = settings.shopify_api_version
    return Integration(
        name="shopify",
        display_name="Shopify",
        description="Manage orders, customers and transactions in a Shopify store.",
        auth=SHOPIFY_AUTH,
        actions=(
            GetOrderAction(config, version),
            GetCustomerOrdersAction(config, version),
            ListOrdersAction(config, version),
            CreateCustomerAction(config, version),
            CreateTransactionAction(config, version),
        ),
        triggers=(NewOrderTrigger(config, version), NewCustomerTrigger(config, version)),
        categories=("ecommerce",),
    )


__all__ = [
    "SHOPIFY_AUTH",
    "ShopifyClient",
    "create_integration",
]
