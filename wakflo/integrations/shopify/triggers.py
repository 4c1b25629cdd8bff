"""Shopify triggers."""

from __future__ import annotations

import logging
from typing import Any

from wakflo.integrations.shopify.client import ShopifyClient
from wakflo.integrations.shopify.schemas import NewCustomerProps, NewOrderProps
from wakflo.sdk.action import Trigger, TriggerMetadata, TriggerType
from wakflo.sdk.client import ClientConfig
from wakflo.sdk.context import ExecuteContext
from wakflo.sdk.form import FormSchema, new_form

logger = logging.getLogger(__name__)


class NewOrderTrigger(Trigger):
    """Polls for orders created since createdTime, or since the last run."""

    integration = "shopify"

    def __init__(self, config: ClientConfig, api_version: str):
        self.config = config
        self.api_version = api_version

    def metadata(self) -> TriggerMetadata:
        return TriggerMetadata(
            id="new_order",
            display_name="New Order",
            description="Triggered when a new order is created in your Shopify store.",
            type=TriggerType.POLLING,
            sample_output={
                "orders": [
                    {
                        "id": 123456789,
                        "name": "#1001",
                        "email": "customer@example.com",
                        "createdAt": "2023-01-01T12:00:00Z",
                        "financialStatus": "paid",
                        "totalPrice": "125.00",
                    }
                ]
            },
            icon="shopify",
        )

    def properties(self) -> FormSchema:
        form = new_form("shopify-new-order", "New Order")
        form.date_time_field("createdTime", "Created after").help_text(
            "Only report orders created after this time. Defaults to the last run."
        )
        return form.build()

    async def execute(self, ctx: ExecuteContext) -> dict[str, Any]:
        props = self.decode_input(ctx, NewOrderProps)
        since = props.created_time or ctx.last_run

        client = ShopifyClient(self.config, ctx.auth_context(self.integration), self.api_version)
        async with client:
            orders = await client.list_orders(created_at_min=since)

        logger.debug(f"[shopify] {len(orders)} new orders since {since}")
        return {"orders": [order.to_summary() for order in orders]}


class NewCustomerTrigger(Trigger):
    """Polls for customers created since the last run."""

    integration = "shopify"

    def __init__(self, config: ClientConfig, api_version: str):
        self.config = config
        self.api_version = api_version

    def metadata(self) -> TriggerMetadata:
        return TriggerMetadata(
            id="new_customer",
            display_name="New Customer",
            description="Triggered when a new customer is created in your Shopify store.",
            type=TriggerType.POLLING,
            sample_output={
                "customers": [
                    {
                        "id": 123456789,
                        "email": "customer@example.com",
                        "firstName": "John",
                        "lastName": "Doe",
                        "createdAt": "2023-01-01T12:00:00Z",
                        "ordersCount": 0,
                    }
                ]
            },
            icon="shopify",
        )

    def properties(self) -> FormSchema:
        form = new_form("shopify-new-customer", "New Customer")
        form.text_field("email", "Email Filter").placeholder("john@example.com").help_text(
            "Only report customers with this email address. Leave blank for all new customers."
        )
        return form.build()

    async def execute(self, ctx: ExecuteContext) -> dict[str, Any]:
        props = self.decode_input(ctx, NewCustomerProps)

        client = ShopifyClient(self.config, ctx.auth_context(self.integration), self.api_version)
        async with client:
            customers = await client.list_customers(created_at_min=ctx.last_run)

        matched = [c.to_summary() for c in customers if props.matches(c)]
        logger.debug(f"[shopify] {len(matched)} new customers since {ctx.last_run}")
        return {"customers": matched}
