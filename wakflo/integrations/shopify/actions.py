"""Shopify actions."""

from __future__ import annotations

import logging
from typing import Any

from wakflo.integrations.shopify.client import ShopifyClient
from wakflo.integrations.shopify.schemas import (
    CreateCustomerProps,
    CreateTransactionProps,
    GetCustomerOrdersProps,
    GetOrderProps,
    ListOrdersProps,
    OrderStatus,
    TransactionKind,
)
from wakflo.sdk.action import Action, ActionMetadata
from wakflo.sdk.client import ClientConfig
from wakflo.sdk.context import PerformContext
from wakflo.sdk.form import FormSchema, Option, new_form

logger = logging.getLogger(__name__)

_ORDER_SAMPLE = {
    "id": 123456789,
    "name": "#1001",
    "email": "customer@example.com",
    "createdAt": "2023-01-01T12:00:00Z",
    "totalPrice": "125.00",
    "currency": "USD",
    "financialStatus": "paid",
    "fulfillmentStatus": "fulfilled",
}


class _ShopifyAction(Action):
    integration = "shopify"

    def __init__(self, config: ClientConfig, api_version: str):
        self.config = config
        self.api_version = api_version

    def _client(self, ctx: PerformContext) -> ShopifyClient:
        return ShopifyClient(self.config, ctx.auth_context(self.integration), self.api_version)


class GetOrderAction(_ShopifyAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="get_order",
            display_name="Get Order",
            description="Retrieve a single order from your Shopify store by its ID.",
            sample_output={"order": _ORDER_SAMPLE},
            icon="shopify",
        )

    def properties(self) -> FormSchema:
        form = new_form("get_order", "Get Order")
        form.number_field("orderId", "Order ID").required().help_text("The ID of the order.")
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, GetOrderProps)
        async with self._client(ctx) as client:
            order = await client.get_order(props.order_id)
        return {"order": order.model_dump()}


class GetCustomerOrdersAction(_ShopifyAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="get_customer_orders",
            display_name="Get Customer Orders",
            description="Retrieve every order placed by a customer.",
            sample_output={"customerOrders": [_ORDER_SAMPLE]},
            icon="shopify",
        )

    def properties(self) -> FormSchema:
        form = new_form("get_customer_orders", "Get Customer Orders")
        form.number_field("customerId", "Customer ID").required().help_text(
            "The ID of the customer."
        )
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, GetCustomerOrdersProps)
        async with self._client(ctx) as client:
            orders = await client.list_customer_orders(props.customer_id)
        return {"customerOrders": [order.to_summary() for order in orders]}


class ListOrdersAction(_ShopifyAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="list_orders",
            display_name="List Orders",
            description="List orders in your store, optionally filtered by status.",
            sample_output={"orders": [_ORDER_SAMPLE]},
            icon="shopify",
        )

    def properties(self) -> FormSchema:
        form = new_form("list_orders", "List Orders")
        form.number_field("limit", "Limit").default_value(50).min_value(1).max_value(250)
        form.select_field("status", "Status").add_options(
            Option(OrderStatus.OPEN.value, "Open"),
            Option(OrderStatus.CLOSED.value, "Closed"),
            Option(OrderStatus.CANCELLED.value, "Cancelled"),
            Option(OrderStatus.ANY.value, "Any"),
        )
        form.text_field("financial_status", "Financial Status").placeholder("paid")
        form.text_field("fulfillment_status", "Fulfillment Status").placeholder("shipped")
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, ListOrdersProps)
        async with self._client(ctx) as client:
            orders = await client.list_orders(params=props.to_params())
        return {"orders": [order.to_summary() for order in orders]}


class CreateCustomerAction(_ShopifyAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="create_customer",
            display_name="Create Customer",
            description="Create a new customer in your Shopify store.",
            sample_output={"customer": {"id": 207119551, "first_name": "Bob", "last_name": "Norman"}},
            icon="shopify",
        )

    def properties(self) -> FormSchema:
        form = new_form("create_customer", "Create Customer")
        form.text_field("firstName", "First name").required()
        form.text_field("lastName", "Last name").required()
        form.text_field("phone", "Phone").placeholder("+15142546011")
        form.text_field("email", "Email").pattern(r"^[^@\s]+@[^@\s]+$", "enter a valid email")
        form.textarea_field("tags", "Tags").help_text("Comma-separated tags")
        form.textarea_field("note", "Note")
        form.checkbox_field("verifiedEmail", "Verified email").default_value(False)
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, CreateCustomerProps)
        async with self._client(ctx) as client:
            customer = await client.create_customer(props.to_api_dict())
        logger.info(f"[shopify] Created customer {customer.get('id')}")
        return {"customer": customer}


class CreateTransactionAction(_ShopifyAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="create_transaction",
            display_name="Create Transaction",
            description="Create a transaction (capture, refund, ...) on an order.",
            sample_output={"transaction": {"id": 389404469, "kind": "capture", "amount": "10.00"}},
            icon="shopify",
        )

    def properties(self) -> FormSchema:
        form = new_form("create_transaction", "Create Transaction")
        form.number_field("orderId", "Order ID").required().help_text(
            "The ID of the order to create a transaction for."
        )
        form.select_field("kind", "Type").required().add_options(
            *(Option(kind.value, kind.value.capitalize()) for kind in TransactionKind)
        )
        form.number_field("parentId", "Parent ID").help_text("The ID of an associated transaction.")
        form.text_field("currency", "Currency").placeholder("USD")
        form.number_field("amount", "Amount")
        form.text_field("authorization", "Authorization Key")
        form.text_field("source", "Source").help_text(
            "Set to external to import a cash transaction for the order."
        )
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, CreateTransactionProps)
        async with self._client(ctx) as client:
            transaction = await client.create_transaction(props.order_id, props.to_api_dict())
        return {"transaction": transaction}
