"""
Shopify Admin REST API client.

The shop is addressed by the domain stored on the connection:
https://<domain>.myshopify.com/admin/api/<version>/

API Reference:
    https://shopify.dev/docs/api/admin-rest
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from wakflo.integrations.shopify.schemas import Customer, Order
from wakflo.sdk.client import ClientConfig, VendorClient
from wakflo.sdk.context import AuthContext
from wakflo.sdk.errors import NotFoundError

logger = logging.getLogger(__name__)


def shop_base_url(domain: str, api_version: str) -> str:
    """Accepts either 'my-shop' or 'my-shop.myshopify.com'."""
    host = domain.strip().removeprefix("https://").rstrip("/")
    if not host.endswith(".myshopify.com"):
        host = f"{host}.myshopify.com"
    return f"https://{host}/admin/api/{api_version}"


class ShopifyClient(VendorClient):
    """
    Async client for the Shopify Admin API.

    Authenticates with the X-Shopify-Access-Token header.
    """

    def __init__(self, config: ClientConfig, auth: AuthContext, api_version: str):
        super().__init__(config)
        self._domain = auth.require_extra("domain", self.name, label="shop domain")
        self._token = auth.require_extra("token", self.name, label="access token")
        self._api_version = api_version

    @property
    def name(self) -> str:
        return "shopify"

    def _base_url(self) -> str:
        return self.config.base_url or shop_base_url(self._domain, self._api_version)

    def _auth_headers(self) -> dict[str, str]:
        return {"X-Shopify-Access-Token": self._token}

    # =========================================================================
    # Orders
    # =========================================================================

    async def get_order(self, order_id: int) -> Order:
        """
        Raises:
            NotFoundError: No order with this id
        """
        try:
            data = await self.get_json(
                f"/orders/{order_id}.json",
                operation="get_order",
                resource_id=str(order_id),
            )
        except NotFoundError as e:
            raise _order_not_found(order_id, "get_order") from e
        order = self.unwrap(data, "order", operation="get_order")
        return self.parse(Order, order, operation="get_order")

    async def list_orders(
        self,
        *,
        params: dict[str, Any] | None = None,
        created_at_min: datetime | None = None,
    ) -> list[Order]:
        query = {"status": "any", **(params or {})}
        if created_at_min is not None:
            query["created_at_min"] = created_at_min.astimezone(timezone.utc).isoformat()
        data = await self.get_json("/orders.json", params=query, operation="list_orders")
        orders = self.unwrap(data, "orders", operation="list_orders")
        return self.parse_many(Order, orders, operation="list_orders")

    async def list_customer_orders(self, customer_id: int) -> list[Order]:
        data = await self.get_json(
            f"/customers/{customer_id}/orders.json",
            params={"status": "any"},
            operation="get_customer_orders",
            resource_id=str(customer_id),
        )
        orders = self.unwrap(data, "orders", operation="get_customer_orders")
        return self.parse_many(Order, orders, operation="get_customer_orders")

    async def create_transaction(self, order_id: int, body: dict[str, Any]) -> dict[str, Any]:
        try:
            data = await self.post_json(
                f"/orders/{order_id}/transactions.json",
                json=body,
                operation="create_transaction",
                resource_id=str(order_id),
            )
        except NotFoundError as e:
            raise _order_not_found(order_id, "create_transaction") from e
        return self.unwrap(data, "transaction", operation="create_transaction")

    # =========================================================================
    # Customers
    # =========================================================================

    async def create_customer(self, body: dict[str, Any]) -> dict[str, Any]:
        data = await self.post_json("/customers.json", json=body, operation="create_customer")
        return self.unwrap(data, "customer", operation="create_customer")

    async def list_customers(self, *, created_at_min: datetime | None = None) -> list[Customer]:
        params: dict[str, Any] = {}
        if created_at_min is not None:
            params["created_at_min"] = created_at_min.astimezone(timezone.utc).isoformat()
        data = await self.get_json("/customers.json", params=params, operation="list_customers")
        customers = self.unwrap(data, "customers", operation="list_customers")
        return self.parse_many(Customer, customers, operation="list_customers")


def _order_not_found(order_id: int, operation: str) -> NotFoundError:
    return NotFoundError(
        f"no order found with ID '{order_id}'",
        "shopify",
        operation=operation,
        resource_id=str(order_id),
        status_code=404,
    )
