"""
Pydantic schemas for the Shopify Admin REST API.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Enums
# =============================================================================


class TransactionKind(str, Enum):
    AUTHORIZATION = "authorization"
    CAPTURE = "capture"
    SALE = "sale"
    VOID = "void"
    REFUND = "refund"


class OrderStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    CANCELLED = "cancelled"
    ANY = "any"


# =============================================================================
# Vendor Resources
# =============================================================================


class Order(BaseModel):
    """Subset of a Shopify order used in action outputs."""

    model_config = ConfigDict(extra="allow")

    id: int
    name: str = ""
    email: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    total_price: str | None = None
    currency: str | None = None
    financial_status: str | None = None
    fulfillment_status: str | None = None
    customer: dict[str, Any] | None = None

    @property
    def customer_id(self) -> int | None:
        return (self.customer or {}).get("id")

    def to_summary(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "totalPrice": self.total_price,
            "currency": self.currency,
            "financialStatus": self.financial_status,
            "fulfillmentStatus": self.fulfillment_status,
        }


class Customer(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    orders_count: int | None = None

    def to_summary(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phone": self.phone,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "ordersCount": self.orders_count,
        }


# =============================================================================
# Action Inputs
# =============================================================================


class GetOrderProps(BaseModel):
    order_id: int = Field(..., alias="orderId", gt=0)


class GetCustomerOrdersProps(BaseModel):
    customer_id: int = Field(..., alias="customerId", gt=0)


class ListOrdersProps(BaseModel):
    limit: int = Field(50, ge=1, le=250)
    status: OrderStatus | None = None
    financial_status: str | None = None
    fulfillment_status: str | None = None

    def to_params(self) -> dict[str, Any]:
        return {
            "limit": self.limit,
            "status": (self.status or OrderStatus.ANY).value,
            "financial_status": self.financial_status or None,
            "fulfillment_status": self.fulfillment_status or None,
        }


class CreateCustomerProps(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: str | None = None
    phone: str | None = None
    tags: str | None = None
    note: str | None = None
    verified_email: bool = Field(False, alias="verifiedEmail")

    def to_api_dict(self) -> dict[str, Any]:
        """Convert to API request format, excluding None values."""
        data: dict[str, Any] = {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "verified_email": self.verified_email,
        }
        for key in ("email", "phone", "tags", "note"):
            value = getattr(self, key)
            if value:
                data[key] = value
        return {"customer": data}


class CreateTransactionProps(BaseModel):
    order_id: int = Field(..., alias="orderId", gt=0)
    kind: TransactionKind
    parent_id: int | None = Field(None, alias="parentId")
    currency: str | None = None
    amount: Decimal | None = None
    authorization: str | None = None
    source: str | None = None

    def to_api_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value}
        if self.parent_id is not None:
            data["parent_id"] = self.parent_id
        if self.currency:
            data["currency"] = self.currency
        if self.amount is not None:
            data["amount"] = str(self.amount)
        if self.authorization:
            data["authorization"] = self.authorization
        if self.source:
            data["source"] = self.source
        return {"transaction": data}


class NewOrderProps(BaseModel):
    created_time: datetime | None = Field(None, alias="createdTime")


class NewCustomerProps(BaseModel):
    email: str | None = None

    def matches(self, customer: Customer) -> bool:
        if not self.email or not self.email.strip():
            return True
        return (customer.email or "").lower() == self.email.strip().lower()
