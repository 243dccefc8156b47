from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, field_validator


class CartLineIn(BaseModel):
    item_id: UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Quantity must be greater than zero")
        return v


class CustomerInfo(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None


class CartRequest(BaseModel):
    lines: list[CartLineIn]
    discount_amount: Decimal = Decimal("0")


class CheckoutRequest(CartRequest):
    customer: CustomerInfo = CustomerInfo()
    payment_method: str = "cash"
    payment_status: str = "paid"
    notes: str | None = None


class CartLineOut(BaseModel):
    item_id: str
    name: str
    sku: str
    price: str
    quantity: int
    total: str


class CartOut(BaseModel):
    lines: list[CartLineOut]
    subtotal: str
    discount_amount: str
    tax_rate: str
    tax_amount: str
    total: str
