from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator

Q2 = Decimal("0.01")


class SaleItemCreate(BaseModel):
    item_id: UUID
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    @field_validator("quantity")
    @classmethod
    def quantity_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Quantity must be greater than zero")
        return v

    @field_validator("unit_price", "total_price")
    @classmethod
    def price_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price must be non-negative")
        return v


class SaleCreate(BaseModel):
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    customer_address: str | None = None
    subtotal: Decimal
    discount_amount: Decimal = Decimal("0")
    tax_rate: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    total_amount: Decimal
    payment_method: str | None = "cash"
    payment_status: str = "paid"
    notes: str | None = None
    items: list[SaleItemCreate]

    @field_validator("discount_amount", "tax_amount", "subtotal")
    @classmethod
    def amount_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Amounts must be non-negative")
        return v

    @model_validator(mode="after")
    def totals_reconcile(self) -> SaleCreate:
        if not self.items:
            raise ValueError("Sale must contain at least one item")
        expected = (self.subtotal - self.discount_amount + self.tax_amount).quantize(Q2)
        if self.total_amount.quantize(Q2) != expected:
            raise ValueError(
                f"total_amount ({self.total_amount}) must equal subtotal - "
                f"discount_amount + tax_amount ({expected})"
            )
        return self


class CatalogRefOut(BaseModel):
    name: str
    sku: str


class SaleItemOut(BaseModel):
    id: str
    item_id: str | None
    name: str | None
    sku: str | None
    quantity: int
    unit_price: str
    total_price: str
    inventory_items: CatalogRefOut | None


class SaleOut(BaseModel):
    id: str
    invoice_number: str
    created_at: str | None
    customer_name: str | None
    customer_email: str | None
    customer_phone: str | None
    customer_address: str | None
    subtotal: str
    discount_amount: str
    tax_rate: str
    tax_amount: str
    total_amount: str
    payment_method: str | None
    payment_status: str
    notes: str | None
    sale_items: list[SaleItemOut]
