from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, field_validator

from stockpos.app.models.inventory import TransactionType


class CategoryCreate(BaseModel):
    name: str
    description: str | None = None


class CategoryOut(BaseModel):
    id: UUID
    name: str
    description: str | None

    class Config:
        from_attributes = True


class SupplierCreate(BaseModel):
    name: str
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None


class SupplierOut(BaseModel):
    id: UUID
    name: str
    contact_person: str | None
    email: str | None
    phone: str | None
    address: str | None

    class Config:
        from_attributes = True


class ItemCreate(BaseModel):
    name: str
    sku: str
    barcode: str | None = None
    description: str | None = None
    category_id: UUID | None = None
    supplier_id: UUID | None = None
    price: Decimal = Decimal("0")
    cost: Decimal | None = None
    quantity: int = 0
    min_stock_level: int = 0
    status: str = "active"
    image_url: str | None = None

    @field_validator("price", "cost")
    @classmethod
    def price_non_negative(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("Price must be non-negative")
        return v

    @field_validator("quantity", "min_stock_level")
    @classmethod
    def count_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Quantity must be non-negative")
        return v


class ItemUpdate(BaseModel):
    name: str | None = None
    sku: str | None = None
    barcode: str | None = None
    description: str | None = None
    category_id: UUID | None = None
    supplier_id: UUID | None = None
    price: Decimal | None = None
    cost: Decimal | None = None
    min_stock_level: int | None = None
    status: str | None = None
    image_url: str | None = None
    # NOTE: quantity is intentionally excluded. Stock changes go through
    # update_inventory_quantity so they are logged as transactions.

    @field_validator("price", "cost")
    @classmethod
    def price_non_negative(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("Price must be non-negative")
        return v


class ItemOut(BaseModel):
    id: UUID
    name: str
    sku: str
    barcode: str | None
    description: str | None
    category_id: UUID | None
    category_name: str | None
    supplier_id: UUID | None
    supplier_name: str | None
    price: str
    cost: str | None
    quantity: int
    min_stock_level: int
    status: str
    image_url: str | None
    is_low_stock: bool


class QuantityUpdate(BaseModel):
    quantity_change: int
    transaction_type: TransactionType
    unit_cost: Decimal | None = None
    reference_number: str | None = None
    notes: str | None = None

    @field_validator("quantity_change")
    @classmethod
    def change_non_zero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("Quantity change must not be zero")
        return v


class TransactionOut(BaseModel):
    id: UUID
    item_id: UUID | None
    item_name: str | None
    item_sku: str | None
    transaction_type: str
    quantity: int
    previous_quantity: int
    new_quantity: int
    unit_cost: str | None
    total_cost: str | None
    reference_number: str | None
    notes: str | None
    created_at: datetime | None
