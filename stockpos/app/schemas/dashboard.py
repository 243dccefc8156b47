from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class LowStockItemOut(BaseModel):
    id: str
    name: str
    quantity: int
    min_stock_level: int


class TrendPointOut(BaseModel):
    created_at: datetime | None
    new_quantity: int
    transaction_type: str


class CategorySliceOut(BaseModel):
    name: str
    value: int


class DashboardOut(BaseModel):
    total_items: int
    total_value: str
    low_stock_count: int
    low_stock_items: list[LowStockItemOut]
    transaction_count: int
    recent_transactions: list[TrendPointOut]
    category_distribution: list[CategorySliceOut]
    sale_count: int
    total_revenue: str
