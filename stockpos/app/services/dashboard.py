"""Dashboard metrics: pure reductions over store query results."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from stockpos.app.models.sales import Sale
from stockpos.app.services.inventory import item_to_dict, list_items, list_transactions
from stockpos.app.services.sales import total_revenue

ZERO = Decimal("0")
RECENT_TREND_SIZE = 7
LOW_STOCK_PREVIEW = 5


def _dec(value: Any) -> Decimal:
    if value is None:
        return ZERO
    return Decimal(str(value))


def _is_low(item: Mapping[str, Any]) -> bool:
    qty = item.get("quantity")
    minimum = item.get("min_stock_level")
    return qty is not None and minimum is not None and qty <= minimum


def compute_inventory_metrics(
    items: Iterable[Mapping[str, Any]],
    transactions: Iterable[Mapping[str, Any]],
) -> dict[str, Any]:
    """Reduce catalog items and recent transactions into dashboard figures.

    *transactions* are expected newest first, as ``list_transactions``
    returns them; the trend is reported oldest first.
    """
    items = list(items)
    transactions = list(transactions)

    total_value = sum((_dec(i.get("price")) * (i.get("quantity") or 0) for i in items), ZERO)
    low_stock = [i for i in items if _is_low(i)]

    categories: dict[str, int] = {}
    for item in items:
        name = item.get("category_name") or "Uncategorized"
        categories[name] = categories.get(name, 0) + (item.get("quantity") or 0)

    recent = list(reversed(transactions[:RECENT_TREND_SIZE]))

    return {
        "total_items": len(items),
        "total_value": str(total_value.quantize(Decimal("0.01"))),
        "low_stock_count": len(low_stock),
        "low_stock_items": [
            {
                "id": str(i.get("id")),
                "name": i.get("name"),
                "quantity": i.get("quantity"),
                "min_stock_level": i.get("min_stock_level"),
            }
            for i in low_stock[:LOW_STOCK_PREVIEW]
        ],
        "transaction_count": len(transactions),
        "recent_transactions": [
            {
                "created_at": t.get("created_at"),
                "new_quantity": t.get("new_quantity"),
                "transaction_type": t.get("transaction_type"),
            }
            for t in recent
        ],
        "category_distribution": [
            {"name": name, "value": value} for name, value in categories.items()
        ],
    }


def compute_sales_metrics(sale_count: int, revenue: Any) -> dict[str, Any]:
    return {
        "sale_count": sale_count or 0,
        "total_revenue": str(_dec(revenue).quantize(Decimal("0.01"))),
    }


def get_dashboard(db: Session) -> dict[str, Any]:
    items = [item_to_dict(i) for i in list_items(db)]
    transactions = list_transactions(db)
    sale_count = db.query(func.count(Sale.id)).scalar()
    return {
        **compute_inventory_metrics(items, transactions),
        **compute_sales_metrics(sale_count, total_revenue(db)),
    }
