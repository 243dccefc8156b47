"""In-memory cart used by the POS checkout flow.

The cart prices lines from the catalog, keeps quantities within the stock on
hand, and produces the payload that ``process_sale`` records.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any
from uuid import UUID

from stockpos.app.models.inventory import InventoryItem
from stockpos.app.schemas.sales import SaleCreate, SaleItemCreate

logger = logging.getLogger(__name__)

Q2 = Decimal("0.01")
ZERO = Decimal("0")


def _money(value: Decimal) -> Decimal:
    return value.quantize(Q2, rounding=ROUND_HALF_UP)


@dataclass
class CartLine:
    item_id: UUID
    name: str
    sku: str
    price: Decimal
    quantity: int
    available: int

    @property
    def total(self) -> Decimal:
        return _money(self.price * self.quantity)


class Cart:
    def __init__(self, tax_rate: Decimal | str | float = ZERO) -> None:
        self.tax_rate = Decimal(str(tax_rate))
        self.discount_amount = ZERO
        self._lines: dict[UUID, CartLine] = {}

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)

    def add_item(self, item: InventoryItem) -> bool:
        """Add one unit of *item*. Returns False when stock does not allow it."""
        available = item.quantity or 0
        if available <= 0:
            logger.warning("Insufficient stock for item: %s", item.name)
            return False

        line = self._lines.get(item.id)
        if line is None:
            self._lines[item.id] = CartLine(
                item_id=item.id,
                name=item.name,
                sku=item.sku,
                price=Decimal(str(item.price or 0)),
                quantity=1,
                available=available,
            )
            return True

        if line.quantity >= available:
            logger.warning("Cannot add more of %s, insufficient stock", item.name)
            return False
        line.quantity += 1
        line.available = available
        return True

    def update_quantity(self, item_id: UUID, quantity: int) -> bool:
        """Set a line's quantity. Zero or less removes the line."""
        if quantity <= 0:
            self.remove_item(item_id)
            return True
        line = self._lines.get(item_id)
        if line is None:
            return False
        if quantity > line.available:
            logger.warning(
                "Cannot set %s quantity to %d, only %d in stock",
                line.name, quantity, line.available,
            )
            return False
        line.quantity = quantity
        return True

    def remove_item(self, item_id: UUID) -> None:
        self._lines.pop(item_id, None)

    def clear(self) -> None:
        self._lines.clear()
        self.discount_amount = ZERO

    def set_discount(self, amount: Decimal | str | float) -> None:
        discount = _money(Decimal(str(amount)))
        if discount < 0:
            raise ValueError("Discount cannot be negative")
        if discount > self.subtotal:
            raise ValueError("Discount cannot exceed the cart subtotal")
        self.discount_amount = discount

    @property
    def subtotal(self) -> Decimal:
        return sum((line.total for line in self._lines.values()), ZERO)

    @property
    def tax_amount(self) -> Decimal:
        return _money((self.subtotal - self.discount_amount) * self.tax_rate)

    @property
    def total(self) -> Decimal:
        return self.subtotal - self.discount_amount + self.tax_amount

    def summary(self) -> dict[str, Any]:
        return {
            "lines": [
                {
                    "item_id": str(line.item_id),
                    "name": line.name,
                    "sku": line.sku,
                    "price": str(line.price),
                    "quantity": line.quantity,
                    "total": str(line.total),
                }
                for line in self._lines.values()
            ],
            "subtotal": str(self.subtotal),
            "discount_amount": str(self.discount_amount),
            "tax_rate": str(self.tax_rate),
            "tax_amount": str(self.tax_amount),
            "total": str(self.total),
        }

    def to_sale_payload(
        self,
        customer: dict[str, str | None] | None = None,
        payment_method: str = "cash",
        payment_status: str = "paid",
        notes: str | None = None,
    ) -> SaleCreate:
        if not self._lines:
            raise ValueError("Cart must contain at least one item")
        customer = customer or {}
        return SaleCreate(
            customer_name=customer.get("name") or None,
            customer_email=customer.get("email") or None,
            customer_phone=customer.get("phone") or None,
            customer_address=customer.get("address") or None,
            subtotal=self.subtotal,
            discount_amount=self.discount_amount,
            tax_rate=self.tax_rate,
            tax_amount=self.tax_amount,
            total_amount=self.total,
            payment_method=payment_method,
            payment_status=payment_status,
            notes=notes or None,
            items=[
                SaleItemCreate(
                    item_id=line.item_id,
                    quantity=line.quantity,
                    unit_price=line.price,
                    total_price=line.total,
                )
                for line in self._lines.values()
            ],
        )
