"""Tests for the POS cart and checkout flow."""
from __future__ import annotations

import uuid
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from stockpos.app.models.inventory import InventoryItem
from stockpos.app.models.sales import Sale
from stockpos.app.schemas.pos import CartLineIn, CartRequest, CheckoutRequest, CustomerInfo
from stockpos.app.services.cart import Cart
from stockpos.app.services.pos import build_cart, checkout


def _item(price: str = "10.00", quantity: int = 5, name: str = "Thing") -> InventoryItem:
    return InventoryItem(
        id=uuid.uuid4(), name=name, sku=f"SKU-{name}", price=Decimal(price), quantity=quantity
    )


# ─── Cart arithmetic ─────────────────────────────────────────────────────────


class TestCart:
    def test_add_item_increments_quantity(self) -> None:
        cart = Cart()
        item = _item()
        assert cart.add_item(item)
        assert cart.add_item(item)
        assert len(cart) == 1
        assert cart.lines[0].quantity == 2

    def test_add_item_respects_stock(self) -> None:
        cart = Cart()
        item = _item(quantity=1)
        assert cart.add_item(item)
        assert not cart.add_item(item)
        assert cart.lines[0].quantity == 1

    def test_out_of_stock_item_is_rejected(self) -> None:
        cart = Cart()
        assert not cart.add_item(_item(quantity=0))
        assert len(cart) == 0

    def test_update_quantity(self) -> None:
        cart = Cart()
        item = _item(quantity=3)
        cart.add_item(item)
        assert cart.update_quantity(item.id, 3)
        assert not cart.update_quantity(item.id, 4)
        assert cart.lines[0].quantity == 3
        assert cart.update_quantity(item.id, 0)
        assert len(cart) == 0

    def test_update_unknown_line(self) -> None:
        assert not Cart().update_quantity(uuid.uuid4(), 2)

    def test_totals(self) -> None:
        cart = Cart(tax_rate="0.0875")
        item = _item(price="50.00")
        cart.add_item(item)
        cart.update_quantity(item.id, 2)
        cart.set_discount("10")

        assert cart.subtotal == Decimal("100.00")
        # (100 - 10) * 0.0875 = 7.875 -> 7.88
        assert cart.tax_amount == Decimal("7.88")
        assert cart.total == Decimal("97.88")

    @pytest.mark.parametrize("discount", ["-1", "100.01"])
    def test_discount_bounds(self, discount: str) -> None:
        cart = Cart()
        item = _item(price="50.00")
        cart.add_item(item)
        cart.update_quantity(item.id, 2)
        with pytest.raises(ValueError):
            cart.set_discount(discount)

    def test_clear(self) -> None:
        cart = Cart()
        cart.add_item(_item())
        cart.set_discount("1")
        cart.clear()
        assert len(cart) == 0
        assert cart.discount_amount == Decimal("0")

    def test_empty_cart_has_no_payload(self) -> None:
        with pytest.raises(ValueError):
            Cart().to_sale_payload()

    def test_payload_reconciles(self) -> None:
        cart = Cart(tax_rate="0.05")
        cart.add_item(_item(price="19.99"))
        payload = cart.to_sale_payload(customer={"name": "Ada", "email": ""}, notes="")
        assert payload.customer_name == "Ada"
        assert payload.customer_email is None
        assert payload.notes is None
        assert payload.total_amount == payload.subtotal - payload.discount_amount + payload.tax_amount
        assert payload.items[0].total_price == Decimal("19.99")


# ─── Pricing against the catalog ─────────────────────────────────────────────


class TestBuildCart:
    def test_uses_invoice_tax_rate(self, db: Session, widget: InventoryItem) -> None:
        cart = build_cart(
            db,
            CartRequest(lines=[CartLineIn(item_id=widget.id, quantity=2)], discount_amount=Decimal("5")),
        )
        summary = cart.summary()
        assert summary["subtotal"] == "100.00"
        assert summary["tax_rate"] == "0.0875"
        assert summary["tax_amount"] == "8.31"
        assert summary["total"] == "103.31"

    def test_insufficient_stock(self, db: Session, widget: InventoryItem) -> None:
        with pytest.raises(ValueError, match="Insufficient stock"):
            build_cart(db, CartRequest(lines=[CartLineIn(item_id=widget.id, quantity=11)]))

    def test_out_of_stock(self, db: Session, widget: InventoryItem) -> None:
        widget.quantity = 0
        db.commit()
        with pytest.raises(ValueError, match="out of stock"):
            build_cart(db, CartRequest(lines=[CartLineIn(item_id=widget.id, quantity=1)]))

    def test_unknown_item(self, db: Session) -> None:
        with pytest.raises(ValueError, match="not found"):
            build_cart(db, CartRequest(lines=[CartLineIn(item_id=uuid.uuid4(), quantity=1)]))

    def test_checkout_records_sale(self, db: Session, widget: InventoryItem) -> None:
        sale = checkout(
            db,
            CheckoutRequest(
                lines=[CartLineIn(item_id=widget.id, quantity=3)],
                customer=CustomerInfo(name="Walk-in"),
            ),
        )
        assert isinstance(sale, Sale)
        assert sale.invoice_number == "INV-1001"
        assert sale.customer_name == "Walk-in"
        db.refresh(widget)
        assert widget.quantity == 7
