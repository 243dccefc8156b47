from __future__ import annotations

from decimal import Decimal

from sqlalchemy.orm import Session

from stockpos.app.models.inventory import InventoryItem
from stockpos.app.models.sales import Sale
from stockpos.app.schemas.pos import CartRequest, CheckoutRequest
from stockpos.app.services.app_settings import get_invoice_settings
from stockpos.app.services.cart import Cart
from stockpos.app.services.sales import process_sale


def build_cart(db: Session, request: CartRequest) -> Cart:
    """Price *request* against the catalog, enforcing stock on hand."""
    if not request.lines:
        raise ValueError("Cart must contain at least one item")

    tax_rate = Decimal(str(get_invoice_settings(db)["tax_rate"]))
    cart = Cart(tax_rate=tax_rate)

    for line in request.lines:
        item = db.query(InventoryItem).filter(InventoryItem.id == line.item_id).first()
        if not item:
            raise ValueError(f"Item {line.item_id} not found")
        if not cart.add_item(item):
            raise ValueError(f"'{item.name}' is out of stock")
        # add_item already counted one unit of this line
        existing = next(cl for cl in cart.lines if cl.item_id == item.id)
        wanted = existing.quantity - 1 + line.quantity
        if not cart.update_quantity(item.id, wanted):
            raise ValueError(
                f"Insufficient stock for '{item.name}': "
                f"{item.quantity} available, {wanted} requested"
            )

    cart.set_discount(request.discount_amount)
    return cart


def checkout(db: Session, request: CheckoutRequest) -> Sale:
    """Price the cart and record it as a sale."""
    cart = build_cart(db, request)
    payload = cart.to_sale_payload(
        customer=request.customer.model_dump(),
        payment_method=request.payment_method,
        payment_status=request.payment_status,
        notes=request.notes,
    )
    return process_sale(db, payload)
