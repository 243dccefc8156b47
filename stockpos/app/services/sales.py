from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import desc, func, or_
from sqlalchemy.orm import Session, selectinload

from stockpos.app.models.inventory import InventoryItem, TransactionType
from stockpos.app.models.sales import Sale, SaleItem
from stockpos.app.schemas.sales import SaleCreate
from stockpos.app.services.app_settings import (
    get_invoice_settings,
    get_notification_settings,
)
from stockpos.app.services.inventory import apply_quantity_change, notify_if_low_stock
from stockpos.app.services.notification_service import (
    NotificationService,
    NotificationType,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def next_invoice_number(db: Session) -> str:
    """Return the next invoice number, e.g. ``INV-1001``.

    Numbers run from ``invoice_settings.start_number`` and skip forward past
    any number already taken.
    """
    invoice_settings = get_invoice_settings(db)
    prefix = invoice_settings["prefix"]
    number = int(invoice_settings["start_number"]) + db.query(func.count(Sale.id)).scalar()
    while db.query(Sale.id).filter(Sale.invoice_number == f"{prefix}-{number}").first():
        number += 1
    return f"{prefix}-{number}"


def process_sale(db: Session, payload: SaleCreate) -> Sale:
    """Record a sale and deduct its stock in a single transaction.

    Line prices and header totals are taken as given; reconciliation of
    ``total_amount`` happens when the payload is validated.
    """
    # ── Load & lock all items up-front ───────────────────────────────────
    lines: list[tuple[InventoryItem, Any]] = []
    for line in payload.items:
        item = (
            db.query(InventoryItem)
            .filter(InventoryItem.id == line.item_id)
            .with_for_update()
            .first()
        )
        if not item:
            raise ValueError(f"Item {line.item_id} not found")
        lines.append((item, line))

    invoice_number = next_invoice_number(db)

    sale = Sale(
        invoice_number=invoice_number,
        customer_name=payload.customer_name or None,
        customer_email=payload.customer_email or None,
        customer_phone=payload.customer_phone or None,
        customer_address=payload.customer_address or None,
        subtotal=payload.subtotal,
        discount_amount=payload.discount_amount,
        tax_rate=payload.tax_rate,
        tax_amount=payload.tax_amount,
        total_amount=payload.total_amount,
        payment_method=payload.payment_method,
        payment_status=payload.payment_status,
        notes=payload.notes or None,
    )
    db.add(sale)
    db.flush()

    try:
        for position, (item, line) in enumerate(lines):
            db.add(SaleItem(
                sale_id=sale.id,
                item_id=item.id,
                position=position,
                name=item.name,
                sku=item.sku,
                quantity=line.quantity,
                unit_price=line.unit_price,
                total_price=line.total_price,
            ))
            apply_quantity_change(
                db,
                item,
                -line.quantity,
                TransactionType.SALE,
                reference_number=invoice_number,
                notes=f"Sale {invoice_number}",
            )
    except ValueError:
        db.rollback()
        raise

    db.commit()
    db.refresh(sale)
    logger.info("Recorded sale %s for %s", invoice_number, sale.total_amount)

    notifier = NotificationService(get_notification_settings(db))
    notifier.send(
        NotificationType.SALE_COMPLETED,
        invoice_number=invoice_number,
        total_amount=str(sale.total_amount),
    )
    notify_if_low_stock(db, [item for item, _ in lines])
    return sale


def _load_sale_query(db: Session):
    return db.query(Sale).options(
        selectinload(Sale.sale_items).selectinload(SaleItem.item)
    )


def list_sales(db: Session, search: str | None = None) -> list[Sale]:
    """All sales newest first, optionally filtered by invoice number or customer."""
    query = _load_sale_query(db)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(Sale.invoice_number.ilike(pattern), Sale.customer_name.ilike(pattern))
        )
    return query.order_by(desc(Sale.created_at), desc(Sale.invoice_number)).all()


def get_sale(db: Session, sale_id: UUID) -> Sale:
    sale = _load_sale_query(db).filter(Sale.id == sale_id).first()
    if not sale:
        raise LookupError(f"Sale {sale_id} not found")
    return sale


def get_sale_by_invoice_number(db: Session, invoice_number: str) -> Sale:
    sale = _load_sale_query(db).filter(Sale.invoice_number == invoice_number).first()
    if not sale:
        raise LookupError(f"Invoice {invoice_number} not found")
    return sale


def total_revenue(db: Session) -> Decimal:
    total = db.query(func.coalesce(func.sum(Sale.total_amount), 0)).scalar()
    return Decimal(str(total))


def sale_to_dict(sale: Sale) -> dict[str, Any]:
    """Serialise a sale the way the invoice pipeline and API consume it.

    Each line carries a joined ``inventory_items`` object when the catalog
    entry still exists, plus the denormalised ``name``/``sku`` snapshot.
    """
    items: list[dict[str, Any]] = []
    for si in sale.sale_items:
        items.append({
            "id": str(si.id),
            "item_id": str(si.item_id) if si.item_id else None,
            "name": si.name,
            "sku": si.sku,
            "quantity": si.quantity,
            "unit_price": str(si.unit_price),
            "total_price": str(si.total_price),
            "inventory_items": (
                {"name": si.item.name, "sku": si.item.sku} if si.item else None
            ),
        })

    return {
        "id": str(sale.id),
        "invoice_number": sale.invoice_number,
        "created_at": sale.created_at.isoformat() if sale.created_at else None,
        "customer_name": sale.customer_name,
        "customer_email": sale.customer_email,
        "customer_phone": sale.customer_phone,
        "customer_address": sale.customer_address,
        "subtotal": str(sale.subtotal),
        "discount_amount": str(sale.discount_amount),
        "tax_rate": str(sale.tax_rate),
        "tax_amount": str(sale.tax_amount),
        "total_amount": str(sale.total_amount),
        "payment_method": sale.payment_method,
        "payment_status": sale.payment_status,
        "notes": sale.notes,
        "sale_items": items,
    }
