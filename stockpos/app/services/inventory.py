from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any
from uuid import UUID

from sqlalchemy import desc, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from stockpos.app.models.inventory import (
    Category,
    InventoryItem,
    InventoryTransaction,
    Supplier,
    TransactionType,
)
from stockpos.app.schemas.inventory import (
    CategoryCreate,
    ItemCreate,
    ItemUpdate,
    SupplierCreate,
)
from stockpos.app.services.app_settings import get_notification_settings
from stockpos.app.services.notification_service import (
    NotificationService,
    NotificationType,
)

logger = logging.getLogger(__name__)

Q2 = Decimal("0.01")
RECENT_TRANSACTION_LIMIT = 100


def is_low_stock(item: InventoryItem) -> bool:
    return item.quantity is not None and item.quantity <= (item.min_stock_level or 0)


def item_to_dict(item: InventoryItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "sku": item.sku,
        "barcode": item.barcode,
        "description": item.description,
        "category_id": item.category_id,
        "category_name": item.category.name if item.category else None,
        "supplier_id": item.supplier_id,
        "supplier_name": item.supplier.name if item.supplier else None,
        "price": str(item.price),
        "cost": str(item.cost) if item.cost is not None else None,
        "quantity": item.quantity,
        "min_stock_level": item.min_stock_level,
        "status": item.status,
        "image_url": item.image_url,
        "is_low_stock": is_low_stock(item),
    }


# ─── Items ────────────────────────────────────────────────────────────────────


def list_items(db: Session, search: str | None = None) -> list[InventoryItem]:
    """Return catalog items newest first, optionally filtered by name or SKU."""
    query = db.query(InventoryItem).options(
        joinedload(InventoryItem.category), joinedload(InventoryItem.supplier)
    )
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(InventoryItem.name.ilike(pattern), InventoryItem.sku.ilike(pattern))
        )
    return query.order_by(desc(InventoryItem.created_at), InventoryItem.name).all()


def get_item(db: Session, item_id: UUID) -> InventoryItem:
    item = db.query(InventoryItem).filter(InventoryItem.id == item_id).first()
    if not item:
        raise LookupError(f"Item {item_id} not found")
    return item


def _check_refs(db: Session, category_id: UUID | None, supplier_id: UUID | None) -> None:
    if category_id and not db.get(Category, category_id):
        raise ValueError(f"Category {category_id} not found")
    if supplier_id and not db.get(Supplier, supplier_id):
        raise ValueError(f"Supplier {supplier_id} not found")


def create_item(db: Session, payload: ItemCreate) -> InventoryItem:
    _check_refs(db, payload.category_id, payload.supplier_id)
    item = InventoryItem(**payload.model_dump())
    db.add(item)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValueError(f"SKU '{payload.sku}' already exists") from None
    db.refresh(item)
    return item


def update_item(db: Session, item_id: UUID, payload: ItemUpdate) -> InventoryItem:
    item = get_item(db, item_id)
    update_data = payload.model_dump(exclude_unset=True)
    _check_refs(db, update_data.get("category_id"), update_data.get("supplier_id"))
    for field, value in update_data.items():
        setattr(item, field, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValueError(f"SKU '{update_data.get('sku')}' already exists") from None
    db.refresh(item)
    return item


def delete_item(db: Session, item_id: UUID) -> None:
    item = get_item(db, item_id)
    db.delete(item)
    db.commit()


# ─── Categories & suppliers ───────────────────────────────────────────────────


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.name).all()


def create_category(db: Session, payload: CategoryCreate) -> Category:
    category = Category(name=payload.name, description=payload.description)
    db.add(category)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValueError(f"Category '{payload.name}' already exists") from None
    db.refresh(category)
    return category


def list_suppliers(db: Session) -> list[Supplier]:
    return db.query(Supplier).order_by(Supplier.name).all()


def create_supplier(db: Session, payload: SupplierCreate) -> Supplier:
    supplier = Supplier(**payload.model_dump())
    db.add(supplier)
    db.commit()
    db.refresh(supplier)
    return supplier


# ─── Stock movements ──────────────────────────────────────────────────────────


def apply_quantity_change(
    db: Session,
    item: InventoryItem,
    quantity_change: int,
    transaction_type: TransactionType,
    unit_cost: Decimal | None = None,
    reference_number: str | None = None,
    notes: str | None = None,
) -> InventoryTransaction:
    """Adjust *item* stock and add the matching transaction row.

    Does NOT commit. The caller owns the transaction so that a sale and its
    stock movements land together.
    """
    previous = item.quantity or 0
    new_quantity = previous + quantity_change
    if new_quantity < 0:
        raise ValueError(
            f"Insufficient stock for '{item.name}': "
            f"{previous} available, {abs(quantity_change)} requested"
        )

    total_cost = None
    if unit_cost is not None:
        total_cost = (unit_cost * abs(quantity_change)).quantize(Q2, rounding=ROUND_HALF_UP)

    item.quantity = new_quantity
    txn = InventoryTransaction(
        item_id=item.id,
        transaction_type=transaction_type,
        quantity=quantity_change,
        previous_quantity=previous,
        new_quantity=new_quantity,
        unit_cost=unit_cost,
        total_cost=total_cost,
        reference_number=reference_number,
        notes=notes,
    )
    db.add(txn)
    return txn


def update_inventory_quantity(
    db: Session,
    item_id: UUID,
    quantity_change: int,
    transaction_type: TransactionType,
    unit_cost: Decimal | None = None,
    reference_number: str | None = None,
    notes: str | None = None,
) -> InventoryItem:
    """Atomically change an item's stock and log the movement."""
    item = (
        db.query(InventoryItem)
        .filter(InventoryItem.id == item_id)
        .with_for_update()
        .first()
    )
    if not item:
        raise LookupError(f"Item {item_id} not found")

    apply_quantity_change(
        db,
        item,
        quantity_change,
        transaction_type,
        unit_cost=unit_cost,
        reference_number=reference_number,
        notes=notes,
    )
    db.commit()
    db.refresh(item)

    logger.info(
        "Stock for %s changed by %d (%s), now %d",
        item.sku, quantity_change, transaction_type.value, item.quantity,
    )
    notify_if_low_stock(db, [item])
    return item


def notify_if_low_stock(db: Session, items: list[InventoryItem]) -> int:
    """Send a low-stock alert for each item at or below its minimum level."""
    low = [i for i in items if is_low_stock(i)]
    if not low:
        return 0
    notifier = NotificationService(get_notification_settings(db))
    sent = 0
    for item in low:
        if notifier.send(
            NotificationType.LOW_STOCK_ALERT,
            item_name=item.name,
            sku=item.sku,
            quantity=str(item.quantity),
            min_stock_level=str(item.min_stock_level),
        ):
            sent += 1
    return sent


def list_transactions(
    db: Session, limit: int = RECENT_TRANSACTION_LIMIT
) -> list[dict[str, Any]]:
    """Return the most recent stock movements with the item name and SKU."""
    rows = (
        db.query(InventoryTransaction)
        .options(joinedload(InventoryTransaction.item))
        .order_by(desc(InventoryTransaction.created_at))
        .limit(limit)
        .all()
    )
    return [
        {
            "id": t.id,
            "item_id": t.item_id,
            "item_name": t.item.name if t.item else None,
            "item_sku": t.item.sku if t.item else None,
            "transaction_type": t.transaction_type.value,
            "quantity": t.quantity,
            "previous_quantity": t.previous_quantity,
            "new_quantity": t.new_quantity,
            "unit_cost": str(t.unit_cost) if t.unit_cost is not None else None,
            "total_cost": str(t.total_cost) if t.total_cost is not None else None,
            "reference_number": t.reference_number,
            "notes": t.notes,
            "created_at": t.created_at,
        }
        for t in rows
    ]
