from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from stockpos.app.core.database import get_db
from stockpos.app.models.inventory import Category, Supplier
from stockpos.app.schemas.inventory import (
    CategoryCreate,
    CategoryOut,
    ItemCreate,
    ItemOut,
    ItemUpdate,
    QuantityUpdate,
    SupplierCreate,
    SupplierOut,
    TransactionOut,
)
from stockpos.app.services import inventory as inventory_service

router = APIRouter()


# ─── Categories ───────────────────────────────────────────────────────────────


@router.get("/categories", response_model=list[CategoryOut])
def list_categories(db: Session = Depends(get_db)) -> list[Category]:
    return inventory_service.list_categories(db)


@router.post("/categories", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)) -> Category:
    try:
        return inventory_service.create_category(db, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# ─── Suppliers ────────────────────────────────────────────────────────────────


@router.get("/suppliers", response_model=list[SupplierOut])
def list_suppliers(db: Session = Depends(get_db)) -> list[Supplier]:
    return inventory_service.list_suppliers(db)


@router.post("/suppliers", response_model=SupplierOut, status_code=status.HTTP_201_CREATED)
def create_supplier(payload: SupplierCreate, db: Session = Depends(get_db)) -> Supplier:
    return inventory_service.create_supplier(db, payload)


# ─── Transactions ─────────────────────────────────────────────────────────────


@router.get("/transactions", response_model=list[TransactionOut])
def list_transactions(
    limit: int = Query(inventory_service.RECENT_TRANSACTION_LIMIT, ge=1, le=500),
    db: Session = Depends(get_db),
) -> list[dict]:
    return inventory_service.list_transactions(db, limit=limit)


# ─── Items ────────────────────────────────────────────────────────────────────


@router.get("/items", response_model=list[ItemOut])
def list_items(
    search: str | None = None,
    db: Session = Depends(get_db),
) -> list[dict]:
    return [inventory_service.item_to_dict(i) for i in inventory_service.list_items(db, search)]


@router.post("/items", response_model=ItemOut, status_code=status.HTTP_201_CREATED)
def create_item(payload: ItemCreate, db: Session = Depends(get_db)) -> dict:
    try:
        item = inventory_service.create_item(db, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return inventory_service.item_to_dict(item)


@router.get("/items/{item_id}", response_model=ItemOut)
def get_item(item_id: UUID, db: Session = Depends(get_db)) -> dict:
    try:
        return inventory_service.item_to_dict(inventory_service.get_item(db, item_id))
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put("/items/{item_id}", response_model=ItemOut)
def update_item(item_id: UUID, payload: ItemUpdate, db: Session = Depends(get_db)) -> dict:
    try:
        item = inventory_service.update_item(db, item_id, payload)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return inventory_service.item_to_dict(item)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(item_id: UUID, db: Session = Depends(get_db)) -> None:
    try:
        inventory_service.delete_item(db, item_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/items/{item_id}/quantity", response_model=ItemOut)
def update_quantity(
    item_id: UUID,
    payload: QuantityUpdate,
    db: Session = Depends(get_db),
) -> dict:
    try:
        item = inventory_service.update_inventory_quantity(
            db,
            item_id,
            payload.quantity_change,
            payload.transaction_type,
            unit_cost=payload.unit_cost,
            reference_number=payload.reference_number,
            notes=payload.notes,
        )
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return inventory_service.item_to_dict(item)
