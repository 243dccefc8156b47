"""Shared test fixtures.

Every test gets its own in-memory SQLite database, so tests never pollute
each other and service code can commit freely.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from stockpos.app.core.config import settings
from stockpos.app.core.database import Base, get_db
from stockpos.app.main import app
from stockpos.app.models.inventory import Category, InventoryItem, Supplier
from stockpos.app.models.sales import Sale
from stockpos.app.schemas.sales import SaleCreate, SaleItemCreate
from stockpos.app.services.sales import process_sale


# ─── DB session on a throwaway database ───────────────────────────────────────


@pytest.fixture()
def db() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def client(db: Session) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the test session."""

    def _override_get_db() -> Generator[Session, None, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _isolated_paths(tmp_path, monkeypatch) -> None:
    """Keep generated files inside the test's tmp directory."""
    monkeypatch.setattr(settings, "FILE_STORAGE_PATH", str(tmp_path / "files"))
    monkeypatch.setattr(settings, "INVOICE_OUTPUT_DIR", str(tmp_path / "invoices"))
    monkeypatch.setattr(settings, "NOTIFICATION_ENABLED", False)


# ─── Catalog fixtures ─────────────────────────────────────────────────────────


@pytest.fixture()
def category(db: Session) -> Category:
    cat = Category(name="Hardware")
    db.add(cat)
    db.commit()
    return cat


@pytest.fixture()
def supplier(db: Session) -> Supplier:
    sup = Supplier(name="Acme Wholesale", email="orders@acme.example")
    db.add(sup)
    db.commit()
    return sup


@pytest.fixture()
def widget(db: Session, category: Category, supplier: Supplier) -> InventoryItem:
    item = InventoryItem(
        name="Widget",
        sku="WID-1",
        category_id=category.id,
        supplier_id=supplier.id,
        price=Decimal("50.00"),
        cost=Decimal("20.00"),
        quantity=10,
        min_stock_level=2,
    )
    db.add(item)
    db.commit()
    return item


@pytest.fixture()
def gadget(db: Session) -> InventoryItem:
    item = InventoryItem(
        name="Gadget",
        sku="GAD-1",
        price=Decimal("12.50"),
        quantity=3,
        min_stock_level=1,
    )
    db.add(item)
    db.commit()
    return item


@pytest.fixture()
def recorded_sale(db: Session, widget: InventoryItem) -> Sale:
    """Two widgets sold to a named customer with a discount and tax."""
    payload = SaleCreate(
        customer_name="Ada Buyer",
        customer_email="ada@example.com",
        subtotal=Decimal("100.00"),
        discount_amount=Decimal("5.00"),
        tax_rate=Decimal("0.0500"),
        tax_amount=Decimal("4.75"),
        total_amount=Decimal("99.75"),
        items=[
            SaleItemCreate(
                item_id=widget.id,
                quantity=2,
                unit_price=Decimal("50.00"),
                total_price=Decimal("100.00"),
            )
        ],
    )
    return process_sale(db, payload)


# ─── Plain sale mappings for the invoice pipeline ────────────────────────────


@pytest.fixture()
def sale_data() -> dict[str, Any]:
    return {
        "id": "sale-1",
        "invoice_number": "INV-2000",
        "created_at": "2024-03-05T10:00:00Z",
        "customer_name": "Ada Buyer",
        "customer_email": "ada@example.com",
        "subtotal": "100",
        "discount_amount": "10",
        "tax_amount": "9",
        "total_amount": "99",
        "notes": "Leave at the front desk.",
        "sale_items": [
            {
                "inventory_items": {"name": "Widget"},
                "quantity": 2,
                "unit_price": 50,
                "total_price": 100,
            }
        ],
    }


@pytest.fixture()
def company_data() -> dict[str, Any]:
    return {
        "name": "Acme Co",
        "address": "1 Main St",
        "phone": "+1-555-0100",
        "email": "billing@acme.example",
    }
