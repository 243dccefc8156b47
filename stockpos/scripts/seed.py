"""Seed the database with default settings and a small sample catalog.

Usage:
    python -m stockpos.scripts.seed
"""

from __future__ import annotations

from decimal import Decimal

from stockpos.app.core.database import SessionLocal
from stockpos.app.models.inventory import Category, InventoryItem, Supplier
from stockpos.app.models.settings import AppSetting
from stockpos.app.services.app_settings import SETTING_SCHEMAS, default_value

CATEGORIES: list[tuple[str, str]] = [
    ("Electronics", "Devices and accessories"),
    ("Office", "Stationery and office supplies"),
    ("Hardware", "Tools and fittings"),
]

# (sku, name, category, price, cost, quantity, min_stock_level)
ITEMS: list[tuple[str, str, str, str, str, int, int]] = [
    ("EL-001", "USB-C Cable", "Electronics", "12.99", "4.50", 120, 20),
    ("EL-002", "Wireless Mouse", "Electronics", "24.50", "11.00", 40, 10),
    ("OF-001", "A4 Paper (500 sheets)", "Office", "6.75", "3.10", 200, 50),
    ("OF-002", "Ballpoint Pens (12 pack)", "Office", "4.25", "1.60", 8, 15),
    ("HW-001", "Widget", "Hardware", "50.00", "22.00", 25, 5),
]


def seed() -> None:
    db = SessionLocal()
    try:
        # ── Settings ───────────────────────────────────────────────────
        for key, (_schema, category, description) in SETTING_SCHEMAS.items():
            if not db.query(AppSetting).filter_by(setting_key=key).first():
                db.add(
                    AppSetting(
                        setting_key=key,
                        setting_value=default_value(key),
                        category=category,
                        description=description,
                    )
                )
                print(f"Created setting: {key}")

        # ── Catalog ────────────────────────────────────────────────────
        categories: dict[str, Category] = {}
        for name, description in CATEGORIES:
            category = db.query(Category).filter_by(name=name).first()
            if not category:
                category = Category(name=name, description=description)
                db.add(category)
                db.flush()
                print(f"Created category: {name}")
            categories[name] = category

        supplier = db.query(Supplier).filter_by(name="Acme Wholesale").first()
        if not supplier:
            supplier = Supplier(
                name="Acme Wholesale",
                contact_person="Jordan Lee",
                email="orders@acme.example",
                phone="+1-555-0199",
            )
            db.add(supplier)
            db.flush()
            print("Created supplier: Acme Wholesale")

        for sku, name, category, price, cost, quantity, min_level in ITEMS:
            if db.query(InventoryItem).filter_by(sku=sku).first():
                continue
            db.add(
                InventoryItem(
                    sku=sku,
                    name=name,
                    category_id=categories[category].id,
                    supplier_id=supplier.id,
                    price=Decimal(price),
                    cost=Decimal(cost),
                    quantity=quantity,
                    min_stock_level=min_level,
                )
            )
            print(f"Created item {sku} - {name}")

        db.commit()
        print("Seed complete.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
