"""Tests for the settings store and dashboard metrics."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from stockpos.app.models.sales import Sale
from stockpos.app.services.app_settings import (
    COMPANY_INFO,
    INVOICE_SETTINGS,
    get_company_info,
    get_invoice_settings,
    get_setting,
    list_settings,
    update_setting,
)
from stockpos.app.services.dashboard import (
    compute_inventory_metrics,
    compute_sales_metrics,
    get_dashboard,
)


# ─── Settings ────────────────────────────────────────────────────────────────


class TestSettings:
    def test_defaults(self, db: Session) -> None:
        company = get_company_info(db)
        assert company["name"] == "Your Company"
        assert company["address"] == "123 Business St"

        invoice = get_invoice_settings(db)
        assert invoice["prefix"] == "INV"
        assert invoice["start_number"] == 1001
        assert invoice["tax_rate"] == "0.0875"
        assert invoice["currency"] == "USD"

    def test_partial_update_keeps_other_fields(self, db: Session) -> None:
        update_setting(db, COMPANY_INFO, {"name": "Acme Co"})
        company = get_setting(db, COMPANY_INFO)
        assert company["name"] == "Acme Co"
        assert company["phone"] == "+1-555-0123"

        update_setting(db, COMPANY_INFO, {"email": "billing@acme.example"})
        assert get_setting(db, COMPANY_INFO)["name"] == "Acme Co"

    @pytest.mark.parametrize("value", [
        {"tax_rate": "1.5"},
        {"prefix": "  "},
        {"prefix": "INV/2024"},
        {"prefix": ".."},
        {"prefix": "INV 1"},
        {"start_number": -1},
    ])
    def test_invalid_invoice_settings(self, db: Session, value: dict) -> None:
        with pytest.raises(ValueError):
            update_setting(db, INVOICE_SETTINGS, value)

    def test_prefix_allows_letters_digits_dash_underscore(self, db: Session) -> None:
        update_setting(db, INVOICE_SETTINGS, {"prefix": " SO_2024-A "})
        assert get_invoice_settings(db)["prefix"] == "SO_2024-A"

    def test_invalid_theme_colour(self, db: Session) -> None:
        with pytest.raises(ValueError):
            update_setting(db, "theme_settings", {"primary_color": "blue"})

    def test_unknown_key(self, db: Session) -> None:
        with pytest.raises(ValueError, match="Unknown setting"):
            get_setting(db, "nope")

    def test_list_has_every_key(self, db: Session) -> None:
        keys = [s["setting_key"] for s in list_settings(db)]
        assert keys == ["company_info", "invoice_settings", "theme_settings", "notification_settings"]


# ─── Dashboard ───────────────────────────────────────────────────────────────


class TestDashboardMetrics:
    def test_inventory_metrics(self) -> None:
        items = [
            {"id": "a", "name": "A", "price": "10.00", "quantity": 3, "min_stock_level": 5,
             "category_name": "Tools"},
            {"id": "b", "name": "B", "price": "2.50", "quantity": 10, "min_stock_level": 1,
             "category_name": None},
            {"id": "c", "name": "C", "price": "1.00", "quantity": 4, "min_stock_level": 4,
             "category_name": "Tools"},
        ]
        transactions = [
            {"created_at": datetime(2024, 1, day), "new_quantity": day, "transaction_type": "sale"}
            for day in range(10, 0, -1)
        ]

        metrics = compute_inventory_metrics(items, transactions)

        assert metrics["total_items"] == 3
        assert metrics["total_value"] == "59.00"
        assert metrics["low_stock_count"] == 2
        assert [i["name"] for i in metrics["low_stock_items"]] == ["A", "C"]
        assert metrics["transaction_count"] == 10
        # newest seven, reported oldest first
        assert [t["new_quantity"] for t in metrics["recent_transactions"]] == [4, 5, 6, 7, 8, 9, 10]
        assert metrics["category_distribution"] == [
            {"name": "Tools", "value": 7},
            {"name": "Uncategorized", "value": 10},
        ]

    def test_empty_inventory(self) -> None:
        metrics = compute_inventory_metrics([], [])
        assert metrics["total_value"] == "0.00"
        assert metrics["low_stock_items"] == []
        assert metrics["recent_transactions"] == []

    def test_sales_metrics(self) -> None:
        assert compute_sales_metrics(2, Decimal("14.5")) == {
            "sale_count": 2,
            "total_revenue": "14.50",
        }
        assert compute_sales_metrics(None, 0) == {"sale_count": 0, "total_revenue": "0.00"}

    def test_dashboard_without_sales(self, db: Session) -> None:
        dashboard = get_dashboard(db)
        assert dashboard["sale_count"] == 0
        assert dashboard["total_revenue"] == "0.00"

    def test_get_dashboard(self, db: Session, recorded_sale: Sale) -> None:
        dashboard = get_dashboard(db)
        assert dashboard["total_items"] == 1
        # eight widgets left at 50.00
        assert dashboard["total_value"] == "400.00"
        assert dashboard["transaction_count"] == 1
        assert dashboard["sale_count"] == 1
        assert dashboard["total_revenue"] == "99.75"
        assert dashboard["category_distribution"] == [{"name": "Hardware", "value": 8}]
