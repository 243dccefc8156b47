"""HTTP tests for the v1 API."""
from __future__ import annotations

import uuid

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from stockpos.app.models.inventory import Category, InventoryItem
from stockpos.app.models.sales import Sale
from stockpos.app.workers.celery_app import celery


# ─── Inventory ───────────────────────────────────────────────────────────────


class TestInventoryEndpoints:
    def test_item_lifecycle(self, client: TestClient, category: Category) -> None:
        resp = client.post("/api/v1/inventory/items", json={
            "name": "Bolt", "sku": "BLT-1", "price": "0.25", "quantity": 100,
            "min_stock_level": 10, "category_id": str(category.id),
        })
        assert resp.status_code == 201
        item = resp.json()
        assert item["category_name"] == "Hardware"

        resp = client.put(f"/api/v1/inventory/items/{item['id']}", json={"name": "Hex Bolt"})
        assert resp.status_code == 200
        assert resp.json()["name"] == "Hex Bolt"

        resp = client.get("/api/v1/inventory/items", params={"search": "hex"})
        assert [i["sku"] for i in resp.json()] == ["BLT-1"]

        assert client.delete(f"/api/v1/inventory/items/{item['id']}").status_code == 204
        assert client.get(f"/api/v1/inventory/items/{item['id']}").status_code == 404

    def test_duplicate_sku_is_rejected(self, client: TestClient, widget: InventoryItem) -> None:
        resp = client.post("/api/v1/inventory/items", json={"name": "Copy", "sku": "WID-1"})
        assert resp.status_code == 400

    def test_quantity_adjustment(self, client: TestClient, widget: InventoryItem) -> None:
        resp = client.post(f"/api/v1/inventory/items/{widget.id}/quantity", json={
            "quantity_change": 5, "transaction_type": "stock_in", "unit_cost": "20.00",
        })
        assert resp.status_code == 200
        assert resp.json()["quantity"] == 15

        resp = client.post(f"/api/v1/inventory/items/{widget.id}/quantity", json={
            "quantity_change": -100, "transaction_type": "stock_out",
        })
        assert resp.status_code == 400
        assert "Insufficient stock" in resp.json()["detail"]

        txns = client.get("/api/v1/inventory/transactions").json()
        assert len(txns) == 1
        assert txns[0]["total_cost"] == "100.00"

    def test_zero_change_is_invalid(self, client: TestClient, widget: InventoryItem) -> None:
        resp = client.post(f"/api/v1/inventory/items/{widget.id}/quantity", json={
            "quantity_change": 0, "transaction_type": "adjustment",
        })
        assert resp.status_code == 422

    def test_categories_and_suppliers(self, client: TestClient) -> None:
        assert client.post("/api/v1/inventory/categories", json={"name": "Paint"}).status_code == 201
        assert client.post("/api/v1/inventory/categories", json={"name": "Paint"}).status_code == 400
        assert [c["name"] for c in client.get("/api/v1/inventory/categories").json()] == ["Paint"]

        resp = client.post("/api/v1/inventory/suppliers", json={"name": "Bolt Bros"})
        assert resp.status_code == 201
        assert client.get("/api/v1/inventory/suppliers").json()[0]["name"] == "Bolt Bros"


# ─── POS ─────────────────────────────────────────────────────────────────────


class TestPosEndpoints:
    def test_quote(self, client: TestClient, widget: InventoryItem) -> None:
        resp = client.post("/api/v1/pos/quote", json={
            "lines": [{"item_id": str(widget.id), "quantity": 2}],
            "discount_amount": "5",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["subtotal"] == "100.00"
        assert body["tax_amount"] == "8.31"
        assert body["total"] == "103.31"

    def test_checkout_then_download_invoice(self, client: TestClient, widget: InventoryItem) -> None:
        resp = client.post("/api/v1/pos/checkout", json={
            "lines": [{"item_id": str(widget.id), "quantity": 2}],
            "customer": {"name": "Ada Buyer"},
        })
        assert resp.status_code == 201
        sale = resp.json()
        assert sale["invoice_number"] == "INV-1001"
        assert sale["sale_items"][0]["inventory_items"]["name"] == "Widget"

        resp = client.get(f"/api/v1/sales/{sale['id']}/invoice")
        assert resp.status_code == 200
        assert resp.content.startswith(b"%PDF-")

    def test_checkout_beyond_stock(self, client: TestClient, widget: InventoryItem) -> None:
        resp = client.post("/api/v1/pos/checkout", json={
            "lines": [{"item_id": str(widget.id), "quantity": 50}],
        })
        assert resp.status_code == 400


# ─── Sales & invoices ────────────────────────────────────────────────────────


class TestSalesEndpoints:
    def test_list_and_get(self, client: TestClient, recorded_sale: Sale) -> None:
        sales = client.get("/api/v1/sales", params={"search": "INV-1001"}).json()
        assert [s["invoice_number"] for s in sales] == ["INV-1001"]

        resp = client.get(f"/api/v1/sales/{recorded_sale.id}")
        assert resp.status_code == 200
        assert resp.json()["customer_name"] == "Ada Buyer"

        assert client.get(f"/api/v1/sales/{uuid.uuid4()}").status_code == 404

    def test_create_sale_validates_totals(self, client: TestClient, widget: InventoryItem) -> None:
        resp = client.post("/api/v1/sales", json={
            "subtotal": "50.00", "total_amount": "60.00",
            "items": [{"item_id": str(widget.id), "quantity": 1,
                       "unit_price": "50.00", "total_price": "50.00"}],
        })
        assert resp.status_code == 422

    def test_invoice_download(self, client: TestClient, recorded_sale: Sale) -> None:
        resp = client.get(f"/api/v1/sales/{recorded_sale.id}/invoice")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/pdf"
        assert resp.headers["content-disposition"] == 'attachment; filename="invoice-INV-1001.pdf"'
        assert resp.content.startswith(b"%PDF-")

    def test_invoice_print_snapshot(self, client: TestClient, recorded_sale: Sale) -> None:
        resp = client.get(
            f"/api/v1/sales/{recorded_sale.id}/invoice/print", params={"renderer": "snapshot"}
        )
        assert resp.status_code == 200
        assert resp.headers["content-disposition"].startswith("inline;")
        assert resp.content.startswith(b"%PDF-")

    def test_unknown_renderer(self, client: TestClient, recorded_sale: Sale) -> None:
        resp = client.get(f"/api/v1/sales/{recorded_sale.id}/invoice", params={"renderer": "fax"})
        assert resp.status_code == 422

    def test_invoice_for_missing_sale(self, client: TestClient) -> None:
        assert client.get(f"/api/v1/sales/{uuid.uuid4()}/invoice").status_code == 404

    def test_preview_png(self, client: TestClient, recorded_sale: Sale) -> None:
        resp = client.get(f"/api/v1/sales/{recorded_sale.id}/invoice/preview")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"
        assert resp.content.startswith(b"\x89PNG")

    def test_archive_is_queued(
        self, client: TestClient, db: Session, recorded_sale: Sale, monkeypatch
    ) -> None:
        from stockpos.app.core import database

        monkeypatch.setattr(celery.conf, "task_always_eager", True)
        monkeypatch.setattr(database, "SessionLocal", lambda: db)

        resp = client.post(f"/api/v1/sales/{recorded_sale.id}/invoice/archive")
        assert resp.status_code == 202
        assert resp.json()["status"] == "queued"
        assert resp.json()["task_id"]


# ─── Settings & dashboard ────────────────────────────────────────────────────


class TestSettingsEndpoints:
    def test_get_and_update(self, client: TestClient) -> None:
        assert len(client.get("/api/v1/settings").json()) == 4

        resp = client.put("/api/v1/settings/company_info", json={"value": {"name": "Acme Co"}})
        assert resp.status_code == 200
        assert resp.json()["setting_value"]["name"] == "Acme Co"

        resp = client.get("/api/v1/settings/company_info")
        assert resp.json()["setting_value"]["name"] == "Acme Co"
        assert resp.json()["category"] == "company"

    def test_unknown_and_invalid(self, client: TestClient) -> None:
        assert client.get("/api/v1/settings/nope").status_code == 404
        assert client.put("/api/v1/settings/nope", json={"value": {}}).status_code == 404
        resp = client.put("/api/v1/settings/invoice_settings", json={"value": {"tax_rate": "2"}})
        assert resp.status_code == 422
        resp = client.put("/api/v1/settings/invoice_settings", json={"value": {"prefix": "INV/2024"}})
        assert resp.status_code == 422


class TestDashboardEndpoint:
    def test_dashboard(self, client: TestClient, recorded_sale: Sale) -> None:
        resp = client.get("/api/v1/dashboard")
        assert resp.status_code == 200
        body = resp.json()
        assert body["sale_count"] == 1
        assert body["total_revenue"] == "99.75"
        assert body["total_items"] == 1
