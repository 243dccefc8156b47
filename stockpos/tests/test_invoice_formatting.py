"""Tests for sale validation and the shared invoice formatting helpers."""
from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

import pytest

from stockpos.app.services.invoicing.errors import InvalidSaleDataError, InvoiceGenerationError
from stockpos.app.services.invoicing.formatting import (
    EMPTY_ROW,
    build_totals_lines,
    company_lines,
    customer_lines,
    format_invoice_date,
    format_line_items,
    format_money,
    invoice_filename,
    parse_money,
)
from stockpos.app.services.invoicing.validation import validate_sale_data


# ─── Validation ──────────────────────────────────────────────────────────────


class TestValidateSaleData:
    def test_valid_sale_has_no_errors(self, sale_data: dict) -> None:
        assert validate_sale_data(sale_data) == []

    @pytest.mark.parametrize("sale", [None, {}, "INV-1", 42])
    def test_missing_sale_is_reported_alone(self, sale) -> None:
        assert validate_sale_data(sale) == ["Sale data is missing"]

    def test_reports_every_missing_field(self) -> None:
        errors = validate_sale_data({"customer_name": "Ada"})
        assert errors == [
            "Invoice number is missing",
            "Total amount is missing",
            "Sale date is missing",
        ]

    def test_blank_strings_count_as_missing(self) -> None:
        errors = validate_sale_data(
            {"invoice_number": "  ", "total_amount": "", "created_at": "2024-01-01"}
        )
        assert errors == ["Invoice number is missing", "Total amount is missing"]

    @pytest.mark.parametrize("total", [0, "0", Decimal("0"), 0.0])
    def test_zero_total_is_valid(self, total) -> None:
        sale = {"invoice_number": "INV-1", "total_amount": total, "created_at": "2024-01-01"}
        assert validate_sale_data(sale) == []

    def test_error_message_joins_all_problems(self) -> None:
        err = InvalidSaleDataError(["Invoice number is missing", "Sale date is missing"])
        assert str(err) == "Invalid sale data: Invoice number is missing, Sale date is missing"
        assert err.errors == ["Invoice number is missing", "Sale date is missing"]

    def test_generation_error_message(self) -> None:
        assert str(InvoiceGenerationError("boom")) == "Failed to generate invoice PDF: boom"


# ─── Money ───────────────────────────────────────────────────────────────────


class TestMoney:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (9.005, "$9.01"),
            ("2.675", "$2.68"),
            (Decimal("0.125"), "$0.13"),
            (100, "$100.00"),
            ("1234.5", "$1234.50"),
            (-2.5, "-$2.50"),
            ("-0.001", "$0.00"),
        ],
    )
    def test_two_decimals_round_half_up(self, value, expected: str) -> None:
        assert format_money(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "NaN", "Infinity", object(), True])
    def test_unparseable_values_are_zero(self, value) -> None:
        assert parse_money(value) == Decimal("0")
        assert format_money(value) == "$0.00"


# ─── Line items ──────────────────────────────────────────────────────────────


class TestFormatLineItems:
    def test_joined_catalog_name_wins(self) -> None:
        rows = format_line_items([
            {
                "inventory_items": {"name": "Widget"},
                "name": "Old Widget",
                "quantity": 2,
                "unit_price": 50,
                "total_price": 100,
            }
        ])
        assert rows == [("Widget", "2", "$50.00", "$100.00")]

    def test_falls_back_to_item_name(self) -> None:
        rows = format_line_items([{"inventory_items": None, "name": "Gizmo", "quantity": 1}])
        assert rows[0][0] == "Gizmo"

    def test_unknown_item_and_defaults(self) -> None:
        rows = format_line_items([{}])
        assert rows == [("Unknown Item", "0", "$0.00", "$0.00")]

    def test_non_mapping_entry_is_treated_as_empty(self) -> None:
        assert format_line_items([None]) == [("Unknown Item", "0", "$0.00", "$0.00")]

    @pytest.mark.parametrize("items", [None, []])
    def test_empty_items_yield_sentinel_row(self, items) -> None:
        assert format_line_items(items) == [EMPTY_ROW]
        assert EMPTY_ROW == ("No items", "0", "$0.00", "$0.00")

    def test_non_list_items_are_logged_and_treated_as_empty(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            rows = format_line_items({"not": "a list"})
        assert rows == [EMPTY_ROW]
        assert "not a list" in caplog.text

    def test_order_is_preserved(self) -> None:
        rows = format_line_items([{"name": "B"}, {"name": "A"}, {"name": "C"}])
        assert [r[0] for r in rows] == ["B", "A", "C"]


# ─── Totals ──────────────────────────────────────────────────────────────────


class TestTotalsLines:
    def test_discount_and_tax_shown_when_positive(self) -> None:
        lines = build_totals_lines(
            {"subtotal": 100, "discount_amount": 5, "tax_amount": 8.31, "total_amount": 103.31}
        )
        assert [line.text for line in lines] == [
            "Subtotal: $100.00",
            "Discount: -$5.00",
            "Tax: $8.31",
            "Total: $103.31",
        ]
        assert [line.emphasized for line in lines] == [False, False, False, True]

    def test_zero_discount_and_tax_are_omitted(self) -> None:
        lines = build_totals_lines(
            {"subtotal": "20", "discount_amount": "0", "tax_amount": None, "total_amount": "20"}
        )
        assert [line.label for line in lines] == ["Subtotal", "Total"]

    def test_missing_amounts_render_as_zero(self) -> None:
        lines = build_totals_lines({})
        assert [line.text for line in lines] == ["Subtotal: $0.00", "Total: $0.00"]


# ─── Header blocks, dates and file names ─────────────────────────────────────


class TestHeaderHelpers:
    def test_company_lines_only_include_present_fields(self) -> None:
        assert company_lines({"name": "Acme", "phone": "555"}) == ["Phone: 555"]
        assert company_lines({
            "address": "1 Main St", "phone": "555", "email": "a@b.c",
        }) == ["1 Main St", "Phone: 555", "Email: a@b.c"]

    def test_customer_block_requires_name_email_or_phone(self) -> None:
        assert customer_lines({"customer_address": "Somewhere"}) == []
        assert customer_lines({
            "customer_name": "Ada", "customer_address": "Somewhere",
        }) == ["Ada", "Somewhere"]

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2024-03-05T10:00:00Z", "3/5/2024"),
            ("2024-12-31T23:59:59+00:00", "12/31/2024"),
            (datetime(2025, 1, 9, 8, 30), "1/9/2025"),
            ("not a date", "not a date"),
            (None, ""),
        ],
    )
    def test_invoice_date(self, value, expected: str) -> None:
        assert format_invoice_date(value) == expected

    def test_filename_is_deterministic(self) -> None:
        assert invoice_filename("INV-1001") == "invoice-INV-1001.pdf"
        assert invoice_filename("INV-1001") == invoice_filename("INV-1001")

    @pytest.mark.parametrize(
        "number, expected",
        [
            ("../../escaped-1001", "invoice-.._.._escaped-1001.pdf"),
            ("INV/2024-1", "invoice-INV_2024-1.pdf"),
            ('INV"1', "invoice-INV_1.pdf"),
        ],
    )
    def test_filename_has_no_path_separators(self, number: str, expected: str) -> None:
        assert invoice_filename(number) == expected
