"""Display formatting shared by every invoice renderer.

All monetary values go through ``parse_money`` / ``format_money`` so the
two-decimal, round-half-up rule is identical across renderers.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENTS = Decimal("0.01")
CURRENCY_SYMBOL = "$"
DEFAULT_COMPANY_NAME = "Your Company"
UNKNOWN_ITEM = "Unknown Item"
EMPTY_ROW = ("No items", "0", "$0.00", "$0.00")
THANK_YOU = "Thank you for your business!"
TABLE_HEADERS = ("Item", "Qty", "Price", "Total")

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")

LineRow = tuple[str, str, str, str]


class TotalsLine(NamedTuple):
    label: str
    value: str
    emphasized: bool = False

    @property
    def text(self) -> str:
        return f"{self.label}: {self.value}"


def parse_money(value: Any) -> Decimal:
    """Parse *value* as a decimal amount, falling back to zero."""
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    if not amount.is_finite():
        return ZERO
    return amount


def format_money(value: Any, symbol: str = CURRENCY_SYMBOL) -> str:
    amount = parse_money(value).quantize(CENTS, rounding=ROUND_HALF_UP)
    if amount == 0:
        amount = abs(amount)
    if amount < 0:
        return f"-{symbol}{-amount}"
    return f"{symbol}{amount}"


def format_invoice_date(value: Any) -> str:
    """Render a timestamp as ``M/D/YYYY``; unparseable text is shown as-is."""
    if isinstance(value, datetime) or isinstance(value, date):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return value
    else:
        return ""
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def _item_name(item: Mapping[str, Any]) -> str:
    joined = item.get("inventory_items")
    if isinstance(joined, Mapping) and joined.get("name"):
        return str(joined["name"])
    if item.get("name"):
        return str(item["name"])
    return UNKNOWN_ITEM


def format_line_items(items: Any) -> list[LineRow]:
    """Normalise sale items into ``(name, qty, unit price, total)`` rows.

    An empty or non-sequence collection yields the single ``EMPTY_ROW`` so a
    rendered table is never blank.
    """
    if items is None:
        items = []
    elif isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
        logger.warning("Sale items is not a list (%s), rendering no items", type(items).__name__)
        items = []

    rows: list[LineRow] = []
    for item in items:
        if not isinstance(item, Mapping):
            item = {}
        quantity = item.get("quantity")
        rows.append((
            _item_name(item),
            "0" if quantity is None or quantity == "" else str(quantity),
            format_money(item.get("unit_price")),
            format_money(item.get("total_price")),
        ))

    return rows or [EMPTY_ROW]


def build_totals_lines(sale: Mapping[str, Any]) -> list[TotalsLine]:
    """Subtotal and total always; discount and tax only when positive."""
    lines = [TotalsLine("Subtotal", format_money(sale.get("subtotal")))]

    discount = parse_money(sale.get("discount_amount"))
    if discount > 0:
        lines.append(TotalsLine("Discount", f"-{format_money(discount)}"))

    tax = parse_money(sale.get("tax_amount"))
    if tax > 0:
        lines.append(TotalsLine("Tax", format_money(tax)))

    lines.append(TotalsLine("Total", format_money(sale.get("total_amount")), emphasized=True))
    return lines


def company_lines(company: Mapping[str, Any]) -> list[str]:
    lines: list[str] = []
    if company.get("address"):
        lines.append(str(company["address"]))
    if company.get("phone"):
        lines.append(f"Phone: {company['phone']}")
    if company.get("email"):
        lines.append(f"Email: {company['email']}")
    return lines


def customer_lines(sale: Mapping[str, Any]) -> list[str]:
    """Lines of the Bill To block; empty when no name, email or phone is known."""
    if not (sale.get("customer_name") or sale.get("customer_email") or sale.get("customer_phone")):
        return []
    return [
        str(sale[field])
        for field in ("customer_name", "customer_email", "customer_phone", "customer_address")
        if sale.get(field)
    ]


def invoice_filename(invoice_number: Any) -> str:
    """``invoice-<number>.pdf``; path separators and other unsafe characters become ``_``."""
    return f"invoice-{_UNSAFE_FILENAME_CHARS.sub('_', str(invoice_number))}.pdf"
