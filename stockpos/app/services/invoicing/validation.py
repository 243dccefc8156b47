from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_sale_data(sale: Any) -> list[str]:
    """Return every presence problem with *sale*; an empty list means valid.

    A total of zero is valid: only an absent or blank ``total_amount`` counts
    as missing.
    """
    if not isinstance(sale, Mapping) or not sale:
        return ["Sale data is missing"]

    errors: list[str] = []
    if _missing(sale.get("invoice_number")):
        errors.append("Invoice number is missing")
    if _missing(sale.get("total_amount")):
        errors.append("Total amount is missing")
    if _missing(sale.get("created_at")):
        errors.append("Sale date is missing")
    return errors
