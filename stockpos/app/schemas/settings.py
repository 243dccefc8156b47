from __future__ import annotations

import re
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, field_validator

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")
_INVOICE_PREFIX = re.compile(r"^[A-Za-z0-9_-]+$")


class CompanyInfo(BaseModel):
    name: str = "Your Company"
    address: str = "123 Business St"
    phone: str = "+1-555-0123"
    email: str = "info@company.com"
    website: str = "www.company.com"
    logo_url: str = ""


class InvoiceSettings(BaseModel):
    prefix: str = "INV"
    start_number: int = 1001
    tax_rate: Decimal = Decimal("0.0875")
    currency: str = "USD"
    due_days: int = 30

    @field_validator("tax_rate")
    @classmethod
    def tax_rate_fraction(cls, v: Decimal) -> Decimal:
        if v < 0 or v >= 1:
            raise ValueError("Tax rate must be a fraction between 0 and 1")
        return v

    @field_validator("start_number", "due_days")
    @classmethod
    def non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Value must be non-negative")
        return v

    @field_validator("prefix")
    @classmethod
    def prefix_safe(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Invoice prefix must not be blank")
        # ends up in file names and Content-Disposition headers
        if not _INVOICE_PREFIX.match(v):
            raise ValueError("Invoice prefix may only contain letters, digits, '-' and '_'")
        return v


class ThemeSettings(BaseModel):
    primary_color: str = "#3b82f6"
    secondary_color: str = "#64748b"
    accent_color: str = "#f59e0b"
    dark_mode: bool = False

    @field_validator("primary_color", "secondary_color", "accent_color")
    @classmethod
    def hex_color(cls, v: str) -> str:
        if not _HEX_COLOR.match(v):
            raise ValueError("Colors must be #RRGGBB hex values")
        return v


class NotificationSettings(BaseModel):
    low_stock_alerts: bool = True
    sale_notifications: bool = True
    email_notifications: bool = False


class SettingOut(BaseModel):
    setting_key: str
    setting_value: dict[str, Any]
    category: str
    description: str | None = None


class SettingUpdate(BaseModel):
    value: dict[str, Any]
