"""Settings store: one JSON document per key, merged over defaults on read."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from sqlalchemy.orm import Session

from stockpos.app.models.settings import AppSetting
from stockpos.app.schemas.settings import (
    CompanyInfo,
    InvoiceSettings,
    NotificationSettings,
    ThemeSettings,
)

COMPANY_INFO = "company_info"
INVOICE_SETTINGS = "invoice_settings"
THEME_SETTINGS = "theme_settings"
NOTIFICATION_SETTINGS = "notification_settings"

# key -> (schema, category, description)
SETTING_SCHEMAS: dict[str, tuple[type[BaseModel], str, str]] = {
    COMPANY_INFO: (CompanyInfo, "company", "Company details shown on invoices"),
    INVOICE_SETTINGS: (InvoiceSettings, "invoice", "Invoice numbering, tax and currency"),
    THEME_SETTINGS: (ThemeSettings, "appearance", "Application colors and dark mode"),
    NOTIFICATION_SETTINGS: (NotificationSettings, "notifications", "Alert preferences"),
}


def _schema_for(key: str) -> type[BaseModel]:
    try:
        return SETTING_SCHEMAS[key][0]
    except KeyError:
        raise ValueError(f"Unknown setting: {key}") from None


def default_value(key: str) -> dict[str, Any]:
    return _schema_for(key)().model_dump(mode="json")


def get_setting(db: Session, key: str) -> dict[str, Any]:
    """Return the stored value for *key* laid over its defaults."""
    schema = _schema_for(key)
    row = db.query(AppSetting).filter(AppSetting.setting_key == key).first()
    stored = row.setting_value if row and isinstance(row.setting_value, dict) else {}
    merged = {**default_value(key), **stored}
    return schema.model_validate(merged).model_dump(mode="json")


def list_settings(db: Session) -> list[dict[str, Any]]:
    out: list[dict[str, Any]] = []
    for key, (_schema, category, description) in SETTING_SCHEMAS.items():
        out.append({
            "setting_key": key,
            "setting_value": get_setting(db, key),
            "category": category,
            "description": description,
        })
    return out


def update_setting(db: Session, key: str, value: dict[str, Any]) -> dict[str, Any]:
    """Validate and upsert *value* for *key*. Partial values keep existing fields."""
    schema = _schema_for(key)
    current = get_setting(db, key)
    validated = schema.model_validate({**current, **value}).model_dump(mode="json")

    row = db.query(AppSetting).filter(AppSetting.setting_key == key).first()
    if row:
        row.setting_value = validated
    else:
        _schema, category, description = SETTING_SCHEMAS[key]
        db.add(AppSetting(
            setting_key=key,
            setting_value=validated,
            category=category,
            description=description,
        ))
    db.commit()
    return validated


def get_company_info(db: Session) -> dict[str, Any]:
    return get_setting(db, COMPANY_INFO)


def get_invoice_settings(db: Session) -> dict[str, Any]:
    return get_setting(db, INVOICE_SETTINGS)


def get_notification_settings(db: Session) -> dict[str, Any]:
    return get_setting(db, NOTIFICATION_SETTINGS)
