from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from stockpos.app.core.database import get_db
from stockpos.app.schemas.settings import SettingOut, SettingUpdate
from stockpos.app.services.app_settings import (
    SETTING_SCHEMAS,
    get_setting,
    list_settings,
    update_setting,
)

router = APIRouter()


def _require_known(key: str) -> None:
    if key not in SETTING_SCHEMAS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown setting: {key}")


def _out(key: str, value: dict) -> dict:
    _schema, category, description = SETTING_SCHEMAS[key]
    return {
        "setting_key": key,
        "setting_value": value,
        "category": category,
        "description": description,
    }


@router.get("", response_model=list[SettingOut])
def get_all_settings(db: Session = Depends(get_db)) -> list[dict]:
    return list_settings(db)


@router.get("/{key}", response_model=SettingOut)
def get_one_setting(key: str, db: Session = Depends(get_db)) -> dict:
    _require_known(key)
    return _out(key, get_setting(db, key))


@router.put("/{key}", response_model=SettingOut)
def put_setting(key: str, payload: SettingUpdate, db: Session = Depends(get_db)) -> dict:
    _require_known(key)
    try:
        value = update_setting(db, key, payload.value)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return _out(key, value)
