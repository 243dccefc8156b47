from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stockpos.app.core.database import get_db
from stockpos.app.schemas.dashboard import DashboardOut
from stockpos.app.services.dashboard import get_dashboard

router = APIRouter()


@router.get("", response_model=DashboardOut)
def dashboard(db: Session = Depends(get_db)) -> dict:
    return get_dashboard(db)
