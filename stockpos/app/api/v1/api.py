from fastapi import APIRouter

from stockpos.app.api.v1.endpoints import (
    dashboard,
    inventory,
    pos,
    sales,
    settings,
)

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
api_router.include_router(pos.router, prefix="/pos", tags=["pos"])
api_router.include_router(sales.router, prefix="/sales", tags=["sales"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
