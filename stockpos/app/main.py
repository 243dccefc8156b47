import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockpos.app.api.v1.api import api_router
from stockpos.app.core.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="StockPOS Inventory & Invoicing")

# ─── CORS: configured origins only ─────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Accept"],
    expose_headers=["Content-Disposition"],
)

app.include_router(api_router)
