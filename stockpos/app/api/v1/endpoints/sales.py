from __future__ import annotations

import io
import logging
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from stockpos.app.core.database import get_db
from stockpos.app.schemas.sales import SaleCreate, SaleOut
from stockpos.app.services.app_settings import get_company_info, get_invoice_settings
from stockpos.app.services.invoicing.delivery import render_for_delivery
from stockpos.app.services.invoicing.errors import (
    InvalidSaleDataError,
    InvoiceDeliveryError,
    InvoiceGenerationError,
)
from stockpos.app.services.invoicing.renderer import InvoiceDocument, get_renderer
from stockpos.app.services.invoicing.view import InvoiceView
from stockpos.app.services.sales import get_sale, list_sales, process_sale, sale_to_dict

logger = logging.getLogger(__name__)

router = APIRouter()

RendererName = Literal["direct", "snapshot"]


def _load_sale(db: Session, sale_id: UUID) -> dict:
    try:
        return sale_to_dict(get_sale(db, sale_id))
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _render(db: Session, sale_id: UUID, renderer: RendererName | None) -> InvoiceDocument:
    sale = _load_sale(db, sale_id)
    try:
        return render_for_delivery(
            sale,
            company=get_company_info(db),
            settings=get_invoice_settings(db),
            renderer=get_renderer(renderer),
        )
    except (InvalidSaleDataError, InvoiceDeliveryError) as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except InvoiceGenerationError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


def _pdf_response(document: InvoiceDocument, disposition: str) -> Response:
    return Response(
        content=document.output(),
        media_type="application/pdf",
        headers={"Content-Disposition": f'{disposition}; filename="{document.filename}"'},
    )


@router.get("", response_model=list[SaleOut])
def get_sales(
    search: str | None = None,
    db: Session = Depends(get_db),
) -> list[dict]:
    return [sale_to_dict(s) for s in list_sales(db, search)]


@router.post("", response_model=SaleOut, status_code=status.HTTP_201_CREATED)
def create_sale(payload: SaleCreate, db: Session = Depends(get_db)) -> dict:
    try:
        sale = process_sale(db, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return sale_to_dict(sale)


@router.get("/{sale_id}", response_model=SaleOut)
def get_sale_detail(sale_id: UUID, db: Session = Depends(get_db)) -> dict:
    return _load_sale(db, sale_id)


# ─── Invoice delivery ─────────────────────────────────────────────────────────


@router.get("/{sale_id}/invoice")
def download_invoice(
    sale_id: UUID,
    renderer: RendererName | None = None,
    db: Session = Depends(get_db),
) -> Response:
    return _pdf_response(_render(db, sale_id, renderer), "attachment")


@router.get("/{sale_id}/invoice/print")
def print_invoice(
    sale_id: UUID,
    renderer: RendererName | None = None,
    db: Session = Depends(get_db),
) -> Response:
    return _pdf_response(_render(db, sale_id, renderer), "inline")


@router.get("/{sale_id}/invoice/preview")
def preview_invoice(
    sale_id: UUID,
    scale: float = 1,
    db: Session = Depends(get_db),
) -> Response:
    """The invoice view as PNG, the same image the snapshot renderer paginates."""
    sale = _load_sale(db, sale_id)
    view = InvoiceView(sale, get_company_info(db), get_invoice_settings(db))
    buf = io.BytesIO()
    view.rasterize(max(0.5, min(scale, 4))).save(buf, format="PNG")
    return Response(content=buf.getvalue(), media_type="image/png")


@router.post("/{sale_id}/invoice/archive", status_code=status.HTTP_202_ACCEPTED)
def archive_invoice(
    sale_id: UUID,
    renderer: RendererName | None = None,
    db: Session = Depends(get_db),
) -> dict:
    """Queue background generation and storage of the invoice PDF."""
    from stockpos.app.workers.tasks.invoices import archive_invoice as archive_task

    _load_sale(db, sale_id)
    result = archive_task.delay(str(sale_id), renderer)
    logger.info("Queued invoice archive for sale %s (task %s)", sale_id, result.id)
    return {"task_id": result.id, "status": "queued"}
