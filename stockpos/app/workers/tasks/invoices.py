"""Background invoice generation."""

from __future__ import annotations

import logging
from uuid import UUID

from stockpos.app.workers.celery_app import celery

logger = logging.getLogger(__name__)


@celery.task(name="stockpos.app.workers.tasks.invoices.archive_invoice")
def archive_invoice(sale_id: str, renderer: str | None = None) -> dict:
    """Render a sale's invoice, store it and send the invoice-ready email.

    Returns ``{"status": "done", "file_path": ...}`` or an error dict.
    """
    from stockpos.app.core.database import SessionLocal
    from stockpos.app.services.app_settings import (
        get_company_info,
        get_invoice_settings,
        get_notification_settings,
    )
    from stockpos.app.services.file_service import FileStorageService
    from stockpos.app.services.invoicing.delivery import render_for_delivery
    from stockpos.app.services.invoicing.errors import InvoiceError
    from stockpos.app.services.invoicing.renderer import get_renderer
    from stockpos.app.services.notification_service import (
        NotificationService,
        NotificationType,
    )
    from stockpos.app.services.sales import get_sale, sale_to_dict

    db = SessionLocal()
    try:
        try:
            sale = sale_to_dict(get_sale(db, UUID(sale_id)))
        except (LookupError, ValueError) as e:
            return {"status": "error", "detail": str(e)}

        try:
            document = render_for_delivery(
                sale,
                company=get_company_info(db),
                settings=get_invoice_settings(db),
                renderer=get_renderer(renderer),
            )
        except (InvoiceError, ValueError) as e:
            logger.error("Invoice archive failed for sale %s: %s", sale_id, e)
            return {"status": "error", "detail": str(e)}

        data = document.output()
        path = FileStorageService().save(f"invoices/{document.filename}", data)

        NotificationService(get_notification_settings(db)).send(
            NotificationType.INVOICE_READY,
            attachments=[(document.filename, data)],
            invoice_number=document.invoice_number,
        )
        return {"status": "done", "file_path": path, "pages": document.page_count}
    finally:
        db.close()
