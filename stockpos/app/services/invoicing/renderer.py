"""Renderer interface shared by the invoice PDF strategies.

A renderer turns a sale mapping (the shape produced by
``services.sales.sale_to_dict``) plus optional company info into an
``InvoiceDocument``.  Subclasses only implement ``_render``; validation,
logging and error wrapping live in ``generate``.
"""
from __future__ import annotations

import abc
import asyncio
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from fpdf import FPDF

from stockpos.app.services.invoicing.errors import InvalidSaleDataError, InvoiceGenerationError
from stockpos.app.services.invoicing.formatting import invoice_filename
from stockpos.app.services.invoicing.validation import validate_sale_data

logger = logging.getLogger(__name__)


class InvoiceDocument:
    """A finished invoice PDF."""

    def __init__(self, pdf: FPDF, invoice_number: str, renderer: str) -> None:
        self.pdf = pdf
        self.invoice_number = invoice_number
        self.renderer = renderer
        self._data: bytes | None = None

    @property
    def filename(self) -> str:
        return invoice_filename(self.invoice_number)

    @property
    def page_count(self) -> int:
        return self.pdf.pages_count

    def output(self) -> bytes:
        if self._data is None:
            self._data = bytes(self.pdf.output())
        return self._data

    def save(self, path: str | Path) -> Path:
        """Write the PDF to *path*; a directory gets ``invoice-<number>.pdf``."""
        dest = Path(path)
        if dest.is_dir():
            dest = dest / self.filename
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(self.output())
        return dest


class InvoiceRenderer(abc.ABC):
    name: str = ""

    def generate(
        self,
        sale: Mapping[str, Any],
        company: Mapping[str, Any] | None = None,
        settings: Mapping[str, Any] | None = None,
    ) -> InvoiceDocument:
        """Validate *sale* and render it.

        Raises ``InvalidSaleDataError`` untouched when fields are missing;
        any other failure is logged with the sale payload and re-raised as
        ``InvoiceGenerationError``.
        """
        company = company or {}
        settings = settings or {}

        sale_items = sale.get("sale_items") if isinstance(sale, Mapping) else None
        logger.info(
            "Starting %s invoice generation: sale=%s invoice=%s has_company=%s items=%s",
            self.name,
            sale.get("id") if isinstance(sale, Mapping) else None,
            sale.get("invoice_number") if isinstance(sale, Mapping) else None,
            bool(company),
            len(sale_items) if isinstance(sale_items, list) else 0,
        )

        errors = validate_sale_data(sale)
        if errors:
            logger.error("Sale data validation failed: %s", errors)
            raise InvalidSaleDataError(errors)

        try:
            pdf = self._render(sale, company, settings)
            document = InvoiceDocument(pdf, str(sale["invoice_number"]), self.name)
            document.output()
        except Exception as exc:
            logger.exception("Error generating invoice %s", sale.get("invoice_number"))
            logger.error("Sale data: %s", json.dumps(sale, indent=2, default=str))
            raise InvoiceGenerationError(str(exc) or exc.__class__.__name__) from exc

        logger.info(
            "Invoice %s generated with %s renderer (%d pages)",
            document.invoice_number, self.name, document.page_count,
        )
        return document

    async def agenerate(
        self,
        sale: Mapping[str, Any],
        company: Mapping[str, Any] | None = None,
        settings: Mapping[str, Any] | None = None,
    ) -> InvoiceDocument:
        return await asyncio.to_thread(self.generate, sale, company, settings)

    @abc.abstractmethod
    def _render(
        self,
        sale: Mapping[str, Any],
        company: Mapping[str, Any],
        settings: Mapping[str, Any],
    ) -> FPDF:
        ...


def get_renderer(name: str | None = None) -> InvoiceRenderer:
    """Return the renderer registered under *name* (default from config)."""
    from stockpos.app.core.config import settings as app_settings
    from stockpos.app.services.invoicing.direct import DirectInvoiceRenderer
    from stockpos.app.services.invoicing.snapshot import SnapshotInvoiceRenderer

    name = (name or app_settings.INVOICE_RENDERER).lower()
    if name == DirectInvoiceRenderer.name:
        return DirectInvoiceRenderer()
    if name == SnapshotInvoiceRenderer.name:
        return SnapshotInvoiceRenderer(
            page_width=app_settings.INVOICE_PAGE_WIDTH_PX,
            scale=app_settings.INVOICE_RASTER_SCALE,
        )
    raise ValueError(f"Unknown invoice renderer: {name}")
