"""Invoice PDF made from a raster snapshot of ``InvoiceView``.

The view is rendered at a fixed width, scaled up for print sharpness, then
cut into A4-proportioned bands; each band becomes one full-width page.
"""
from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from fpdf import FPDF
from PIL import Image

from stockpos.app.services.invoicing.renderer import InvoiceRenderer
from stockpos.app.services.invoicing.view import InvoiceView

logger = logging.getLogger(__name__)

A4_WIDTH_MM = 210
A4_HEIGHT_MM = 297


def page_bands(image_height: int, band_height: int) -> list[tuple[int, int]]:
    """Split *image_height* pixels into ``(top, bottom)`` page bands.

    An image that fits exactly into N bands yields N pages, not N + 1.
    """
    if band_height <= 0:
        raise ValueError("band height must be positive")
    return [
        (top, min(top + band_height, image_height))
        for top in range(0, image_height, band_height)
    ]


class SnapshotInvoiceRenderer(InvoiceRenderer):
    """Raster invoice: looks exactly like the on-screen view."""

    name = "snapshot"

    def __init__(self, page_width: int = 800, scale: float = 2) -> None:
        self.page_width = page_width
        self.scale = scale

    def _render(
        self,
        sale: Mapping[str, Any],
        company: Mapping[str, Any],
        settings: Mapping[str, Any],
    ) -> FPDF:
        scratch = Path(tempfile.mkdtemp(prefix="invoice-snapshot-"))
        try:
            view = InvoiceView(sale, company, settings, width=self.page_width)
            image = view.rasterize(self.scale)
            return self._paginate(image, scratch)
        finally:
            shutil.rmtree(scratch, ignore_errors=True)

    def _paginate(self, image: Image.Image, scratch: Path) -> FPDF:
        pdf = FPDF(orientation="P", unit="mm", format="A4")
        pdf.set_auto_page_break(auto=False)
        pdf.set_margins(0, 0, 0)

        band_height = int(A4_HEIGHT_MM * image.width / A4_WIDTH_MM)
        mm_per_px = A4_WIDTH_MM / image.width
        bands = page_bands(image.height, band_height)
        for index, (top, bottom) in enumerate(bands, start=1):
            band = image.crop((0, top, image.width, bottom))
            band_path = scratch / f"page-{index}.png"
            band.save(band_path)
            pdf.add_page()
            pdf.image(str(band_path), x=0, y=0, w=A4_WIDTH_MM, h=(bottom - top) * mm_per_px)

        logger.debug("Snapshot %dx%d px split into %d pages", image.width, image.height, len(bands))
        return pdf
