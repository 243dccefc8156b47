"""Download and print delivery of invoice PDFs."""
from __future__ import annotations

import logging
import tempfile
import webbrowser
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from stockpos.app.core.config import settings as app_settings
from stockpos.app.services.invoicing.errors import InvoiceDeliveryError, PrintWindowError
from stockpos.app.services.invoicing.formatting import invoice_filename
from stockpos.app.services.invoicing.renderer import InvoiceDocument, InvoiceRenderer, get_renderer

logger = logging.getLogger(__name__)


def render_for_delivery(
    sale: Mapping[str, Any] | None,
    company: Mapping[str, Any] | None = None,
    settings: Mapping[str, Any] | None = None,
    renderer: InvoiceRenderer | None = None,
) -> InvoiceDocument:
    """Check the sale is deliverable, then render it."""
    if not sale:
        raise InvoiceDeliveryError("Sale data is required for invoice generation")
    if not sale.get("invoice_number"):
        raise InvoiceDeliveryError("Invoice number is missing from sale data")

    renderer = renderer or get_renderer()
    return renderer.generate(sale, company, settings)


def download_invoice(
    sale: Mapping[str, Any] | None,
    company: Mapping[str, Any] | None = None,
    settings: Mapping[str, Any] | None = None,
    renderer: InvoiceRenderer | None = None,
    directory: str | Path | None = None,
) -> Path:
    """Save ``invoice-<number>.pdf`` into *directory* and return its path."""
    document = render_for_delivery(sale, company, settings, renderer)
    target = Path(directory or app_settings.INVOICE_OUTPUT_DIR)
    target.mkdir(parents=True, exist_ok=True)
    path = document.save(target / document.filename)
    logger.info("Invoice %s saved to %s", document.invoice_number, path)
    return path


def print_invoice(
    sale: Mapping[str, Any] | None,
    company: Mapping[str, Any] | None = None,
    settings: Mapping[str, Any] | None = None,
    renderer: InvoiceRenderer | None = None,
    opener: Callable[[str], bool] = webbrowser.open,
) -> Path:
    """Open the invoice in the system viewer so it can be printed.

    The temporary file is left in place for the viewer to read, and removed
    when the viewer cannot be opened.
    """
    document = render_for_delivery(sale, company, settings, renderer)
    with tempfile.NamedTemporaryFile(
        prefix=f"{Path(invoice_filename(document.invoice_number)).stem}-",
        suffix=".pdf",
        delete=False,
    ) as handle:
        handle.write(document.output())
        path = Path(handle.name)

    if not opener(path.as_uri()):
        path.unlink(missing_ok=True)
        raise PrintWindowError(
            "Failed to open print window. Please check your browser popup settings."
        )
    logger.info("Invoice %s opened for printing", document.invoice_number)
    return path
