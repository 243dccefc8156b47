"""Render the invoice PDF for a recorded sale.

Usage:
    python -m stockpos.scripts.render_invoice INV-1001 [--renderer snapshot] [--out DIR] [--print]
"""

from __future__ import annotations

import argparse
import sys

from stockpos.app.core.database import SessionLocal
from stockpos.app.services.app_settings import get_company_info, get_invoice_settings
from stockpos.app.services.invoicing.delivery import download_invoice, print_invoice
from stockpos.app.services.invoicing.errors import InvoiceError
from stockpos.app.services.invoicing.renderer import get_renderer
from stockpos.app.services.sales import get_sale_by_invoice_number, sale_to_dict


def main() -> None:
    parser = argparse.ArgumentParser(description="Render an invoice PDF")
    parser.add_argument("invoice_number")
    parser.add_argument("--renderer", choices=["direct", "snapshot"], default=None)
    parser.add_argument("--out", default=None, help="output directory")
    parser.add_argument("--print", dest="open_for_print", action="store_true",
                        help="open the PDF in the system viewer instead of saving it")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        try:
            sale = sale_to_dict(get_sale_by_invoice_number(db, args.invoice_number))
        except LookupError as e:
            print(f"Error: {e}")
            sys.exit(1)

        company = get_company_info(db)
        invoice_settings = get_invoice_settings(db)
        renderer = get_renderer(args.renderer)
        try:
            if args.open_for_print:
                path = print_invoice(sale, company, invoice_settings, renderer)
            else:
                path = download_invoice(sale, company, invoice_settings, renderer, args.out)
        except InvoiceError as e:
            print(f"Error: {e}")
            sys.exit(1)
        print(f"Invoice written to {path}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
