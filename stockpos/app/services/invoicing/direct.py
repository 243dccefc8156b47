"""Invoice PDF drawn directly with fpdf2 primitives (A4, millimetres)."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fpdf import FPDF, XPos, YPos

from stockpos.app.services.invoicing.formatting import (
    DEFAULT_COMPANY_NAME,
    TABLE_HEADERS,
    THANK_YOU,
    build_totals_lines,
    company_lines,
    customer_lines,
    format_invoice_date,
    format_line_items,
)
from stockpos.app.services.invoicing.renderer import InvoiceRenderer


# ── Layout ──────────────────────────────────────────────────────────────────

_FONT = "Helvetica"
_LEFT = 20
_BILL_TO_X = 120
_BLOCK_LINE = 10
_TABLE_TOP = 90
_ROW_H = 8
_WIDTHS = (80, 20, 35, 35)
_ALIGNS = ("L", "C", "R", "R")
_HEAD_BG = (59, 130, 246)
_TOTALS_X = 110
_TOTALS_W = 80


def _safe_text(text: Any) -> str:
    """Replace characters the built-in fonts cannot encode."""
    return str(text).encode("latin-1", errors="replace").decode("latin-1")


def _fit(pdf: FPDF, text: str, width: float) -> str:
    """Truncate *text* with an ellipsis so it fits in a cell of *width*."""
    limit = width - 2 * pdf.c_margin
    if pdf.get_string_width(text) <= limit:
        return text
    while text and pdf.get_string_width(text + "...") > limit:
        text = text[:-1]
    return text + "..."


def _header_row(pdf: FPDF) -> None:
    pdf.set_fill_color(*_HEAD_BG)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font(_FONT, "B", 10)
    for header, width, align in zip(TABLE_HEADERS, _WIDTHS, _ALIGNS):
        pdf.cell(width, _ROW_H, header, border=1, fill=True, align=align)
    pdf.ln()
    pdf.set_text_color(0, 0, 0)


def _data_row(pdf: FPDF, values: tuple[str, ...]) -> None:
    pdf.set_font(_FONT, "", 10)
    for value, width, align in zip(values, _WIDTHS, _ALIGNS):
        pdf.cell(width, _ROW_H, _fit(pdf, _safe_text(value), width), border=1, align=align)
    pdf.ln()


class DirectInvoiceRenderer(InvoiceRenderer):
    """Text-based invoice: selectable text, small files, paginated table."""

    name = "direct"

    def _render(
        self,
        sale: Mapping[str, Any],
        company: Mapping[str, Any],
        settings: Mapping[str, Any],
    ) -> FPDF:
        pdf = FPDF(orientation="P", unit="mm", format="A4")
        pdf.set_margins(_LEFT, 15, _LEFT)
        pdf.set_auto_page_break(auto=True, margin=15)
        pdf.set_title(_safe_text(f"Invoice {sale['invoice_number']}"))
        pdf.add_page()

        table_top = self._draw_header(pdf, sale, company)
        pdf.set_y(table_top)
        self._draw_items(pdf, sale)
        self._draw_totals(pdf, sale)
        self._draw_footer(pdf, sale)
        return pdf

    def _draw_header(self, pdf: FPDF, sale: Mapping[str, Any], company: Mapping[str, Any]) -> float:
        """Draw company and customer blocks; return the y where the table starts."""
        pdf.set_font(_FONT, "B", 20)
        pdf.text(_LEFT, 20, _safe_text(company.get("name") or DEFAULT_COMPANY_NAME))

        pdf.set_font(_FONT, "", 12)
        pdf.text(_LEFT, 35, _safe_text(f"Invoice: {sale['invoice_number']}"))
        pdf.text(_LEFT, 45, _safe_text(f"Date: {format_invoice_date(sale.get('created_at'))}"))

        y = 55
        for line in company_lines(company):
            pdf.text(_LEFT, y, _safe_text(line))
            y += _BLOCK_LINE
        bottom = y

        bill_to = customer_lines(sale)
        if bill_to:
            pdf.text(_BILL_TO_X, 35, "Bill To:")
            y = 45
            for line in bill_to:
                pdf.text(_BILL_TO_X, y, _safe_text(line))
                y += _BLOCK_LINE
            bottom = max(bottom, y)

        return max(_TABLE_TOP, bottom)

    def _draw_items(self, pdf: FPDF, sale: Mapping[str, Any]) -> None:
        _header_row(pdf)
        for row in format_line_items(sale.get("sale_items")):
            if pdf.will_page_break(_ROW_H):
                pdf.add_page()
                _header_row(pdf)
            _data_row(pdf, row)

    def _draw_totals(self, pdf: FPDF, sale: Mapping[str, Any]) -> None:
        pdf.ln(10)
        for line in build_totals_lines(sale):
            if line.emphasized:
                pdf.ln(5)
                pdf.set_font(_FONT, "B", 14)
            else:
                pdf.set_font(_FONT, "", 12)
            pdf.set_x(_TOTALS_X)
            pdf.cell(
                _TOTALS_W, _BLOCK_LINE, _safe_text(line.text), align="R",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )

    def _draw_footer(self, pdf: FPDF, sale: Mapping[str, Any]) -> None:
        pdf.ln(8)
        pdf.set_font(_FONT, "", 10)
        notes = sale.get("notes")
        if notes:
            pdf.multi_cell(0, 6, _safe_text(f"Notes: {notes}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            pdf.ln(4)
        pdf.set_font(_FONT, "I", 10)
        pdf.cell(0, 6, THANK_YOU, align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
