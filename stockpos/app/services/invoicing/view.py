"""Pixel layout of an invoice, rasterised with Pillow.

``InvoiceView`` is the visual invoice: the same content the direct renderer
draws, laid out at a fixed logical width.  ``rasterize`` returns the
finished image, which the snapshot renderer paginates into a PDF and the
preview endpoint serves as PNG.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from PIL import Image, ImageDraw, ImageFont

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

logger = logging.getLogger(__name__)

# ── Palette ─────────────────────────────────────────────────────────────────

_WHITE = (255, 255, 255)
_INK = (31, 41, 55)
_MUTED = (75, 85, 99)
_ACCENT = (37, 99, 235)
_BORDER = (209, 213, 219)
_DISCOUNT = (220, 38, 38)

_PADDING = 32
_COLUMNS = (0.46, 0.14, 0.20, 0.20)
_ANCHORS = ("lm", "mm", "rm", "rm")
_HEAD_H = 44
_ROW_H = 40
_TOTALS_W = 256
_TOTALS_ROW_H = 40


class InvoiceView:
    def __init__(
        self,
        sale: Mapping[str, Any],
        company: Mapping[str, Any] | None = None,
        settings: Mapping[str, Any] | None = None,
        width: int = 800,
    ) -> None:
        self.sale = sale
        self.company = company or {}
        self.settings = settings or {}
        self.width = width
        self._fonts: dict[tuple[int, float], ImageFont.FreeTypeFont] = {}

    def rasterize(self, scale: float = 1) -> Image.Image:
        """Render the invoice at *scale* times its logical size."""
        height = self._paint(None, scale)
        image = Image.new("RGB", (round(self.width * scale), round(height * scale)), _WHITE)
        self._paint(ImageDraw.Draw(image), scale)
        logger.debug("Invoice view rasterized at %sx: %dx%d px", scale, *image.size)
        return image

    # ── Drawing helpers ─────────────────────────────────────────────────────

    def _font(self, size: int, scale: float) -> ImageFont.FreeTypeFont:
        key = (size, scale)
        if key not in self._fonts:
            self._fonts[key] = ImageFont.load_default(size=size * scale)
        return self._fonts[key]

    def _text(
        self,
        draw: ImageDraw.ImageDraw | None,
        scale: float,
        xy: tuple[float, float],
        text: str,
        size: int = 16,
        fill: tuple[int, int, int] = _MUTED,
        bold: bool = False,
        anchor: str = "la",
    ) -> None:
        if draw is None:
            return
        draw.text(
            (xy[0] * scale, xy[1] * scale),
            text,
            font=self._font(size, scale),
            fill=fill,
            anchor=anchor,
            stroke_width=max(1, round(scale / 2)) if bold else 0,
            stroke_fill=fill,
        )

    def _rect(self, draw, scale, box, fill=None, outline=None, width=1) -> None:
        if draw is None:
            return
        draw.rectangle(
            [c * scale for c in box], fill=fill, outline=outline, width=max(1, round(width * scale)),
        )

    def _wrap(self, text: str, size: int, max_width: float) -> list[str]:
        font = self._font(size, 1)
        lines: list[str] = []
        for paragraph in text.splitlines() or [""]:
            current = ""
            for word in paragraph.split():
                candidate = f"{current} {word}".strip()
                if current and font.getlength(candidate) > max_width:
                    lines.append(current)
                    current = word
                else:
                    current = candidate
            lines.append(current)
        return lines

    def _clip(self, text: str, size: int, max_width: float) -> str:
        font = self._font(size, 1)
        if font.getlength(text) <= max_width:
            return text
        while text and font.getlength(text + "...") > max_width:
            text = text[:-1]
        return text + "..."

    # ── Layout ──────────────────────────────────────────────────────────────

    def _paint(self, draw: ImageDraw.ImageDraw | None, scale: float) -> float:
        """Lay out every block; draws when *draw* is given, returns the height."""
        y = self._paint_header(draw, scale)
        y = self._paint_bill_to(draw, scale, y)
        y = self._paint_items(draw, scale, y)
        y = self._paint_totals(draw, scale, y)
        return self._paint_footer(draw, scale, y)

    def _paint_header(self, draw, scale) -> float:
        right = self.width - _PADDING
        self._text(draw, scale, (_PADDING, _PADDING), self.company.get("name") or DEFAULT_COMPANY_NAME,
                   size=30, fill=_INK, bold=True)
        left_y = _PADDING + 44
        for line in company_lines(self.company):
            self._text(draw, scale, (_PADDING, left_y), line)
            left_y += 24

        self._text(draw, scale, (right, _PADDING), "INVOICE", size=24, fill=_INK, bold=True, anchor="ra")
        right_y = _PADDING + 36
        self._text(draw, scale, (right, right_y), f"#{self.sale.get('invoice_number')}", anchor="ra")
        right_y += 24
        self._text(draw, scale, (right, right_y),
                   f"Date: {format_invoice_date(self.sale.get('created_at'))}", anchor="ra")
        right_y += 24

        return max(left_y, right_y) + 32

    def _paint_bill_to(self, draw, scale, y: float) -> float:
        lines = customer_lines(self.sale)
        if not lines:
            return y
        self._text(draw, scale, (_PADDING, y), "Bill To:", size=18, fill=_INK, bold=True)
        y += 30
        for line in lines:
            self._text(draw, scale, (_PADDING, y), line)
            y += 24
        return y + 32

    def _column_edges(self) -> list[tuple[float, float]]:
        content = self.width - 2 * _PADDING
        edges = []
        x = _PADDING
        for fraction in _COLUMNS:
            edges.append((x, x + content * fraction))
            x += content * fraction
        return edges

    def _cell_anchor_x(self, left: float, right: float, anchor: str) -> float:
        if anchor[0] == "l":
            return left + 12
        if anchor[0] == "r":
            return right - 12
        return (left + right) / 2

    def _paint_items(self, draw, scale, y: float) -> float:
        edges = self._column_edges()
        left, right = _PADDING, self.width - _PADDING

        self._rect(draw, scale, (left, y, right, y + _HEAD_H), fill=_ACCENT)
        for header, (x0, x1), anchor in zip(TABLE_HEADERS, edges, _ANCHORS):
            self._text(draw, scale, (self._cell_anchor_x(x0, x1, anchor), y + _HEAD_H / 2), header,
                       fill=_WHITE, bold=True, anchor=anchor)
        y += _HEAD_H

        for row in format_line_items(self.sale.get("sale_items")):
            for value, (x0, x1), anchor in zip(row, edges, _ANCHORS):
                self._rect(draw, scale, (x0, y, x1, y + _ROW_H), outline=_BORDER)
                self._text(draw, scale, (self._cell_anchor_x(x0, x1, anchor), y + _ROW_H / 2),
                           self._clip(value, 16, x1 - x0 - 24), fill=_INK, anchor=anchor)
            y += _ROW_H
        return y + 32

    def _paint_totals(self, draw, scale, y: float) -> float:
        right = self.width - _PADDING
        left = right - _TOTALS_W
        for line in build_totals_lines(self.sale):
            size = 20 if line.emphasized else 16
            colour = _DISCOUNT if line.label == "Discount" else _INK
            middle = y + _TOTALS_ROW_H / 2
            self._text(draw, scale, (left, middle), f"{line.label}:", size=size,
                       fill=_INK if line.emphasized else _MUTED, bold=line.emphasized, anchor="lm")
            self._text(draw, scale, (right, middle), line.value, size=size, fill=colour,
                       bold=True, anchor="rm")
            y += _TOTALS_ROW_H
            if draw is not None:
                width = 2 if line.emphasized else 1
                draw.line([left * scale, y * scale, right * scale, y * scale],
                          fill=_INK if line.emphasized else _BORDER, width=max(1, round(width * scale)))
        return y + 32

    def _paint_footer(self, draw, scale, y: float) -> float:
        centre = self.width / 2
        notes = self.sale.get("notes")
        if notes:
            self._text(draw, scale, (centre, y), "Notes:", fill=_INK, bold=True, anchor="ma")
            y += 26
            for line in self._wrap(str(notes), 16, self.width - 2 * _PADDING):
                self._text(draw, scale, (centre, y), line, anchor="ma")
                y += 22
            y += 16
        self._text(draw, scale, (centre, y), THANK_YOU, size=20, fill=_INK, bold=True, anchor="ma")
        return y + 28 + _PADDING
