from __future__ import annotations


class InvoiceError(Exception):
    """Base class for invoice pipeline failures."""


class InvalidSaleDataError(InvoiceError):
    """The sale record is missing fields the invoice needs."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Invalid sale data: {', '.join(self.errors)}")


class InvoiceGenerationError(InvoiceError):
    """Drawing, rasterising or serialising the document failed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to generate invoice PDF: {reason}")


class InvoiceDeliveryError(InvoiceError):
    """A download or print request was rejected before generation."""


class PrintWindowError(InvoiceDeliveryError):
    """The viewing context for printing could not be opened."""
