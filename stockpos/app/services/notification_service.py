"""Template-based notification service."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from stockpos.app.core.config import settings
from stockpos.app.services.email_service import EmailService

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    LOW_STOCK_ALERT = "LOW_STOCK_ALERT"
    SALE_COMPLETED = "SALE_COMPLETED"
    INVOICE_READY = "INVOICE_READY"


# Which notification_settings flag gates each type
_PREFERENCE: dict[NotificationType, str] = {
    NotificationType.LOW_STOCK_ALERT: "low_stock_alerts",
    NotificationType.SALE_COMPLETED: "sale_notifications",
    NotificationType.INVOICE_READY: "sale_notifications",
}

_TEMPLATES: dict[NotificationType, dict[str, str]] = {
    NotificationType.LOW_STOCK_ALERT: {
        "subject": "Low Stock Alert: {item_name}",
        "body": (
            "<h2>Low Stock Alert</h2>"
            "<p>Item <strong>{item_name}</strong> ({sku}) is at or below its "
            "minimum level. Current quantity: <strong>{quantity}</strong>, "
            "minimum: {min_stock_level}.</p>"
        ),
    },
    NotificationType.SALE_COMPLETED: {
        "subject": "Sale Completed: {invoice_number}",
        "body": (
            "<h2>Sale Completed</h2>"
            "<p>Invoice <strong>{invoice_number}</strong> was recorded for "
            "<strong>{total_amount}</strong>.</p>"
        ),
    },
    NotificationType.INVOICE_READY: {
        "subject": "Invoice Ready: {invoice_number}",
        "body": (
            "<h2>Invoice Ready</h2>"
            "<p>The PDF for invoice <strong>{invoice_number}</strong> has been "
            "generated and is ready for download.</p>"
        ),
    },
}


class NotificationService:
    """Send typed notifications using predefined templates.

    ``preferences`` is the ``notification_settings`` document. A type is only
    sent when its preference flag and ``email_notifications`` are both on.
    """

    def __init__(self, preferences: dict[str, Any] | None = None) -> None:
        self._email = EmailService()
        self._preferences = preferences or {}

    def is_enabled(self, notification_type: NotificationType) -> bool:
        flag = _PREFERENCE.get(notification_type)
        return bool(
            self._preferences.get("email_notifications")
            and flag
            and self._preferences.get(flag)
        )

    def send(
        self,
        notification_type: NotificationType,
        recipient_email: str | None = None,
        attachments: list[tuple[str, bytes]] | None = None,
        **kwargs: str,
    ) -> bool:
        """Render the template for *notification_type* and send via email."""
        template = _TEMPLATES.get(notification_type)
        if template is None:
            logger.error("Unknown notification type: %s", notification_type)
            return False
        if not self.is_enabled(notification_type):
            logger.debug("Notification %s disabled by settings", notification_type.value)
            return False

        recipient = recipient_email or settings.NOTIFICATION_RECIPIENT
        if not recipient:
            logger.warning("No recipient configured for %s", notification_type.value)
            return False

        subject = template["subject"].format(**kwargs)
        body = template["body"].format(**kwargs)
        return self._email.send(
            to=recipient, subject=subject, body_html=body, attachments=attachments
        )
