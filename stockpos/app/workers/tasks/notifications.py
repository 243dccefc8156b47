"""Async notification tasks."""

from __future__ import annotations

from stockpos.app.workers.celery_app import celery


@celery.task(name="stockpos.app.workers.tasks.notifications.send_notification")
def send_notification(
    notification_type: str,
    recipient_email: str | None,
    template_kwargs: dict,
) -> dict:
    """Send a notification email asynchronously, honouring stored preferences."""
    from stockpos.app.core.database import SessionLocal
    from stockpos.app.services.app_settings import get_notification_settings
    from stockpos.app.services.notification_service import (
        NotificationService,
        NotificationType,
    )

    try:
        ntype = NotificationType(notification_type)
    except ValueError:
        return {"status": "error", "detail": f"Unknown type: {notification_type}"}

    db = SessionLocal()
    try:
        svc = NotificationService(get_notification_settings(db))
    finally:
        db.close()

    ok = svc.send(ntype, recipient_email, **template_kwargs)
    return {"status": "sent" if ok else "skipped"}
