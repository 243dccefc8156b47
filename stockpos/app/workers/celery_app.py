"""Celery application instance.

Start the worker::

    celery -A stockpos.app.workers.celery_app worker --loglevel=info
"""

from __future__ import annotations

from celery import Celery

from stockpos.app.core.config import settings

celery = Celery(
    "stockpos",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
)

celery.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
)

celery.autodiscover_tasks(["stockpos.app.workers.tasks"])
