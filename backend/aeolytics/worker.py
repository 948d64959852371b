"""
Celery Worker Configuration

Configures Celery for background task processing including:
- Scheduled query runs against the AI engines
- Weekly summary e-mails
"""

import logging

from celery import Celery
from celery.schedules import crontab

from aeolytics.config import settings

logger = logging.getLogger(__name__)


# Create Celery app
celery_app = Celery(
    "aeolytics",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=[
        "aeolytics.tasks.processing_tasks",
        "aeolytics.tasks.report_tasks",
    ],
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=3600,  # 1 hour max per task
    task_soft_time_limit=3300,

    # Worker settings
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=100,

    result_expires=86400,  # 24 hours

    # Queue routing
    task_routes={
        "aeolytics.tasks.processing_tasks.*": {"queue": "processing"},
        "aeolytics.tasks.report_tasks.*": {"queue": "reports"},
    },
    task_default_queue="default",
)

# Beat schedule for periodic tasks
celery_app.conf.beat_schedule = {
    # Daily citation checks at 4 AM
    "daily-query-runs": {
        "task": "aeolytics.tasks.processing_tasks.schedule_query_runs",
        "schedule": crontab(hour=4, minute=0),
        "args": ("daily",),
    },

    # Weekly summary e-mails every Monday at 6 AM
    "weekly-summaries": {
        "task": "aeolytics.tasks.report_tasks.send_weekly_summaries",
        "schedule": crontab(day_of_week=1, hour=6, minute=0),
    },
}


class AEOlyticsTask(celery_app.Task):
    """Base task class that records failures."""

    abstract = True

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        logger.error(f"Task {self.name}[{task_id}] failed: {exc}")
        self.update_state(
            state="FAILURE",
            meta={
                "exc_type": type(exc).__name__,
                "exc_message": str(exc),
            }
        )


# Register base class
celery_app.Task = AEOlyticsTask
