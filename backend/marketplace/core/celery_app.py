from celery import Celery
from celery.schedules import crontab

from .config import get_settings
from .logging import configure_logging

settings = get_settings()
configure_logging()

celery_app = Celery(
    "marketplace",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
)

celery_app.conf.update(
    task_routes={"marketplace.services.indexing.*": {"queue": "indexing"}},
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    imports=("marketplace.services.indexing",),
    beat_schedule={
        # Nightly full rebuild of the search index from the database
        "reindex-companies": {
            "task": "marketplace.services.indexing.reindex_companies",
            "schedule": crontab(hour=settings.SEARCH_REINDEX_HOUR, minute=0),
        },
    },
)
