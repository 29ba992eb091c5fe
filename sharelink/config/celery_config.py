"""
Celery Configuration

Configures Celery with a Redis broker and the periodic reap schedule.
"""

import os
from typing import Optional

from celery import Celery
from kombu import Queue

from .lifecycle_config import LifecycleConfig

REAP_TASK_NAME = "sharelink.tasks.reap_expired_links"


def build_beat_schedule(config: Optional[LifecycleConfig] = None) -> dict:
    """Periodic task schedule, with the reap interval taken from LifecycleConfig."""
    config = config or LifecycleConfig()
    return {
        "reap-expired-links": {
            "task": REAP_TASK_NAME,
            "schedule": config.reap_interval_seconds,
        },
    }


class CeleryConfig:
    """Celery configuration settings."""

    # Broker settings
    broker_url = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
    result_backend = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/0")

    # Task settings
    task_serializer = "json"
    accept_content = ["json"]
    result_serializer = "json"
    timezone = "UTC"
    enable_utc = True

    # Worker settings
    worker_prefetch_multiplier = 1
    task_acks_late = True

    # Task routing
    task_routes = {
        REAP_TASK_NAME: {"queue": "reap_queue"},
    }

    # Queue definitions
    task_default_queue = "default"
    task_queues = (
        Queue("default", routing_key="default"),
        Queue("reap_queue", routing_key="reap"),
    )

    # Beat schedule for periodic tasks
    beat_schedule = build_beat_schedule()

    # Time limits
    task_soft_time_limit = int(os.getenv("CELERY_TASK_SOFT_TIME_LIMIT", 120))
    task_time_limit = int(os.getenv("CELERY_TASK_TIME_LIMIT", 180))

    result_expires = 3600


def make_celery(name: str = "sharelink") -> Celery:
    """
    Create Celery instance configured from CeleryConfig.

    Args:
        name: Main module name for the Celery app

    Returns:
        Configured Celery instance
    """
    celery = Celery(
        name,
        backend=CeleryConfig.result_backend,
        broker=CeleryConfig.broker_url,
    )
    celery.config_from_object(CeleryConfig)
    return celery
