"""
Celery Application Instance

Creates the Celery app instance for use by workers and the beat scheduler.
Services are resolved lazily from the app factory container inside tasks.
"""

from .config.celery_config import make_celery

celery_app = make_celery()

# Task modules are imported by the worker at startup, after celery_app exists.
celery_app.conf.imports = ("sharelink.tasks.reap_task",)
