"""
Reap Task

Celery beat task for periodic removal of expired links and orphaned files.
Thin wrapper that delegates to LifecycleCoordinator.
"""

import logging

from ..celery_app import celery_app
from ..config.celery_config import REAP_TASK_NAME
from ..domain.errors import ApplicationError, DomainError, ErrorCategory

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name=REAP_TASK_NAME)
def reap_expired_links(self):
    """
    Periodic task that removes expired links and the files they orphan.

    Services are resolved from the DependencyContainer; the task never
    touches storage directly.

    Returns:
        dict: Reap statistics with counts and errors, plus a categorized
            "error" entry when the pass itself failed
    """
    logger.info("Starting reap task")

    try:
        from ..app_factory import get_container
        from ..application.lifecycle_service import LifecycleCoordinator

        coordinator = get_container().resolve(LifecycleCoordinator)
        report = coordinator.reap()

        return report.to_dict()

    except Exception as e:
        error_msg = f"Reap task failed: {e}"
        logger.error(error_msg, exc_info=True)

        if isinstance(e, DomainError):
            app_error = ApplicationError.from_domain_error(e)
        else:
            app_error = ApplicationError(ErrorCategory.SYSTEM_ERROR, technical_message=str(e))

        return {
            "removed_links": 0,
            "removed_files": 0,
            "errors": [error_msg],
            "error": app_error.to_dict(),
        }
