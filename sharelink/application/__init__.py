"""Application layer: lifecycle orchestration and service wiring."""

from .dependency_container import DependencyContainer, DependencyNotFoundError
from .event_publisher import EventPublisher
from .lifecycle_service import LifecycleCoordinator
from .resolution_result import ReapReport, ResolutionResult, ResolutionStatus, UploadResult

__all__ = [
    "DependencyContainer",
    "DependencyNotFoundError",
    "EventPublisher",
    "LifecycleCoordinator",
    "ReapReport",
    "ResolutionResult",
    "ResolutionStatus",
    "UploadResult",
]
