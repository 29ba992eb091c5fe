"""Environment-driven configuration."""

from .lifecycle_config import LifecycleConfig

__all__ = ["LifecycleConfig"]
