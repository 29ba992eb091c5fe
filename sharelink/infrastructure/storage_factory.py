"""
Storage Factory

Factory for creating the blob store and link repository implementations
selected by configuration. The application layer only ever sees the
BlobStore and LinkRepository interfaces.
"""

import logging
from typing import Callable, Optional

from ..config.lifecycle_config import LifecycleConfig
from ..domain.file_storage.repositories import BlobStore
from ..domain.link_management.repositories import LinkRepository
from .local_blob_store import LocalFileBlobStore
from .memory_repositories import InMemoryBlobStore, InMemoryLinkRepository
from .redis_repository import RedisRepository

logger = logging.getLogger(__name__)


class StorageFactory:
    """
    Factory for storage implementations.

    Selection Logic:
    - BLOB_BACKEND: "local" (default) or "memory"
    - LINK_BACKEND: "redis" (default) or "memory"

    The in-memory link repository only guarantees atomicity within a single
    process; use Redis whenever several workers share the same links.
    """

    @staticmethod
    def create_blob_store(config: Optional[LifecycleConfig] = None) -> BlobStore:
        """
        Create the configured BlobStore.

        Raises:
            ValueError: If the backend name is unknown
            RuntimeError: If storage initialization fails
        """
        config = config or LifecycleConfig()

        if config.blob_backend == "memory":
            logger.info("Storage factory: using in-memory blob store")
            return InMemoryBlobStore(capacity_bytes=config.blob_capacity_bytes)

        if config.blob_backend == "local":
            try:
                store = LocalFileBlobStore(config.blob_storage_dir)
            except Exception as e:
                raise RuntimeError(f"Failed to initialize local blob store: {e}") from e
            logger.info(f"Storage factory: using local blob store at {config.blob_storage_dir}")
            return store

        raise ValueError(f"Unknown BLOB_BACKEND: {config.blob_backend}")

    @staticmethod
    def create_link_repository(
        config: Optional[LifecycleConfig] = None,
        redis_repository_provider: Optional[Callable[[], RedisRepository]] = None,
    ) -> LinkRepository:
        """
        Create the configured LinkRepository.

        Args:
            config: Lifecycle configuration
            redis_repository_provider: Callable returning the RedisRepository
                to use when LINK_BACKEND is "redis"

        Raises:
            ValueError: If the backend name is unknown or Redis is selected
                without a provider
        """
        config = config or LifecycleConfig()

        if config.link_backend == "memory":
            logger.info("Storage factory: using in-memory link repository")
            return InMemoryLinkRepository()

        if config.link_backend == "redis":
            if redis_repository_provider is None:
                raise ValueError("LINK_BACKEND=redis requires a Redis repository provider")
            from .redis_link_repository import RedisLinkRepository

            logger.info("Storage factory: using Redis link repository")
            return RedisLinkRepository(redis_repository_provider())

        raise ValueError(f"Unknown LINK_BACKEND: {config.link_backend}")
