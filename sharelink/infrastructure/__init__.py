"""Infrastructure layer: storage implementations and event handlers."""

from .local_blob_store import LocalFileBlobStore
from .memory_repositories import InMemoryBlobStore, InMemoryLinkRepository
from .redis_link_repository import RedisLinkRepository
from .redis_repository import RedisConnectionManager, RedisRepository
from .storage_factory import StorageFactory

__all__ = [
    "InMemoryBlobStore",
    "InMemoryLinkRepository",
    "LocalFileBlobStore",
    "RedisConnectionManager",
    "RedisLinkRepository",
    "RedisRepository",
    "StorageFactory",
]
