"""
Application Factory

Wires the storage backends, domain services and the lifecycle coordinator
into a DependencyContainer. Callers (embedding applications, Celery tasks,
tests) resolve services from the returned container.
"""

import logging
from datetime import timedelta
from typing import Optional

from .application.dependency_container import DependencyContainer
from .application.event_publisher import EventPublisher
from .application.lifecycle_service import LifecycleCoordinator
from .config.lifecycle_config import LifecycleConfig
from .config.redis_config import (
    RedisConfig,
    get_redis_repository,
    init_redis,
    redis_health_check,
)
from .domain.file_storage.repositories import BlobStore
from .domain.link_management.access_grants import AccessGrantSigner
from .domain.link_management.passwords import PasswordHasher
from .domain.link_management.repositories import LinkRepository
from .domain.link_management.services import LinkRegistry
from .infrastructure.storage_factory import StorageFactory

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_container: Optional[DependencyContainer] = None


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the process."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def create_app(
    config: Optional[LifecycleConfig] = None,
    redis_config: Optional[RedisConfig] = None,
) -> DependencyContainer:
    """
    Create and configure the service container.

    Args:
        config: Lifecycle configuration, uses default if None
        redis_config: Redis configuration, used only when LINK_BACKEND is "redis"

    Returns:
        DependencyContainer with every service registered as a singleton
    """
    if config is None:
        config = LifecycleConfig()

    container = DependencyContainer()
    container.register_singleton(LifecycleConfig, config)

    _initialize_storage(container, config, redis_config)
    _initialize_services(container, config)

    if config.reap_on_startup:
        _reap_on_startup(container)

    return container


def _initialize_storage(
    container: DependencyContainer,
    config: LifecycleConfig,
    redis_config: Optional[RedisConfig],
) -> None:
    """Register the blob store and link repository selected by config."""
    blob_store = StorageFactory.create_blob_store(config)

    redis_provider = None
    if config.link_backend == "redis":
        redis_config = redis_config or RedisConfig()
        init_redis(redis_config)
        if redis_health_check():
            logger.info("Redis initialized successfully")
        else:
            logger.warning(
                f"Redis at {redis_config.host}:{redis_config.port} is not reachable; "
                "link operations will fail until it is"
            )

        def redis_provider():
            return get_redis_repository(redis_config.key_prefix)

    link_repository = StorageFactory.create_link_repository(config, redis_provider)

    container.register_singleton(BlobStore, blob_store)
    container.register_singleton(LinkRepository, link_repository)


def _initialize_services(container: DependencyContainer, config: LifecycleConfig) -> None:
    """Register domain and application services."""
    event_publisher = EventPublisher()
    container.setup_event_handlers(event_publisher)

    password_hasher = PasswordHasher(iterations=config.password_hash_iterations)
    link_registry = LinkRegistry(
        container.resolve(LinkRepository),
        password_hasher=password_hasher,
        max_code_attempts=config.max_code_attempts,
    )
    grant_signer = AccessGrantSigner(
        secret_key=config.secret_key,
        ttl_seconds=config.access_grant_ttl_seconds,
    )
    coordinator = LifecycleCoordinator(
        blob_store=container.resolve(BlobStore),
        link_registry=link_registry,
        event_publisher=event_publisher,
        grant_signer=grant_signer,
        orphan_grace=timedelta(seconds=config.orphan_grace_seconds),
    )

    container.register_singleton(EventPublisher, event_publisher)
    container.register_singleton(PasswordHasher, password_hasher)
    container.register_singleton(LinkRegistry, link_registry)
    container.register_singleton(AccessGrantSigner, grant_signer)
    container.register_singleton(LifecycleCoordinator, coordinator)


def _reap_on_startup(container: DependencyContainer) -> None:
    """Run one reap pass; failures are logged and never block startup."""
    try:
        report = container.resolve(LifecycleCoordinator).reap()
        logger.info(
            f"Startup reap removed {report.removed_links} links and {report.removed_files} files"
        )
    except Exception as e:
        logger.error(f"Startup reap failed: {e}", exc_info=True)


def get_container() -> DependencyContainer:
    """Return the process-wide container, creating it on first use."""
    global _container
    if _container is None:
        config = LifecycleConfig()
        configure_logging(config.log_level)
        _container = create_app(config)
    return _container
