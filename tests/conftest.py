"""
Shared pytest fixtures and configuration for the sharelink test suite.

This module provides:
- Hypothesis configuration for property-based testing
- A controllable clock and in-memory storage fixtures
- A fully wired LifecycleCoordinator
- A Redis client for Redis-backed tests (skipped when Redis is down)
"""

import os
from typing import List

import pytest
import redis
from hypothesis import HealthCheck, Phase, settings

from sharelink.application.event_publisher import EventPublisher
from sharelink.application.lifecycle_service import LifecycleCoordinator
from sharelink.domain.events import DomainEvent
from sharelink.domain.link_management.access_grants import AccessGrantSigner
from sharelink.domain.link_management.passwords import PasswordHasher
from sharelink.domain.link_management.services import LinkRegistry
from sharelink.infrastructure.memory_repositories import (
    InMemoryBlobStore,
    InMemoryLinkRepository,
)
from sharelink.infrastructure.redis_link_repository import RedisLinkRepository
from sharelink.infrastructure.redis_repository import RedisRepository
from tests.fixtures import FixedClock

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.load_profile("default")

# Low iteration count keeps password tests fast; the format is unchanged
TEST_HASH_ITERATIONS = 1_000


# =============================================================================
# Clock and Storage Fixtures
# =============================================================================

@pytest.fixture
def clock() -> FixedClock:
    """Provide a clock frozen at FIXED_NOW."""
    return FixedClock()


@pytest.fixture
def blob_store(clock) -> InMemoryBlobStore:
    """Provide an empty in-memory blob store stamped by the test clock."""
    return InMemoryBlobStore(clock=clock)


@pytest.fixture
def link_repository() -> InMemoryLinkRepository:
    """Provide an empty in-memory link repository."""
    return InMemoryLinkRepository()


@pytest.fixture
def password_hasher() -> PasswordHasher:
    return PasswordHasher(iterations=TEST_HASH_ITERATIONS)


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def link_registry(link_repository, password_hasher, clock) -> LinkRegistry:
    return LinkRegistry(link_repository, password_hasher=password_hasher, clock=clock)


@pytest.fixture
def grant_signer() -> AccessGrantSigner:
    return AccessGrantSigner(secret_key="test-secret", ttl_seconds=300)


@pytest.fixture
def event_publisher() -> EventPublisher:
    return EventPublisher()


@pytest.fixture
def published_events(event_publisher) -> List[DomainEvent]:
    """Collect every event published through the event_publisher fixture."""
    events: List[DomainEvent] = []
    event_publisher.subscribe(DomainEvent, events.append)
    return events


@pytest.fixture
def coordinator(blob_store, link_registry, event_publisher, grant_signer, clock) -> LifecycleCoordinator:
    """Provide a LifecycleCoordinator over in-memory storage."""
    return LifecycleCoordinator(
        blob_store=blob_store,
        link_registry=link_registry,
        event_publisher=event_publisher,
        grant_signer=grant_signer,
        clock=clock,
    )


# =============================================================================
# Redis Fixtures
# =============================================================================

# Redis-backed tests only ever touch keys under this prefix.
REDIS_TEST_KEY_PREFIX = "test"


def _clear_test_keys(client: redis.Redis) -> None:
    keys = list(client.scan_iter(match=f"{REDIS_TEST_KEY_PREFIX}:*", count=500))
    if keys:
        client.delete(*keys)


@pytest.fixture(scope="session")
def redis_connection_pool():
    """Connection pool for the test database, or skip when Redis is down."""
    pool = redis.ConnectionPool(
        host=os.getenv("REDIS_HOST", "localhost"),
        port=int(os.getenv("REDIS_PORT", 6379)),
        db=int(os.getenv("REDIS_TEST_DB", 15)),
        socket_connect_timeout=2,
    )
    try:
        redis.Redis(connection_pool=pool).ping()
    except redis.ConnectionError:
        pool.disconnect()
        pytest.skip("Redis not reachable, skipping Redis-backed tests")

    yield pool
    pool.disconnect()


@pytest.fixture
def redis_client(redis_connection_pool):
    """Redis client with the test key space emptied before and after use."""
    client = redis.Redis(connection_pool=redis_connection_pool)
    _clear_test_keys(client)
    yield client
    _clear_test_keys(client)


@pytest.fixture
def redis_link_repository(redis_client) -> RedisLinkRepository:
    """Provide a RedisLinkRepository scoped to the test key prefix."""
    return RedisLinkRepository(RedisRepository(redis_client, key_prefix=REDIS_TEST_KEY_PREFIX))


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (require external services)"
    )
    config.addinivalue_line(
        "markers", "contract: Contract tests (verify interface compliance)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    - tests/contracts/* -> @pytest.mark.contract
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/contracts/" in test_path or "\\contracts\\" in test_path:
            item.add_marker(pytest.mark.contract)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
