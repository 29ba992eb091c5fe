import logging

import pytest

from sharelink.application.dependency_container import (
    DependencyContainer,
    DependencyNotFoundError,
)
from sharelink.application.event_publisher import EventPublisher
from sharelink.domain.events import FileStoredEvent
from tests.fixtures import FIXED_NOW


class Service:
    pass


class OtherService:
    pass


def test_singleton_returns_same_instance():
    container = DependencyContainer()
    instance = Service()
    container.register_singleton(Service, instance)

    assert container.resolve(Service) is instance
    assert container.resolve(Service) is container.resolve(Service)


def test_registrations_are_keyed_by_interface():
    container = DependencyContainer()
    service, other = Service(), OtherService()
    container.register_singleton(Service, service)
    container.register_singleton(OtherService, other)

    assert container.resolve(OtherService) is other
    assert container.resolve(Service) is service


def test_re_registration_replaces_instance():
    container = DependencyContainer()
    container.register_singleton(Service, Service())
    replacement = Service()
    container.register_singleton(Service, replacement)

    assert container.resolve(Service) is replacement


def test_unregistered_raises():
    container = DependencyContainer()
    with pytest.raises(DependencyNotFoundError, match="Service"):
        container.resolve(Service)


def test_setup_event_handlers_logs_events(caplog):
    container = DependencyContainer()
    publisher = EventPublisher()
    container.setup_event_handlers(publisher)

    with caplog.at_level(logging.INFO, logger="sharelink"):
        publisher.publish(
            FileStoredEvent(aggregate_id="f1", occurred_at=FIXED_NOW, name="a.txt", size_bytes=1)
        )

    assert "File stored: file_id=f1" in caplog.text
