import logging
from unittest.mock import Mock

from sharelink.domain.events import (
    DownloadRecordedEvent,
    LinkCreatedEvent,
    LinksReapedEvent,
    PasswordRejectedEvent,
)
from sharelink.infrastructure.event_handlers import LoggingEventHandler
from tests.fixtures import FIXED_NOW


def test_link_created_logged_without_code(caplog):
    handler = LoggingEventHandler(logging.getLogger("test.sharelink"))
    event = LinkCreatedEvent(
        aggregate_id="link-1",
        occurred_at=FIXED_NOW,
        file_id="file-1",
        code_length=5,
        expires_at=FIXED_NOW,
        download_limit=None,
        password_protected=True,
    )

    with caplog.at_level(logging.INFO):
        handler.handle(event)

    assert "link_id=link-1" in caplog.text
    assert "code_length=5" in caplog.text


def test_unlimited_download_logged(caplog):
    handler = LoggingEventHandler(logging.getLogger("test.sharelink"))
    with caplog.at_level(logging.INFO):
        handler.handle(
            DownloadRecordedEvent(
                aggregate_id="link-1", occurred_at=FIXED_NOW, downloads=4, download_limit=None
            )
        )
    assert "downloads=4/unlimited" in caplog.text


def test_password_rejection_logged_as_warning(caplog):
    handler = LoggingEventHandler(logging.getLogger("test.sharelink"))
    with caplog.at_level(logging.INFO):
        handler.handle(PasswordRejectedEvent(aggregate_id="link-1", occurred_at=FIXED_NOW))
    assert caplog.records[-1].levelno == logging.WARNING


def test_logger_failure_is_contained():
    logger = Mock()
    logger.info.side_effect = RuntimeError("broken sink")
    handler = LoggingEventHandler(logger)

    handler.handle(
        LinksReapedEvent(aggregate_id="s", occurred_at=FIXED_NOW, removed_links=1, removed_files=1)
    )

    logger.error.assert_called_once()
