"""
Logging Event Handler

Infrastructure event handler for logging domain events.
Domain layer remains unaware of logging infrastructure.
"""

import logging

from ...domain.events import (
    DomainEvent,
    DownloadRecordedEvent,
    FileStoredEvent,
    LinkCreatedEvent,
    LinksReapedEvent,
    PasswordRejectedEvent,
)


class LoggingEventHandler:
    """
    Infrastructure event handler for logging domain events.

    Short codes and passwords are never written to the log.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize with logger instance.

        Args:
            logger: Python logging.Logger instance
        """
        self.logger = logger

    def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event by logging it.

        Args:
            event: Domain event to log
        """
        try:
            if isinstance(event, FileStoredEvent):
                self._handle_file_stored(event)
            elif isinstance(event, LinkCreatedEvent):
                self._handle_link_created(event)
            elif isinstance(event, DownloadRecordedEvent):
                self._handle_download_recorded(event)
            elif isinstance(event, PasswordRejectedEvent):
                self._handle_password_rejected(event)
            elif isinstance(event, LinksReapedEvent):
                self._handle_links_reaped(event)
            else:
                self.logger.debug(
                    f"Unhandled event: {event.__class__.__name__} "
                    f"(aggregate_id={event.aggregate_id})"
                )
        except Exception as e:
            # Log handler errors but don't fail the operation
            self.logger.error(
                f"Error in logging event handler for {event.__class__.__name__}: {e}",
                exc_info=True,
            )

    def _handle_file_stored(self, event: FileStoredEvent) -> None:
        self.logger.info(
            f"File stored: file_id={event.aggregate_id}, "
            f"name={event.name}, size={event.size_bytes} bytes"
        )

    def _handle_link_created(self, event: LinkCreatedEvent) -> None:
        self.logger.info(
            f"Link created: link_id={event.aggregate_id}, file_id={event.file_id}, "
            f"code_length={event.code_length}, expires_at={event.expires_at.isoformat()}, "
            f"download_limit={event.download_limit}, "
            f"password_protected={event.password_protected}"
        )

    def _handle_download_recorded(self, event: DownloadRecordedEvent) -> None:
        limit = event.download_limit if event.download_limit is not None else "unlimited"
        self.logger.info(
            f"Download recorded: link_id={event.aggregate_id}, "
            f"downloads={event.downloads}/{limit}"
        )

    def _handle_password_rejected(self, event: PasswordRejectedEvent) -> None:
        self.logger.warning(f"Wrong password submitted: link_id={event.aggregate_id}")

    def _handle_links_reaped(self, event: LinksReapedEvent) -> None:
        self.logger.info(
            f"Reap sweep {event.aggregate_id}: removed {event.removed_links} links, "
            f"{event.removed_files} files"
        )
