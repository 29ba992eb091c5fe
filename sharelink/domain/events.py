"""
Domain Events

Immutable records of significant state changes in the lifecycle core.
Events decouple side effects (logging, metrics) from core business logic.
"""

from abc import ABC
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Attributes:
        aggregate_id: ID of the aggregate that generated the event (file or link id)
        occurred_at: Timestamp when the event occurred
    """
    aggregate_id: str
    occurred_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert event to dictionary for serialization.

        Returns:
            Dictionary representation of the event
        """
        return {
            "event_type": self.__class__.__name__,
            "aggregate_id": self.aggregate_id,
            "occurred_at": self.occurred_at.isoformat(),
        }


@dataclass(frozen=True)
class FileStoredEvent(DomainEvent):
    """
    Event emitted when an uploaded file is written to the blob store.

    Attributes:
        aggregate_id: File ID
        name: Original filename
        size_bytes: Payload size
    """
    name: str
    size_bytes: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "name": self.name,
            "size_bytes": self.size_bytes,
        })
        return base_dict


@dataclass(frozen=True)
class LinkCreatedEvent(DomainEvent):
    """
    Event emitted when a link is issued.

    Attributes:
        aggregate_id: Link ID
        file_id: File the link grants access to
        code_length: Length of the issued code (the code itself is not logged)
        expires_at: When the link expires
        download_limit: Download cap, None for unlimited
        password_protected: Whether a password challenge is required
    """
    file_id: str
    code_length: int
    expires_at: datetime
    download_limit: Optional[int]
    password_protected: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "file_id": self.file_id,
            "code_length": self.code_length,
            "expires_at": self.expires_at.isoformat(),
            "download_limit": self.download_limit,
            "password_protected": self.password_protected,
        })
        return base_dict


@dataclass(frozen=True)
class DownloadRecordedEvent(DomainEvent):
    """
    Event emitted when a download slot is consumed.

    Attributes:
        aggregate_id: Link ID
        downloads: Counter value after the increment
        download_limit: Download cap, None for unlimited
    """
    downloads: int
    download_limit: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "downloads": self.downloads,
            "download_limit": self.download_limit,
        })
        return base_dict


@dataclass(frozen=True)
class PasswordRejectedEvent(DomainEvent):
    """Event emitted when a wrong password is submitted for a link."""

    def to_dict(self) -> Dict[str, Any]:
        return super().to_dict()


@dataclass(frozen=True)
class LinksReapedEvent(DomainEvent):
    """
    Event emitted after a reap sweep.

    Attributes:
        aggregate_id: Sweep identifier
        removed_links: Number of expired links removed
        removed_files: Number of orphaned files removed
    """
    removed_links: int
    removed_files: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        base_dict = super().to_dict()
        base_dict.update({
            "removed_links": self.removed_links,
            "removed_files": self.removed_files,
        })
        return base_dict
