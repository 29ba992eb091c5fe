"""
Domain Entity Factories

Factory functions for creating domain entities with sensible defaults,
plus a controllable clock for time-dependent behavior.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from sharelink.domain.file_storage.entities import FileRecord
from sharelink.domain.link_management.entities import LinkRecord

FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        """Move the clock forward by timedelta(**kwargs) and return the new time."""
        self.now = self.now + timedelta(**kwargs)
        return self.now


def create_file_record(
    payload: bytes = b"hello world",
    name: str = "hello.txt",
    mime_type: str = "text/plain",
    created_at: Optional[datetime] = None,
) -> FileRecord:
    """Create a FileRecord with sensible defaults."""
    return FileRecord.create(payload, name, mime_type, now=created_at or FIXED_NOW)


def create_link_record(
    link_id: Optional[str] = None,
    file_id: Optional[str] = None,
    code: str = "abCD1",
    downloads: int = 0,
    expires_at: Optional[datetime] = None,
    created_at: Optional[datetime] = None,
    password_hash: Optional[str] = None,
    download_limit: Optional[int] = None,
) -> LinkRecord:
    """
    Create a LinkRecord with sensible defaults.

    Args:
        link_id: Link identifier (auto-generated if not provided)
        file_id: File identifier (auto-generated if not provided)
        code: Short code
        downloads: Counter value
        expires_at: Expiry (default: 7 days after created_at)
        created_at: Creation time (default: FIXED_NOW)
        password_hash: Encoded digest for protected links
        download_limit: Download cap

    Returns:
        LinkRecord instance with specified or default values
    """
    created_at = created_at or FIXED_NOW
    return LinkRecord(
        link_id=link_id or str(uuid.uuid4()),
        file_id=file_id or str(uuid.uuid4()),
        code=code,
        downloads=downloads,
        expires_at=expires_at or created_at + timedelta(days=7),
        created_at=created_at,
        password_hash=password_hash,
        download_limit=download_limit,
    )
