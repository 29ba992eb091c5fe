"""
Link Management Entities

Domain entity for shareable access grants.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..errors import ErrorCategory


@dataclass
class LinkRecord:
    """
    Entity representing one shareable access grant to a file.

    Every field except `downloads` is fixed at creation. The counter only
    moves through the repository's atomic increment, never by mutating an
    instance held in memory.
    """

    link_id: str
    file_id: str
    code: str
    downloads: int
    expires_at: datetime
    created_at: datetime
    password_hash: Optional[str] = None
    download_limit: Optional[int] = None

    @classmethod
    def create(
        cls,
        file_id: str,
        code: str,
        expiry: timedelta,
        password_hash: Optional[str] = None,
        download_limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> "LinkRecord":
        """
        Factory method to create a new link with a zeroed counter.

        Args:
            file_id: Id of the FileRecord this link grants access to
            code: Short code issued for the link
            expiry: Lifetime of the link
            password_hash: Encoded password digest, None for open links
            download_limit: Maximum number of downloads, None for unlimited
            now: Creation time (defaults to current UTC time)

        Returns:
            New LinkRecord instance
        """
        now = now or datetime.now(timezone.utc)
        return cls(
            link_id=str(uuid.uuid4()),
            file_id=file_id,
            code=code,
            downloads=0,
            expires_at=now + expiry,
            created_at=now,
            password_hash=password_hash,
            download_limit=download_limit,
        )

    @property
    def requires_password(self) -> bool:
        return self.password_hash is not None

    def is_expired(self, now: datetime) -> bool:
        """Check whether the link is past its expiry time."""
        return now > self.expires_at

    def is_exhausted(self) -> bool:
        """Check whether the download limit has been used up."""
        return self.download_limit is not None and self.downloads >= self.download_limit

    def is_valid(self, now: datetime) -> bool:
        """
        Check whether the link grants access at `now`.

        Pure: depends only on the record and the instant passed in.
        """
        return not self.is_expired(now) and not self.is_exhausted()

    def invalid_reason(self, now: datetime) -> Optional[ErrorCategory]:
        """
        Explain why the link is invalid.

        Returns:
            EXPIRED, DOWNLOAD_LIMIT_REACHED, or None when the link is valid
        """
        if self.is_expired(now):
            return ErrorCategory.EXPIRED
        if self.is_exhausted():
            return ErrorCategory.DOWNLOAD_LIMIT_REACHED
        return None

    def remaining_downloads(self) -> Optional[int]:
        """Downloads left before the limit, None when unlimited."""
        if self.download_limit is None:
            return None
        return max(0, self.download_limit - self.downloads)

    def with_downloads(self, downloads: int) -> "LinkRecord":
        """Copy of this record carrying a different counter value."""
        return replace(self, downloads=downloads)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "link_id": self.link_id,
            "file_id": self.file_id,
            "code": self.code,
            "password_hash": self.password_hash,
            "download_limit": self.download_limit,
            "downloads": self.downloads,
            "expires_at": self.expires_at.isoformat(),
            # Numeric copy for storage-side comparisons (Lua scripts)
            "expires_at_epoch": self.expires_at.timestamp(),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LinkRecord":
        """Create LinkRecord from dictionary."""
        return cls(
            link_id=data["link_id"],
            file_id=data["file_id"],
            code=data["code"],
            downloads=int(data.get("downloads", 0)),
            expires_at=datetime.fromisoformat(data["expires_at"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            password_hash=data.get("password_hash"),
            download_limit=data.get("download_limit"),
        )
