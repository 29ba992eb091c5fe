"""
Resolution Result Value Objects

Tagged outcomes returned by the lifecycle coordinator. Expected conditions
(not found, expired, wrong password, gone) are values, not exceptions.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..domain.errors import ErrorCategory, describe
from ..domain.file_storage.entities import FileRecord
from ..domain.link_management.entities import LinkRecord


class ResolutionStatus(Enum):
    """Outcome variants for resolve, verify_password and consume."""
    READY = "ready"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    PASSWORD_REQUIRED = "password_required"
    WRONG_PASSWORD = "wrong_password"
    GONE = "gone"


@dataclass
class ResolutionResult:
    """
    Value object representing the outcome of a link operation.

    READY carries the file and link (and an access grant after a password
    check). EXPIRED and GONE carry a reason telling a timed-out link apart
    from one that ran out of downloads.
    """

    status: ResolutionStatus
    file: Optional[FileRecord] = None
    link: Optional[LinkRecord] = None
    link_id: Optional[str] = None
    access_grant: Optional[str] = None
    reason: Optional[ErrorCategory] = None

    @classmethod
    def ready(
        cls,
        file: FileRecord,
        link: LinkRecord,
        access_grant: Optional[str] = None,
    ) -> "ResolutionResult":
        return cls(
            status=ResolutionStatus.READY,
            file=file,
            link=link,
            link_id=link.link_id,
            access_grant=access_grant,
        )

    @classmethod
    def not_found(cls, link_id: Optional[str] = None) -> "ResolutionResult":
        return cls(status=ResolutionStatus.NOT_FOUND, link_id=link_id)

    @classmethod
    def expired(cls, link: LinkRecord, reason: ErrorCategory) -> "ResolutionResult":
        """
        Create an expired result.

        Args:
            link: The invalid link
            reason: EXPIRED or DOWNLOAD_LIMIT_REACHED
        """
        return cls(
            status=ResolutionStatus.EXPIRED,
            link=link,
            link_id=link.link_id,
            reason=reason,
        )

    @classmethod
    def password_required(cls, link_id: str) -> "ResolutionResult":
        return cls(status=ResolutionStatus.PASSWORD_REQUIRED, link_id=link_id)

    @classmethod
    def wrong_password(cls, link_id: str) -> "ResolutionResult":
        return cls(status=ResolutionStatus.WRONG_PASSWORD, link_id=link_id)

    @classmethod
    def gone(cls, link_id: str, reason: Optional[ErrorCategory] = None) -> "ResolutionResult":
        """Link was valid when resolved but is no longer valid at consume time."""
        return cls(status=ResolutionStatus.GONE, link_id=link_id, reason=reason)

    @property
    def is_ready(self) -> bool:
        return self.status is ResolutionStatus.READY

    @property
    def category(self) -> Optional[ErrorCategory]:
        """Error category used for the user-facing message, None when ready."""
        if self.status is ResolutionStatus.READY:
            return None
        if self.status is ResolutionStatus.EXPIRED:
            return self.reason or ErrorCategory.EXPIRED
        return ErrorCategory(self.status.value)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert result to dictionary for the presentation layer.

        Returns:
            Dictionary with the outcome, file metadata when ready, and a
            distinct title/message for every non-ready outcome
        """
        data: Dict[str, Any] = {
            "status": self.status.value,
            "link_id": self.link_id,
        }
        if self.reason is not None:
            data["reason"] = self.reason.value

        if self.is_ready:
            data["file"] = self.file.metadata()
            data["remaining_downloads"] = self.link.remaining_downloads()
            data["expires_at"] = self.link.expires_at.isoformat()
            if self.access_grant:
                data["access_grant"] = self.access_grant
        else:
            info = describe(self.category)
            data["title"] = info["title"]
            data["message"] = info["message"]
            data["action"] = info["action"]
        return data


@dataclass(frozen=True)
class UploadResult:
    """Outcome of an upload: the code to share and the password to show the uploader."""

    code: str
    link_id: str
    file_id: str
    expires_at: datetime
    password: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "link_id": self.link_id,
            "file_id": self.file_id,
            "expires_at": self.expires_at.isoformat(),
            "password": self.password,
        }


@dataclass
class ReapReport:
    """Statistics of one reap sweep."""

    removed_links: int = 0
    removed_files: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "removed_links": self.removed_links,
            "removed_files": self.removed_files,
            "errors": list(self.errors),
        }
