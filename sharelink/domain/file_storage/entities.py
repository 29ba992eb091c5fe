"""
File Storage Entities

Domain entity for uploaded file blobs.
"""

import base64
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class FileRecord:
    """
    Entity representing one uploaded blob.

    Records are write-once: created on upload and only ever deleted by the
    reaper once no link references them.
    """
    file_id: str
    name: str
    mime_type: str
    size_bytes: int
    payload: bytes
    created_at: datetime

    @classmethod
    def create(
        cls,
        payload: bytes,
        name: str,
        mime_type: str,
        now: Optional[datetime] = None,
    ) -> "FileRecord":
        """
        Factory method to create a new file record with a fresh id.

        Args:
            payload: File bytes
            name: Original filename
            mime_type: MIME type reported by the uploader
            now: Creation time (defaults to current UTC time)

        Returns:
            New FileRecord instance
        """
        payload = bytes(payload)
        return cls(
            file_id=str(uuid.uuid4()),
            name=name,
            mime_type=mime_type or "application/octet-stream",
            size_bytes=len(payload),
            payload=payload,
            created_at=now or datetime.now(timezone.utc),
        )

    def metadata(self) -> dict:
        """Serializable metadata without the payload."""
        return {
            "file_id": self.file_id,
            "name": self.name,
            "mime_type": self.mime_type,
            "size_bytes": self.size_bytes,
            "created_at": self.created_at.isoformat(),
        }

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization, payload base64 encoded."""
        data = self.metadata()
        data["payload"] = base64.b64encode(self.payload).decode("ascii")
        return data

    @classmethod
    def from_dict(cls, data: dict, payload: Optional[bytes] = None) -> "FileRecord":
        """
        Create FileRecord from dictionary.

        Args:
            data: Dictionary produced by to_dict() or metadata()
            payload: Raw bytes, used when data carries metadata only
        """
        if payload is None:
            payload = base64.b64decode(data["payload"])
        return cls(
            file_id=data["file_id"],
            name=data["name"],
            mime_type=data["mime_type"],
            size_bytes=data["size_bytes"],
            payload=payload,
            created_at=datetime.fromisoformat(data["created_at"]),
        )
