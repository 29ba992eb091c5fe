"""
Blob Store Interface

Abstract interface for uploaded file storage. The lifecycle coordinator
depends only on this contract, never on a concrete storage medium.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from .entities import FileRecord


class BlobStore(ABC):
    """
    Id-keyed storage for file bytes plus metadata.

    Contract Guarantees:
    - put() always assigns a fresh id
    - get() returns None for unknown ids (no exceptions)
    - delete() is idempotent: deleting an unknown id is a no-op

    Implementation Requirements:
    - put() raises StorageFullError when the medium has no space left
      and BlobStorageError for any other write failure
    - Implementations must be safe for concurrent use
    """

    @abstractmethod
    def put(self, payload: bytes, name: str, mime_type: str) -> FileRecord:
        """
        Store bytes and return the full record.

        Args:
            payload: File bytes
            name: Original filename
            mime_type: MIME type

        Returns:
            The stored FileRecord

        Raises:
            StorageFullError: If the medium rejected the write for lack of space
            BlobStorageError: If the medium rejected the write for any other reason
        """
        pass  # pragma: no cover

    @abstractmethod
    def get(self, file_id: str) -> Optional[FileRecord]:
        """
        Retrieve a record by exact id.

        Returns:
            FileRecord if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, file_id: str) -> None:
        """Remove a record. Unknown ids are ignored."""
        pass  # pragma: no cover

    @abstractmethod
    def list_ids(self) -> List[str]:
        """Return the ids of every stored record, unordered."""
        pass  # pragma: no cover

    def exists(self, file_id: str) -> bool:
        """Check whether a record is stored under file_id."""
        return self.get(file_id) is not None

    def get_created_at(self, file_id: str) -> Optional[datetime]:
        """
        Creation time of a record, None if absent.

        Implementations that keep metadata apart from the payload should
        override this to avoid loading the bytes.
        """
        record = self.get(file_id)
        return record.created_at if record else None
