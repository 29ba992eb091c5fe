"""
In-Memory Repositories

Process-local implementations of BlobStore and LinkRepository. Every
check-then-act runs under a lock, so they are safe for threaded callers
within one process. Used by tests and single-process deployments.
"""

import threading
from datetime import datetime
from typing import Callable, Dict, List, Optional

from ..domain.errors import StorageFullError
from ..domain.file_storage.entities import FileRecord
from ..domain.file_storage.repositories import BlobStore
from ..domain.link_management.entities import LinkRecord
from ..domain.link_management.repositories import LinkRepository


class InMemoryBlobStore(BlobStore):
    """
    Dict-backed BlobStore.

    Attributes:
        capacity_bytes: Optional total payload size in bytes; writes beyond it
            raise StorageFullError
        clock: Optional source of creation timestamps (defaults to UTC now)
    """

    def __init__(
        self,
        capacity_bytes: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.capacity_bytes = capacity_bytes
        self.clock = clock
        self._files: Dict[str, FileRecord] = {}
        self._used_bytes = 0
        self._lock = threading.Lock()

    def put(self, payload: bytes, name: str, mime_type: str) -> FileRecord:
        now = self.clock() if self.clock else None
        record = FileRecord.create(payload, name, mime_type, now=now)
        with self._lock:
            if (
                self.capacity_bytes is not None
                and self._used_bytes + record.size_bytes > self.capacity_bytes
            ):
                raise StorageFullError(
                    f"Storing {record.size_bytes} bytes would exceed capacity of "
                    f"{self.capacity_bytes} bytes"
                )
            self._files[record.file_id] = record
            self._used_bytes += record.size_bytes
        return record

    def get(self, file_id: str) -> Optional[FileRecord]:
        return self._files.get(file_id)

    def delete(self, file_id: str) -> None:
        with self._lock:
            record = self._files.pop(file_id, None)
            if record is not None:
                self._used_bytes -= record.size_bytes

    def list_ids(self) -> List[str]:
        with self._lock:
            return list(self._files)


class InMemoryLinkRepository(LinkRepository):
    """Dict-backed LinkRepository with a code index."""

    def __init__(self):
        self._links: Dict[str, LinkRecord] = {}
        self._codes: Dict[str, str] = {}
        self._lock = threading.Lock()

    def insert(self, link: LinkRecord) -> bool:
        with self._lock:
            if link.code in self._codes or link.link_id in self._links:
                return False
            self._links[link.link_id] = link
            self._codes[link.code] = link.link_id
            return True

    def get(self, link_id: str) -> Optional[LinkRecord]:
        with self._lock:
            return self._links.get(link_id)

    def find_by_code(self, code: str) -> Optional[LinkRecord]:
        with self._lock:
            link_id = self._codes.get(code)
            return self._links.get(link_id) if link_id else None

    def increment_downloads(self, link_id: str, now: datetime) -> Optional[LinkRecord]:
        with self._lock:
            link = self._links.get(link_id)
            if link is None or not link.is_valid(now):
                return None
            # Stored records are replaced, never mutated, so readers holding
            # an earlier copy keep a consistent snapshot
            updated = link.with_downloads(link.downloads + 1)
            self._links[link_id] = updated
            return updated

    def delete(self, link_id: str) -> bool:
        with self._lock:
            link = self._links.pop(link_id, None)
            if link is None:
                return False
            if self._codes.get(link.code) == link_id:
                del self._codes[link.code]
            return True

    def list_all(self) -> List[LinkRecord]:
        with self._lock:
            return list(self._links.values())
