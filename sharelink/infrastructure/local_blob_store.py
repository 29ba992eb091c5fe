"""
Local Blob Store Implementation

Durable BlobStore on the local filesystem. Each record lives in its own
directory under the base path:

    <base>/<file_id>/payload.bin
    <base>/<file_id>/meta.json

meta.json is written last through an atomic rename, so a directory without
it is an incomplete write: invisible to get() but still listed so the
reaper can clear it.
"""

import errno
import json
import logging
import os
import re
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ..domain.errors import BlobStorageError, StorageFullError
from ..domain.file_storage.entities import FileRecord
from ..domain.file_storage.repositories import BlobStore

logger = logging.getLogger(__name__)

PAYLOAD_NAME = "payload.bin"
META_NAME = "meta.json"
CHUNK_SIZE = 8192

_FILE_ID_PATTERN = re.compile(r"^[0-9a-fA-F-]{1,64}$")
_FULL_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


class LocalFileBlobStore(BlobStore):
    """
    Local filesystem implementation of BlobStore.

    Thread Safety:
        Every put() writes into a fresh directory, and completed records are
        never modified, so concurrent operations need no locking.

    Attributes:
        base_path: Base directory for blob storage
    """

    def __init__(self, base_path: str = "/tmp/sharelink"):
        """
        Initialize the local blob store.

        Args:
            base_path: Base directory for blob storage (default: /tmp/sharelink)

        Raises:
            BlobStorageError: If the base directory cannot be created
        """
        self.base_path = Path(base_path)
        self._ensure_base_directory()

    def _ensure_base_directory(self) -> None:
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BlobStorageError(
                f"Failed to create storage directory: {self.base_path}", e
            ) from e

    def put(self, payload: bytes, name: str, mime_type: str) -> FileRecord:
        """
        Write payload and metadata for a new record.

        Raises:
            StorageFullError: On ENOSPC / EDQUOT
            BlobStorageError: On any other filesystem error
        """
        record = FileRecord.create(payload, name, mime_type)
        record_dir = self.base_path / record.file_id

        try:
            record_dir.mkdir(parents=True, exist_ok=False)
            self._write_atomic(record_dir / PAYLOAD_NAME, record.payload)
            meta = json.dumps(record.metadata()).encode("utf-8")
            self._write_atomic(record_dir / META_NAME, meta)
        except OSError as e:
            shutil.rmtree(record_dir, ignore_errors=True)
            if e.errno in _FULL_ERRNOS:
                raise StorageFullError(f"No space left to store {record.name}", e) from e
            raise BlobStorageError(f"Failed to store {record.name}: {e}", e) from e

        return record

    def get(self, file_id: str) -> Optional[FileRecord]:
        """
        Read a record. Missing or incomplete records return None.

        Raises:
            BlobStorageError: If a complete record cannot be read
        """
        record_dir = self._record_dir(file_id)
        if record_dir is None:
            return None

        meta = self._read_meta(record_dir)
        if meta is None:
            return None

        try:
            payload = (record_dir / PAYLOAD_NAME).read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise BlobStorageError(f"Failed to read payload of {file_id}: {e}", e) from e

        return FileRecord.from_dict(meta, payload=payload)

    def delete(self, file_id: str) -> None:
        """
        Remove a record directory. Idempotent.

        Raises:
            BlobStorageError: If an existing record cannot be removed
        """
        record_dir = self._record_dir(file_id)
        if record_dir is None or not record_dir.exists():
            return
        try:
            shutil.rmtree(record_dir)
        except FileNotFoundError:
            return
        except OSError as e:
            raise BlobStorageError(f"Failed to delete {file_id}: {e}", e) from e

    def list_ids(self) -> List[str]:
        try:
            return [
                entry.name
                for entry in self.base_path.iterdir()
                if entry.is_dir() and _FILE_ID_PATTERN.match(entry.name)
            ]
        except FileNotFoundError:
            return []
        except OSError as e:
            raise BlobStorageError(f"Failed to list {self.base_path}: {e}", e) from e

    def get_created_at(self, file_id: str) -> Optional[datetime]:
        """
        Creation time from metadata without reading the payload.

        Incomplete records report their directory modification time.
        """
        record_dir = self._record_dir(file_id)
        if record_dir is None:
            return None

        meta = self._read_meta(record_dir)
        if meta is not None:
            return datetime.fromisoformat(meta["created_at"])

        try:
            return datetime.fromtimestamp(record_dir.stat().st_mtime, tz=timezone.utc)
        except OSError:
            return None

    def _record_dir(self, file_id: str) -> Optional[Path]:
        # Ids become path components; reject anything that is not an id
        if not file_id or not _FILE_ID_PATTERN.match(file_id):
            return None
        return self.base_path / file_id

    @staticmethod
    def _read_meta(record_dir: Path) -> Optional[dict]:
        try:
            with open(record_dir / META_NAME, "rb") as f:
                return json.loads(f.read().decode("utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable metadata in {record_dir}: {e}")
            return None

    @staticmethod
    def _write_atomic(path: Path, data: bytes) -> None:
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        with open(tmp_path, "wb") as f:
            for start in range(0, len(data), CHUNK_SIZE):
                f.write(data[start:start + CHUNK_SIZE])
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
