"""
File Storage Domain

Handles storage of uploaded file bytes and their metadata.
"""

from .entities import FileRecord
from .repositories import BlobStore

__all__ = [
    "BlobStore",
    "FileRecord",
]
