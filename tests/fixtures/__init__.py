"""
Test fixtures package.

Provides factory functions, a controllable clock and repository doubles.
"""

from .domain_fixtures import (
    FIXED_NOW,
    FixedClock,
    create_file_record,
    create_link_record,
)
from .mock_repositories import (
    CollidingLinkRepository,
    FailingDeleteBlobStore,
    FailingDeleteLinkRepository,
    RecordingLinkRepository,
)

__all__ = [
    "FIXED_NOW",
    "FixedClock",
    "create_file_record",
    "create_link_record",
    "CollidingLinkRepository",
    "FailingDeleteBlobStore",
    "FailingDeleteLinkRepository",
    "RecordingLinkRepository",
]
