"""
Link Management Repositories

Repository interface for link persistence.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from .entities import LinkRecord


class LinkRepository(ABC):
    """
    Abstract repository interface for link persistence.

    The two check-then-act operations, insert() and increment_downloads(),
    must be atomic with respect to concurrent callers of the same
    repository, including callers in other processes when the backing
    store is shared.
    """

    @abstractmethod
    def insert(self, link: LinkRecord) -> bool:
        """
        Atomically store a new link if its code is free.

        Args:
            link: LinkRecord to store

        Returns:
            True if stored, False if another stored link already holds
            link.code (nothing is written in that case)
        """
        pass  # pragma: no cover

    @abstractmethod
    def get(self, link_id: str) -> Optional[LinkRecord]:
        """
        Retrieve a link by id.

        Returns:
            LinkRecord if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def find_by_code(self, code: str) -> Optional[LinkRecord]:
        """
        Retrieve a link by exact short code match.

        Returns:
            LinkRecord if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def increment_downloads(self, link_id: str, now: datetime) -> Optional[LinkRecord]:
        """
        Atomically consume one download slot.

        The counter is incremented only if the link exists, `now` is not
        past its expiry and its download limit (if any) is not reached.

        Args:
            link_id: Link identifier
            now: Instant the download is granted at

        Returns:
            Updated LinkRecord if a slot was consumed, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, link_id: str) -> bool:
        """
        Delete a link and release its code.

        Returns:
            True if a link was deleted, False if it did not exist
        """
        pass  # pragma: no cover

    @abstractmethod
    def list_all(self) -> List[LinkRecord]:
        """Return every stored link, unordered."""
        pass  # pragma: no cover
