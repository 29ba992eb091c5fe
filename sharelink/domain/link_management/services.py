"""
Link Management Services

Domain service for issuing, validating and consuming links.
"""

import logging
from datetime import datetime, timezone
from random import Random
from typing import Callable, List, Optional

from ..errors import CodeGenerationError
from .entities import LinkRecord
from .passwords import PasswordHasher
from .repositories import LinkRepository
from .value_objects import LinkOptions, ShortCode

logger = logging.getLogger(__name__)

DEFAULT_MAX_CODE_ATTEMPTS = 10


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LinkRegistry:
    """
    Domain service owning link records.

    Generates collision-free short codes, evaluates validity and records
    downloads through the repository's atomic increment.
    """

    def __init__(
        self,
        link_repository: LinkRepository,
        password_hasher: Optional[PasswordHasher] = None,
        clock: Callable[[], datetime] = utc_now,
        rng: Optional[Random] = None,
        max_code_attempts: int = DEFAULT_MAX_CODE_ATTEMPTS,
    ):
        """
        Initialize LinkRegistry with repository.

        Args:
            link_repository: Repository for link persistence
            password_hasher: Hasher for link passwords
            clock: Callable returning the current UTC time
            rng: Random source for code generation (defaults to the OS CSPRNG)
            max_code_attempts: Codes tried before giving up on a collision streak
        """
        self.link_repo = link_repository
        self.password_hasher = password_hasher or PasswordHasher()
        self.clock = clock
        self.rng = rng
        self.max_code_attempts = max_code_attempts

    def create(self, file_id: str, options: LinkOptions) -> LinkRecord:
        """
        Issue a new link for a stored file.

        A fresh code is drawn for every attempt; the repository's atomic
        insert rejects codes already held by another link.

        Args:
            file_id: Id of the file the link grants access to
            options: Validated link options

        Returns:
            The stored LinkRecord

        Raises:
            CodeGenerationError: If every attempt collided
        """
        password_hash = None
        if options.password is not None:
            password_hash = self.password_hasher.hash(options.password)

        for attempt in range(1, self.max_code_attempts + 1):
            code = ShortCode.generate(options.expiry, self.rng)
            link = LinkRecord.create(
                file_id=file_id,
                code=str(code),
                expiry=options.expiry,
                password_hash=password_hash,
                download_limit=options.download_limit,
                now=self.clock(),
            )
            if self.link_repo.insert(link):
                return link
            logger.debug(f"Short code collision on attempt {attempt} for file {file_id}")

        raise CodeGenerationError(
            f"No free short code after {self.max_code_attempts} attempts"
        )

    def get(self, link_id: str) -> Optional[LinkRecord]:
        return self.link_repo.get(link_id)

    def find_by_code(self, code: str) -> Optional[LinkRecord]:
        """Look up a link by exact code."""
        if not code:
            return None
        return self.link_repo.find_by_code(code)

    def record_download(self, link_id: str) -> Optional[LinkRecord]:
        """
        Consume one download slot.

        Returns:
            Updated LinkRecord, or None when the link is missing, expired
            or out of downloads
        """
        return self.link_repo.increment_downloads(link_id, self.clock())

    def verify_password(self, link: LinkRecord, candidate: Optional[str]) -> bool:
        """Check a candidate password; open links always pass."""
        if not link.requires_password:
            return True
        return self.password_hasher.verify(candidate, link.password_hash)

    @staticmethod
    def is_valid(link: LinkRecord, now: datetime) -> bool:
        """
        Pure validity predicate.

        True iff now <= expires_at and the download limit is unset or not
        yet reached.
        """
        return link.is_valid(now)

    def delete(self, link_id: str) -> None:
        self.link_repo.delete(link_id)

    def list_all(self) -> List[LinkRecord]:
        return self.link_repo.list_all()
