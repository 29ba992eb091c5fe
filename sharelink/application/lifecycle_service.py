"""
Lifecycle Application Service

Coordinates the blob store and link registry: upload, resolve, password
verification, consumption and reaping. Holds no state of its own.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..domain.errors import DomainError, ErrorCategory
from ..domain.events import (
    DomainEvent,
    DownloadRecordedEvent,
    FileStoredEvent,
    LinkCreatedEvent,
    LinksReapedEvent,
    PasswordRejectedEvent,
)
from ..domain.file_storage import BlobStore
from ..domain.link_management import AccessGrantSigner, LinkOptions, LinkRegistry
from ..domain.link_management.services import utc_now
from .event_publisher import EventPublisher
from .resolution_result import ReapReport, ResolutionResult, UploadResult

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_DAYS = 7
DEFAULT_ORPHAN_GRACE = timedelta(minutes=5)


class LifecycleCoordinator:
    """
    Application service for the link/file lifecycle.

    Orchestrates uploads and downloads across the blob store and the link
    registry and enforces the cross-cutting policy: validity is re-checked
    before every grant, password-protected links require an access grant
    to release bytes, and expired links are reaped with the files they
    orphan.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        link_registry: LinkRegistry,
        event_publisher: Optional[EventPublisher] = None,
        grant_signer: Optional[AccessGrantSigner] = None,
        clock: Optional[Callable[[], datetime]] = None,
        orphan_grace: timedelta = DEFAULT_ORPHAN_GRACE,
    ):
        """
        Initialize LifecycleCoordinator.

        Args:
            blob_store: Storage for file bytes
            link_registry: LinkRegistry domain service
            event_publisher: Publisher for domain events (optional)
            grant_signer: Signer for post-password access grants
            clock: Callable returning the current UTC time (defaults to the registry clock)
            orphan_grace: Minimum age before a never-linked file is reaped
        """
        self.blob_store = blob_store
        self.link_registry = link_registry
        self.event_publisher = event_publisher
        self.grant_signer = grant_signer or AccessGrantSigner()
        self.clock = clock or getattr(link_registry, "clock", utc_now)
        self.orphan_grace = orphan_grace

    def upload(
        self,
        payload: bytes,
        name: str,
        mime_type: str,
        expiry_days: float = DEFAULT_EXPIRY_DAYS,
        password: Optional[str] = None,
        download_limit: Optional[int] = None,
    ) -> UploadResult:
        """
        Store a file and issue a link for it.

        Args:
            payload: File bytes
            name: Original filename
            mime_type: MIME type
            expiry_days: Link lifetime in days
            password: Optional password (empty string means none)
            download_limit: Optional maximum number of downloads

        Returns:
            UploadResult with the code and the password to show the uploader

        Raises:
            ValidationError: If download_limit <= 0 or expiry_days <= 0
            StorageFullError: If the blob store is out of space
            BlobStorageError: If the blob store failed the write
            CodeGenerationError: If no free code could be issued
        """
        options = LinkOptions.from_days(
            expiry_days, password=password, download_limit=download_limit
        )
        return self.upload_with_options(payload, name, mime_type, options)

    def upload_with_options(
        self, payload: bytes, name: str, mime_type: str, options: LinkOptions
    ) -> UploadResult:
        """Store a file and issue a link using prebuilt options."""
        file = self.blob_store.put(payload, name, mime_type)
        self._publish(
            FileStoredEvent(
                aggregate_id=file.file_id,
                occurred_at=self.clock(),
                name=file.name,
                size_bytes=file.size_bytes,
            )
        )

        try:
            link = self.link_registry.create(file.file_id, options)
        except Exception:
            logger.error(f"Link creation failed, removing stored file {file.file_id}")
            self.blob_store.delete(file.file_id)
            raise

        self._publish(
            LinkCreatedEvent(
                aggregate_id=link.link_id,
                occurred_at=link.created_at,
                file_id=file.file_id,
                code_length=len(link.code),
                expires_at=link.expires_at,
                download_limit=link.download_limit,
                password_protected=link.requires_password,
            )
        )

        return UploadResult(
            code=link.code,
            link_id=link.link_id,
            file_id=file.file_id,
            expires_at=link.expires_at,
            password=options.password,
        )

    def resolve(self, code: str) -> ResolutionResult:
        """
        Resolve a short code on link visit.

        Returns:
            NOT_FOUND, EXPIRED (with reason), PASSWORD_REQUIRED or READY
        """
        link = self.link_registry.find_by_code(code)
        if link is None:
            return ResolutionResult.not_found()

        reason = link.invalid_reason(self.clock())
        if reason is not None:
            return ResolutionResult.expired(link, reason)

        if link.requires_password:
            return ResolutionResult.password_required(link.link_id)

        file = self.blob_store.get(link.file_id)
        if file is None:
            logger.warning(f"Link {link.link_id} references missing file {link.file_id}")
            return ResolutionResult.not_found(link.link_id)

        return ResolutionResult.ready(file, link)

    def verify_password(self, link_id: str, candidate: Optional[str]) -> ResolutionResult:
        """
        Check a submitted password. Never consumes a download.

        Returns:
            READY with an access grant, WRONG_PASSWORD, or NOT_FOUND / EXPIRED
            when the link vanished or became invalid
        """
        link = self.link_registry.get(link_id)
        if link is None:
            return ResolutionResult.not_found(link_id)

        now = self.clock()
        reason = link.invalid_reason(now)
        if reason is not None:
            return ResolutionResult.expired(link, reason)

        if not self.link_registry.verify_password(link, candidate):
            self._publish(PasswordRejectedEvent(aggregate_id=link_id, occurred_at=now))
            return ResolutionResult.wrong_password(link_id)

        file = self.blob_store.get(link.file_id)
        if file is None:
            logger.warning(f"Link {link_id} references missing file {link.file_id}")
            return ResolutionResult.not_found(link_id)

        grant = self.grant_signer.issue(link_id, now) if link.requires_password else None
        return ResolutionResult.ready(file, link, access_grant=grant)

    def consume(self, link_id: str, access_grant: Optional[str] = None) -> ResolutionResult:
        """
        Record a download and release the file.

        Validity is evaluated again here: the link may have expired or run
        out of downloads since it was resolved. The slot is consumed only
        after the blob is known to exist.

        Args:
            link_id: Link identifier
            access_grant: Grant from verify_password, required for protected links

        Returns:
            READY with the file and updated link, GONE, PASSWORD_REQUIRED or NOT_FOUND
        """
        link = self.link_registry.get(link_id)
        if link is None:
            return ResolutionResult.not_found(link_id)

        now = self.clock()
        reason = link.invalid_reason(now)
        if reason is not None:
            return ResolutionResult.gone(link_id, reason)

        if link.requires_password and not self.grant_signer.validate(access_grant, link_id, now):
            return ResolutionResult.password_required(link_id)

        file = self.blob_store.get(link.file_id)
        if file is None:
            logger.warning(f"Link {link_id} references missing file {link.file_id}")
            return ResolutionResult.not_found(link_id)

        updated = self.link_registry.record_download(link_id)
        if updated is None:
            current = self.link_registry.get(link_id)
            reason = current.invalid_reason(self.clock()) if current else ErrorCategory.EXPIRED
            return ResolutionResult.gone(link_id, reason)

        self._publish(
            DownloadRecordedEvent(
                aggregate_id=link_id,
                occurred_at=now,
                downloads=updated.downloads,
                download_limit=updated.download_limit,
            )
        )
        return ResolutionResult.ready(file, updated)

    def reap(self, now: Optional[datetime] = None) -> ReapReport:
        """
        Remove expired links and the files they leave unreferenced.

        Only time-based expiry removes a link; links that ran out of
        downloads are kept until they expire. A file referenced by no
        remaining link is removed, except that files never referenced by
        any link are spared until they are older than the orphan grace
        period (their link may still be in the middle of being created).

        Args:
            now: Sweep instant (defaults to the current time)

        Returns:
            ReapReport with removal counts and per-item errors
        """
        now = now or self.clock()
        report = ReapReport()
        logger.info("Starting reap sweep")

        links = self.link_registry.list_all()
        referenced = {link.file_id for link in links}
        retained = set()

        for link in links:
            if not link.is_expired(now):
                retained.add(link.file_id)
                continue
            try:
                self.link_registry.delete(link.link_id)
                report.removed_links += 1
            except DomainError as e:
                # The link is still stored, so its file stays
                retained.add(link.file_id)
                report.errors.append(f"Error removing link {link.link_id}: {e}")

        grace_cutoff = now - self.orphan_grace
        for file_id in self.blob_store.list_ids():
            if file_id in retained:
                continue
            if file_id not in referenced:
                created_at = self.blob_store.get_created_at(file_id)
                if created_at is None or created_at > grace_cutoff:
                    continue
            try:
                self.blob_store.delete(file_id)
                report.removed_files += 1
            except DomainError as e:
                report.errors.append(f"Error removing file {file_id}: {e}")

        logger.info(
            f"Reap completed - Links: {report.removed_links}, "
            f"Files: {report.removed_files}, Errors: {len(report.errors)}"
        )
        if report.errors:
            logger.warning(f"Reap errors: {report.errors}")

        self._publish(
            LinksReapedEvent(
                aggregate_id=str(uuid.uuid4()),
                occurred_at=now,
                removed_links=report.removed_links,
                removed_files=report.removed_files,
            )
        )
        return report

    def _publish(self, event: DomainEvent) -> None:
        if self.event_publisher is not None:
            self.event_publisher.publish(event)
