from datetime import timedelta

from sharelink.domain.errors import ErrorCategory
from sharelink.domain.file_storage.entities import FileRecord
from sharelink.domain.link_management.entities import LinkRecord
from tests.fixtures import FIXED_NOW, create_file_record, create_link_record


class TestFileRecord:
    def test_create_assigns_id_and_size(self):
        record = FileRecord.create(b"abc", "a.txt", "text/plain", now=FIXED_NOW)
        assert record.file_id
        assert record.size_bytes == 3
        assert record.created_at == FIXED_NOW

    def test_create_assigns_fresh_ids(self):
        ids = {FileRecord.create(b"x", "x", "text/plain").file_id for _ in range(20)}
        assert len(ids) == 20

    def test_missing_mime_type_defaults_to_octet_stream(self):
        assert FileRecord.create(b"x", "x.bin", "").mime_type == "application/octet-stream"

    def test_empty_payload_allowed(self):
        assert FileRecord.create(b"", "empty", "text/plain").size_bytes == 0

    def test_metadata_excludes_payload(self):
        meta = create_file_record().metadata()
        assert "payload" not in meta
        assert meta["name"] == "hello.txt"

    def test_dict_round_trip_preserves_payload(self):
        record = create_file_record(payload=bytes(range(256)))
        assert FileRecord.from_dict(record.to_dict()) == record


class TestLinkRecordCreate:
    def test_create_starts_with_zero_downloads(self):
        link = LinkRecord.create("file-1", "abCD", timedelta(days=1), now=FIXED_NOW)
        assert link.downloads == 0
        assert link.created_at == FIXED_NOW
        assert link.expires_at == FIXED_NOW + timedelta(days=1)
        assert not link.requires_password

    def test_password_hash_marks_link_protected(self):
        link = LinkRecord.create("f", "abCD", timedelta(days=1), password_hash="x", now=FIXED_NOW)
        assert link.requires_password


class TestLinkRecordValidity:
    def test_valid_at_exact_expiry(self):
        link = create_link_record()
        assert link.is_valid(link.expires_at)

    def test_invalid_one_millisecond_after_expiry(self):
        link = create_link_record()
        now = link.expires_at + timedelta(milliseconds=1)
        assert not link.is_valid(now)
        assert link.invalid_reason(now) == ErrorCategory.EXPIRED

    def test_unlimited_link_never_exhausted(self):
        link = create_link_record(downloads=10_000)
        assert link.is_valid(FIXED_NOW)
        assert link.remaining_downloads() is None

    def test_exhausted_when_downloads_reach_limit(self):
        link = create_link_record(downloads=2, download_limit=2)
        assert not link.is_valid(FIXED_NOW)
        assert link.invalid_reason(FIXED_NOW) == ErrorCategory.DOWNLOAD_LIMIT_REACHED
        assert link.remaining_downloads() == 0

    def test_valid_below_limit(self):
        link = create_link_record(downloads=1, download_limit=2)
        assert link.is_valid(FIXED_NOW)
        assert link.invalid_reason(FIXED_NOW) is None
        assert link.remaining_downloads() == 1

    def test_expiry_reported_before_exhaustion(self):
        link = create_link_record(downloads=1, download_limit=1)
        later = link.expires_at + timedelta(seconds=1)
        assert link.invalid_reason(later) == ErrorCategory.EXPIRED

    def test_with_downloads_returns_copy(self):
        link = create_link_record()
        updated = link.with_downloads(3)
        assert updated.downloads == 3
        assert link.downloads == 0
        assert updated.link_id == link.link_id


class TestLinkRecordSerialization:
    def test_round_trip(self):
        link = create_link_record(password_hash="pbkdf2:sha256:1$s$h", download_limit=5, downloads=2)
        assert LinkRecord.from_dict(link.to_dict()) == link

    def test_to_dict_carries_epoch_expiry(self):
        link = create_link_record()
        assert link.to_dict()["expires_at_epoch"] == link.expires_at.timestamp()
