"""
Integration tests for RedisLinkRepository against a live Redis server.
"""

import threading
from datetime import timedelta

import pytest

from sharelink.application.lifecycle_service import LifecycleCoordinator
from sharelink.application.resolution_result import ResolutionStatus
from sharelink.domain.link_management.passwords import PasswordHasher
from sharelink.domain.link_management.services import LinkRegistry
from sharelink.infrastructure.local_blob_store import LocalFileBlobStore
from tests.fixtures import FixedClock, create_link_record


@pytest.fixture
def repo(redis_link_repository):
    return redis_link_repository


class TestRedisLinkRepository:
    def test_insert_and_get(self, repo):
        link = create_link_record(download_limit=3, password_hash="pbkdf2:sha256:1$s$h")
        assert repo.insert(link)
        assert repo.get(link.link_id) == link
        assert repo.find_by_code(link.code) == link

    def test_keys_are_prefixed(self, repo, redis_client):
        link = create_link_record(code="wxyz")
        repo.insert(link)
        assert redis_client.get("test:code:wxyz") == link.link_id.encode()
        assert redis_client.exists(f"test:link:{link.link_id}")

    def test_insert_rejects_taken_code(self, repo):
        assert repo.insert(create_link_record(code="abcd"))
        assert not repo.insert(create_link_record(code="abcd"))
        assert len(repo.list_all()) == 1

    def test_unknown_lookups(self, repo):
        assert repo.get("missing") is None
        assert repo.find_by_code("none") is None
        assert repo.increment_downloads("missing", create_link_record().created_at) is None
        assert not repo.delete("missing")

    def test_increment_until_limit(self, repo):
        link = create_link_record(download_limit=2)
        repo.insert(link)
        now = link.created_at

        assert repo.increment_downloads(link.link_id, now).downloads == 1
        assert repo.increment_downloads(link.link_id, now).downloads == 2
        assert repo.increment_downloads(link.link_id, now) is None
        assert repo.get(link.link_id).downloads == 2

    def test_increment_unlimited(self, repo):
        link = create_link_record()
        repo.insert(link)
        for expected in range(1, 4):
            assert repo.increment_downloads(link.link_id, link.created_at).downloads == expected

    def test_increment_respects_expiry_boundary(self, repo):
        link = create_link_record()
        repo.insert(link)

        assert repo.increment_downloads(link.link_id, link.expires_at) is not None
        later = link.expires_at + timedelta(milliseconds=1)
        assert repo.increment_downloads(link.link_id, later) is None

    def test_delete_frees_code(self, repo, redis_client):
        link = create_link_record(code="abcd")
        repo.insert(link)

        assert repo.delete(link.link_id)

        assert repo.get(link.link_id) is None
        assert repo.find_by_code("abcd") is None
        assert not redis_client.exists(f"test:downloads:{link.link_id}")
        assert repo.insert(create_link_record(code="abcd"))

    def test_list_all(self, repo):
        links = [create_link_record(code=f"c{i}") for i in range(5)]
        for link in links:
            repo.insert(link)
        repo.increment_downloads(links[0].link_id, links[0].created_at)

        loaded = {link.link_id: link for link in repo.list_all()}

        assert set(loaded) == {link.link_id for link in links}
        assert loaded[links[0].link_id].downloads == 1

    def test_corrupt_document_skipped(self, repo, redis_client):
        link = create_link_record(code="good")
        repo.insert(link)
        redis_client.set("test:link:broken", b"{not json")

        assert [item.link_id for item in repo.list_all()] == [link.link_id]

    def test_concurrent_increments_respect_limit(self, repo):
        link = create_link_record(download_limit=5)
        repo.insert(link)
        results = []
        lock = threading.Lock()
        barrier = threading.Barrier(20)

        def worker():
            barrier.wait()
            result = repo.increment_downloads(link.link_id, link.created_at)
            with lock:
                results.append(result)

        threads = [threading.Thread(target=worker) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        granted = [r for r in results if r is not None]
        assert sorted(r.downloads for r in granted) == [1, 2, 3, 4, 5]
        assert repo.get(link.link_id).downloads == 5


class TestLifecycleOverRedis:
    @pytest.fixture
    def coordinator(self, repo, tmp_path):
        clock = FixedClock()
        registry = LinkRegistry(repo, password_hasher=PasswordHasher(iterations=1_000), clock=clock)
        return LifecycleCoordinator(LocalFileBlobStore(str(tmp_path)), registry, clock=clock)

    def test_upload_resolve_consume(self, coordinator):
        upload = coordinator.upload(b"bytes", "f.bin", "application/octet-stream", download_limit=1)

        assert coordinator.resolve(upload.code).is_ready
        assert coordinator.consume(upload.link_id).file.payload == b"bytes"
        assert coordinator.consume(upload.link_id).status is ResolutionStatus.GONE

    def test_password_flow(self, coordinator):
        upload = coordinator.upload(b"bytes", "f.bin", "application/octet-stream", password="pw")

        assert coordinator.verify_password(upload.link_id, "nope").status is ResolutionStatus.WRONG_PASSWORD
        grant = coordinator.verify_password(upload.link_id, "pw").access_grant
        assert coordinator.consume(upload.link_id, grant).is_ready

    def test_reap_removes_expired(self, coordinator):
        upload = coordinator.upload(b"bytes", "f.bin", "application/octet-stream", expiry_days=1)
        coordinator.clock.advance(days=2)

        report = coordinator.reap()

        assert (report.removed_links, report.removed_files) == (1, 1)
        assert coordinator.resolve(upload.code).status is ResolutionStatus.NOT_FOUND
