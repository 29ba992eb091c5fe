"""
Redis Link Repository Implementation

Concrete Redis-based implementation of LinkRepository. Every
check-then-act runs as a Lua script, so the guarantees hold across
processes sharing the same Redis.

Key layout (relative to the repository prefix):
    link:<link_id>       immutable JSON document of the LinkRecord
    downloads:<link_id>  download counter (INCR)
    code:<code>          link_id holding the code
"""

import json
import logging
from datetime import datetime
from typing import List, Optional

from ..domain.link_management.entities import LinkRecord
from ..domain.link_management.repositories import LinkRepository
from .redis_repository import RedisRepository

logger = logging.getLogger(__name__)


INSERT_SCRIPT = """
local code_key = KEYS[1]
local link_key = KEYS[2]
local downloads_key = KEYS[3]

if redis.call('EXISTS', code_key) == 1 or redis.call('EXISTS', link_key) == 1 then
    return 0
end

redis.call('SET', code_key, ARGV[1])
redis.call('SET', link_key, ARGV[2])
redis.call('SET', downloads_key, 0)
return 1
"""

INCREMENT_SCRIPT = """
local link_key = KEYS[1]
local downloads_key = KEYS[2]
local now = tonumber(ARGV[1])

local data = redis.call('GET', link_key)
if not data then
    return nil
end

local link = cjson.decode(data)
if now > tonumber(link['expires_at_epoch']) then
    return nil
end

local downloads = tonumber(redis.call('GET', downloads_key) or '0')
local limit = link['download_limit']
if type(limit) == 'number' and downloads >= limit then
    return nil
end

return {redis.call('INCR', downloads_key), data}
"""

DELETE_SCRIPT = """
local link_key = KEYS[1]
local downloads_key = KEYS[2]
local code_key = KEYS[3]
local link_id = ARGV[1]

if redis.call('EXISTS', link_key) == 0 then
    return 0
end

if redis.call('GET', code_key) == link_id then
    redis.call('DEL', code_key)
end
redis.call('DEL', link_key, downloads_key)
return 1
"""


class RedisLinkRepository(LinkRepository):
    """
    Redis-based implementation of LinkRepository.

    The link document is written once; only the separate counter key
    changes afterwards, and only through INCREMENT_SCRIPT.
    """

    def __init__(self, redis_repository: RedisRepository):
        """
        Initialize with Redis repository.

        Args:
            redis_repository: RedisRepository instance from infrastructure layer
        """
        self.redis_repo = redis_repository
        self.link_prefix = "link"
        self.downloads_prefix = "downloads"
        self.code_prefix = "code"

        self._insert = redis_repository.register_script(INSERT_SCRIPT)
        self._increment = redis_repository.register_script(INCREMENT_SCRIPT)
        self._delete = redis_repository.register_script(DELETE_SCRIPT)

    def _link_key(self, link_id: str) -> str:
        return self.redis_repo._make_key(f"{self.link_prefix}:{link_id}")

    def _downloads_key(self, link_id: str) -> str:
        return self.redis_repo._make_key(f"{self.downloads_prefix}:{link_id}")

    def _code_key(self, code: str) -> str:
        return self.redis_repo._make_key(f"{self.code_prefix}:{code}")

    def _link_id(self, link_id) -> str:
        return link_id.decode("utf-8") if isinstance(link_id, bytes) else link_id

    def _build(self, raw_link, raw_downloads) -> Optional[LinkRecord]:
        data = RedisRepository.decode_json(raw_link)
        if data is None:
            return None
        try:
            link = LinkRecord.from_dict(data)
        except (KeyError, ValueError, TypeError) as e:
            logger.error(f"Error deserializing link document: {e}")
            return None
        return link.with_downloads(int(raw_downloads or 0))

    def insert(self, link: LinkRecord) -> bool:
        result = self._insert(
            keys=[
                self._code_key(link.code),
                self._link_key(link.link_id),
                self._downloads_key(link.link_id),
            ],
            args=[link.link_id, json.dumps(link.to_dict())],
        )
        return result == 1

    def get(self, link_id: str) -> Optional[LinkRecord]:
        raw_link, raw_downloads = self.redis_repo.redis.mget(
            self._link_key(link_id), self._downloads_key(link_id)
        )
        return self._build(raw_link, raw_downloads)

    def find_by_code(self, code: str) -> Optional[LinkRecord]:
        link_id = self.redis_repo.redis.get(self._code_key(code))
        if link_id is None:
            return None
        return self.get(self._link_id(link_id))

    def increment_downloads(self, link_id: str, now: datetime) -> Optional[LinkRecord]:
        result = self._increment(
            keys=[self._link_key(link_id), self._downloads_key(link_id)],
            args=[repr(now.timestamp())],
        )
        if result is None:
            return None

        downloads, raw_link = result
        return self._build(raw_link, downloads)

    def delete(self, link_id: str) -> bool:
        link = self.get(link_id)
        if link is None:
            return False

        result = self._delete(
            keys=[
                self._link_key(link_id),
                self._downloads_key(link_id),
                self._code_key(link.code),
            ],
            args=[link_id],
        )
        return result == 1

    def list_all(self) -> List[LinkRecord]:
        """
        Load every link using SCAN plus pipelined reads.

        Links deleted between the scan and the read are skipped.
        """
        link_ids = [
            key[len(self.link_prefix) + 1:]
            for key in self.redis_repo.scan_keys(f"{self.link_prefix}:*")
        ]
        if not link_ids:
            return []

        pipeline = self.redis_repo.redis.pipeline(transaction=False)
        for link_id in link_ids:
            pipeline.mget(self._link_key(link_id), self._downloads_key(link_id))
        results = pipeline.execute()

        links = []
        for raw_link, raw_downloads in results:
            link = self._build(raw_link, raw_downloads)
            if link is not None:
                links.append(link)
        return links
