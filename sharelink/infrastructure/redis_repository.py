"""
Redis Repository Base Class

Key prefixing, JSON codec, Lua script registration and non-blocking key
iteration shared by the Redis-backed repositories. Connection and command
errors propagate to the caller unchanged.
"""

import json
import logging
from typing import Any, Dict, Iterator, Optional

import redis
from redis.commands.core import Script
from redis.exceptions import ConnectionError as RedisConnectionError

logger = logging.getLogger(__name__)


class RedisRepository:
    """Base Redis repository with prefixed keys and JSON values."""

    def __init__(self, redis_client: redis.Redis, key_prefix: str = ""):
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _make_key(self, key: str) -> str:
        """Create a prefixed key for Redis storage."""
        return f"{self.key_prefix}:{key}" if self.key_prefix else key

    def _strip_key(self, redis_key) -> str:
        """Inverse of _make_key for keys returned by Redis."""
        if isinstance(redis_key, bytes):
            redis_key = redis_key.decode("utf-8")
        if self.key_prefix:
            return redis_key[len(self.key_prefix) + 1:]
        return redis_key

    @staticmethod
    def decode_json(raw) -> Optional[Dict[str, Any]]:
        """Decode a stored JSON value, None for missing or corrupt data."""
        if raw is None:
            return None
        try:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            return json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Discarding undecodable JSON value: {e}")
            return None

    def register_script(self, lua_script: str) -> Script:
        """Register a Lua script; calls run it by SHA and reload it when evicted."""
        return self.redis.register_script(lua_script)

    def scan_keys(self, pattern: str, count: int = 100) -> Iterator[str]:
        """
        Iterate keys matching a pattern without blocking Redis.

        Yields:
            Matching keys without prefix
        """
        for redis_key in self.redis.scan_iter(match=self._make_key(pattern), count=count):
            yield self._strip_key(redis_key)


class RedisConnectionManager:
    """Manages Redis connection with connection pooling."""

    def __init__(self, host: str = 'localhost', port: int = 6379, db: int = 0,
                 password: Optional[str] = None, max_connections: int = 20,
                 decode_responses: bool = False):
        self.connection_pool = redis.ConnectionPool(
            host=host,
            port=port,
            db=db,
            password=password,
            max_connections=max_connections,
            decode_responses=decode_responses,
            retry_on_timeout=True,
            socket_keepalive=True,
        )
        self._client = None

    @property
    def client(self) -> redis.Redis:
        """Get Redis client instance with connection pooling."""
        if self._client is None:
            self._client = redis.Redis(connection_pool=self.connection_pool)
        return self._client

    def health_check(self) -> bool:
        """Check if Redis connection is healthy."""
        try:
            return bool(self.client.ping())
        except RedisConnectionError:
            return False
