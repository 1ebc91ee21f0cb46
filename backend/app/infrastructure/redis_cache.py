"""Redis Cache Backend — bytes key-value substrate with TTL and prefix scan.

Invariants:
    - Values stored with SET ... EX: Redis never serves an expired entry
    - Prefix lookup uses incremental SCAN MATCH (never blocking KEYS)
    - Bulk delete is a single DEL, atomic for the keys found
    - Every redis-py failure is mapped to CacheUnavailableError

Design Decisions:
    - redis.asyncio client with short socket timeouts: a slow cache must not
      stall a request longer than a store round-trip would
    - Glob metacharacters in the prefix are escaped so a prefix matches literally
"""

import logging
from collections.abc import Iterable

from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.core.errors import CacheUnavailableError

logger = logging.getLogger(__name__)

_GLOB_SPECIALS = "\\*?[]"
_SCAN_BATCH = 500


def _escape_glob(prefix: str) -> str:
    return "".join(f"\\{c}" if c in _GLOB_SPECIALS else c for c in prefix)


class RedisCacheBackend:
    """CacheBackend implementation over redis-py's asyncio client."""

    def __init__(self, client: Redis):
        self._client = client

    @classmethod
    def from_url(
        cls, url: str, socket_timeout: float = 0.5,
    ) -> "RedisCacheBackend":
        client = Redis.from_url(
            url,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client)

    async def get(self, key: str) -> bytes | None:
        try:
            return await self._client.get(key)
        except RedisError as e:
            raise CacheUnavailableError(str(e), "get") from e

    async def keys_with_prefix(self, prefix: str) -> set[str]:
        pattern = f"{_escape_glob(prefix)}*"
        try:
            return {
                k.decode() if isinstance(k, bytes) else k
                async for k in self._client.scan_iter(
                    match=pattern, count=_SCAN_BATCH,
                )
            }
        except RedisError as e:
            raise CacheUnavailableError(str(e), "scan") from e

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            raise CacheUnavailableError(str(e), "set") from e

    async def delete_many(self, keys: Iterable[str]) -> int:
        keys = list(keys)
        if not keys:
            return 0
        try:
            return await self._client.delete(*keys)
        except RedisError as e:
            raise CacheUnavailableError(str(e), "delete") from e

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def close(self) -> None:
        await self._client.aclose()
