"""Resilient Cache — JSON read-through cache layer that never fails a request.

Invariants:
    - get() returns the decoded payload or None (absent, expired, unavailable, corrupt)
    - set() overwrites unconditionally with a fresh TTL
    - invalidate_prefix() removes every key under the prefix; returns count removed
    - Substrate failures are logged at WARNING and degrade to miss/no-op, never raised

Design Decisions:
    - Wrapper over raw backend: isolates degradation policy from services
      (ADR: single responsibility, same shape as the store adapter)
    - Compact, key-sorted JSON: equal payloads serialize to equal bytes
"""

import json
import logging
from typing import Any

from app.core.errors import CacheUnavailableError
from app.core.repository_protocols import CacheBackend

logger = logging.getLogger(__name__)


def encode_payload(value: Any) -> bytes:
    return json.dumps(
        value, separators=(",", ":"), sort_keys=True, ensure_ascii=False,
    ).encode("utf-8")


class ResilientCache:
    """Cache layer over a CacheBackend with miss-on-failure semantics."""

    def __init__(self, backend: CacheBackend):
        self.backend = backend

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self.backend.get(key)
        except CacheUnavailableError as e:
            logger.warning(
                f"Cache get degraded to miss: {e.message}",
                extra={"cache_key": key, "error_code": e.code},
            )
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(
                f"Discarding undecodable cache entry: {e}",
                extra={"cache_key": key},
            )
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            await self.backend.set(key, encode_payload(value), ttl_seconds)
        except CacheUnavailableError as e:
            logger.warning(
                f"Cache set skipped: {e.message}",
                extra={"cache_key": key, "error_code": e.code},
            )

    async def invalidate_prefix(self, prefix: str) -> int:
        try:
            keys = await self.backend.keys_with_prefix(prefix)
            removed = await self.backend.delete_many(keys)
        except CacheUnavailableError as e:
            logger.warning(
                f"Cache invalidation skipped: {e.message}",
                extra={"prefix": prefix, "error_code": e.code},
            )
            return 0
        logger.debug(
            f"Invalidated {removed} cache entries", extra={"prefix": prefix},
        )
        return removed
