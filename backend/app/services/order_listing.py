"""Order Listing — read-through cached, paginated, searchable order listing.

Invariants:
    - Cache consulted first; a hit returns the stored payload without touching the store
    - On miss: count and page queried independently, payload cached with TTL
    - Raises ValidationError only for page/limit < 1; empty results are a normal payload
    - An omitted limit resolves to the configured default before validation and keying

Design Decisions:
    - Payload is plain JSON-compatible data: the value returned on a miss equals
      what a later hit decodes, so repeated calls serialize identically
"""

import logging

from app.core.listing_filter import build_listing_params
from app.core.repository_protocols import OrderStore
from app.infrastructure.listing_cache import ResilientCache

logger = logging.getLogger(__name__)


class OrderListingService:
    """Serves {total, page, limit, data} listings through the cache."""

    def __init__(
        self,
        store: OrderStore,
        cache: ResilientCache,
        ttl_seconds: int = 30,
        default_limit: int = 10,
    ):
        self.store = store
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.default_limit = default_limit

    async def list_orders(
        self, page: int = 1, limit: int | None = None, search: str | None = "",
    ) -> dict:
        if limit is None:
            limit = self.default_limit
        params = build_listing_params(page, limit, search)
        key = params.cache_key

        cached = await self.cache.get(key)
        if cached is not None:
            logger.debug("Listing cache hit", extra={"cache_key": key})
            return cached

        listing_filter = params.filter
        total = await self.store.count_orders(listing_filter)
        data = await self.store.list_orders(
            listing_filter, params.limit, params.offset,
        )
        payload = {
            "total": total,
            "page": params.page,
            "limit": params.limit,
            "data": data,
        }
        await self.cache.set(key, payload, self.ttl_seconds)
        return payload
