"""Order Confirmation Job — PENDING -> CONFIRMED transition run by the scheduler.

Invariants:
    - Status write is unconditional (no read-modify-write); re-running is harmless
    - Listing cache invalidated only after the store write succeeded
    - Errors propagate to the scheduler's error boundary (logged there, never retried)
"""

import logging

from app.core.domain_types import OrderId, OrderStatus
from app.core.listing_filter import LISTING_CACHE_PREFIX
from app.core.repository_protocols import OrderStore
from app.infrastructure.listing_cache import ResilientCache

logger = logging.getLogger(__name__)


class OrderConfirmationJob:
    """Callable job: confirm one order and invalidate cached listings."""

    def __init__(self, store: OrderStore, cache: ResilientCache):
        self.store = store
        self.cache = cache

    async def __call__(self, order_id: OrderId) -> None:
        updated = await self.store.update_status(order_id, OrderStatus.CONFIRMED)
        if not updated:
            logger.warning(
                "Confirmation target does not exist", extra={"order_id": order_id},
            )
            return
        await self.cache.invalidate_prefix(LISTING_CACHE_PREFIX)
        logger.info("Order confirmed", extra={"order_id": order_id})
