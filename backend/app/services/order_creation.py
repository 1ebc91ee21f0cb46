"""Order Creation — validate, check references, persist atomically, then fan out.

Invariants:
    - ValidationError and NotFoundError are raised before any write
    - Store transaction is all-or-nothing (TransactionError on failure, nothing persisted)
    - Listing cache invalidated and confirmation scheduled ONLY after a successful commit
    - Returned order has the same shape as a listing row (status PENDING)

Design Decisions:
    - Reference check precedes the write: gives a precise 404 naming the bad ids
      instead of a generic FK violation from the transaction
"""

import logging
from collections.abc import Mapping
from typing import Any

from app.core.domain_types import OrderId
from app.core.listing_filter import LISTING_CACHE_PREFIX
from app.core.order_input import parse_new_order
from app.core.repository_protocols import OrderStore
from app.infrastructure.confirmation_scheduler import ConfirmationScheduler
from app.infrastructure.listing_cache import ResilientCache

logger = logging.getLogger(__name__)


class OrderCreationService:
    """Creates orders and triggers cache invalidation plus confirmation."""

    def __init__(
        self,
        store: OrderStore,
        cache: ResilientCache,
        scheduler: ConfirmationScheduler,
    ):
        self.store = store
        self.cache = cache
        self.scheduler = scheduler

    async def create_order(self, payload: Mapping[str, Any]) -> dict:
        new_order = parse_new_order(payload)

        missing = await self.store.find_missing_references(
            new_order.user_id, new_order.product_ids,
        )
        missing.raise_if_any()

        order = await self.store.create_order(new_order)
        order_id = OrderId(order["id"])
        logger.info(
            "Order created",
            extra={
                "order_id": order_id,
                "user_id": new_order.user_id,
                "item_count": len(new_order.items),
            },
        )

        await self.cache.invalidate_prefix(LISTING_CACHE_PREFIX)
        self.scheduler.schedule(order_id)
        return order
