"""OrderConfirmationJob and the end-to-end PENDING -> CONFIRMED transition."""

from unittest.mock import AsyncMock

import pytest

from app.core.domain_types import OrderStatus
from app.core.errors import DatabaseError
from app.services.order_confirmation import OrderConfirmationJob
from app.services.order_services import build_order_services


async def test_job_writes_confirmed_then_invalidates(cache, cache_backend):
    await cache.set("orders:list:p=1:l=10:q=", {}, 30)
    store = AsyncMock()
    store.update_status.return_value = True

    await OrderConfirmationJob(store, cache)(5)

    store.update_status.assert_awaited_once_with(5, OrderStatus.CONFIRMED)
    assert cache_backend.entries == {}


async def test_missing_order_leaves_cache_alone(cache, cache_backend):
    await cache.set("orders:list:p=1:l=10:q=", {}, 30)
    store = AsyncMock()
    store.update_status.return_value = False

    await OrderConfirmationJob(store, cache)(5)

    assert "orders:list:p=1:l=10:q=" in cache_backend.entries


async def test_store_failure_propagates_to_scheduler_boundary(cache):
    store = AsyncMock()
    store.update_status.side_effect = DatabaseError("down", "execute")

    with pytest.raises(DatabaseError):
        await OrderConfirmationJob(store, cache)(5)


async def test_order_becomes_confirmed_after_delay(store, cache):
    services = build_order_services(
        store, cache, confirmation_delay_seconds=0,
    )
    created = await services.creation.create_order({
        "user_id": 1, "items": [{"product_id": 1, "quantity": 2}],
    })
    assert created["status"] == "PENDING"

    await services.scheduler.drain()

    listing = await services.listing.list_orders(1, 10, "")
    assert listing["data"][0]["id"] == created["id"]
    assert listing["data"][0]["status"] == "CONFIRMED"


async def test_confirmation_invalidates_cached_pending_listing(store, cache):
    services = build_order_services(
        store, cache, confirmation_delay_seconds=0.3,
    )
    await services.creation.create_order({
        "user_id": 1, "items": [{"product_id": 1, "quantity": 1}],
    })
    pending = await services.listing.list_orders(1, 10, "")
    assert pending["data"][0]["status"] == "PENDING"

    await services.scheduler.drain()

    confirmed = await services.listing.list_orders(1, 10, "")
    assert confirmed["data"][0]["status"] == "CONFIRMED"
