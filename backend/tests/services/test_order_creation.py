"""OrderCreationService — ordering of checks, writes and fan-out with a mocked store.

Invariants:
    - Validation and reference checks happen before create_order
    - Invalidation and scheduling happen only after a successful write
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.errors import NotFoundError, TransactionError, ValidationError
from app.core.order_input import MissingReferences
from app.services.order_creation import OrderCreationService

_CREATED = {
    "id": 11,
    "status": "PENDING",
    "created_at": "2026-01-01T00:00:00+00:00",
    "user": {"id": 1, "email": "a@x.com", "name": "Alice"},
    "items": [],
}


def _service(cache, missing=None, create_side_effect=None):
    store = AsyncMock()
    store.find_missing_references.return_value = missing or MissingReferences()
    store.create_order.return_value = _CREATED
    if create_side_effect is not None:
        store.create_order.side_effect = create_side_effect
    scheduler = MagicMock()
    return OrderCreationService(store, cache, scheduler), store, scheduler


async def test_success_invalidates_listings_and_schedules(cache, cache_backend):
    await cache.set("orders:list:p=1:l=10:q=", {"stale": True}, 30)
    service, store, scheduler = _service(cache)

    order = await service.create_order({
        "user_id": 1, "items": [{"product_id": 1, "quantity": 2}],
    })

    assert order == _CREATED
    assert cache_backend.entries == {}
    scheduler.schedule.assert_called_once_with(11)
    new_order = store.create_order.await_args.args[0]
    assert new_order.user_id == 1
    assert new_order.items[0].quantity == 2


async def test_validation_error_touches_nothing(cache):
    service, store, scheduler = _service(cache)

    with pytest.raises(ValidationError):
        await service.create_order({"user_id": 1, "items": []})

    store.find_missing_references.assert_not_awaited()
    store.create_order.assert_not_awaited()
    scheduler.schedule.assert_not_called()


async def test_unknown_user_raises_not_found_before_write(cache):
    service, store, scheduler = _service(
        cache, missing=MissingReferences(user_id=999),
    )

    with pytest.raises(NotFoundError) as exc_info:
        await service.create_order({
            "user_id": 999, "items": [{"product_id": 1, "quantity": 1}],
        })

    assert "user 999" in exc_info.value.message
    store.create_order.assert_not_awaited()
    scheduler.schedule.assert_not_called()


async def test_transaction_failure_skips_fan_out(cache, cache_backend):
    await cache.set("orders:list:p=1:l=10:q=", {"kept": True}, 30)
    service, _, scheduler = _service(
        cache, create_side_effect=TransactionError(),
    )

    with pytest.raises(TransactionError):
        await service.create_order({
            "user_id": 1, "items": [{"product_id": 1, "quantity": 1}],
        })

    assert "orders:list:p=1:l=10:q=" in cache_backend.entries
    scheduler.schedule.assert_not_called()


async def test_cache_outage_does_not_fail_creation(cache, cache_backend):
    cache_backend.available = False
    service, _, scheduler = _service(cache)

    order = await service.create_order({
        "user_id": 1, "items": [{"product_id": 1, "quantity": 1}],
    })

    assert order["id"] == 11
    scheduler.schedule.assert_called_once_with(11)
