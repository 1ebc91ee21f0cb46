"""Boundary Protocols — contracts between core/services and infrastructure.

Invariants:
    - Services NEVER import a concrete store or cache — dependency arrows point inward
    - Store methods return plain dicts in the public response shape (no ORM objects leak)
    - Cache substrate deals in bytes; serialization belongs to the cache layer

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no inheritance
    - Async in Protocol: implementations do IO
"""

from collections.abc import Iterable
from typing import Protocol

from app.core.domain_types import OrderId, OrderStatus, ProductId, UserId
from app.core.listing_filter import ListingFilter
from app.core.order_input import MissingReferences, NewOrder


class OrderStore(Protocol):
    """Contract for order persistence — implemented by SqlOrderStore."""
    async def count_orders(self, listing_filter: ListingFilter) -> int: ...
    async def list_orders(
        self, listing_filter: ListingFilter, limit: int, offset: int,
    ) -> list[dict]: ...
    async def find_missing_references(
        self, user_id: UserId, product_ids: Iterable[ProductId],
    ) -> MissingReferences: ...
    async def create_order(self, new_order: NewOrder) -> dict: ...
    async def update_status(
        self, order_id: OrderId, status: OrderStatus,
    ) -> bool: ...


class CacheBackend(Protocol):
    """Contract for the key-value substrate under the listing cache."""
    async def get(self, key: str) -> bytes | None: ...
    async def keys_with_prefix(self, prefix: str) -> set[str]: ...
    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None: ...
    async def delete_many(self, keys: Iterable[str]) -> int: ...
    async def ping(self) -> bool: ...
