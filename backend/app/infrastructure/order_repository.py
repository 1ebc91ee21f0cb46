"""SQL Order Store — relational adapter for orders, items, users and products.

Invariants:
    - Every public method opens its own session (safe to call from background jobs)
    - create_order is all-or-nothing: order row, item rows and the returned read
      succeed in one transaction or nothing is persisted
    - Listing order is created_at DESC, id DESC; total counts the filtered set, not the page
    - Rows leave this module as dicts in the public response shape (no ORM objects)

Design Decisions:
    - Filter variants compiled here, not in core: core stays free of SQLAlchemy
    - icontains(autoescape=True): user input never acts as a LIKE wildcard
    - selectinload for user/items/product: one query per relationship, no N+1,
      and lazy="raise" on the models catches any missed eager load
"""

import logging
from collections.abc import Iterable

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.domain_types import OrderId, OrderStatus, ProductId, UserId
from app.core.errors import DatabaseError, ErrorContext, TransactionError
from app.core.listing_filter import ListingFilter, NoFilter, SearchFilter
from app.core.order_input import MissingReferences, NewOrder
from app.infrastructure.database import DatabaseSessionManager
from app.models.order import Order
from app.models.order_item import OrderItem
from app.models.product import Product
from app.models.user import User

logger = logging.getLogger(__name__)


def compile_filter(listing_filter: ListingFilter):
    """Translate a listing filter variant into a WHERE clause (or None)."""
    if isinstance(listing_filter, NoFilter):
        return None
    if isinstance(listing_filter, SearchFilter):
        term = listing_filter.term
        return or_(
            User.email.icontains(term, autoescape=True),
            Order.items.any(
                OrderItem.product.has(
                    Product.name.icontains(term, autoescape=True),
                ),
            ),
        )
    raise TypeError(f"Unknown listing filter: {listing_filter!r}")


def serialize_order(order: Order) -> dict:
    """Denormalize an eagerly-loaded Order into the response shape."""
    return {
        "id": order.id,
        "status": order.status,
        "created_at": order.created_at.isoformat(),
        "user": {
            "id": order.user.id,
            "email": order.user.email,
            "name": order.user.name,
        },
        "items": [
            {
                "id": item.id,
                "quantity": item.quantity,
                "product": {
                    "id": item.product.id,
                    "name": item.product.name,
                    "price": f"{item.product.price:.2f}",
                },
            }
            for item in order.items
        ],
    }


def _with_joins(query):
    return query.options(
        selectinload(Order.user),
        selectinload(Order.items).selectinload(OrderItem.product),
    )


class SqlOrderStore:
    """OrderStore implementation over SQLAlchemy async sessions."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def count_orders(self, listing_filter: ListingFilter) -> int:
        query = select(func.count(Order.id)).select_from(Order).join(
            User, User.id == Order.user_id,
        )
        clause = compile_filter(listing_filter)
        if clause is not None:
            query = query.where(clause)
        async with self._db.session() as db:
            result = await db.execute(query)
            return result.scalar_one()

    async def list_orders(
        self, listing_filter: ListingFilter, limit: int, offset: int,
    ) -> list[dict]:
        query = (
            select(Order)
            .join(User, User.id == Order.user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(limit)
            .offset(offset)
        )
        clause = compile_filter(listing_filter)
        if clause is not None:
            query = query.where(clause)
        async with self._db.session() as db:
            result = await db.execute(_with_joins(query))
            return [serialize_order(o) for o in result.scalars().all()]

    async def find_missing_references(
        self, user_id: UserId, product_ids: Iterable[ProductId],
    ) -> MissingReferences:
        wanted = set(product_ids)
        found: set[int] = set()
        async with self._db.session() as db:
            user_found = await db.scalar(
                select(User.id).where(User.id == user_id),
            )
            if wanted:
                result = await db.scalars(
                    select(Product.id).where(Product.id.in_(wanted)),
                )
                found = set(result.all())
        return MissingReferences(
            user_id=None if user_found is not None else user_id,
            product_ids=tuple(sorted(wanted - found)),
        )

    async def create_order(self, new_order: NewOrder) -> dict:
        """Insert the order and its items in one transaction."""
        try:
            async with self._db.session() as db:
                async with db.begin():
                    order = Order(
                        user_id=new_order.user_id,
                        status=OrderStatus.PENDING.value,
                    )
                    db.add(order)
                    await db.flush()
                    db.add_all([
                        OrderItem(
                            order_id=order.id,
                            product_id=item.product_id,
                            quantity=item.quantity,
                        )
                        for item in new_order.items
                    ])
                    await db.flush()
                    created = await self._load_order(db, OrderId(order.id))
        except DatabaseError as e:
            logger.error(
                f"Order transaction rolled back: {e.message}",
                extra={
                    "user_id": new_order.user_id,
                    "item_count": len(new_order.items),
                    "error_code": e.code,
                },
            )
            raise TransactionError(
                ErrorContext(user_id=new_order.user_id),
            ) from e
        return created

    async def update_status(
        self, order_id: OrderId, status: OrderStatus,
    ) -> bool:
        """Unconditional status write. Returns False if the order does not exist."""
        async with self._db.session() as db:
            async with db.begin():
                result = await db.execute(
                    update(Order)
                    .where(Order.id == order_id)
                    .values(status=status.value)
                )
                updated = result.rowcount
        return updated > 0

    async def _load_order(self, db: AsyncSession, order_id: OrderId) -> dict:
        result = await db.execute(
            _with_joins(select(Order).where(Order.id == order_id))
            .execution_options(populate_existing=True)
        )
        return serialize_order(result.scalar_one())
