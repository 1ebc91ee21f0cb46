"""Order ORM — persists the aggregate root of a purchase.

Invariants:
    - Created PENDING, atomically with >= 1 OrderItem
    - status transitions: PENDING -> CONFIRMED (confirmation job only)
    - Never deleted in scope

Design Decisions:
    - Composite index (created_at, id): serves the newest-first listing with
      deterministic tie-break
    - items ordered by id: response preserves insertion order
    - lazy="raise" on relationships: listing queries must eager-load explicitly,
      an accidental lazy load in async context fails loudly
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.domain_types import OrderStatus
from app.db.base import Base


class Order(Base):
    """Order aggregate root — owns its items."""
    __tablename__ = "orders"
    __table_args__ = (
        Index("ix_orders_created_at_id", "created_at", "id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=OrderStatus.PENDING.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    user: Mapped["User"] = relationship("User", lazy="raise")
    items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem", back_populates="order",
        cascade="all, delete-orphan", order_by="OrderItem.id", lazy="raise",
    )
