"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - OrderId, UserId, ProductId wrap ints — never mix them in domain logic
    - OrderStatus encodes the only two valid states; PENDING is initial, CONFIRMED terminal
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

OrderId = NewType("OrderId", int)
UserId = NewType("UserId", int)
ProductId = NewType("ProductId", int)


# ─── Enums ───────────────────────────────────────────────────────

class OrderStatus(str, Enum):
    """Order lifecycle states — maps to DB `status` column."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
