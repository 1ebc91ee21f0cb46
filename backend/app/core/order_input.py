"""Order Input — pure validation of an order creation request.

Invariants:
    - user_id is a positive int (bool rejected)
    - items is a non-empty list; every item has a positive int product_id and quantity
    - All issues are collected before raising, so the caller sees every bad field
    - Output NewOrder preserves item order and duplicates (one row per input item)

Design Decisions:
    - Accepts plain mappings, not Pydantic models: the service layer is callable
      outside HTTP (scripts, tests) and must enforce the same contract
    - Reference existence is NOT checked here (needs IO) — see MissingReferences
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from app.core.domain_types import ProductId, UserId
from app.core.errors import FieldIssue, NotFoundError, ValidationError


@dataclass(frozen=True)
class NewOrderItem:
    product_id: ProductId
    quantity: int


@dataclass(frozen=True)
class NewOrder:
    user_id: UserId
    items: tuple[NewOrderItem, ...]

    @property
    def product_ids(self) -> set[ProductId]:
        return {item.product_id for item in self.items}


@dataclass(frozen=True)
class MissingReferences:
    """Result of the pre-write existence check."""
    user_id: UserId | None = None
    product_ids: tuple[ProductId, ...] = field(default_factory=tuple)

    def __bool__(self) -> bool:
        return self.user_id is not None or bool(self.product_ids)

    def raise_if_any(self) -> None:
        if self:
            raise NotFoundError(self.user_id, list(self.product_ids))


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def parse_new_order(payload: Mapping[str, Any]) -> NewOrder:
    """Validate a raw creation payload into a NewOrder or raise ValidationError."""
    issues: list[FieldIssue] = []

    user_id = payload.get("user_id")
    if user_id is None:
        issues.append(FieldIssue("user_id", "user_id is required"))
    elif not _is_positive_int(user_id):
        issues.append(FieldIssue("user_id", "user_id must be a positive integer"))

    raw_items = payload.get("items")
    items: list[NewOrderItem] = []
    if not isinstance(raw_items, list) or not raw_items:
        issues.append(FieldIssue("items", "items must be a non-empty list"))
    else:
        for index, raw in enumerate(raw_items):
            item = _parse_item(raw, index, issues)
            if item is not None:
                items.append(item)

    if issues:
        raise ValidationError(issues)
    return NewOrder(UserId(user_id), tuple(items))


def _parse_item(
    raw: Any, index: int, issues: list[FieldIssue],
) -> NewOrderItem | None:
    prefix = f"items.{index}"
    if not isinstance(raw, Mapping):
        issues.append(FieldIssue(prefix, "item must be an object"))
        return None

    ok = True
    product_id = raw.get("product_id")
    if product_id is None:
        issues.append(FieldIssue(f"{prefix}.product_id", "product_id is required"))
        ok = False
    elif not _is_positive_int(product_id):
        issues.append(FieldIssue(
            f"{prefix}.product_id", "product_id must be a positive integer",
        ))
        ok = False

    quantity = raw.get("quantity")
    if not _is_positive_int(quantity):
        issues.append(FieldIssue(
            f"{prefix}.quantity", "quantity must be a positive integer",
        ))
        ok = False

    return NewOrderItem(ProductId(product_id), quantity) if ok else None
