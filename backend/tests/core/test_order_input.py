"""Tests for parse_new_order and MissingReferences — pure input contract, no IO."""

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.core.order_input import (
    MissingReferences,
    NewOrderItem,
    parse_new_order,
)


def _fields(exc_info) -> list[str]:
    return [issue.field for issue in exc_info.value.issues]


def test_valid_payload_parses_in_item_order():
    order = parse_new_order({
        "user_id": 1,
        "items": [
            {"product_id": 2, "quantity": 1},
            {"product_id": 1, "quantity": 2},
        ],
    })
    assert order.user_id == 1
    assert order.items == (NewOrderItem(2, 1), NewOrderItem(1, 2))


def test_duplicate_products_kept_as_separate_items():
    order = parse_new_order({
        "user_id": 1,
        "items": [
            {"product_id": 1, "quantity": 1},
            {"product_id": 1, "quantity": 3},
        ],
    })
    assert len(order.items) == 2
    assert order.product_ids == {1}


def test_missing_user_id_rejected():
    with pytest.raises(ValidationError) as exc_info:
        parse_new_order({"items": [{"product_id": 1, "quantity": 1}]})
    assert _fields(exc_info) == ["user_id"]


@pytest.mark.parametrize("user_id", [0, -3, "1", True, 1.5])
def test_non_positive_or_non_int_user_id_rejected(user_id):
    with pytest.raises(ValidationError) as exc_info:
        parse_new_order({
            "user_id": user_id, "items": [{"product_id": 1, "quantity": 1}],
        })
    assert _fields(exc_info) == ["user_id"]


@pytest.mark.parametrize("items", [None, [], "abc", {"product_id": 1}])
def test_items_must_be_non_empty_list(items):
    with pytest.raises(ValidationError) as exc_info:
        parse_new_order({"user_id": 1, "items": items})
    assert _fields(exc_info) == ["items"]


def test_item_without_product_id_rejected():
    with pytest.raises(ValidationError) as exc_info:
        parse_new_order({"user_id": 1, "items": [{"quantity": 1}]})
    assert _fields(exc_info) == ["items.0.product_id"]


@pytest.mark.parametrize("quantity", [0, -1, None, "2"])
def test_non_positive_quantity_rejected(quantity):
    with pytest.raises(ValidationError) as exc_info:
        parse_new_order({
            "user_id": 1,
            "items": [
                {"product_id": 1, "quantity": 1},
                {"product_id": 2, "quantity": quantity},
            ],
        })
    assert _fields(exc_info) == ["items.1.quantity"]


def test_all_issues_reported_together():
    with pytest.raises(ValidationError) as exc_info:
        parse_new_order({
            "user_id": 0,
            "items": [{"product_id": -1, "quantity": 0}, "bad"],
        })
    assert _fields(exc_info) == [
        "user_id", "items.0.product_id", "items.0.quantity", "items.1",
    ]


def test_missing_references_empty_is_falsy_and_silent():
    missing = MissingReferences()
    assert not missing
    missing.raise_if_any()


def test_missing_references_raises_not_found_with_ids():
    missing = MissingReferences(user_id=999, product_ids=(7, 5))
    with pytest.raises(NotFoundError) as exc_info:
        missing.raise_if_any()
    assert exc_info.value.user_id == 999
    assert exc_info.value.product_ids == [5, 7]
