from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

import pytest

from recordkit.queries import (
    average_by_field,
    chunk_by,
    distinct_by_field,
    get_page,
    group_by_field,
    max_by_field,
    min_by_field,
    order_by_field,
    sum_by_field,
    total_pages,
    where_field_contains,
    where_field_equals,
)


@dataclass
class Item:
    name: str
    price: Decimal
    category: str | None = None


@pytest.fixture
def items() -> list[Item]:
    return [
        Item("Lamp", Decimal("30"), "home"),
        Item("Desk", Decimal("120"), "office"),
        Item("Pen", Decimal("2"), "office"),
        Item("Rug", Decimal("48"), None),
    ]


def test_order_by_field(items: list[Item]) -> None:
    assert [item.name for item in order_by_field(items, "price")] == ["Pen", "Lamp", "Rug", "Desk"]
    assert [item.name for item in order_by_field(items, "price", ascending=False)] == ["Desk", "Rug", "Lamp", "Pen"]


def test_order_by_field_puts_none_first(items: list[Item]) -> None:
    assert [item.name for item in order_by_field(items, "category")] == ["Rug", "Lamp", "Desk", "Pen"]


def test_order_by_unknown_field_keeps_order(items: list[Item]) -> None:
    assert order_by_field(items, "weight") == items
    assert order_by_field(items, "") == items


def test_order_by_field_with_unorderable_values() -> None:
    rows = [{"value": "b"}, {"value": 2}, {"value": "a"}]

    assert [row["value"] for row in order_by_field(rows, "value")] == [2, "a", "b"]


def test_order_by_field_keeps_natural_order_within_each_type() -> None:
    rows = [{"value": 10}, {"value": "b"}, {"value": 9}, {"value": None}, {"value": "a"}]

    assert [row["value"] for row in order_by_field(rows, "value")] == [None, 9, 10, "a", "b"]
    assert [row["value"] for row in order_by_field(rows, "value", ascending=False)] == ["b", "a", 10, 9, None]


def test_where_field_equals(items: list[Item]) -> None:
    assert [item.name for item in where_field_equals(items, "category", "office")] == ["Desk", "Pen"]
    assert where_field_equals(items, "weight", 1) == items


def test_where_field_contains_is_case_insensitive(items: list[Item]) -> None:
    assert [item.name for item in where_field_contains(items, "category", "OFF")] == ["Desk", "Pen"]
    assert [item.name for item in where_field_contains(items, "name", "e")] == ["Desk", "Pen"]


def test_where_field_contains_without_text_keeps_everything(items: list[Item]) -> None:
    assert where_field_contains(items, "name", None) == items


def test_group_by_field_keeps_first_seen_order(items: list[Item]) -> None:
    groups = group_by_field(items, "category")

    assert [(key, [item.name for item in members]) for key, members in groups] == [
        ("home", ["Lamp"]),
        ("office", ["Desk", "Pen"]),
        (None, ["Rug"]),
    ]


def test_group_by_unknown_field_is_one_group(items: list[Item]) -> None:
    assert group_by_field(items, "weight") == [(None, items)]
    assert group_by_field([], "weight") == []


def test_distinct_by_field_keeps_first(items: list[Item]) -> None:
    assert [item.name for item in distinct_by_field(items, "category")] == ["Lamp", "Desk", "Rug"]


def test_sum_and_average(items: list[Item]) -> None:
    assert sum_by_field(items, "price") == Decimal("200")
    assert average_by_field(items, "price") == Decimal("50")
    assert sum_by_field(items, "weight") == Decimal(0)
    assert average_by_field([], "price") == Decimal(0)


def test_sum_treats_absent_values_as_zero() -> None:
    rows = [{"amount": 5}, {"amount": None}, {"amount": "2.5"}]

    assert sum_by_field(rows, "amount") == Decimal("7.5")


def test_min_and_max(items: list[Item]) -> None:
    assert min_by_field(items, "price").name == "Pen"
    assert max_by_field(items, "price").name == "Desk"
    assert min_by_field([], "price") is None


def test_paging() -> None:
    numbers = list(range(1, 26))

    assert chunk_by(numbers, 10) == [numbers[:10], numbers[10:20], numbers[20:]]
    assert get_page(numbers, 3, 10) == [21, 22, 23, 24, 25]
    assert get_page(numbers, 0, 0) == numbers[:10]
    assert get_page(numbers, 4, 10) == []
    assert total_pages(numbers, 10) == 3
    assert total_pages([], 10) == 0
