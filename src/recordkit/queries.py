"""Sequence helpers that sort, filter, group, aggregate and page records by a field name."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Any, TypeVar

from recordkit.accessor import get_field, has_field

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10


def _resolvable(items: Sequence[Any], name: str) -> bool:
    # Field lookups are resolved against the first record, like a typed collection.
    return bool(name) and bool(items) and has_field(items[0], name)


def _ordering_key(value: Any) -> tuple[bool, Any]:
    return (value is not None, value)


def _typed_key(value: Any) -> tuple[bool, str, Any]:
    return (value is not None, type(value).__name__, value)


def _repr_key(value: Any) -> tuple[bool, str, str]:
    return (value is not None, type(value).__name__, repr(value))


def order_by_field(items: Iterable[T], name: str, *, ascending: bool = True) -> list[T]:
    """Stable sort by a field; ``None`` sorts first.

    Mixed types that cannot be compared are grouped by type name and keep their
    natural order within a type; values that are not orderable at all sort by repr.
    """
    records = list(items)
    if not _resolvable(records, name):
        return records
    values = [get_field(item, name) for item in records]
    for key in (_ordering_key, _typed_key, _repr_key):
        try:
            keys = [key(value) for value in values]
            order = sorted(range(len(records)), key=keys.__getitem__, reverse=not ascending)
        except TypeError:
            continue
        return [records[index] for index in order]
    return records


def where_field_equals(items: Iterable[T], name: str, value: Any) -> list[T]:
    records = list(items)
    if not _resolvable(records, name):
        return records
    return [item for item in records if get_field(item, name) == value]


def where_field_contains(items: Iterable[T], name: str, text: str | None) -> list[T]:
    """Case-insensitive substring match on the string form of a field. No text matches everything."""
    records = list(items)
    if text is None or not _resolvable(records, name):
        return records
    needle = text.casefold()
    matches: list[T] = []
    for item in records:
        value = get_field(item, name)
        if value is None:
            continue
        rendered = str(value)
        if rendered and needle in rendered.casefold():
            matches.append(item)
    return matches


def group_by_field(items: Iterable[T], name: str) -> list[tuple[Any, list[T]]]:
    """Group records by field value, in first-seen order.

    Returns ``(value, records)`` pairs so unhashable field values group too.
    An unknown field puts everything in one ``None`` group.
    """
    records = list(items)
    if not _resolvable(records, name):
        return [(None, records)] if records else []
    groups: list[tuple[Any, list[T]]] = []
    for item in records:
        value = get_field(item, name)
        for key, members in groups:
            if key == value:
                members.append(item)
                break
        else:
            groups.append((value, [item]))
    return groups


def distinct_by_field(items: Iterable[T], name: str) -> list[T]:
    """Keep the first record for each distinct field value."""
    records = list(items)
    if not _resolvable(records, name):
        return records
    return [members[0] for _, members in group_by_field(records, name)]


def sum_by_field(items: Iterable[Any], name: str) -> Decimal:
    records = list(items)
    if not _resolvable(records, name):
        return Decimal(0)
    return sum((get_field(item, name, Decimal) for item in records), Decimal(0))


def average_by_field(items: Iterable[Any], name: str) -> Decimal:
    records = list(items)
    if not _resolvable(records, name):
        return Decimal(0)
    return sum_by_field(records, name) / len(records)


def min_by_field(items: Iterable[T], name: str) -> T | None:
    records = order_by_field(items, name)
    return records[0] if records else None


def max_by_field(items: Iterable[T], name: str) -> T | None:
    records = order_by_field(items, name, ascending=False)
    return records[0] if records else None


def _page_size(size: int) -> int:
    return size if size >= 1 else DEFAULT_PAGE_SIZE


def chunk_by(items: Iterable[T], size: int) -> list[list[T]]:
    records = list(items)
    size = _page_size(size)
    return [records[start : start + size] for start in range(0, len(records), size)]


def get_page(items: Iterable[T], page: int, size: int) -> list[T]:
    """Return one page; pages start at 1. Out-of-range numbers fall back to page 1 and size 10."""
    page = page if page >= 1 else 1
    size = _page_size(size)
    records = list(items)
    start = (page - 1) * size
    return records[start : start + size]


def total_pages(items: Iterable[Any], size: int) -> int:
    return math.ceil(len(list(items)) / _page_size(size))
