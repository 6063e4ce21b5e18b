"""Envelope-returning record transforms for service layers.

These wrap the best-effort accessor and report outcomes as
:class:`~recordkit.result.ServiceResult` instead of ``None``/``False``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from loguru import logger

from recordkit.accessor import (
    changed_fields,
    convert_to,
    copy_fields,
    from_mapping,
    has_field,
    set_field,
    to_mapping,
)
from recordkit.fields import field_table
from recordkit.result import ServiceResult

T = TypeVar("T")


def _label(target_type: Any) -> str:
    return getattr(target_type, "__name__", repr(target_type))


def mapping_of(record: Any, *, include_nulls: bool = False) -> ServiceResult[dict[str, Any]]:
    if record is None:
        return ServiceResult.fail("record is required")
    snapshot = to_mapping(record)
    if not include_nulls:
        snapshot = {name: value for name, value in snapshot.items() if value is not None}
    return ServiceResult.ok(snapshot, total_count=len(snapshot))


def record_from(mapping: Mapping[str, Any] | None, target_type: type[T]) -> ServiceResult[T]:
    if mapping is None:
        return ServiceResult.fail("mapping is required")
    record = from_mapping(mapping, target_type)
    if record is None:
        return ServiceResult.fail(f"{_label(target_type)} cannot be constructed")
    return ServiceResult.ok(record)


def transform_to(source: Any, target_type: type[T]) -> ServiceResult[T]:
    """Convert ``source`` into ``target_type`` via a mapping round trip."""
    if source is None:
        return ServiceResult.fail("source is required")
    converted = convert_to(source, target_type)
    if converted is None:
        return ServiceResult.fail(f"{type(source).__name__} cannot be converted to {_label(target_type)}")
    return ServiceResult.ok(converted)


def transform_collection(items: Iterable[Any] | None, target_type: type[T]) -> ServiceResult[list[T]]:
    """Convert every item; fails as a whole, listing each item that could not be converted."""
    if items is None:
        return ServiceResult.fail("items are required")
    converted: list[T] = []
    errors: list[str] = []
    for index, item in enumerate(items):
        outcome = transform_to(item, target_type)
        if outcome.success:
            converted.append(outcome.payload)
        else:
            errors.extend(f"item {index}: {message}" for message in outcome.errors)
    if errors:
        logger.debug("transform.collection.failed target={} failures={}", _label(target_type), len(errors))
        return ServiceResult.fail(*errors)
    return ServiceResult.ok(converted, total_count=len(converted))


def copy_fields_excluding(source: Any, target_type: type[T], excluded: Iterable[str]) -> ServiceResult[T]:
    if source is None:
        return ServiceResult.fail("source is required")
    skipped = set(excluded)
    names = [name for name in field_table(source).names() if name not in skipped]
    if not names:
        return ServiceResult.fail("no fields left to copy")
    copied = copy_fields(source, target_type, names)
    if copied is None:
        return ServiceResult.fail(f"{_label(target_type)} cannot be constructed")
    return ServiceResult.ok(copied)


def update_record(
    target: Any,
    updates: Mapping[str, Any] | None,
    allowed: Iterable[str] | None = None,
) -> ServiceResult[list[str]]:
    """Apply ``updates`` to ``target`` in place.

    The payload lists the fields that changed. Names outside ``allowed`` or
    that fail to set make the whole result a failure, though the fields that
    did set stay updated.
    """
    if target is None:
        return ServiceResult.fail("target is required")
    if not updates:
        return ServiceResult.ok([], total_count=0)
    permitted = set(allowed) if allowed is not None else None
    updated: list[str] = []
    errors: list[str] = []
    for name, value in updates.items():
        if permitted is not None and name not in permitted:
            errors.append(f"field '{name}' is not allowed")
        elif not has_field(target, name):
            errors.append(f"field '{name}' does not exist")
        elif set_field(target, name, value):
            updated.append(name)
        else:
            errors.append(f"field '{name}' could not be set")
    if errors:
        return ServiceResult.fail(*errors, total_count=len(updated))
    return ServiceResult.ok(updated, total_count=len(updated))


def compare_records(a: Any, b: Any, names: Iterable[str] | None = None) -> ServiceResult[bool]:
    """Payload is True when the compared fields match; ``total_count`` is the number that differ.

    Without ``names`` every readable field of ``a`` is compared.
    """
    if a is None or b is None:
        return ServiceResult.fail("both records are required")
    field_names = list(names) if names is not None else field_table(a).names()
    differing = changed_fields(a, b, field_names)
    return ServiceResult.ok(not differing, total_count=len(differing))
