"""Dynamic accessor: read, write, copy and compare record fields by name.

Every public operation here is best effort. Resolution misses, coercion
failures and construction failures come back as ``None``/zero values or
``False`` and are logged at DEBUG; the raising variants ``read_field`` and
``write_field`` are what they are built on.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from loguru import logger
from pydantic import ValidationError

from recordkit.coercion import coerce, reset_value, zero_value
from recordkit.errors import (
    CoercionError,
    ConstructionError,
    FieldNotFoundError,
    FieldNotReadableError,
    FieldNotWritableError,
    NoZeroValueError,
    RecordkitError,
)
from recordkit.fields import FieldAccessor, construct, field_table
from recordkit.types import FieldMapping, Record

if TYPE_CHECKING:
    from recordkit.transcoder import Transcoder

T = TypeVar("T")


def _type_name(record: Record) -> str:
    return type(record).__name__


def _zero_or_none(kind: Any) -> Any:
    if kind is None:
        return None
    try:
        return zero_value(kind)
    except NoZeroValueError:
        return None


def _read(record: Record, accessor: FieldAccessor) -> Any:
    if accessor.getter is None:
        raise FieldNotReadableError(_type_name(record), accessor.name)
    try:
        return accessor.getter(record)
    except (AttributeError, KeyError) as exc:
        # Declared on the type but never assigned on this instance.
        raise FieldNotFoundError(_type_name(record), accessor.name) from exc
    except Exception as exc:
        raise FieldNotReadableError(_type_name(record), accessor.name) from exc


def read_field(record: Record, name: str) -> Any:
    """Read ``name`` from ``record``.

    Raises:
        FieldNotFoundError: The type has no such field, or the instance never set it.
        FieldNotReadableError: The field has no getter, or its getter raised.
    """
    accessor = field_table(record).get(name)
    if accessor is None:
        raise FieldNotFoundError(_type_name(record), name)
    return _read(record, accessor)


def write_field(record: Record, name: str, value: Any) -> None:
    """Coerce ``value`` to the declared type of ``name`` and assign it.

    The value is converted before the setter runs, so a rejected value leaves
    the field untouched.

    Raises:
        FieldNotFoundError: The type has no such field.
        FieldNotWritableError: The field is read-only.
        CoercionError: The value cannot be converted, or the setter rejected it.
    """
    accessor = field_table(record).get(name, creating=True)
    if accessor is None:
        raise FieldNotFoundError(_type_name(record), name)
    if accessor.setter is None:
        raise FieldNotWritableError(_type_name(record), name)

    converted = coerce(value, accessor.declared_type)
    try:
        accessor.setter(record, converted)
    except AttributeError as exc:
        raise FieldNotWritableError(_type_name(record), name) from exc
    except (TypeError, ValueError) as exc:
        raise CoercionError(value, accessor.declared_type) from exc


def has_field(record: Record, name: str) -> bool:
    """Return True when ``record``'s type declares ``name``, whatever its current value."""
    if record is None or not name:
        return False
    return name in field_table(record)


def get_field(record: Record, name: str, as_type: Any = None) -> Any:
    """Read a field, optionally coerced to ``as_type``.

    Misses return the zero value of ``as_type`` (``None`` without one), which
    is indistinguishable from a field that holds that value; use
    :func:`has_field` when the difference matters.
    """
    fallback = _zero_or_none(as_type)
    if record is None or not name:
        return fallback
    try:
        value = read_field(record, name)
        return value if as_type is None else coerce(value, as_type)
    except RecordkitError as exc:
        logger.debug("accessor.get.miss type={} name={} reason={}", _type_name(record), name, exc)
        return fallback


def set_field(record: Record, name: str, value: Any) -> bool:
    """Write a field; True only when the field was actually updated."""
    if record is None or not name:
        return False
    try:
        write_field(record, name, value)
    except RecordkitError as exc:
        logger.debug("accessor.set.miss type={} name={} reason={}", _type_name(record), name, exc)
        return False
    return True


def to_mapping(record: Record) -> FieldMapping:
    """Snapshot every readable field, in table order. ``None`` gives ``{}``."""
    if record is None:
        return {}
    snapshot: FieldMapping = {}
    for accessor in field_table(record):
        if not accessor.readable:
            continue
        try:
            snapshot[accessor.name] = _read(record, accessor)
        except RecordkitError as exc:
            logger.debug("accessor.snapshot.skip type={} name={} reason={}", _type_name(record), accessor.name, exc)
    return snapshot


def from_mapping(mapping: Mapping[str, Any] | None, target_type: type[T]) -> T | None:
    """Build a zero-initialized ``target_type`` and apply every pair of ``mapping`` to it.

    Pairs that fail to set are skipped. Returns ``None`` only when the mapping
    is ``None`` or the type cannot be constructed.
    """
    if mapping is None:
        return None
    target = _construct_or_none(target_type)
    if target is None:
        return None
    for name, value in mapping.items():
        set_field(target, name, value)
    return target


def convert_to(source: Record, target_type: type[T], *, transcoder: Transcoder | None = None) -> T | None:
    """Return ``source`` if it already is a ``target_type``, else a round-tripped copy or ``None``."""
    if source is None:
        return None
    from recordkit.transcoder import MappingTranscoder

    codec = transcoder if transcoder is not None else MappingTranscoder()
    try:
        if isinstance(source, target_type):
            return source
        return codec.decode(codec.encode(source), target_type)
    except (RecordkitError, ValidationError, TypeError, ValueError) as exc:
        logger.debug(
            "accessor.convert.failed source={} target={} reason={}",
            _type_name(source),
            getattr(target_type, "__name__", target_type),
            exc,
        )
        return None


def convert_to_scalar(source: Any, kind: type[T]) -> T:
    """Cast ``source`` to a scalar kind, falling back to the kind's zero value."""
    fallback = _zero_or_none(kind)
    if source is None:
        return fallback
    try:
        return coerce(source, kind)
    except CoercionError as exc:
        logger.debug("accessor.scalar.failed kind={} reason={}", getattr(kind, "__name__", kind), exc)
        return fallback


def copy_fields(source: Record, target_type: type[T], names: Iterable[str] | None) -> T | None:
    """Copy the named fields of ``source`` into a new ``target_type``, in the given order.

    A name missing on ``source`` writes ``None``, which non-nullable target
    fields reject and keep their zero value.
    """
    field_names = list(names) if names is not None else []
    if source is None or not field_names:
        return None
    target = _construct_or_none(target_type)
    if target is None:
        return None
    for name in field_names:
        set_field(target, name, get_field(source, name))
    return target


def copy_all_fields(source: Record, target_type: type[T]) -> T | None:
    if source is None:
        return None
    return copy_fields(source, target_type, field_table(source).names())


def clear_fields(record: Record, names: Iterable[str] | None) -> None:
    """Set each named field to ``None``; non-nullable fields stay as they are."""
    if record is None or names is None:
        return
    for name in names:
        set_field(record, name, None)


def reset_fields(record: Record, names: Iterable[str] | None) -> None:
    """Set each named field to the zero value of its declared type (``0``, ``""``, ``False``, ...)."""
    if record is None or names is None:
        return
    table = field_table(record)
    for name in names:
        accessor = table.get(name)
        if accessor is None:
            logger.debug("accessor.reset.miss type={} name={}", _type_name(record), name)
            continue
        try:
            value = reset_value(accessor.declared_type)
        except NoZeroValueError as exc:
            logger.debug("accessor.reset.miss type={} name={} reason={}", _type_name(record), name, exc)
            continue
        set_field(record, name, value)


def fields_equal(a: Record, b: Record, names: Iterable[str] | None) -> bool:
    """True when every named field of ``a`` and ``b`` compares equal; an empty name list is vacuously equal."""
    if a is None or b is None or names is None:
        return False
    return all(get_field(a, name) == get_field(b, name) for name in names)


def changed_fields(original: Record, current: Record, names: Iterable[str] | None) -> list[str]:
    if original is None or current is None or names is None:
        return []
    return [name for name in names if get_field(original, name) != get_field(current, name)]


def _construct_or_none(target_type: type[T]) -> T | None:
    try:
        return construct(target_type)
    except ConstructionError as exc:
        logger.debug(
            "accessor.construct.failed target={} reason={}",
            getattr(target_type, "__name__", target_type),
            exc,
        )
        return None
