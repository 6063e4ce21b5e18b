"""Coercion of values to declared field types, and zero values."""

from __future__ import annotations

import collections.abc
import dataclasses
import enum
import types
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Annotated, Any, Literal, Union, get_args, get_origin, is_typeddict
from uuid import UUID

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError, PydanticUndefinedAnnotation, PydanticUserError

from recordkit.errors import CoercionError, NoZeroValueError

# Lax validation plus number->str, the closest match to a general "change type" cast.
_COERCION_CONFIG = ConfigDict(coerce_numbers_to_str=True, arbitrary_types_allowed=True)

_SCALAR_ZEROS: dict[type, Any] = {
    bool: False,
    int: 0,
    float: 0.0,
    complex: 0j,
    str: "",
    bytes: b"",
    Decimal: Decimal(0),
    datetime: datetime.min,
    date: date.min,
    time: time(),
    timedelta: timedelta(),
    UUID: UUID(int=0),
}

_EMPTY_CONTAINERS: dict[Any, type] = {
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    dict: dict,
    collections.abc.Sequence: tuple,
    collections.abc.MutableSequence: list,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
    collections.abc.Iterable: tuple,
}


def unwrap_annotated(declared_type: Any) -> Any:
    while get_origin(declared_type) is Annotated:
        declared_type = get_args(declared_type)[0]
    return declared_type


def is_optional(declared_type: Any) -> bool:
    """Return True when ``None`` is an accepted value of ``declared_type``."""
    declared_type = unwrap_annotated(declared_type)
    if declared_type in (Any, object, None, type(None)):
        return True
    if get_origin(declared_type) in (Union, types.UnionType):
        return type(None) in get_args(declared_type)
    return False


def strip_optional(declared_type: Any) -> Any:
    """``X | None`` -> ``X``; anything else is returned as is."""
    declared_type = unwrap_annotated(declared_type)
    if get_origin(declared_type) not in (Union, types.UnionType):
        return declared_type
    remaining = tuple(arg for arg in get_args(declared_type) if arg is not type(None))
    if not remaining:
        return type(None)
    if len(remaining) == 1:
        return remaining[0]
    return Union[remaining]  # noqa: UP007


def zero_value(declared_type: Any) -> Any:
    """Return the zero value of ``declared_type``.

    Nullable types and ``Any`` zero to ``None``; scalars to their numeric,
    empty or minimum value; containers to an empty container; enums to their
    first member.

    Raises:
        NoZeroValueError: For types without a natural zero (records, arbitrary classes).
    """
    declared_type = unwrap_annotated(declared_type)
    if is_optional(declared_type):
        return None

    origin = get_origin(declared_type)
    if origin is Literal:
        return get_args(declared_type)[0]
    if origin in (Union, types.UnionType):
        return zero_value(get_args(declared_type)[0])

    container = _EMPTY_CONTAINERS.get(origin or declared_type)
    if container is not None:
        return container()

    if isinstance(declared_type, type):
        if issubclass(declared_type, enum.Enum):
            members = list(declared_type)
            if members:
                return members[0]
        elif declared_type in _SCALAR_ZEROS:
            return _SCALAR_ZEROS[declared_type]
    raise NoZeroValueError(declared_type)


def reset_value(declared_type: Any) -> Any:
    """Zero value used when resetting a field: nullable fields reset to the zero of their inner type."""
    if not is_optional(declared_type):
        return zero_value(declared_type)
    try:
        return zero_value(strip_optional(declared_type))
    except NoZeroValueError:
        return None


def coerce(value: Any, declared_type: Any) -> Any:
    """Convert ``value`` to ``declared_type``.

    Values already of the declared class pass through unchanged. Everything
    else goes through pydantic lax-mode validation, so ``"26"`` becomes ``26``
    for an ``int`` field and ``None`` is only accepted by nullable types.

    Raises:
        CoercionError: When validation rejects the value.
    """
    plain_type = unwrap_annotated(declared_type)
    if plain_type is Any or plain_type is object:
        return value
    if isinstance(plain_type, type):
        if type(value) is plain_type and plain_type is declared_type:
            return value
        if plain_type not in _SCALAR_ZEROS and _is_instance(value, plain_type):
            return value

    try:
        return _adapter_for(declared_type).validate_python(value)
    except (ValidationError, PydanticSchemaGenerationError, PydanticUndefinedAnnotation, PydanticUserError) as exc:
        raise CoercionError(value, declared_type) from exc


def _is_instance(value: Any, plain_type: type) -> bool:
    try:
        return isinstance(value, plain_type)
    except TypeError:
        # TypedDicts and non-runtime protocols refuse isinstance checks.
        return False


def _adapter_for(declared_type: Any) -> TypeAdapter[Any]:
    if _owns_config(declared_type):
        return TypeAdapter(declared_type)
    return TypeAdapter(declared_type, config=_COERCION_CONFIG)


def _owns_config(declared_type: Any) -> bool:
    # pydantic refuses an explicit config for types that carry their own.
    return isinstance(declared_type, type) and (
        issubclass(declared_type, BaseModel) or dataclasses.is_dataclass(declared_type) or is_typeddict(declared_type)
    )
