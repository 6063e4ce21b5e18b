"""Round-trip transcoding between records and nested mappings."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, TypeAdapter
from pydantic.errors import PydanticSchemaGenerationError, PydanticUserError

from recordkit.accessor import from_mapping, to_mapping
from recordkit.errors import ConstructionError

T = TypeVar("T")

_SCALARS = (str, bytes, int, float, complex, bool)


@runtime_checkable
class Transcoder(Protocol):
    """Encodes a record to a mapping and decodes a mapping into a given record type."""

    def encode(self, record: Any) -> dict[str, Any]: ...

    def decode(self, mapping: Mapping[str, Any], target_type: type[T]) -> T: ...


class MappingTranscoder:
    """Default transcoder.

    Encoding snapshots readable fields recursively. Decoding validates with a
    pydantic ``TypeAdapter`` for the target type: unknown keys are ignored,
    missing required fields or mismatched types fail. Types pydantic cannot
    build a schema for are filled field by field instead.
    """

    def encode(self, record: Any) -> dict[str, Any]:
        encoded = self._encode_value(record)
        if not isinstance(encoded, dict):
            raise TypeError(f"{type(record).__name__} does not encode to a mapping")
        return encoded

    def decode(self, mapping: Mapping[str, Any], target_type: type[T]) -> T:
        try:
            adapter = TypeAdapter(target_type)
        except (PydanticSchemaGenerationError, PydanticUserError):
            record = from_mapping(mapping, target_type)
            if record is None:
                raise ConstructionError(f"{target_type.__name__} cannot be constructed") from None
            return record
        return adapter.validate_python(dict(mapping))

    def _encode_value(self, value: Any) -> Any:
        if value is None or isinstance(value, _SCALARS):
            return value
        if isinstance(value, Mapping):
            return {key: self._encode_value(item) for key, item in value.items()}
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self._encode_value(item) for item in value]
        if not _is_record(value):
            # Dates, decimals, enums, UUIDs and other opaque values travel as is.
            return value
        return {name: self._encode_value(item) for name, item in to_mapping(value).items()}


def _is_record(value: Any) -> bool:
    if isinstance(value, BaseModel) or dataclasses.is_dataclass(value):
        return True
    if hasattr(type(value), "__field_table__"):
        return True
    return any(not name.startswith("_") for name in getattr(value, "__dict__", {}))
