"""Exception types for recordkit.

The best-effort operations in :mod:`recordkit.accessor` never let these
escape; the raising variants (``read_field``/``write_field``) and the result
envelope do.
"""

from __future__ import annotations

from typing import Any


class RecordkitError(Exception):
    """Base exception for recordkit."""


class FieldResolutionError(RecordkitError):
    """Base exception for a field name that does not resolve to a usable field."""

    def __init__(self, type_name: str, field_name: str, reason: str) -> None:
        super().__init__(f"Field '{field_name}' on {type_name} {reason}")
        self.type_name = type_name
        self.field_name = field_name


class FieldNotFoundError(FieldResolutionError):
    """Raised when a record type has no field with the given name."""

    def __init__(self, type_name: str, field_name: str) -> None:
        super().__init__(type_name, field_name, "does not exist")


class FieldNotReadableError(FieldResolutionError):
    """Raised when a field exists but exposes no getter."""

    def __init__(self, type_name: str, field_name: str) -> None:
        super().__init__(type_name, field_name, "is not readable")


class FieldNotWritableError(FieldResolutionError):
    """Raised when a field exists but is read-only."""

    def __init__(self, type_name: str, field_name: str) -> None:
        super().__init__(type_name, field_name, "is read-only")


class CoercionError(RecordkitError):
    """Raised when a value cannot be converted to a declared type."""

    def __init__(self, value: Any, declared_type: Any) -> None:
        super().__init__(f"Cannot coerce {type(value).__name__} value {value!r} to {_type_label(declared_type)}")
        self.value = value
        self.declared_type = declared_type


class ConstructionError(RecordkitError):
    """Raised when a record type cannot be zero-initialized."""


class NoZeroValueError(ConstructionError):
    """Raised when a declared type has no zero value."""

    def __init__(self, declared_type: Any) -> None:
        super().__init__(f"No zero value for {_type_label(declared_type)}")
        self.declared_type = declared_type


class ResultError(RecordkitError):
    """Raised when unwrapping a failed ServiceResult."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


def _type_label(declared_type: Any) -> str:
    return getattr(declared_type, "__name__", None) or repr(declared_type)
