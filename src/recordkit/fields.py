"""Field tables: the per-type capability the accessor operates against."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass
from functools import partial
from operator import attrgetter, itemgetter
from typing import Any, ClassVar, Final, get_args, get_origin, get_type_hints

from pydantic import BaseModel
from pydantic_core import PydanticUndefined

from recordkit.coercion import zero_value
from recordkit.errors import ConstructionError

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]


@dataclass(frozen=True)
class FieldAccessor:
    """One named field of a record type and how to read and write it."""

    name: str
    declared_type: Any
    getter: Getter | None
    setter: Setter | None = None

    @property
    def readable(self) -> bool:
        return self.getter is not None

    @property
    def writable(self) -> bool:
        return self.setter is not None


class FieldTable:
    """Ordered field accessors of one record type, plus a zero-initializing factory.

    Types may provide their own table through a ``__field_table__`` classmethod;
    otherwise :func:`field_table` generates one for dataclasses, pydantic models,
    mappings and plain annotated classes.
    """

    def __init__(
        self,
        owner: type,
        accessors: Iterable[FieldAccessor],
        *,
        factory: Callable[[], Any] | None = None,
        extra: Callable[[str], FieldAccessor] | None = None,
    ) -> None:
        self.owner = owner
        self._accessors: dict[str, FieldAccessor] = {}
        for accessor in accessors:
            self._accessors.setdefault(accessor.name, accessor)
        self._factory = factory
        self._extra = extra

    def __contains__(self, name: object) -> bool:
        return name in self._accessors

    def __iter__(self) -> Iterator[FieldAccessor]:
        return iter(self._accessors.values())

    def __len__(self) -> int:
        return len(self._accessors)

    def get(self, name: str, *, creating: bool = False) -> FieldAccessor | None:
        """Resolve ``name``; ``creating`` lets open tables (mutable mappings) accept new keys."""
        accessor = self._accessors.get(name)
        if accessor is None and creating and self._extra is not None:
            return self._extra(name)
        return accessor

    def names(self, *, readable_only: bool = True) -> list[str]:
        return [accessor.name for accessor in self if accessor.readable or not readable_only]

    def construct(self) -> Any:
        """Build a new instance with defaults where declared and zero values elsewhere.

        Raises:
            ConstructionError: When the type has no factory or the factory rejects the zero values.
        """
        if self._factory is None:
            raise ConstructionError(f"{self.owner.__name__} cannot be constructed")
        try:
            return self._factory()
        except ConstructionError:
            raise
        except (AttributeError, TypeError, ValueError) as exc:
            raise ConstructionError(f"{self.owner.__name__} cannot be constructed: {exc}") from exc


def field_table(subject: Any) -> FieldTable:
    """Return the field table for a record instance or a record type.

    Tables are built on every call. Passing an instance rather than its type
    also picks up instance-only attributes and mapping keys.
    """
    record_type = subject if isinstance(subject, type) else type(subject)
    instance = None if isinstance(subject, type) else subject

    provider = getattr(record_type, "__field_table__", None)
    if provider is not None:
        return provider()
    if issubclass(record_type, BaseModel):
        return _model_table(record_type)
    if dataclasses.is_dataclass(record_type):
        return _dataclass_table(record_type)
    if issubclass(record_type, Mapping):
        return _mapping_table(record_type, instance)
    return _class_table(record_type, instance)


def construct(target_type: type) -> Any:
    return field_table(target_type).construct()


def attribute_accessor(name: str, declared_type: Any = Any, *, readonly: bool = False) -> FieldAccessor:
    """Accessor for a plain attribute, usable when hand-writing a ``__field_table__``."""
    setter = None if readonly else partial(_set_attribute, name)
    return FieldAccessor(name=name, declared_type=declared_type, getter=attrgetter(name), setter=setter)


def _set_attribute(name: str, record: Any, value: Any) -> None:
    setattr(record, name, value)


def _set_item(key: str, record: Any, value: Any) -> None:
    record[key] = value


def _model_table(record_type: type[BaseModel]) -> FieldTable:
    frozen = bool(record_type.model_config.get("frozen", False))
    accessors = [
        attribute_accessor(name, info.annotation, readonly=frozen or bool(info.frozen))
        for name, info in record_type.model_fields.items()
    ]
    for name, info in record_type.model_computed_fields.items():
        declared = Any if info.return_type is PydanticUndefined else info.return_type
        accessors.append(FieldAccessor(name=name, declared_type=declared, getter=attrgetter(name)))
    accessors.extend(_property_accessors(record_type, skip={accessor.name for accessor in accessors}))
    return FieldTable(record_type, accessors, factory=partial(_construct_model, record_type))


def _construct_model(record_type: type[BaseModel]) -> BaseModel:
    values = {
        name: zero_value(info.annotation) for name, info in record_type.model_fields.items() if info.is_required()
    }
    return record_type.model_construct(**values)


def _dataclass_table(record_type: type) -> FieldTable:
    hints = _type_hints(record_type)
    frozen = record_type.__dataclass_params__.frozen  # type: ignore[attr-defined]
    accessors: list[FieldAccessor] = []
    for item in dataclasses.fields(record_type):
        declared, final = _strip_final(hints.get(item.name, Any))
        readonly = frozen or final or bool(item.metadata.get("readonly", False))
        accessors.append(attribute_accessor(item.name, declared, readonly=readonly))
    accessors.extend(_property_accessors(record_type, skip={accessor.name for accessor in accessors}))
    return FieldTable(record_type, accessors, factory=partial(_construct_dataclass, record_type, hints))


def _construct_dataclass(record_type: type, hints: dict[str, Any]) -> Any:
    values: dict[str, Any] = {}
    for item in dataclasses.fields(record_type):
        if not item.init:
            continue
        if item.default is dataclasses.MISSING and item.default_factory is dataclasses.MISSING:
            values[item.name] = zero_value(_strip_final(hints.get(item.name, Any))[0])
    return record_type(**values)


def _mapping_table(record_type: type, instance: Mapping[Any, Any] | None) -> FieldTable:
    keys = [key for key in instance if isinstance(key, str)] if instance is not None else []
    mutable = issubclass(record_type, MutableMapping)

    def accessor_for(key: str) -> FieldAccessor:
        setter = partial(_set_item, key) if mutable else None
        return FieldAccessor(name=key, declared_type=Any, getter=itemgetter(key), setter=setter)

    return FieldTable(
        record_type,
        [accessor_for(key) for key in keys],
        factory=record_type,
        extra=accessor_for if mutable else None,
    )


def _class_table(record_type: type, instance: Any) -> FieldTable:
    accessors = [
        attribute_accessor(name, declared, readonly=final)
        for name, (declared, final) in _annotated(record_type).items()
    ]
    accessors.extend(_property_accessors(record_type, skip={accessor.name for accessor in accessors}))
    if instance is not None and hasattr(instance, "__dict__"):
        known = {accessor.name for accessor in accessors}
        accessors.extend(
            attribute_accessor(name) for name in vars(instance) if not name.startswith("_") and name not in known
        )
    return FieldTable(record_type, accessors, factory=partial(_construct_plain, record_type))


def _annotated(record_type: type) -> dict[str, tuple[Any, bool]]:
    """Public, non-ClassVar annotations as ``name -> (declared type, is Final)``."""
    annotated: dict[str, tuple[Any, bool]] = {}
    for name, declared in _type_hints(record_type).items():
        if name.startswith("_") or declared is ClassVar or get_origin(declared) is ClassVar:
            continue
        annotated[name] = _strip_final(declared)
    return annotated


def _construct_plain(record_type: type) -> Any:
    instance = record_type()
    for name, (declared, final) in _annotated(record_type).items():
        # Final attributes are left to the class.
        if final or hasattr(instance, name):
            continue
        setattr(instance, name, zero_value(declared))
    return instance


def _property_accessors(record_type: type, *, skip: set[str]) -> list[FieldAccessor]:
    found: dict[str, property] = {}
    for klass in reversed(record_type.__mro__):
        if klass in (object, BaseModel):
            continue
        for name, member in vars(klass).items():
            if isinstance(member, property) and not name.startswith("_"):
                found[name] = member

    accessors: list[FieldAccessor] = []
    for name, member in found.items():
        if name in skip:
            continue
        declared = _type_hints(member.fget).get("return", Any) if member.fget is not None else Any
        accessors.append(
            FieldAccessor(
                name=name,
                declared_type=declared,
                getter=attrgetter(name) if member.fget is not None else None,
                setter=partial(_set_attribute, name) if member.fset is not None else None,
            )
        )
    return accessors


def _strip_final(declared: Any) -> tuple[Any, bool]:
    if declared is Final:
        return Any, True
    if get_origin(declared) is Final:
        return get_args(declared)[0], True
    return declared, False


def _type_hints(target: Any) -> dict[str, Any]:
    try:
        return get_type_hints(target, include_extras=True)
    except (NameError, TypeError, AttributeError):
        # Unresolvable forward references; fields fall back to Any.
        return {}
