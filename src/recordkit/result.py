"""Operation result envelope."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from recordkit.errors import ResultError

T = TypeVar("T")
U = TypeVar("U")


class ServiceResult(BaseModel, Generic[T]):
    """Outcome of one operation: success flag, payload, errors and a total count.

    A successful result carries no errors; a failed one carries no payload
    and at least one error. Build them with :meth:`ok` and :meth:`fail`.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    payload: T | None = None
    errors: list[str] = Field(default_factory=list)
    total_count: int = 0

    @model_validator(mode="after")
    def check_outcome(self) -> ServiceResult[T]:
        if self.success and self.errors:
            raise ValueError("a successful result cannot carry errors")
        if not self.success and not self.errors:
            raise ValueError("a failed result needs at least one error")
        if not self.success and self.payload is not None:
            raise ValueError("a failed result cannot carry a payload")
        return self

    @classmethod
    def ok(cls, payload: T | None = None, *, total_count: int = 0) -> ServiceResult[T]:
        return cls(success=True, payload=payload, total_count=total_count)

    @classmethod
    def fail(cls, *errors: str, total_count: int = 0) -> ServiceResult[T]:
        return cls(success=False, errors=list(errors), total_count=total_count)

    def __bool__(self) -> bool:
        return self.success

    def unwrap(self) -> T | None:
        """Return the payload, raising ``ResultError`` with the collected errors on failure."""
        if not self.success:
            raise ResultError(self.errors)
        return self.payload

    def map(self, fn: Callable[[T | None], U]) -> ServiceResult[U]:
        if not self.success:
            return ServiceResult.fail(*self.errors, total_count=self.total_count)
        return ServiceResult.ok(fn(self.payload), total_count=self.total_count)
