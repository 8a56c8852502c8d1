"""Explicit success/failure values for the record store boundary."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"ok": self.value}


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying an error description."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {"err": self.error}


Result = Union[Ok[T], Err[E]]
