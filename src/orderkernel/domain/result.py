"""Typed results for operations whose failure is a routine business outcome.

An operation returns either ``Ok(value)`` or ``Err(error)``; callers branch
on it instead of catching exceptions::

    match Email.create(raw):
        case Ok(email):
            ...
        case Err(error):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

from orderkernel.domain.exceptions import UnwrapError

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))

    def and_then(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return fn(self.value)


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise UnwrapError(self.error)

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, fn: Callable) -> Err[E]:
        return self

    def and_then(self, fn: Callable) -> Err[E]:
        return self


Result = Union[Ok[T], Err[E]]
