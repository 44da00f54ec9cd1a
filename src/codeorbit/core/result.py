"""
Outcome of a check that may legitimately fail.

A graph handed over by a producer is expected to be malformed now and
then, so ``validate`` returns its verdict as a value: ``Ok`` wrapping the
accepted graph, or ``Err`` wrapping the list of integrity issues. The
store decides whether that becomes an exception.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Accepted; ``value`` is the checked object."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """Rejected; ``error`` says why."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise ValueError(f"Rejected: {self.error}")


Result = Union[Ok[T], Err[E]]
