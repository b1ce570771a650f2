"""Result type returned across the use-case boundary.

Use cases never let a :class:`DomainError` escape; they return a failed
``Result`` carrying it instead.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from tiermem.core.exceptions import DomainError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Discriminated success/failure value.

    Build instances with :meth:`ok` or :meth:`fail`; accessing ``value`` on a
    failure (or ``error`` on a success) raises ``RuntimeError``.
    """

    _value: T | None = None
    _error: DomainError | None = None

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(_value=value)

    @classmethod
    def fail(cls, error: DomainError) -> "Result[T]":
        return cls(_error=error)

    def is_ok(self) -> bool:
        return self._error is None

    def is_err(self) -> bool:
        return self._error is not None

    @property
    def value(self) -> T:
        if self._error is not None:
            raise RuntimeError("Cannot access value of an error Result")
        return self._value  # type: ignore[return-value]

    @property
    def error(self) -> DomainError:
        if self._error is None:
            raise RuntimeError("Cannot access error of a success Result")
        return self._error

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        """Apply ``fn`` to the value of a success, pass failures through."""
        if self._error is None:
            return Result.ok(fn(self._value))  # type: ignore[arg-type]
        return Result.fail(self._error)
