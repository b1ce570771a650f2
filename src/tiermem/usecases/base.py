"""Shared plumbing for use cases.

Use cases are the boundary at which domain failures stop being exceptions:
``execute`` methods decorated with :func:`returns_result` hand back a
:class:`Result` instead of raising :class:`DomainError`.
"""

import functools
import logging
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from pydantic import ValidationError as PydanticValidationError

from tiermem.core.events import DomainEventBus
from tiermem.core.exceptions import DomainError, ValidationError
from tiermem.core.result import Result
from tiermem.core.types import DomainEvent

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def describe_validation_error(error: PydanticValidationError) -> str:
    """Flatten a pydantic validation error into a single message."""
    parts = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        parts.append(f"{location}: {detail['msg']}" if location else detail["msg"])
    return "; ".join(parts)


def returns_result(fn: Callable[P, T]) -> Callable[P, Result[T]]:
    """Wrap a use-case method so domain failures become failed results.

    ``DomainError`` and pydantic validation errors are caught; anything else
    propagates.
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T]:
        try:
            return Result.ok(fn(*args, **kwargs))
        except DomainError as e:
            logger.debug(f"{fn.__qualname__} failed: {e!r}")
            return Result.fail(e)
        except PydanticValidationError as e:
            error = ValidationError(describe_validation_error(e))
            logger.debug(f"{fn.__qualname__} failed: {error!r}")
            return Result.fail(error)

    return wrapper


class UseCase:
    """Base class giving use cases optional access to the event bus.

    Attributes:
        event_bus: Bus receiving the events raised by the use case, if any.
    """

    def __init__(self, event_bus: DomainEventBus | None = None):
        self.event_bus = event_bus

    def _publish(self, *events: DomainEvent) -> None:
        if self.event_bus is None:
            return
        for event in events:
            self.event_bus.publish(event)
