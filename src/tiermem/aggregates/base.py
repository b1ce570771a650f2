"""Base class for aggregates that raise domain events."""

from tiermem.core.types import DomainEvent


class AggregateRoot:
    """Collects domain events until the caller publishes them.

    Events are not published automatically; the use case that persisted the
    aggregate pulls them and hands them to the event bus.
    """

    def __init__(self) -> None:
        self._uncommitted_events: list[DomainEvent] = []

    def _add_domain_event(self, event: DomainEvent) -> None:
        self._uncommitted_events.append(event)

    def get_uncommitted_events(self) -> list[DomainEvent]:
        return list(self._uncommitted_events)

    def clear_uncommitted_events(self) -> None:
        self._uncommitted_events = []

    def pull_events(self) -> list[DomainEvent]:
        """Return and clear the uncommitted events."""
        events = self.get_uncommitted_events()
        self.clear_uncommitted_events()
        return events
