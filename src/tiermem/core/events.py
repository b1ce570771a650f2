"""Synchronous domain event bus.

Handlers run in the caller's stack, in subscription order, as soon as an
event is published. A handler that raises propagates to the publisher.
"""

import logging
from collections import defaultdict
from collections.abc import Callable

from tiermem.core.types import DomainEvent

logger = logging.getLogger(__name__)

EPISODE_RECORDED = "EPISODE_RECORDED"
PATTERN_DETECTED = "PATTERN_DETECTED"
PATTERN_PROMOTED = "PATTERN_PROMOTED"
CLIENT_FACT_ADDED = "CLIENT_FACT_ADDED"
PREFERENCE_UPDATED = "PREFERENCE_UPDATED"
FEEDBACK_RECORDED = "FEEDBACK_RECORDED"
PROFILE_CREATED = "PROFILE_CREATED"
DISCOVERY_LINKED = "DISCOVERY_LINKED"

EventHandler = Callable[[DomainEvent], None]


class DomainEventBus:
    """Dispatches domain events to subscribed handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Register ``handler`` for events of ``event_type``."""
        self._handlers[event_type].append(handler)

    def publish(self, event: DomainEvent) -> None:
        """Deliver ``event`` to every handler registered for its type."""
        handlers = self._handlers.get(event.type, [])
        logger.debug(f"Publishing {event.type} to {len(handlers)} handler(s)")
        for handler in list(handlers):
            handler(event)

    def publish_all(self, events: list[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    def clear(self) -> None:
        """Drop all subscriptions."""
        self._handlers.clear()
