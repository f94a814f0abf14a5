"""
Adapter: In-process domain event bus.

Implements DomainEventPublisher.
Maps topic strings to lists of async handlers. Constructed once in the
composition root and injected wherever events are published; there is
no module-level instance.
"""

import asyncio
import logging
from collections import defaultdict

from wagerbridge.domain.betting.events import DomainEvent
from wagerbridge.domain.betting.ports import DomainEventPublisher, EventHandler

logger = logging.getLogger(__name__)

WILDCARD = "*"


class InMemoryEventBus(DomainEventPublisher):
    """Publish/subscribe over async handlers.

    Handlers for a topic (and wildcard handlers) run concurrently; a
    failing handler is logged and does not prevent the others from
    receiving the event.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._stats = {"published": 0, "delivered": 0, "handler_errors": 0}

    @property
    def stats(self) -> dict:
        return dict(self._stats)

    def subscribe(self, topic: str, handler: EventHandler) -> None:
        if handler not in self._handlers[topic]:
            self._handlers[topic].append(handler)
            logger.debug("Handler subscribed to %s", topic)

    def unsubscribe(self, topic: str, handler: EventHandler) -> None:
        if handler in self._handlers.get(topic, []):
            self._handlers[topic].remove(handler)

    def handlers_for(self, topic: str) -> list[EventHandler]:
        return list(self._handlers.get(topic, [])) + list(
            self._handlers.get(WILDCARD, [])
        )

    async def publish(self, event: DomainEvent) -> int:
        self._stats["published"] += 1
        handlers = self.handlers_for(event.event_type)
        if not handlers:
            logger.debug("No subscribers for %s", event.event_type)
            return 0

        results = await asyncio.gather(
            *(handler(event) for handler in handlers), return_exceptions=True
        )

        delivered = 0
        for result in results:
            if isinstance(result, Exception):
                self._stats["handler_errors"] += 1
                logger.error(
                    "Handler for %s (event_id=%s) failed: %s",
                    event.event_type,
                    event.event_id,
                    result,
                )
            else:
                delivered += 1
        self._stats["delivered"] += delivered
        return delivered
