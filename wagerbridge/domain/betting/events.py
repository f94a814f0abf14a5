"""
Domain events.

An event is an immutable fact recorded after a state change.
Events are published by the application layer (or the gateway)
through an injected DomainEventPublisher.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

BET_PLACED = "BetPlaced"
BET_WON = "BetWon"
BET_LOST = "BetLost"
BET_CANCELLED = "BetCancelled"
BET_VOIDED = "BetVoided"

EVENT_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class DomainEvent:
    """Envelope shared by every published event."""

    event_type: str
    aggregate_id: str
    aggregate_type: str
    payload: dict[str, Any] = field(default_factory=dict)
    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = EVENT_SCHEMA_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "eventId": self.event_id,
            "eventType": self.event_type,
            "aggregateId": self.aggregate_id,
            "aggregateType": self.aggregate_type,
            "timestamp": self.timestamp.isoformat(),
            "version": self.version,
            "payload": self.payload,
        }
