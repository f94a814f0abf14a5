"""
Port interfaces (ABCs) for the betting bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional

from wagerbridge.domain.betting.entities import Bet, BetStatistics, BetStatus
from wagerbridge.domain.betting.events import DomainEvent

EventHandler = Callable[[DomainEvent], Awaitable[Any]]


class BetRepository(ABC):
    """Port for storing and querying bets.

    Bets are never physically deleted: ``soft_delete`` hides a bet from
    every query while keeping its row.
    """

    @abstractmethod
    def save(self, bet: Bet) -> None:
        """Insert or update a bet."""
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, bet_id: str) -> Optional[Bet]:
        """Return the bet with this id, or None if missing or deleted."""
        raise NotImplementedError

    @abstractmethod
    def find_by_customer(
        self,
        customer_id: str,
        status: Optional[BetStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Bet]:
        """Return a customer's bets, newest first.

        Args:
            customer_id: Owner of the bets.
            status: Optional status filter.
            limit: Maximum number of bets to return.
            offset: Number of bets to skip.
        """
        raise NotImplementedError

    @abstractmethod
    def find_open_by_market(self, market_id: str) -> list[Bet]:
        """Return all OPEN bets placed on a market."""
        raise NotImplementedError

    @abstractmethod
    def soft_delete(self, bet_id: str) -> bool:
        """Hide a bet from queries. Returns False if it did not exist."""
        raise NotImplementedError

    @abstractmethod
    def get_statistics(self, customer_id: Optional[str] = None) -> BetStatistics:
        """Return aggregated figures, optionally for a single customer."""
        raise NotImplementedError


class DomainEventPublisher(ABC):
    """Port for publishing domain events to subscribers."""

    @abstractmethod
    async def publish(self, event: DomainEvent) -> int:
        """Deliver an event to its subscribers.

        Returns:
            Number of handlers that ran successfully.
        """
        raise NotImplementedError

    @abstractmethod
    def subscribe(self, topic: str, handler: EventHandler) -> None:
        """Register an async handler for an event type (``"*"`` for all)."""
        raise NotImplementedError

    async def publish_all(self, events: list[DomainEvent]) -> None:
        """Publish events one by one, in recording order."""
        for event in events:
            await self.publish(event)
