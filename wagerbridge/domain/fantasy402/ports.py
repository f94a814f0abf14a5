"""
Port interfaces (ABCs) for the Fantasy402 integration context.

Internal code talks to the external wagering system only through
this port. Every method returns domain entities, never wire records.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from wagerbridge.domain.betting.value_objects import Money, OddsValue
from wagerbridge.domain.fantasy402.dtos import (
    AgentQuery,
    BetQuery,
    PlaceBetParams,
    SportEventQuery,
)
from wagerbridge.domain.fantasy402.entities import (
    FantasyAccount,
    FantasyAgent,
    FantasyBet,
    FantasySportEvent,
)


class HealthState(Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass(frozen=True)
class GatewayHealth:
    status: HealthState
    latency_ms: float
    checked_at: datetime
    error: Optional[str] = None


@dataclass(frozen=True)
class BalanceUpdateResult:
    """Outcome of a balance adjustment.

    ``previous_balance`` is derived as ``new_balance - amount`` and is
    only exact when nothing else touched the account concurrently.
    """

    agent_id: str
    previous_balance: Money
    new_balance: Money
    amount: Decimal
    reason: str


class Fantasy402GatewayPort(ABC):
    """Port for the anti-corruption gateway over Fantasy402."""

    @abstractmethod
    async def get_live_sport_events(
        self, query: Optional[SportEventQuery] = None
    ) -> list[FantasySportEvent]:
        raise NotImplementedError

    @abstractmethod
    async def get_sport_event_odds(self, event_id: str) -> list[OddsValue]:
        raise NotImplementedError

    @abstractmethod
    async def get_agents(self, query: Optional[AgentQuery] = None) -> list[FantasyAgent]:
        raise NotImplementedError

    @abstractmethod
    async def get_agent(self, agent_id: str) -> Optional[FantasyAgent]:
        raise NotImplementedError

    @abstractmethod
    async def get_agent_account(self, agent_id: str) -> Optional[FantasyAccount]:
        raise NotImplementedError

    @abstractmethod
    async def get_bets(self, query: Optional[BetQuery] = None) -> list[FantasyBet]:
        raise NotImplementedError

    @abstractmethod
    async def get_bet(self, bet_id: str) -> Optional[FantasyBet]:
        """Return the bet, or None when the external system has no such bet."""
        raise NotImplementedError

    @abstractmethod
    async def place_bet(self, params: PlaceBetParams) -> FantasyBet:
        raise NotImplementedError

    @abstractmethod
    async def cancel_bet(self, bet_id: str, reason: Optional[str] = None) -> FantasyBet:
        raise NotImplementedError

    @abstractmethod
    async def update_agent_balance(
        self, agent_id: str, amount: Decimal, reason: str
    ) -> BalanceUpdateResult:
        raise NotImplementedError

    @abstractmethod
    async def health_check(self) -> GatewayHealth:
        raise NotImplementedError
