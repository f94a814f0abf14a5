"""
Shapes of Fantasy402 records and requests.

The adapter parses wire JSON into these dataclasses; the gateway maps
them into entities. They carry no behavior and know nothing about
HTTP, JSON field names or envelopes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class OddsDTO:
    """A decimal price for one selection of one market."""

    market_id: str
    selection: str
    price: Decimal
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class SportEventDTO:
    id: str
    sport: str
    league: str
    home_team: str
    away_team: str
    start_time: datetime
    status: str
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    odds: tuple[OddsDTO, ...] = ()


@dataclass(frozen=True)
class AgentDTO:
    id: str
    name: str
    level: str
    status: str
    parent_id: Optional[str] = None
    permissions: tuple[str, ...] = ()
    commission_rate: Decimal = Decimal("0")


@dataclass(frozen=True)
class AccountDTO:
    id: str
    agent_id: str
    current_balance: Decimal
    available_balance: Decimal
    pending_wagers: Decimal
    credit_limit: Decimal
    currency: str = "USD"
    status: str = "active"


@dataclass(frozen=True)
class BetDTO:
    id: str
    agent_id: str
    event_id: str
    selection: str
    amount: Decimal
    odds: Decimal
    status: str
    placed_at: datetime
    customer_id: Optional[str] = None
    market: Optional[str] = None
    odds_format: Optional[str] = None
    currency: str = "USD"
    settled_at: Optional[datetime] = None
    payout: Optional[Decimal] = None


@dataclass(frozen=True)
class BalanceUpdateDTO:
    agent_id: str
    new_balance: Decimal
    currency: str = "USD"
    transaction_id: Optional[str] = None


@dataclass(frozen=True)
class SportEventQuery:
    """Filters for listing sport events."""

    sport: Optional[str] = None
    league: Optional[str] = None
    status: Optional[str] = "live"
    start_after: Optional[datetime] = None
    start_before: Optional[datetime] = None
    limit: int = 100


@dataclass(frozen=True)
class AgentQuery:
    parent_id: Optional[str] = None
    level: Optional[str] = None
    status: Optional[str] = None
    limit: int = 100


@dataclass(frozen=True)
class BetQuery:
    agent_id: Optional[str] = None
    customer_id: Optional[str] = None
    event_id: Optional[str] = None
    status: Optional[str] = None
    limit: int = 100


@dataclass(frozen=True)
class PlaceBetParams:
    """Request to place a wager on the external system."""

    agent_id: str
    event_id: str
    selection: str
    amount: Decimal
    odds: Decimal
    odds_format: str = "decimal"
    customer_id: Optional[str] = None
    market: Optional[str] = None
    metadata: dict = field(default_factory=dict)
