"""
Data Transfer Objects for the betting application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from wagerbridge.domain.betting.entities import Bet


@dataclass(frozen=True)
class PlaceBetCommand:
    """Input DTO for placing a bet.

    Attributes:
        customer_id: Owner of the bet.
        stake: Amount wagered.
        odds_price: Decimal odds accepted by the customer.
        selection: Outcome backed, e.g. "Home".
        market_id: Market the selection belongs to.
    """

    customer_id: str
    stake: Decimal
    odds_price: Decimal
    selection: str
    market_id: str


@dataclass(frozen=True)
class SettleBetCommand:
    """Input DTO for settling a single bet.

    Attributes:
        bet_id: Bet to settle.
        won: True to settle as won, False as lost.
        market_result: Result description recorded on the bet.
    """

    bet_id: str
    won: bool
    market_result: str


@dataclass(frozen=True)
class CancelBetCommand:
    bet_id: str
    reason: Optional[str] = None


@dataclass(frozen=True)
class VoidBetCommand:
    bet_id: str
    reason: Optional[str] = None


@dataclass(frozen=True)
class ListCustomerBetsQuery:
    """Input DTO for a customer's bet history.

    Attributes:
        customer_id: Owner of the bets.
        status: Optional status filter ("open", "won", ...).
        limit: Page size.
        offset: Number of bets skipped.
    """

    customer_id: str
    status: Optional[str] = None
    limit: int = 50
    offset: int = 0


@dataclass(frozen=True)
class SettleMarketCommand:
    """Input DTO for settling every open bet on a market.

    Attributes:
        market_id: Market being resulted.
        winning_selection: Selection that won; all others lose.
        market_result: Result description recorded on each bet.
    """

    market_id: str
    winning_selection: str
    market_result: str


@dataclass(frozen=True)
class BetResult:
    """Output DTO describing a bet and its odds."""

    bet_id: str
    customer_id: str
    stake: Decimal
    potential_win: Decimal
    odds_price: Decimal
    selection: str
    market_id: str
    fractional_odds: str
    american_odds: int
    implied_probability: Decimal
    placed_at: datetime
    status: str
    settled_at: Optional[datetime] = None
    outcome: Optional[str] = None
    actual_win: Optional[Decimal] = None
    market_result: Optional[str] = None


@dataclass(frozen=True)
class BetStatisticsResult:
    customer_id: Optional[str]
    total_bets: int
    open_bets: int
    won_bets: int
    lost_bets: int
    cancelled_bets: int
    voided_bets: int
    total_staked: Decimal
    total_payout: Decimal
    net_result: Decimal
    win_rate: Decimal


@dataclass(frozen=True)
class SettleMarketResult:
    market_id: str
    settled: int
    won: int
    lost: int
    bet_ids: list[str]


def to_bet_result(bet: Bet) -> BetResult:
    """Flatten a Bet aggregate into its output DTO."""
    odds = bet.odds
    return BetResult(
        bet_id=bet.id,
        customer_id=bet.customer_id,
        stake=bet.stake,
        potential_win=bet.potential_win,
        odds_price=odds.price,
        selection=odds.selection,
        market_id=odds.market_id,
        fractional_odds=odds.fractional_odds,
        american_odds=odds.american_odds,
        implied_probability=odds.implied_probability,
        placed_at=bet.placed_at,
        status=bet.status.value,
        settled_at=bet.settled_at,
        outcome=bet.outcome,
        actual_win=bet.actual_win,
        market_result=bet.market_result,
    )
