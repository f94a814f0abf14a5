"""
Data Transfer Objects for the Fantasy402 application layer.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from wagerbridge.domain.fantasy402.entities import (
    FantasyAccount,
    FantasyBet,
    FantasySportEvent,
)


@dataclass(frozen=True)
class PlaceExternalBetCommand:
    """Input DTO for a wager routed to Fantasy402.

    Attributes:
        agent_id: Agent whose account funds the wager.
        event_id: External sport event id.
        selection: Outcome backed.
        amount: Stake.
        odds: Odds figure, read according to ``odds_format``.
        odds_format: "decimal" or "american".
        customer_id: Optional end customer.
        market: Optional market type, e.g. "moneyline".
    """

    agent_id: str
    event_id: str
    selection: str
    amount: Decimal
    odds: Decimal
    odds_format: str = "decimal"
    customer_id: Optional[str] = None
    market: Optional[str] = None


@dataclass(frozen=True)
class ReconcileAgentBalanceCommand:
    agent_id: str
    internal_balance: Decimal


@dataclass(frozen=True)
class ExternalBetResult:
    bet_id: str
    agent_id: str
    event_id: str
    selection: str
    amount: Decimal
    currency: str
    odds: Decimal
    odds_format: str
    status: str
    potential_payout: Decimal
    placed_at: datetime


@dataclass(frozen=True)
class AccountResult:
    account_id: str
    agent_id: str
    current_balance: Decimal
    available_balance: Decimal
    pending_wagers: Decimal
    credit_limit: Decimal
    currency: str
    status: str
    utilization_percentage: Decimal


@dataclass(frozen=True)
class SportEventResult:
    event_id: str
    sport: str
    league: str
    name: str
    home_team: str
    away_team: str
    start_time: datetime
    status: str
    home_score: Optional[int]
    away_score: Optional[int]
    betting_open: bool


@dataclass(frozen=True)
class ReconcileAgentBalanceResult:
    """Output DTO of a balance reconciliation.

    ``difference`` is external minus internal.
    """

    agent_id: str
    internal_balance: Decimal
    external_balance: Decimal
    difference: Decimal
    currency: str
    in_sync: bool


def to_external_bet_result(bet: FantasyBet) -> ExternalBetResult:
    return ExternalBetResult(
        bet_id=bet.external_id,
        agent_id=bet.agent_id,
        event_id=bet.event_id,
        selection=bet.selection,
        amount=bet.amount.amount,
        currency=bet.amount.currency,
        odds=bet.odds,
        odds_format=bet.odds_format.value,
        status=bet.status.value,
        potential_payout=bet.calculate_potential_payout().amount,
        placed_at=bet.placed_at,
    )


def to_account_result(account: FantasyAccount) -> AccountResult:
    return AccountResult(
        account_id=account.external_id,
        agent_id=account.agent_id,
        current_balance=account.current_balance.amount,
        available_balance=account.available_balance.amount,
        pending_wagers=account.pending_wagers.amount,
        credit_limit=account.credit_limit.amount,
        currency=account.currency,
        status=account.status.value,
        utilization_percentage=account.get_utilization_percentage(),
    )


def to_sport_event_result(event: FantasySportEvent) -> SportEventResult:
    return SportEventResult(
        event_id=event.external_id,
        sport=event.sport,
        league=event.league,
        name=event.display_name,
        home_team=event.home_team,
        away_team=event.away_team,
        start_time=event.start_time,
        status=event.status.value,
        home_score=event.home_score,
        away_score=event.away_score,
        betting_open=event.is_betting_open(),
    )
