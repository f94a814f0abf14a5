"""
Pydantic schemas for the Fantasy402 integration API.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field

from wagerbridge.interfaces.schemas import CamelModel


class PlaceExternalBetRequest(CamelModel):
    """Request schema for placing a bet on Fantasy402.

    Attributes:
        agent_id: Agent whose account funds the wager.
        event_id: External sport event id.
        selection: Outcome backed.
        amount: Stake.
        odds: Odds figure in ``odds_format``.
        odds_format: "decimal" (default) or "american".
    """

    agent_id: str = Field(..., min_length=1, max_length=50)
    event_id: str = Field(..., min_length=1, max_length=50)
    selection: str = Field(..., min_length=1, max_length=100)
    amount: Decimal
    odds: Decimal
    odds_format: Literal["decimal", "american"] = "decimal"
    customer_id: Optional[str] = Field(default=None, max_length=100)
    market: Optional[str] = Field(default=None, max_length=50)


class ReconcileBalanceRequest(CamelModel):
    internal_balance: Decimal


class SportEventSchema(CamelModel):
    event_id: str
    sport: str
    league: str
    name: str
    home_team: str
    away_team: str
    start_time: datetime
    status: str
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    betting_open: bool


class SportEventListResponse(CamelModel):
    events: list[SportEventSchema]
    count: int


class AccountResponse(CamelModel):
    account_id: str
    agent_id: str
    current_balance: Decimal
    available_balance: Decimal
    pending_wagers: Decimal
    credit_limit: Decimal
    currency: str
    status: str
    utilization_percentage: Decimal


class ExternalBetResponse(CamelModel):
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


class ReconcileBalanceResponse(CamelModel):
    agent_id: str
    internal_balance: Decimal
    external_balance: Decimal
    difference: Decimal
    currency: str
    in_sync: bool


class ExternalHealthResponse(CamelModel):
    status: str
    latency_ms: float
    checked_at: datetime
    error: Optional[str] = None
