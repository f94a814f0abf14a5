"""
Pydantic schemas for the betting API.

Request schemas check shape and types only; betting limits (stake and
price ranges) are enforced by the use cases so that they surface as
VALIDATION_ERROR rather than as schema errors.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field

from wagerbridge.interfaces.schemas import CamelModel


class PlaceBetRequest(CamelModel):
    """Request schema for bet placement.

    Attributes:
        customer_id: Owner of the bet.
        stake: Amount wagered (0 < stake <= 10000).
        odds_price: Decimal odds (1 < price <= 100).
        selection: Outcome backed.
        market_id: Market the selection belongs to.
    """

    customer_id: str = Field(..., description="Customer placing the bet")
    stake: Decimal = Field(..., description="Amount wagered")
    odds_price: Decimal = Field(..., description="Decimal odds accepted")
    selection: str = Field(..., description="Outcome backed, e.g. 'Home'")
    market_id: str = Field(..., description="Market identifier")


class SettleBetRequest(CamelModel):
    outcome: Literal["won", "lost"]
    market_result: str = Field(..., min_length=1, max_length=255)


class ReasonRequest(CamelModel):
    """Optional body for cancel and void."""

    reason: Optional[str] = Field(default=None, max_length=255)


class SettleMarketRequest(CamelModel):
    winning_selection: str = Field(..., min_length=1, max_length=100)
    market_result: str = Field(..., min_length=1, max_length=255)


class OddsSchema(CamelModel):
    """Odds with every derived representation."""

    price: Decimal
    selection: str
    market_id: str
    fractional: str
    american: int
    implied_probability: Decimal


class BetResponse(CamelModel):
    bet_id: str
    customer_id: str
    stake: Decimal
    potential_win: Decimal
    odds: OddsSchema
    placed_at: datetime
    status: str
    settled_at: Optional[datetime] = None
    outcome: Optional[str] = None
    actual_win: Optional[Decimal] = None
    market_result: Optional[str] = None


class BetListResponse(CamelModel):
    bets: list[BetResponse]
    count: int
    limit: int
    offset: int


class BetStatisticsResponse(CamelModel):
    customer_id: Optional[str] = None
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


class SettleMarketResponse(CamelModel):
    market_id: str
    settled: int
    won: int
    lost: int
    bet_ids: list[str]
