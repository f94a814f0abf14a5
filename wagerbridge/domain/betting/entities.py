"""
Domain entities for the betting bounded context.

The Bet aggregate owns its settlement lifecycle:

    OPEN ──▶ WON | LOST | CANCELLED | VOIDED   (all terminal)

Every transition records exactly one domain event. Business-policy
caps on stake and odds are checked by the placement use case, not here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Iterable, Optional
from uuid import uuid4

from wagerbridge.domain.betting import events
from wagerbridge.domain.betting.errors import (
    BetCannotCancelError,
    BetCannotSettleError,
    BetCannotVoidError,
    ValidationError,
)
from wagerbridge.domain.betting.events import DomainEvent
from wagerbridge.domain.betting.odds_utils import Number, to_decimal
from wagerbridge.domain.betting.value_objects import OddsValue

AGGREGATE_TYPE = "Bet"
CENT = Decimal("0.01")
ZERO = Decimal("0.00")
MAX_TEXT_LENGTH = 255

_FACTORY_TOKEN = object()


class BetStatus(Enum):
    """Lifecycle state of a bet."""

    OPEN = "OPEN"
    WON = "WON"
    LOST = "LOST"
    CANCELLED = "CANCELLED"
    VOIDED = "VOIDED"

    @property
    def is_terminal(self) -> bool:
        return self is not BetStatus.OPEN


def _money(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _check_text(value: Optional[str], field: str) -> None:
    if value is not None and len(value) > MAX_TEXT_LENGTH:
        raise ValidationError(
            f"{field.capitalize()} cannot exceed {MAX_TEXT_LENGTH} characters", field=field
        )


class Bet:
    """A customer's stake on a selection at fixed odds.

    Build instances with ``Bet.create`` (new placement) or
    ``Bet.reconstitute`` (rehydration from storage); the initializer
    rejects any other caller.
    """

    def __init__(
        self,
        token: object,
        *,
        bet_id: str,
        customer_id: str,
        stake: Decimal,
        potential_win: Decimal,
        odds: OddsValue,
        placed_at: datetime,
        status: BetStatus = BetStatus.OPEN,
        settled_at: Optional[datetime] = None,
        outcome: Optional[str] = None,
        actual_win: Optional[Decimal] = None,
        market_result: Optional[str] = None,
    ) -> None:
        if token is not _FACTORY_TOKEN:
            raise TypeError("Use Bet.create() or Bet.reconstitute() to build a Bet")
        self._id = bet_id
        self._customer_id = customer_id
        self._stake = stake
        self._potential_win = potential_win
        self._odds = odds
        self._placed_at = placed_at
        self._status = status
        self._settled_at = settled_at
        self._outcome = outcome
        self._actual_win = actual_win
        self._market_result = market_result
        self._domain_events: list[DomainEvent] = []

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def create(cls, customer_id: str, stake: Number, odds: OddsValue) -> Bet:
        """Place a new bet and record ``BetPlaced``."""
        stake = _money(stake)
        bet = cls(
            _FACTORY_TOKEN,
            bet_id=str(uuid4()),
            customer_id=customer_id,
            stake=stake,
            potential_win=_money(stake * odds.price),
            odds=odds,
            placed_at=_now(),
        )
        bet._record(
            events.BET_PLACED,
            {
                "betId": bet.id,
                "customerId": bet.customer_id,
                "stake": bet.stake,
                "potentialWin": bet.potential_win,
                "odds": odds.to_dict(),
                "placedAt": bet.placed_at.isoformat(),
            },
        )
        return bet

    @classmethod
    def reconstitute(
        cls,
        *,
        bet_id: str,
        customer_id: str,
        stake: Number,
        potential_win: Number,
        odds: OddsValue,
        placed_at: datetime,
        status: BetStatus,
        settled_at: Optional[datetime] = None,
        outcome: Optional[str] = None,
        actual_win: Optional[Number] = None,
        market_result: Optional[str] = None,
    ) -> Bet:
        """Rebuild a stored bet. Records no events."""
        return cls(
            _FACTORY_TOKEN,
            bet_id=bet_id,
            customer_id=customer_id,
            stake=_money(stake),
            potential_win=_money(potential_win),
            odds=odds,
            placed_at=placed_at,
            status=status,
            settled_at=settled_at,
            outcome=outcome,
            actual_win=_money(actual_win) if actual_win is not None else None,
            market_result=market_result,
        )

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self._id

    @property
    def customer_id(self) -> str:
        return self._customer_id

    @property
    def stake(self) -> Decimal:
        return self._stake

    @property
    def potential_win(self) -> Decimal:
        return self._potential_win

    @property
    def odds(self) -> OddsValue:
        return self._odds

    @property
    def placed_at(self) -> datetime:
        return self._placed_at

    @property
    def status(self) -> BetStatus:
        return self._status

    @property
    def settled_at(self) -> Optional[datetime]:
        return self._settled_at

    @property
    def outcome(self) -> Optional[str]:
        return self._outcome

    @property
    def actual_win(self) -> Optional[Decimal]:
        return self._actual_win

    @property
    def market_result(self) -> Optional[str]:
        return self._market_result

    def is_open(self) -> bool:
        return self._status is BetStatus.OPEN

    def is_settled(self) -> bool:
        return self._status.is_terminal

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def settle_as_won(self, market_result: str) -> None:
        """Settle as a winner: the full potential win is paid out."""
        if not self.is_open():
            raise BetCannotSettleError(self._id, self._status.value)
        _check_text(market_result, "market_result")
        self._finish(BetStatus.WON, self._potential_win, outcome="won")
        self._market_result = market_result
        self._record(events.BET_WON, self._settlement_payload())

    def settle_as_lost(self, market_result: str) -> None:
        """Settle as a loser: nothing is paid out."""
        if not self.is_open():
            raise BetCannotSettleError(self._id, self._status.value)
        _check_text(market_result, "market_result")
        self._finish(BetStatus.LOST, ZERO, outcome="lost")
        self._market_result = market_result
        self._record(events.BET_LOST, self._settlement_payload())

    def cancel(self, reason: Optional[str] = None) -> None:
        """Cancel the bet and return the full stake."""
        if not self.is_open():
            raise BetCannotCancelError(self._id, self._status.value)
        _check_text(reason, "reason")
        self._finish(BetStatus.CANCELLED, self._stake, outcome=reason or "cancelled")
        self._record(events.BET_CANCELLED, self._refund_payload(reason))

    def void(self, reason: Optional[str] = None) -> None:
        """Void the bet and return the full stake."""
        if not self.is_open():
            raise BetCannotVoidError(self._id, self._status.value)
        _check_text(reason, "reason")
        self._finish(BetStatus.VOIDED, self._stake, outcome=reason or "voided")
        self._record(events.BET_VOIDED, self._refund_payload(reason))

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def get_net_result(self) -> Decimal:
        """Profit or loss relative to the stake.

        Cancelled and voided bets net to zero because the stake came
        back as ``actual_win``.
        """
        if self._status is BetStatus.WON:
            return self._actual_win - self._stake
        if self._status is BetStatus.LOST:
            return -self._stake
        return ZERO

    def get_total_payout(self) -> Decimal:
        if self.is_settled() and self._actual_win is not None:
            return self._actual_win
        return ZERO

    # ------------------------------------------------------------------
    # Domain events
    # ------------------------------------------------------------------

    @property
    def domain_events(self) -> list[DomainEvent]:
        return list(self._domain_events)

    def pull_domain_events(self) -> list[DomainEvent]:
        """Return the recorded events and clear them."""
        pending, self._domain_events = self._domain_events, []
        return pending

    def _record(self, event_type: str, payload: dict[str, Any]) -> None:
        self._domain_events.append(
            DomainEvent(
                event_type=event_type,
                aggregate_id=self._id,
                aggregate_type=AGGREGATE_TYPE,
                payload=payload,
            )
        )

    def _finish(self, status: BetStatus, actual_win: Decimal, outcome: str) -> None:
        self._status = status
        self._actual_win = actual_win
        self._outcome = outcome
        self._settled_at = _now()

    def _settlement_payload(self) -> dict[str, Any]:
        return {
            "betId": self._id,
            "customerId": self._customer_id,
            "stake": self._stake,
            "potentialWin": self._potential_win,
            "actualWin": self._actual_win,
            "marketResult": self._market_result,
            "settledAt": self._settled_at.isoformat(),
        }

    def _refund_payload(self, reason: Optional[str]) -> dict[str, Any]:
        return {
            "betId": self._id,
            "customerId": self._customer_id,
            "stake": self._stake,
            "refundAmount": self._actual_win,
            "reason": reason,
            "settledAt": self._settled_at.isoformat(),
        }

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Bet) and other._id == self._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"Bet(id={self._id!r}, customer_id={self._customer_id!r}, "
            f"stake={self._stake}, status={self._status.value})"
        )


@dataclass(frozen=True)
class BetStatistics:
    """Aggregated figures over a set of bets."""

    total_bets: int = 0
    open_bets: int = 0
    won_bets: int = 0
    lost_bets: int = 0
    cancelled_bets: int = 0
    voided_bets: int = 0
    total_staked: Decimal = ZERO
    total_payout: Decimal = ZERO
    net_result: Decimal = ZERO

    @property
    def win_rate(self) -> Decimal:
        """Percentage of decided (won or lost) bets that won."""
        decided = self.won_bets + self.lost_bets
        if decided == 0:
            return ZERO
        return (Decimal(self.won_bets) * 100 / decided).quantize(
            CENT, rounding=ROUND_HALF_UP
        )

    @classmethod
    def from_bets(cls, bets: Iterable[Bet]) -> BetStatistics:
        counts = {status: 0 for status in BetStatus}
        total_staked = total_payout = net_result = ZERO
        for bet in bets:
            counts[bet.status] += 1
            total_staked += bet.stake
            total_payout += bet.get_total_payout()
            net_result += bet.get_net_result()
        return cls(
            total_bets=sum(counts.values()),
            open_bets=counts[BetStatus.OPEN],
            won_bets=counts[BetStatus.WON],
            lost_bets=counts[BetStatus.LOST],
            cancelled_bets=counts[BetStatus.CANCELLED],
            voided_bets=counts[BetStatus.VOIDED],
            total_staked=total_staked,
            total_payout=total_payout,
            net_result=net_result,
        )
