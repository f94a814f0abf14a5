"""
Domain entities for the Fantasy402 integration context.

Each entity wraps a snapshot of remote state plus a locally assigned
identity. Instances are built only through ``from_external_data``;
the business rules (balance arithmetic, agent hierarchy, payout math)
live on the entities themselves.
"""

from __future__ import annotations

from dataclasses import InitVar, dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from wagerbridge.domain.betting.errors import ValidationError
from wagerbridge.domain.betting.odds_utils import Number, to_decimal
from wagerbridge.domain.betting.value_objects import Money, OddsValue
from wagerbridge.domain.fantasy402.dtos import (
    AccountDTO,
    AgentDTO,
    BetDTO,
    SportEventDTO,
)
from wagerbridge.domain.fantasy402.errors import (
    AccountInactiveError,
    InsufficientFundsError,
)
from wagerbridge.domain.fantasy402.odds_formats import OddsFormat, strategy_for

_FACTORY_TOKEN = object()


def _check_token(token: object, cls_name: str) -> None:
    if token is not _FACTORY_TOKEN:
        raise TypeError(f"Use {cls_name}.from_external_data() to build a {cls_name}")


def _parse_enum(enum_cls, value: str, field_name: str):
    try:
        return enum_cls(value.strip().lower())
    except (ValueError, AttributeError) as exc:
        raise ValidationError(
            f"Unknown {field_name}: {value!r}", field=field_name
        ) from exc


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ══════════════════════════════════════════════════════════════════════
# Sport events
# ══════════════════════════════════════════════════════════════════════


class SportEventStatus(Enum):
    SCHEDULED = "scheduled"
    LIVE = "live"
    FINISHED = "finished"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"


@dataclass(kw_only=True, eq=False)
class FantasySportEvent:
    """Local cache of an event lifecycled by the external system."""

    id: str
    external_id: str
    sport: str
    league: str
    home_team: str
    away_team: str
    start_time: datetime
    status: SportEventStatus
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    odds: list[OddsValue] = field(default_factory=list)
    last_synced_at: datetime = field(default_factory=_now)
    _token: InitVar[object] = None

    def __post_init__(self, _token: object) -> None:
        _check_token(_token, "FantasySportEvent")

    @classmethod
    def from_external_data(cls, dto: SportEventDTO) -> FantasySportEvent:
        return cls(
            id=str(uuid4()),
            external_id=dto.id,
            sport=dto.sport,
            league=dto.league,
            home_team=dto.home_team,
            away_team=dto.away_team,
            start_time=dto.start_time,
            status=_parse_enum(SportEventStatus, dto.status, "status"),
            home_score=dto.home_score,
            away_score=dto.away_score,
            odds=[OddsValue.create(o.price, o.selection, o.market_id) for o in dto.odds],
            _token=_FACTORY_TOKEN,
        )

    def refresh_from(self, dto: SportEventDTO) -> None:
        """Overwrite the cached remote state with a newer snapshot."""
        if dto.id != self.external_id:
            raise ValidationError(
                f"Snapshot {dto.id} does not belong to event {self.external_id}",
                field="id",
            )
        self.start_time = dto.start_time
        self.status = _parse_enum(SportEventStatus, dto.status, "status")
        self.home_score = dto.home_score
        self.away_score = dto.away_score
        self.odds = [OddsValue.create(o.price, o.selection, o.market_id) for o in dto.odds]
        self.last_synced_at = _now()

    @property
    def display_name(self) -> str:
        return f"{self.home_team} vs {self.away_team}"

    def is_live(self) -> bool:
        return self.status is SportEventStatus.LIVE

    def is_finished(self) -> bool:
        return self.status is SportEventStatus.FINISHED

    def has_started(self, now: Optional[datetime] = None) -> bool:
        return self.start_time <= (now or _now())

    def is_betting_open(self, now: Optional[datetime] = None) -> bool:
        """Pre-match events before kick-off and live events accept bets."""
        if self.status is SportEventStatus.LIVE:
            return True
        return self.status is SportEventStatus.SCHEDULED and not self.has_started(now)

    def odds_for(self, market_id: str) -> list[OddsValue]:
        return [o for o in self.odds if o.market_id == market_id]


# ══════════════════════════════════════════════════════════════════════
# Agents
# ══════════════════════════════════════════════════════════════════════


class AgentLevel(Enum):
    MASTER = "master"
    SUB_AGENT = "sub_agent"
    RETAIL = "retail"

    @property
    def hierarchy(self) -> int:
        return _AGENT_HIERARCHY[self]


_AGENT_HIERARCHY = {
    AgentLevel.MASTER: 1,
    AgentLevel.SUB_AGENT: 2,
    AgentLevel.RETAIL: 3,
}


class AgentStatus(Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"


@dataclass(kw_only=True, eq=False)
class FantasyAgent:
    """An agent in the external system's master/sub-agent/retail hierarchy."""

    id: str
    external_id: str
    name: str
    level: AgentLevel
    status: AgentStatus
    parent_agent_id: Optional[str] = None
    permissions: frozenset[str] = frozenset()
    commission_rate: Decimal = Decimal("0")
    _token: InitVar[object] = None

    def __post_init__(self, _token: object) -> None:
        _check_token(_token, "FantasyAgent")

    @classmethod
    def from_external_data(cls, dto: AgentDTO) -> FantasyAgent:
        commission = to_decimal(dto.commission_rate)
        if not Decimal("0") <= commission <= Decimal("100"):
            raise ValidationError(
                "Commission rate must be between 0 and 100", field="commission_rate"
            )
        return cls(
            id=str(uuid4()),
            external_id=dto.id,
            name=dto.name,
            level=_parse_enum(AgentLevel, dto.level, "level"),
            status=_parse_enum(AgentStatus, dto.status, "status"),
            parent_agent_id=dto.parent_id,
            permissions=frozenset(dto.permissions),
            commission_rate=commission,
            _token=_FACTORY_TOKEN,
        )

    @property
    def hierarchy_level(self) -> int:
        return self.level.hierarchy

    def is_active(self) -> bool:
        return self.status is AgentStatus.ACTIVE

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions

    def can_manage_agent(self, other: FantasyAgent) -> bool:
        """Masters manage any other agent; sub-agents manage retail agents only."""
        if other.external_id == self.external_id:
            return False
        if self.level is AgentLevel.MASTER:
            return True
        if self.level is AgentLevel.SUB_AGENT:
            return other.level is AgentLevel.RETAIL
        return False


# ══════════════════════════════════════════════════════════════════════
# Accounts
# ══════════════════════════════════════════════════════════════════════


class AccountStatus(Enum):
    ACTIVE = "active"
    FROZEN = "frozen"
    CLOSED = "closed"


@dataclass(kw_only=True, eq=False)
class FantasyAccount:
    """An agent's balance sheet on the external system.

    ``current_balance`` always equals ``available_balance`` plus
    ``pending_wagers``: credits and debits move the first two together,
    wagers move money between available and pending.
    """

    id: str
    external_id: str
    agent_id: str
    current_balance: Money
    available_balance: Money
    pending_wagers: Money
    credit_limit: Money
    status: AccountStatus = AccountStatus.ACTIVE
    _token: InitVar[object] = None

    def __post_init__(self, _token: object) -> None:
        _check_token(_token, "FantasyAccount")

    @classmethod
    def from_external_data(cls, dto: AccountDTO) -> FantasyAccount:
        currency = dto.currency
        return cls(
            id=str(uuid4()),
            external_id=dto.id,
            agent_id=dto.agent_id,
            current_balance=Money.of(dto.current_balance, currency),
            available_balance=Money.of(dto.available_balance, currency),
            pending_wagers=Money.of(dto.pending_wagers, currency),
            credit_limit=Money.of(dto.credit_limit, currency),
            status=_parse_enum(AccountStatus, dto.status, "status"),
            _token=_FACTORY_TOKEN,
        )

    @property
    def currency(self) -> str:
        return self.current_balance.currency

    def is_active(self) -> bool:
        return self.status is AccountStatus.ACTIVE

    def _money(self, amount: Number) -> Money:
        money = Money.of(amount, self.currency)
        if money.is_negative() or money.is_zero():
            raise ValidationError("Amount must be positive", field="amount")
        return money

    def _require_active(self) -> None:
        if not self.is_active():
            raise AccountInactiveError(self.external_id, self.status.value)

    def _require_available(self, amount: Money) -> None:
        if self.available_balance.is_less_than(amount):
            raise InsufficientFundsError(
                self.external_id, str(amount), str(self.available_balance)
            )

    def can_cover(self, amount: Number) -> bool:
        return self.is_active() and not self.available_balance.is_less_than(
            Money.of(amount, self.currency)
        )

    def credit(self, amount: Number) -> None:
        self._require_active()
        money = self._money(amount)
        self.current_balance = self.current_balance.add(money)
        self.available_balance = self.available_balance.add(money)

    def debit(self, amount: Number) -> None:
        self._require_active()
        money = self._money(amount)
        self._require_available(money)
        self.current_balance = self.current_balance.subtract(money)
        self.available_balance = self.available_balance.subtract(money)

    def add_pending_wager(self, amount: Number) -> None:
        """Reserve a stake: available funds move into pending wagers."""
        self._require_active()
        money = self._money(amount)
        self._require_available(money)
        self.available_balance = self.available_balance.subtract(money)
        self.pending_wagers = self.pending_wagers.add(money)

    def settle_pending_wager(
        self, amount: Number, is_win: bool, payout: Optional[Number] = None
    ) -> None:
        """Release a reserved stake.

        On a loss the stake leaves the account. On a win the stake is
        returned and the winnings (``payout - amount``, or ``amount`` for
        even money when no payout is given) are credited to both balances.
        """
        money = self._money(amount)
        if self.pending_wagers.is_less_than(money):
            raise ValidationError(
                f"Pending wagers {self.pending_wagers} do not cover {money}",
                field="amount",
            )
        self.pending_wagers = self.pending_wagers.subtract(money)
        if not is_win:
            self.current_balance = self.current_balance.subtract(money)
            return
        winnings = (
            Money.of(payout, self.currency).subtract(money)
            if payout is not None
            else money
        )
        if winnings.is_negative():
            raise ValidationError("Payout cannot be lower than the stake", field="payout")
        self.available_balance = self.available_balance.add(money).add(winnings)
        self.current_balance = self.current_balance.add(winnings)

    def freeze(self) -> None:
        if self.status is AccountStatus.CLOSED:
            raise AccountInactiveError(self.external_id, self.status.value)
        self.status = AccountStatus.FROZEN

    def unfreeze(self) -> None:
        if self.status is AccountStatus.CLOSED:
            raise AccountInactiveError(self.external_id, self.status.value)
        self.status = AccountStatus.ACTIVE

    def get_utilization_percentage(self) -> Decimal:
        """Share of the credit limit currently in use, in percent."""
        if self.credit_limit.is_zero():
            return Decimal("0")
        used = self.credit_limit.amount - self.available_balance.amount
        return (used / self.credit_limit.amount * 100).quantize(Decimal("0.01"))


# ══════════════════════════════════════════════════════════════════════
# Bets
# ══════════════════════════════════════════════════════════════════════


class FantasyBetStatus(Enum):
    PENDING = "pending"
    WON = "won"
    LOST = "lost"
    CANCELLED = "cancelled"
    VOID = "void"
    PUSH = "push"


@dataclass(kw_only=True, eq=False)
class FantasyBet:
    """A wager as recorded by the external system."""

    id: str
    external_id: str
    agent_id: str
    event_id: str
    selection: str
    amount: Money
    odds: Decimal
    odds_format: OddsFormat
    status: FantasyBetStatus
    placed_at: datetime
    customer_id: Optional[str] = None
    market: Optional[str] = None
    settled_at: Optional[datetime] = None
    payout: Optional[Money] = None
    _token: InitVar[object] = None

    def __post_init__(self, _token: object) -> None:
        _check_token(_token, "FantasyBet")

    @classmethod
    def from_external_data(
        cls, dto: BetDTO, default_odds_format: OddsFormat = OddsFormat.DECIMAL
    ) -> FantasyBet:
        odds_format = OddsFormat.parse(dto.odds_format, default_odds_format)
        odds = to_decimal(dto.odds)
        strategy_for(odds_format).validate(odds)
        amount = Money.of(dto.amount, dto.currency)
        if amount.is_negative() or amount.is_zero():
            raise ValidationError("Bet amount must be positive", field="amount")
        return cls(
            id=str(uuid4()),
            external_id=dto.id,
            agent_id=dto.agent_id,
            event_id=dto.event_id,
            selection=dto.selection,
            amount=amount,
            odds=odds,
            odds_format=odds_format,
            status=_parse_enum(FantasyBetStatus, dto.status, "status"),
            placed_at=dto.placed_at,
            customer_id=dto.customer_id,
            market=dto.market,
            settled_at=dto.settled_at,
            payout=Money.of(dto.payout, dto.currency) if dto.payout is not None else None,
            _token=_FACTORY_TOKEN,
        )

    def calculate_potential_payout(self) -> Money:
        """Total return if the bet wins (stake included)."""
        payout = strategy_for(self.odds_format).payout(self.amount.amount, self.odds)
        return Money.of(payout, self.amount.currency)

    def calculate_potential_profit(self) -> Money:
        return self.calculate_potential_payout().subtract(self.amount)

    def decimal_price(self) -> Decimal:
        return strategy_for(self.odds_format).to_decimal_price(self.odds)

    def is_pending(self) -> bool:
        return self.status is FantasyBetStatus.PENDING

    def is_settled(self) -> bool:
        return not self.is_pending()

    def can_be_cancelled(self) -> bool:
        return self.is_pending()
