"""
Shared fixtures.

Environment defaults are set before the application is imported so
that settings are built without rate limiting or a database.
"""

import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "")
os.environ.setdefault("FANTASY402_API_URL", "https://fantasy402.test/api")
os.environ.setdefault("FANTASY402_CUSTOMER_ID", "agent01")
os.environ.setdefault("FANTASY402_PASSWORD", "secret")

from datetime import datetime, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402

from wagerbridge.domain.betting.entities import Bet  # noqa: E402
from wagerbridge.domain.betting.events import DomainEvent  # noqa: E402
from wagerbridge.domain.betting.value_objects import OddsValue  # noqa: E402
from wagerbridge.domain.fantasy402.dtos import (  # noqa: E402
    AccountDTO,
    AgentDTO,
    BetDTO,
    OddsDTO,
    SportEventDTO,
)
from wagerbridge.infrastructure.betting.in_memory_bet_repository import (  # noqa: E402
    InMemoryBetRepository,
)
from wagerbridge.infrastructure.events.event_bus import InMemoryEventBus  # noqa: E402


def make_bet(
    customer_id: str = "cust-1",
    stake: str = "10",
    price: str = "2.50",
    selection: str = "Home",
    market_id: str = "match-1",
) -> Bet:
    odds = OddsValue.create(Decimal(price), selection, market_id)
    bet = Bet.create(customer_id, Decimal(stake), odds)
    bet.pull_domain_events()
    return bet


def account_dto(**overrides) -> AccountDTO:
    values = dict(
        id="acc-1",
        agent_id="agent-1",
        current_balance=Decimal("1000"),
        available_balance=Decimal("800"),
        pending_wagers=Decimal("200"),
        credit_limit=Decimal("2000"),
        currency="USD",
        status="active",
    )
    values.update(overrides)
    return AccountDTO(**values)


def agent_dto(**overrides) -> AgentDTO:
    values = dict(
        id="agent-1",
        name="North Desk",
        level="sub_agent",
        status="active",
        parent_id="master-1",
        permissions=("place_bets",),
        commission_rate=Decimal("5"),
    )
    values.update(overrides)
    return AgentDTO(**values)


def bet_dto(**overrides) -> BetDTO:
    values = dict(
        id="ext-bet-1",
        agent_id="agent-1",
        event_id="evt-1",
        selection="Home",
        amount=Decimal("100"),
        odds=Decimal("150"),
        status="pending",
        placed_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        odds_format="american",
    )
    values.update(overrides)
    return BetDTO(**values)


def sport_event_dto(**overrides) -> SportEventDTO:
    values = dict(
        id="evt-1",
        sport="football",
        league="Premier League",
        home_team="Arsenal",
        away_team="Chelsea",
        start_time=datetime(2024, 5, 1, 15, 0, tzinfo=timezone.utc),
        status="live",
        home_score=1,
        away_score=0,
        odds=(OddsDTO(market_id="1x2", selection="Home", price=Decimal("1.80")),),
    )
    values.update(overrides)
    return SportEventDTO(**values)


class EventRecorder:
    """Wildcard subscriber keeping every published event."""

    def __init__(self) -> None:
        self.events: list[DomainEvent] = []

    async def __call__(self, event: DomainEvent) -> None:
        self.events.append(event)

    @property
    def types(self) -> list[str]:
        return [event.event_type for event in self.events]


@pytest.fixture
def repository() -> InMemoryBetRepository:
    return InMemoryBetRepository()


@pytest.fixture
def event_bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def recorder(event_bus: InMemoryEventBus) -> EventRecorder:
    recorder = EventRecorder()
    event_bus.subscribe("*", recorder)
    return recorder
