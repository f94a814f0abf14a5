"""
Dependency injection for the betting bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection. The repository
and the event bus are process-wide singletons; tests replace them
through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy import create_engine

from wagerbridge.application.betting.cancel_bet import CancelBetUseCase
from wagerbridge.application.betting.get_bet import GetBetUseCase
from wagerbridge.application.betting.get_bet_statistics import GetBetStatisticsUseCase
from wagerbridge.application.betting.list_customer_bets import ListCustomerBetsUseCase
from wagerbridge.application.betting.place_bet import PlaceBetUseCase
from wagerbridge.application.betting.settle_bet import SettleBetUseCase
from wagerbridge.application.betting.settle_market import SettleMarketUseCase
from wagerbridge.application.betting.void_bet import VoidBetUseCase
from wagerbridge.core.config import settings
from wagerbridge.domain.betting.ports import BetRepository, DomainEventPublisher
from wagerbridge.infrastructure.betting.in_memory_bet_repository import (
    InMemoryBetRepository,
)
from wagerbridge.infrastructure.betting.sql_bet_repository import SqlBetRepository
from wagerbridge.infrastructure.events.event_bus import InMemoryEventBus


@lru_cache
def get_event_bus() -> DomainEventPublisher:
    """Return the process-wide event bus."""
    return InMemoryEventBus()


@lru_cache
def get_bet_repository() -> BetRepository:
    """Build the bet store: SQL when a database URL is configured, else in-memory."""
    if settings.database_url:
        engine = create_engine(settings.database_url, pool_pre_ping=True)
        return SqlBetRepository(engine)
    return InMemoryBetRepository()


def get_place_bet_use_case(
    repository: BetRepository = Depends(get_bet_repository),
    publisher: DomainEventPublisher = Depends(get_event_bus),
) -> PlaceBetUseCase:
    return PlaceBetUseCase(
        repository,
        publisher,
        max_stake=settings.max_stake,
        min_odds_price=settings.min_odds_price,
        max_odds_price=settings.max_odds_price,
    )


def get_settle_bet_use_case(
    repository: BetRepository = Depends(get_bet_repository),
    publisher: DomainEventPublisher = Depends(get_event_bus),
) -> SettleBetUseCase:
    return SettleBetUseCase(repository, publisher)


def get_cancel_bet_use_case(
    repository: BetRepository = Depends(get_bet_repository),
    publisher: DomainEventPublisher = Depends(get_event_bus),
) -> CancelBetUseCase:
    return CancelBetUseCase(repository, publisher)


def get_void_bet_use_case(
    repository: BetRepository = Depends(get_bet_repository),
    publisher: DomainEventPublisher = Depends(get_event_bus),
) -> VoidBetUseCase:
    return VoidBetUseCase(repository, publisher)


def get_settle_market_use_case(
    repository: BetRepository = Depends(get_bet_repository),
    publisher: DomainEventPublisher = Depends(get_event_bus),
) -> SettleMarketUseCase:
    return SettleMarketUseCase(repository, publisher)


def get_get_bet_use_case(
    repository: BetRepository = Depends(get_bet_repository),
) -> GetBetUseCase:
    return GetBetUseCase(repository)


def get_list_customer_bets_use_case(
    repository: BetRepository = Depends(get_bet_repository),
) -> ListCustomerBetsUseCase:
    return ListCustomerBetsUseCase(repository)


def get_bet_statistics_use_case(
    repository: BetRepository = Depends(get_bet_repository),
) -> GetBetStatisticsUseCase:
    return GetBetStatisticsUseCase(repository)
