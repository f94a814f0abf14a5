"""
Dependency injection for the Fantasy402 integration.

The adapter holds the remote session, so one instance is shared by the
whole process and closed on application shutdown.
"""

from functools import lru_cache

from fastapi import Depends

from wagerbridge.application.fantasy402.get_agent_account import GetAgentAccountUseCase
from wagerbridge.application.fantasy402.list_live_events import ListLiveEventsUseCase
from wagerbridge.application.fantasy402.place_external_bet import PlaceExternalBetUseCase
from wagerbridge.application.fantasy402.reconcile_agent_balance import (
    ReconcileAgentBalanceUseCase,
)
from wagerbridge.core.config import settings
from wagerbridge.domain.betting.ports import DomainEventPublisher
from wagerbridge.domain.fantasy402.ports import Fantasy402GatewayPort
from wagerbridge.infrastructure.fantasy402.adapter import Fantasy402Adapter
from wagerbridge.infrastructure.fantasy402.config import Fantasy402Config
from wagerbridge.infrastructure.fantasy402.gateway import Fantasy402Gateway
from wagerbridge.interfaces.betting.dependencies import get_event_bus


@lru_cache
def get_fantasy402_config() -> Fantasy402Config:
    return Fantasy402Config.from_settings(settings)


@lru_cache
def get_fantasy402_adapter() -> Fantasy402Adapter:
    return Fantasy402Adapter(get_fantasy402_config())


async def close_fantasy402_adapter() -> None:
    """Close the shared adapter if one was ever built."""
    if get_fantasy402_adapter.cache_info().currsize:
        await get_fantasy402_adapter().disconnect()
        get_fantasy402_adapter.cache_clear()


def get_fantasy402_gateway(
    publisher: DomainEventPublisher = Depends(get_event_bus),
) -> Fantasy402GatewayPort:
    return Fantasy402Gateway(
        get_fantasy402_adapter(), publisher, get_fantasy402_config()
    )


def get_list_live_events_use_case(
    gateway: Fantasy402GatewayPort = Depends(get_fantasy402_gateway),
) -> ListLiveEventsUseCase:
    return ListLiveEventsUseCase(gateway)


def get_agent_account_use_case(
    gateway: Fantasy402GatewayPort = Depends(get_fantasy402_gateway),
) -> GetAgentAccountUseCase:
    return GetAgentAccountUseCase(gateway)


def get_place_external_bet_use_case(
    gateway: Fantasy402GatewayPort = Depends(get_fantasy402_gateway),
) -> PlaceExternalBetUseCase:
    return PlaceExternalBetUseCase(gateway)


def get_reconcile_agent_balance_use_case(
    gateway: Fantasy402GatewayPort = Depends(get_fantasy402_gateway),
    publisher: DomainEventPublisher = Depends(get_event_bus),
) -> ReconcileAgentBalanceUseCase:
    return ReconcileAgentBalanceUseCase(gateway, publisher)
