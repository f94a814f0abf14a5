"""
Gateway: anti-corruption layer over the Fantasy402 adapter.

Implements Fantasy402GatewayPort. Wire records coming back from the
adapter are mapped to domain entities here, and every state-changing
call is announced on the event publisher. The gateway keeps no state
of its own.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from wagerbridge.domain.betting.ports import DomainEventPublisher
from wagerbridge.domain.betting.value_objects import Money, OddsValue
from wagerbridge.domain.betting.events import DomainEvent
from wagerbridge.domain.fantasy402.dtos import (
    AgentQuery,
    BetDTO,
    BetQuery,
    PlaceBetParams,
    SportEventQuery,
)
from wagerbridge.domain.fantasy402.entities import (
    FantasyAccount,
    FantasyAgent,
    FantasyBet,
    FantasySportEvent,
)
from wagerbridge.domain.fantasy402.errors import ExternalNotFoundError
from wagerbridge.domain.fantasy402.odds_formats import OddsFormat
from wagerbridge.domain.fantasy402.ports import (
    BalanceUpdateResult,
    Fantasy402GatewayPort,
    GatewayHealth,
    HealthState,
)
from wagerbridge.infrastructure.fantasy402.adapter import Fantasy402Adapter
from wagerbridge.infrastructure.fantasy402.config import Fantasy402Config

logger = logging.getLogger(__name__)

SPORT_EVENT_DISCOVERED = "fantasy.sport_event.discovered"
BET_PLACED = "fantasy.bet.placed"
BET_CANCELLED = "fantasy.bet.cancelled"
ACCOUNT_BALANCE_UPDATED = "fantasy.account.balance_updated"

EVENT_VERSION_PREFIX = "v1."
HEALTH_CHECK_FAILED = "Fantasy402 ping failed"


class Fantasy402Gateway(Fantasy402GatewayPort):
    """Maps Fantasy402 records to domain entities and publishes integration events."""

    def __init__(
        self,
        adapter: Fantasy402Adapter,
        publisher: DomainEventPublisher,
        config: Fantasy402Config,
    ) -> None:
        self._adapter = adapter
        self._publisher = publisher
        self._config = config

    # ── Events ───────────────────────────────────────────────────────

    def event_name(self, name: str) -> str:
        if self._config.enable_event_versioning:
            return f"{EVENT_VERSION_PREFIX}{name}"
        return name

    async def _publish(
        self, name: str, aggregate_id: str, aggregate_type: str, payload: dict[str, Any]
    ) -> None:
        await self._publisher.publish(
            DomainEvent(
                event_type=self.event_name(name),
                aggregate_id=aggregate_id,
                aggregate_type=aggregate_type,
                payload=payload,
            )
        )

    # ── Mapping ──────────────────────────────────────────────────────

    def _to_bet(self, dto: BetDTO, fallback: Optional[OddsFormat] = None) -> FantasyBet:
        odds_format = fallback or self._config.default_odds_format
        if dto.odds_format is None:
            logger.warning(
                "Bet %s has no odds format tag; assuming %s", dto.id, odds_format.value
            )
        return FantasyBet.from_external_data(dto, odds_format)

    # ── Sport events ─────────────────────────────────────────────────

    async def get_live_sport_events(
        self, query: Optional[SportEventQuery] = None
    ) -> list[FantasySportEvent]:
        dtos = await self._adapter.get_sport_events(query or SportEventQuery())
        events: list[FantasySportEvent] = []
        for dto in dtos:
            event = FantasySportEvent.from_external_data(dto)
            events.append(event)
            await self._publish(
                SPORT_EVENT_DISCOVERED,
                event.external_id,
                "FantasySportEvent",
                {
                    "eventId": event.external_id,
                    "sport": event.sport,
                    "league": event.league,
                    "displayName": event.display_name,
                    "startTime": event.start_time.isoformat(),
                    "status": event.status.value,
                },
            )
        logger.info("Fetched %d live sport events", len(events))
        return events

    async def get_sport_event_odds(self, event_id: str) -> list[OddsValue]:
        dtos = await self._adapter.get_event_odds(event_id)
        return [OddsValue.create(d.price, d.selection, d.market_id) for d in dtos]

    # ── Agents & accounts ────────────────────────────────────────────

    async def get_agents(self, query: Optional[AgentQuery] = None) -> list[FantasyAgent]:
        dtos = await self._adapter.get_agents(query or AgentQuery())
        return [FantasyAgent.from_external_data(dto) for dto in dtos]

    async def get_agent(self, agent_id: str) -> Optional[FantasyAgent]:
        try:
            dto = await self._adapter.get_agent(agent_id)
        except ExternalNotFoundError:
            return None
        return FantasyAgent.from_external_data(dto)

    async def get_agent_account(self, agent_id: str) -> Optional[FantasyAccount]:
        try:
            dto = await self._adapter.get_agent_account(agent_id)
        except ExternalNotFoundError:
            return None
        return FantasyAccount.from_external_data(dto)

    async def update_agent_balance(
        self, agent_id: str, amount: Decimal, reason: str
    ) -> BalanceUpdateResult:
        dto = await self._adapter.update_balance(agent_id, amount, reason)
        new_balance = Money.of(dto.new_balance, dto.currency)
        # no atomic read of the old value is offered by the API
        previous_balance = new_balance.subtract(Money.of(amount, dto.currency))
        result = BalanceUpdateResult(
            agent_id=agent_id,
            previous_balance=previous_balance,
            new_balance=new_balance,
            amount=Decimal(str(amount)),
            reason=reason,
        )
        await self._publish(
            ACCOUNT_BALANCE_UPDATED,
            agent_id,
            "FantasyAccount",
            {
                "agentId": agent_id,
                "previousBalance": str(previous_balance.amount),
                "newBalance": str(new_balance.amount),
                "amount": str(result.amount),
                "currency": new_balance.currency,
                "reason": reason,
                "transactionId": dto.transaction_id,
            },
        )
        return result

    # ── Bets ─────────────────────────────────────────────────────────

    async def get_bets(self, query: Optional[BetQuery] = None) -> list[FantasyBet]:
        dtos = await self._adapter.get_bets(query or BetQuery())
        return [self._to_bet(dto) for dto in dtos]

    async def get_bet(self, bet_id: str) -> Optional[FantasyBet]:
        try:
            dto = await self._adapter.get_bet(bet_id)
        except ExternalNotFoundError:
            return None
        return self._to_bet(dto)

    async def place_bet(self, params: PlaceBetParams) -> FantasyBet:
        # an untagged answer is read in the format the request was placed in
        requested = OddsFormat.parse(params.odds_format, self._config.default_odds_format)
        bet = self._to_bet(await self._adapter.place_bet(params), requested)
        await self._publish(
            BET_PLACED,
            bet.external_id,
            "FantasyBet",
            {
                "betId": bet.external_id,
                "agentId": params.agent_id,
                "eventId": params.event_id,
                "selection": params.selection,
                "amount": str(params.amount),
                "odds": str(params.odds),
                "oddsFormat": params.odds_format,
                "customerId": params.customer_id,
                "market": params.market,
                "status": bet.status.value,
            },
        )
        logger.info("Placed external bet %s for agent %s", bet.external_id, params.agent_id)
        return bet

    async def cancel_bet(self, bet_id: str, reason: Optional[str] = None) -> FantasyBet:
        bet = self._to_bet(await self._adapter.cancel_bet(bet_id, reason))
        await self._publish(
            BET_CANCELLED,
            bet.external_id,
            "FantasyBet",
            {"betId": bet.external_id, "reason": reason, "status": bet.status.value},
        )
        return bet

    # ── Health ───────────────────────────────────────────────────────

    async def health_check(self) -> GatewayHealth:
        started = time.monotonic()
        try:
            await self._adapter.health_check()
        except Exception as exc:
            latency_ms = (time.monotonic() - started) * 1000
            logger.warning("Fantasy402 health check failed: %s", exc)
            return GatewayHealth(
                status=HealthState.UNHEALTHY,
                latency_ms=round(latency_ms, 2),
                checked_at=datetime.now(timezone.utc),
                error=HEALTH_CHECK_FAILED,
            )
        latency_ms = (time.monotonic() - started) * 1000
        status = (
            HealthState.HEALTHY
            if latency_ms < self._config.health_latency_threshold_ms
            else HealthState.DEGRADED
        )
        return GatewayHealth(
            status=status,
            latency_ms=round(latency_ms, 2),
            checked_at=datetime.now(timezone.utc),
        )
