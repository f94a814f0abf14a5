"""
Use case: Compare an agent's internally tracked balance with Fantasy402.

A difference above the tolerance publishes balance.discrepancy_detected.
"""

import logging
from decimal import Decimal

from wagerbridge.application.fantasy402.dtos import (
    ReconcileAgentBalanceCommand,
    ReconcileAgentBalanceResult,
)
from wagerbridge.domain.betting.events import DomainEvent
from wagerbridge.domain.betting.odds_utils import to_decimal
from wagerbridge.domain.betting.ports import DomainEventPublisher
from wagerbridge.domain.fantasy402.errors import AgentNotFoundError
from wagerbridge.domain.fantasy402.ports import Fantasy402GatewayPort

logger = logging.getLogger(__name__)

BALANCE_DISCREPANCY_DETECTED = "balance.discrepancy_detected"
DEFAULT_TOLERANCE = Decimal("0.01")


class ReconcileAgentBalanceUseCase:
    def __init__(
        self,
        gateway: Fantasy402GatewayPort,
        publisher: DomainEventPublisher,
        tolerance: Decimal = DEFAULT_TOLERANCE,
    ) -> None:
        self._gateway = gateway
        self._publisher = publisher
        self._tolerance = tolerance

    async def execute(
        self, command: ReconcileAgentBalanceCommand
    ) -> ReconcileAgentBalanceResult:
        account = await self._gateway.get_agent_account(command.agent_id)
        if account is None:
            raise AgentNotFoundError(command.agent_id)

        internal = to_decimal(command.internal_balance)
        external = account.current_balance.amount
        difference = external - internal
        in_sync = abs(difference) <= self._tolerance

        if not in_sync:
            logger.warning(
                "Balance discrepancy for agent %s: internal=%s external=%s",
                command.agent_id,
                internal,
                external,
            )
            await self._publisher.publish(
                DomainEvent(
                    event_type=BALANCE_DISCREPANCY_DETECTED,
                    aggregate_id=command.agent_id,
                    aggregate_type="FantasyAccount",
                    payload={
                        "agentId": command.agent_id,
                        "internalBalance": str(internal),
                        "externalBalance": str(external),
                        "difference": str(difference),
                        "currency": account.currency,
                    },
                )
            )

        return ReconcileAgentBalanceResult(
            agent_id=command.agent_id,
            internal_balance=internal,
            external_balance=external,
            difference=difference,
            currency=account.currency,
            in_sync=in_sync,
        )
