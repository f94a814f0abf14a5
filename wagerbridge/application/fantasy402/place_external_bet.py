"""
Use case: Place a wager on Fantasy402 on behalf of an agent.

The agent's account is read through the gateway first; the wager is
only sent when the account is active and can cover the stake.

Input:  PlaceExternalBetCommand
Output: ExternalBetResult
Side effects: Places the bet remotely; the gateway publishes
              fantasy.bet.placed.
"""

import logging

from wagerbridge.application.fantasy402.dtos import (
    ExternalBetResult,
    PlaceExternalBetCommand,
    to_external_bet_result,
)
from wagerbridge.domain.betting.errors import ValidationError
from wagerbridge.domain.betting.odds_utils import to_decimal
from wagerbridge.domain.betting.value_objects import Money
from wagerbridge.domain.fantasy402.dtos import PlaceBetParams
from wagerbridge.domain.fantasy402.errors import (
    AccountInactiveError,
    AgentNotFoundError,
    InsufficientFundsError,
)
from wagerbridge.domain.fantasy402.odds_formats import OddsFormat, strategy_for
from wagerbridge.domain.fantasy402.ports import Fantasy402GatewayPort

logger = logging.getLogger(__name__)


class PlaceExternalBetUseCase:
    def __init__(self, gateway: Fantasy402GatewayPort) -> None:
        self._gateway = gateway

    async def execute(self, command: PlaceExternalBetCommand) -> ExternalBetResult:
        """Check funds, then place the bet.

        Raises:
            ValidationError: Bad amount, odds or odds format.
            AgentNotFoundError: The agent has no account.
            AccountInactiveError: The account is frozen or closed.
            InsufficientFundsError: Available balance below the stake.
        """
        amount = to_decimal(command.amount)
        if amount <= 0:
            raise ValidationError("Amount must be greater than zero", field="amount")
        odds_format = OddsFormat.parse(command.odds_format, OddsFormat.DECIMAL)
        strategy_for(odds_format).validate(to_decimal(command.odds))

        account = await self._gateway.get_agent_account(command.agent_id)
        if account is None:
            raise AgentNotFoundError(command.agent_id)
        if not account.is_active():
            raise AccountInactiveError(account.external_id, account.status.value)
        if not account.can_cover(amount):
            raise InsufficientFundsError(
                account.external_id,
                str(Money.of(amount, account.currency)),
                str(account.available_balance),
            )

        bet = await self._gateway.place_bet(
            PlaceBetParams(
                agent_id=command.agent_id,
                event_id=command.event_id,
                selection=command.selection,
                amount=amount,
                odds=to_decimal(command.odds),
                odds_format=odds_format.value,
                customer_id=command.customer_id,
                market=command.market,
            )
        )
        logger.info(
            "External bet %s placed for agent %s (%s %s).",
            bet.external_id,
            command.agent_id,
            amount,
            account.currency,
        )
        return to_external_bet_result(bet)
