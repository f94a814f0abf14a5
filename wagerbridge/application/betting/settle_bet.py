"""
Use case: Settle a bet as won or lost.

Input:  SettleBetCommand
Output: BetResult
Side effects: Saves the settled bet and publishes BetWon or BetLost.
"""

import logging

from wagerbridge.application.betting.dtos import BetResult, SettleBetCommand, to_bet_result
from wagerbridge.domain.betting.errors import BetAlreadySettledError, BetNotFoundError
from wagerbridge.domain.betting.ports import BetRepository, DomainEventPublisher

logger = logging.getLogger(__name__)


class SettleBetUseCase:
    def __init__(self, repository: BetRepository, publisher: DomainEventPublisher) -> None:
        self._repository = repository
        self._publisher = publisher

    async def execute(self, command: SettleBetCommand) -> BetResult:
        """Settle one bet.

        Raises:
            BetNotFoundError: No visible bet has this id.
            BetAlreadySettledError: The bet has left the OPEN state.
        """
        bet = self._repository.find_by_id(command.bet_id)
        if bet is None:
            raise BetNotFoundError(command.bet_id)
        if not bet.is_open():
            raise BetAlreadySettledError(bet.id, bet.status.value)

        if command.won:
            bet.settle_as_won(command.market_result)
        else:
            bet.settle_as_lost(command.market_result)

        self._repository.save(bet)
        await self._publisher.publish_all(bet.pull_domain_events())

        logger.info("Settled bet %s as %s.", bet.id, bet.status.value)
        return to_bet_result(bet)
