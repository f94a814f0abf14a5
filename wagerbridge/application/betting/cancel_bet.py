"""
Use case: Cancel an open bet and refund the stake.
"""

import logging

from wagerbridge.application.betting.dtos import BetResult, CancelBetCommand, to_bet_result
from wagerbridge.domain.betting.errors import BetNotFoundError
from wagerbridge.domain.betting.ports import BetRepository, DomainEventPublisher

logger = logging.getLogger(__name__)


class CancelBetUseCase:
    def __init__(self, repository: BetRepository, publisher: DomainEventPublisher) -> None:
        self._repository = repository
        self._publisher = publisher

    async def execute(self, command: CancelBetCommand) -> BetResult:
        bet = self._repository.find_by_id(command.bet_id)
        if bet is None:
            raise BetNotFoundError(command.bet_id)

        bet.cancel(command.reason)
        self._repository.save(bet)
        await self._publisher.publish_all(bet.pull_domain_events())

        logger.info("Cancelled bet %s (reason=%s).", bet.id, command.reason)
        return to_bet_result(bet)
