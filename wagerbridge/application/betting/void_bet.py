"""
Use case: Void an open bet, e.g. after a market is abandoned.
"""

import logging

from wagerbridge.application.betting.dtos import BetResult, VoidBetCommand, to_bet_result
from wagerbridge.domain.betting.errors import BetNotFoundError
from wagerbridge.domain.betting.ports import BetRepository, DomainEventPublisher

logger = logging.getLogger(__name__)


class VoidBetUseCase:
    def __init__(self, repository: BetRepository, publisher: DomainEventPublisher) -> None:
        self._repository = repository
        self._publisher = publisher

    async def execute(self, command: VoidBetCommand) -> BetResult:
        bet = self._repository.find_by_id(command.bet_id)
        if bet is None:
            raise BetNotFoundError(command.bet_id)

        bet.void(command.reason)
        self._repository.save(bet)
        await self._publisher.publish_all(bet.pull_domain_events())

        logger.info("Voided bet %s (reason=%s).", bet.id, command.reason)
        return to_bet_result(bet)
