"""
Use case: Result a market.

Every OPEN bet on the market is settled: bets on the winning selection
as won, all others as lost. Each bet is saved and its events published
before the next one is touched, so a failure part-way leaves earlier
bets settled.

Input:  SettleMarketCommand
Output: SettleMarketResult
"""

import logging

from wagerbridge.application.betting.dtos import SettleMarketCommand, SettleMarketResult
from wagerbridge.domain.betting.errors import ValidationError
from wagerbridge.domain.betting.ports import BetRepository, DomainEventPublisher

logger = logging.getLogger(__name__)


class SettleMarketUseCase:
    def __init__(self, repository: BetRepository, publisher: DomainEventPublisher) -> None:
        self._repository = repository
        self._publisher = publisher

    async def execute(self, command: SettleMarketCommand) -> SettleMarketResult:
        if not command.winning_selection.strip():
            raise ValidationError(
                "Winning selection is required", field="winning_selection"
            )

        bets = self._repository.find_open_by_market(command.market_id)
        won = lost = 0
        for bet in bets:
            if bet.odds.selection == command.winning_selection:
                bet.settle_as_won(command.market_result)
                won += 1
            else:
                bet.settle_as_lost(command.market_result)
                lost += 1
            self._repository.save(bet)
            await self._publisher.publish_all(bet.pull_domain_events())

        logger.info(
            "Settled market %s: %d won, %d lost.", command.market_id, won, lost
        )
        return SettleMarketResult(
            market_id=command.market_id,
            settled=won + lost,
            won=won,
            lost=lost,
            bet_ids=[bet.id for bet in bets],
        )
