"""
Use case: Fetch a single bet by id.
"""

from wagerbridge.application.betting.dtos import BetResult, to_bet_result
from wagerbridge.domain.betting.errors import BetNotFoundError
from wagerbridge.domain.betting.ports import BetRepository


class GetBetUseCase:
    def __init__(self, repository: BetRepository) -> None:
        self._repository = repository

    def execute(self, bet_id: str) -> BetResult:
        bet = self._repository.find_by_id(bet_id)
        if bet is None:
            raise BetNotFoundError(bet_id)
        return to_bet_result(bet)
