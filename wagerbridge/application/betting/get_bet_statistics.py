"""
Use case: Aggregate bet figures, globally or for one customer.
"""

from typing import Optional

from wagerbridge.application.betting.dtos import BetStatisticsResult
from wagerbridge.domain.betting.ports import BetRepository


class GetBetStatisticsUseCase:
    def __init__(self, repository: BetRepository) -> None:
        self._repository = repository

    def execute(self, customer_id: Optional[str] = None) -> BetStatisticsResult:
        stats = self._repository.get_statistics(customer_id)
        return BetStatisticsResult(
            customer_id=customer_id,
            total_bets=stats.total_bets,
            open_bets=stats.open_bets,
            won_bets=stats.won_bets,
            lost_bets=stats.lost_bets,
            cancelled_bets=stats.cancelled_bets,
            voided_bets=stats.voided_bets,
            total_staked=stats.total_staked,
            total_payout=stats.total_payout,
            net_result=stats.net_result,
            win_rate=stats.win_rate,
        )
