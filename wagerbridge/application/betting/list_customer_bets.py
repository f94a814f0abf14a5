"""
Use case: List a customer's bets, newest first.

Input:  ListCustomerBetsQuery
Output: list[BetResult]
"""

import logging

from wagerbridge.application.betting.dtos import (
    BetResult,
    ListCustomerBetsQuery,
    to_bet_result,
)
from wagerbridge.domain.betting.entities import BetStatus
from wagerbridge.domain.betting.errors import ValidationError
from wagerbridge.domain.betting.ports import BetRepository

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 200


class ListCustomerBetsUseCase:
    def __init__(self, repository: BetRepository) -> None:
        self._repository = repository

    def execute(self, query: ListCustomerBetsQuery) -> list[BetResult]:
        status = None
        if query.status:
            try:
                status = BetStatus(query.status.strip().upper())
            except ValueError as exc:
                raise ValidationError(
                    f"Unknown bet status: {query.status!r}", field="status"
                ) from exc
        if not 1 <= query.limit <= MAX_PAGE_SIZE:
            raise ValidationError(
                f"Limit must be between 1 and {MAX_PAGE_SIZE}", field="limit"
            )
        if query.offset < 0:
            raise ValidationError("Offset cannot be negative", field="offset")

        bets = self._repository.find_by_customer(
            query.customer_id, status=status, limit=query.limit, offset=query.offset
        )
        logger.debug("Found %d bets for customer %s.", len(bets), query.customer_id)
        return [to_bet_result(bet) for bet in bets]
