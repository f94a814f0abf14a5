"""
Adapter: In-memory bet repository.

Implements BetRepository with a dict keyed by bet id. Used when no
database URL is configured, and in tests.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from wagerbridge.domain.betting.entities import Bet, BetStatistics, BetStatus
from wagerbridge.domain.betting.ports import BetRepository

logger = logging.getLogger(__name__)


class InMemoryBetRepository(BetRepository):
    """Keeps bets in process memory. Soft-deleted bets stay in the store."""

    def __init__(self) -> None:
        self._bets: dict[str, Bet] = {}
        self._deleted_at: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def _visible(self) -> list[Bet]:
        return [bet for bet_id, bet in self._bets.items() if bet_id not in self._deleted_at]

    def save(self, bet: Bet) -> None:
        with self._lock:
            self._bets[bet.id] = bet
        logger.debug("Saved bet %s (%s).", bet.id, bet.status.value)

    def find_by_id(self, bet_id: str) -> Optional[Bet]:
        if bet_id in self._deleted_at:
            return None
        return self._bets.get(bet_id)

    def find_by_customer(
        self,
        customer_id: str,
        status: Optional[BetStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Bet]:
        bets = [
            bet
            for bet in self._visible()
            if bet.customer_id == customer_id and (status is None or bet.status is status)
        ]
        bets.sort(key=lambda bet: bet.placed_at, reverse=True)
        return bets[offset : offset + limit]

    def find_open_by_market(self, market_id: str) -> list[Bet]:
        return [
            bet
            for bet in self._visible()
            if bet.is_open() and bet.odds.market_id == market_id
        ]

    def soft_delete(self, bet_id: str) -> bool:
        with self._lock:
            if bet_id not in self._bets or bet_id in self._deleted_at:
                return False
            self._deleted_at[bet_id] = datetime.now(timezone.utc)
        logger.info("Soft-deleted bet %s.", bet_id)
        return True

    def get_statistics(self, customer_id: Optional[str] = None) -> BetStatistics:
        bets = self._visible()
        if customer_id is not None:
            bets = [bet for bet in bets if bet.customer_id == customer_id]
        return BetStatistics.from_bets(bets)
