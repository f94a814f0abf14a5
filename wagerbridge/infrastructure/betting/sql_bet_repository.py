"""
Adapter: SQL bet repository.

Implements BetRepository port on top of a SQLAlchemy Engine.
Works against PostgreSQL and SQLite: amounts are stored as decimal
strings and timestamps as ISO-8601 UTC strings so both engines keep
exact values and sort chronologically.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from wagerbridge.domain.betting.entities import Bet, BetStatistics, BetStatus
from wagerbridge.domain.betting.ports import BetRepository
from wagerbridge.domain.betting.value_objects import OddsValue

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, customer_id, stake, potential_win, odds_price, odds_selection, "
    "odds_market_id, placed_at, status, settled_at, outcome, actual_win, "
    "market_result"
)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS bets (
        id              VARCHAR(36) PRIMARY KEY,
        customer_id     VARCHAR(100) NOT NULL,
        stake           VARCHAR(32) NOT NULL,
        potential_win   VARCHAR(32) NOT NULL,
        odds_price      VARCHAR(32) NOT NULL,
        odds_selection  VARCHAR(100) NOT NULL,
        odds_market_id  VARCHAR(50) NOT NULL,
        placed_at       VARCHAR(40) NOT NULL,
        status          VARCHAR(16) NOT NULL,
        settled_at      VARCHAR(40),
        outcome         VARCHAR(255),
        actual_win      VARCHAR(32),
        market_result   VARCHAR(255),
        deleted_at      VARCHAR(40)
    )
    """,
    "CREATE INDEX IF NOT EXISTS ix_bets_customer ON bets (customer_id, placed_at)",
    "CREATE INDEX IF NOT EXISTS ix_bets_market ON bets (odds_market_id, status)",
)


def _iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _parse_iso(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class SqlBetRepository(BetRepository):
    """Persists bets to a relational database.

    Rows are never removed: ``soft_delete`` stamps ``deleted_at`` and
    every query filters on it.
    """

    def __init__(self, engine: Engine, create_schema: bool = True) -> None:
        self._engine = engine
        if create_schema:
            self.create_schema()

    def create_schema(self) -> None:
        with self._engine.begin() as conn:
            for statement in _SCHEMA:
                conn.execute(text(statement))
        logger.debug("Ensured bets table exists.")

    @staticmethod
    def _params(bet: Bet) -> dict[str, Any]:
        return {
            "id": bet.id,
            "customer_id": bet.customer_id,
            "stake": str(bet.stake),
            "potential_win": str(bet.potential_win),
            "odds_price": str(bet.odds.price),
            "odds_selection": bet.odds.selection,
            "odds_market_id": bet.odds.market_id,
            "placed_at": _iso(bet.placed_at),
            "status": bet.status.value,
            "settled_at": _iso(bet.settled_at),
            "outcome": bet.outcome,
            "actual_win": str(bet.actual_win) if bet.actual_win is not None else None,
            "market_result": bet.market_result,
        }

    @staticmethod
    def _to_entity(row: Any) -> Bet:
        placed_at = _parse_iso(row.placed_at)
        return Bet.reconstitute(
            bet_id=row.id,
            customer_id=row.customer_id,
            stake=Decimal(row.stake),
            potential_win=Decimal(row.potential_win),
            odds=OddsValue(
                price=Decimal(row.odds_price),
                selection=row.odds_selection,
                market_id=row.odds_market_id,
                timestamp=placed_at,
            ),
            placed_at=placed_at,
            status=BetStatus(row.status),
            settled_at=_parse_iso(row.settled_at),
            outcome=row.outcome,
            actual_win=Decimal(row.actual_win) if row.actual_win is not None else None,
            market_result=row.market_result,
        )

    def save(self, bet: Bet) -> None:
        """Insert a new bet or overwrite the stored state of an existing one.

        Args:
            bet: The Bet aggregate to persist.
        """
        query = text(
            f"""
            INSERT INTO bets ({_COLUMNS})
            VALUES
                (:id, :customer_id, :stake, :potential_win, :odds_price,
                 :odds_selection, :odds_market_id, :placed_at, :status,
                 :settled_at, :outcome, :actual_win, :market_result)
            ON CONFLICT (id) DO UPDATE SET
                status = excluded.status,
                settled_at = excluded.settled_at,
                outcome = excluded.outcome,
                actual_win = excluded.actual_win,
                market_result = excluded.market_result
            """
        )
        with self._engine.begin() as conn:
            conn.execute(query, self._params(bet))
        logger.debug("Saved bet %s (%s).", bet.id, bet.status.value)

    def find_by_id(self, bet_id: str) -> Optional[Bet]:
        query = text(
            f"SELECT {_COLUMNS} FROM bets WHERE id = :id AND deleted_at IS NULL"
        )
        with self._engine.connect() as conn:
            row = conn.execute(query, {"id": bet_id}).fetchone()
        return self._to_entity(row) if row is not None else None

    def find_by_customer(
        self,
        customer_id: str,
        status: Optional[BetStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Bet]:
        conditions = ["customer_id = :customer_id", "deleted_at IS NULL"]
        params: dict[str, Any] = {
            "customer_id": customer_id,
            "limit": limit,
            "offset": offset,
        }
        if status is not None:
            conditions.append("status = :status")
            params["status"] = status.value

        query = text(
            f"""
            SELECT {_COLUMNS} FROM bets
            WHERE {" AND ".join(conditions)}
            ORDER BY placed_at DESC
            LIMIT :limit OFFSET :offset
            """
        )
        with self._engine.connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._to_entity(row) for row in rows]

    def find_open_by_market(self, market_id: str) -> list[Bet]:
        query = text(
            f"""
            SELECT {_COLUMNS} FROM bets
            WHERE odds_market_id = :market_id
              AND status = :status
              AND deleted_at IS NULL
            ORDER BY placed_at
            """
        )
        with self._engine.connect() as conn:
            rows = conn.execute(
                query, {"market_id": market_id, "status": BetStatus.OPEN.value}
            ).fetchall()
        return [self._to_entity(row) for row in rows]

    def soft_delete(self, bet_id: str) -> bool:
        query = text(
            "UPDATE bets SET deleted_at = :now WHERE id = :id AND deleted_at IS NULL"
        )
        with self._engine.begin() as conn:
            result = conn.execute(
                query, {"id": bet_id, "now": _iso(datetime.now(timezone.utc))}
            )
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Soft-deleted bet %s.", bet_id)
        return deleted

    def get_statistics(self, customer_id: Optional[str] = None) -> BetStatistics:
        """Aggregate over all visible bets, optionally for one customer.

        Payout figures depend on per-status rules held by the entity, so
        the rows are loaded and folded in Python.
        """
        conditions = ["deleted_at IS NULL"]
        params: dict[str, Any] = {}
        if customer_id is not None:
            conditions.append("customer_id = :customer_id")
            params["customer_id"] = customer_id
        query = text(
            f"SELECT {_COLUMNS} FROM bets WHERE {' AND '.join(conditions)}"
        )
        with self._engine.connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return BetStatistics.from_bets(self._to_entity(row) for row in rows)
