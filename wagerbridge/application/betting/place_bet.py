"""
Use case: Place a bet.

Input:  PlaceBetCommand
Output: BetResult
Side effects: Saves the new bet and publishes BetPlaced.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from wagerbridge.application.betting.dtos import BetResult, PlaceBetCommand, to_bet_result
from wagerbridge.domain.betting.entities import Bet
from wagerbridge.domain.betting.errors import ValidationError
from wagerbridge.domain.betting.odds_utils import to_decimal
from wagerbridge.domain.betting.ports import BetRepository, DomainEventPublisher
from wagerbridge.domain.betting.value_objects import CENT, OddsValue

logger = logging.getLogger(__name__)

MAX_STAKE = Decimal("10000")
MIN_ODDS_PRICE = Decimal("1")
MAX_ODDS_PRICE = Decimal("100")
MAX_CUSTOMER_ID_LENGTH = 100


class PlaceBetUseCase:
    """Validates a bet request against the betting policy and records it.

    The policy is narrower than what OddsValue accepts: prices must be
    strictly above ``min_odds_price`` and at most ``max_odds_price``.
    """

    def __init__(
        self,
        repository: BetRepository,
        publisher: DomainEventPublisher,
        max_stake: Decimal = MAX_STAKE,
        min_odds_price: Decimal = MIN_ODDS_PRICE,
        max_odds_price: Decimal = MAX_ODDS_PRICE,
    ) -> None:
        self._repository = repository
        self._publisher = publisher
        self._max_stake = to_decimal(max_stake)
        self._min_odds_price = to_decimal(min_odds_price)
        self._max_odds_price = to_decimal(max_odds_price)

    def _validate(self, command: PlaceBetCommand) -> Decimal:
        """Check the request and return the stake rounded to cents."""
        stake = to_decimal(command.stake)
        if not stake.is_finite():
            raise ValidationError("Stake must be a finite number", field="stake")
        stake = stake.quantize(CENT, rounding=ROUND_HALF_UP)
        if stake <= 0:
            raise ValidationError("Stake must be greater than zero", field="stake")
        if stake > self._max_stake:
            raise ValidationError(
                f"Stake cannot exceed {self._max_stake}", field="stake"
            )
        price = to_decimal(command.odds_price)
        if price <= self._min_odds_price:
            raise ValidationError(
                f"Odds price must be greater than {self._min_odds_price}",
                field="odds_price",
            )
        if price > self._max_odds_price:
            raise ValidationError(
                f"Odds price cannot exceed {self._max_odds_price}", field="odds_price"
            )
        if not 1 <= len((command.customer_id or "").strip()) <= MAX_CUSTOMER_ID_LENGTH:
            raise ValidationError(
                f"Customer id must be 1-{MAX_CUSTOMER_ID_LENGTH} characters",
                field="customer_id",
            )
        if not 1 <= len(command.selection.strip()) <= 100:
            raise ValidationError(
                "Selection must be 1-100 characters", field="selection"
            )
        if not 1 <= len(command.market_id.strip()) <= 50:
            raise ValidationError(
                "Market id must be 1-50 characters", field="market_id"
            )
        return stake

    async def execute(self, command: PlaceBetCommand) -> BetResult:
        """Place a bet.

        Args:
            command: Customer, stake and the odds being accepted.

        Returns:
            The placed bet.

        Raises:
            ValidationError: If the request breaks the betting policy.
        """
        stake = self._validate(command)
        odds = OddsValue.create(
            command.odds_price, command.selection.strip(), command.market_id.strip()
        )
        bet = Bet.create(command.customer_id.strip(), stake, odds)
        self._repository.save(bet)
        await self._publisher.publish_all(bet.pull_domain_events())

        logger.info(
            "Placed bet %s: customer=%s stake=%s price=%s market=%s",
            bet.id,
            bet.customer_id,
            bet.stake,
            odds.price,
            odds.market_id,
        )
        return to_bet_result(bet)
