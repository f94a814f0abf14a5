"""
Odds-format strategies for external bets.

The Fantasy402 feed mixes decimal and American odds. The format is
chosen from an explicit tag on the record, never guessed from the
number itself.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from typing import Optional

from wagerbridge.domain.betting import odds_utils
from wagerbridge.domain.betting.errors import ValidationError

HUNDRED = Decimal("100")


class OddsFormat(Enum):
    """Representation of an odds figure."""

    DECIMAL = "decimal"
    AMERICAN = "american"

    @classmethod
    def parse(cls, value: Optional[str], default: "OddsFormat") -> "OddsFormat":
        """Resolve a wire tag, falling back to ``default`` when absent."""
        if value is None or not str(value).strip():
            return default
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValidationError(f"Unknown odds format: {value!r}", field="oddsFormat") from exc


class OddsFormatStrategy(ABC):
    """Payout arithmetic for one odds representation."""

    @abstractmethod
    def validate(self, odds: Decimal) -> None:
        raise NotImplementedError

    @abstractmethod
    def profit(self, stake: Decimal, odds: Decimal) -> Decimal:
        """Winnings on top of the returned stake."""
        raise NotImplementedError

    @abstractmethod
    def to_decimal_price(self, odds: Decimal) -> Decimal:
        raise NotImplementedError

    def payout(self, stake: Decimal, odds: Decimal) -> Decimal:
        """Total return on a win: stake plus profit."""
        return stake + self.profit(stake, odds)


class DecimalOddsStrategy(OddsFormatStrategy):
    def validate(self, odds: Decimal) -> None:
        if odds <= 1:
            raise ValidationError("Decimal odds must be greater than 1", field="odds")

    def profit(self, stake: Decimal, odds: Decimal) -> Decimal:
        self.validate(odds)
        return stake * (odds - 1)

    def to_decimal_price(self, odds: Decimal) -> Decimal:
        self.validate(odds)
        return odds


class AmericanOddsStrategy(OddsFormatStrategy):
    def validate(self, odds: Decimal) -> None:
        if -HUNDRED < odds < HUNDRED:
            raise ValidationError(
                "American odds must be at least +100 or at most -100", field="odds"
            )

    def profit(self, stake: Decimal, odds: Decimal) -> Decimal:
        self.validate(odds)
        if odds > 0:
            return stake * odds / HUNDRED
        return stake * HUNDRED / abs(odds)

    def to_decimal_price(self, odds: Decimal) -> Decimal:
        self.validate(odds)
        return odds_utils.american_to_decimal(odds)


_STRATEGIES: dict[OddsFormat, OddsFormatStrategy] = {
    OddsFormat.DECIMAL: DecimalOddsStrategy(),
    OddsFormat.AMERICAN: AmericanOddsStrategy(),
}


def strategy_for(odds_format: OddsFormat) -> OddsFormatStrategy:
    return _STRATEGIES[odds_format]
