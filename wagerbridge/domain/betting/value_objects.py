"""
Value objects for the betting bounded context.

Value objects are immutable and compared by their fields.
They contain no framework imports and no IO operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from wagerbridge.domain.betting import odds_utils
from wagerbridge.domain.betting.errors import ValidationError
from wagerbridge.domain.betting.odds_utils import Number, to_decimal

MIN_PRICE_EXCLUSIVE = Decimal("0")
MAX_PRICE = Decimal("1000")
MAX_SELECTION_LENGTH = 100
MAX_MARKET_ID_LENGTH = 50
LONG_SHOT_PRICE = Decimal("5")
FAVORITE_PRICE = Decimal("2")

CENT = Decimal("0.01")


@dataclass(frozen=True)
class OddsValue:
    """A decimal odds price offered for a selection in a market.

    Equality is structural over price, selection and market id; the
    snapshot timestamp does not take part in it. Fractional and American
    odds and the implied probability are derived on every access.
    """

    price: Decimal
    selection: str
    market_id: str
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False
    )

    def __post_init__(self) -> None:
        price = to_decimal(self.price)
        object.__setattr__(self, "price", price)
        if not price.is_finite() or price <= MIN_PRICE_EXCLUSIVE:
            raise ValidationError("Odds price must be greater than 0", field="price")
        if price > MAX_PRICE:
            raise ValidationError(
                f"Odds price cannot exceed {MAX_PRICE}", field="price"
            )
        if not self.selection or not self.selection.strip():
            raise ValidationError("Selection is required", field="selection")
        if len(self.selection) > MAX_SELECTION_LENGTH:
            raise ValidationError(
                f"Selection cannot exceed {MAX_SELECTION_LENGTH} characters",
                field="selection",
            )
        if not self.market_id or not self.market_id.strip():
            raise ValidationError("Market id is required", field="market_id")
        if len(self.market_id) > MAX_MARKET_ID_LENGTH:
            raise ValidationError(
                f"Market id cannot exceed {MAX_MARKET_ID_LENGTH} characters",
                field="market_id",
            )

    @classmethod
    def create(cls, price: Number, selection: str, market_id: str) -> OddsValue:
        """Validate the inputs and build an odds snapshot taken now."""
        return cls(price=to_decimal(price), selection=selection, market_id=market_id)

    @property
    def fractional_odds(self) -> str:
        return odds_utils.decimal_to_fractional(self.price)

    @property
    def american_odds(self) -> int:
        return odds_utils.decimal_to_american(self.price)

    @property
    def implied_probability(self) -> Decimal:
        """Implied probability in percent, rounded to two places."""
        return odds_utils.implied_probability(self.price)

    @property
    def is_long_shot(self) -> bool:
        return self.price >= LONG_SHOT_PRICE

    @property
    def is_favorite(self) -> bool:
        return self.price < FAVORITE_PRICE

    def to_dict(self) -> dict:
        return {
            "price": str(self.price),
            "selection": self.selection,
            "marketId": self.market_id,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class Money:
    """A currency-tagged amount, quantized to cents."""

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        amount = to_decimal(self.amount)
        if not amount.is_finite():
            raise ValidationError("Amount must be a finite number", field="amount")
        object.__setattr__(
            self, "amount", amount.quantize(CENT, rounding=ROUND_HALF_UP)
        )
        currency = (self.currency or "").strip().upper()
        if len(currency) != 3:
            raise ValidationError(
                f"Invalid currency code: {self.currency!r}", field="currency"
            )
        object.__setattr__(self, "currency", currency)

    @classmethod
    def of(cls, amount: Number, currency: str = "USD") -> Money:
        return cls(to_decimal(amount), currency)

    @classmethod
    def zero(cls, currency: str = "USD") -> Money:
        return cls(Decimal("0"), currency)

    def _check_currency(self, other: Money) -> None:
        if other.currency != self.currency:
            raise ValidationError(
                f"Currency mismatch: {self.currency} vs {other.currency}",
                field="currency",
            )

    def add(self, other: Money) -> Money:
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: Money) -> Money:
        self._check_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def multiply(self, factor: Number) -> Money:
        return Money(self.amount * to_decimal(factor), self.currency)

    def is_negative(self) -> bool:
        return self.amount < 0

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_less_than(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def is_greater_than(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount > other.amount

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"
