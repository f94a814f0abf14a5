"""
Pure odds conversion helpers.

Conversions between decimal, fractional and American odds.
OddsValue delegates to these functions, so both paths always agree.
"""

from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from typing import Union

from wagerbridge.domain.betting.errors import ValidationError

Number = Union[Decimal, int, float, str]

ONE = Decimal("1")
TWO = Decimal("2")
HUNDRED = Decimal("100")


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    try:
        return Decimal(value)
    except Exception as exc:
        raise ValidationError(f"Not a number: {value!r}") from exc


def round_half_up(value: Decimal, places: int = 0) -> Decimal:
    """Round the way the source system does (half away from zero)."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def decimal_to_fractional(price: Number) -> str:
    """Return fractional odds such as ``"3/2"`` or ``"1/4"``.

    Odds shorter than evens are expressed as ``1/n``, longer odds as ``n/1``.
    """
    price = to_decimal(price)
    if price <= ONE:
        return "0/1"
    if price < TWO:
        return f"1/{int(round_half_up(ONE / (price - ONE)))}"
    return f"{int(round_half_up(price - ONE))}/1"


def decimal_to_american(price: Number) -> int:
    """Return American (moneyline) odds for a decimal price."""
    price = to_decimal(price)
    if price <= ONE:
        return 0
    if price >= TWO:
        return int(round_half_up((price - ONE) * HUNDRED))
    return -int(round_half_up(HUNDRED / (price - ONE)))


def american_to_decimal(american: Number) -> Decimal:
    """Return the decimal price for American odds, rounded to 4 places."""
    american = to_decimal(american)
    if american == 0 or -HUNDRED < american < HUNDRED:
        raise ValidationError(f"Invalid American odds: {american}")
    if american > 0:
        return round_half_up(ONE + american / HUNDRED, 4)
    return round_half_up(ONE + HUNDRED / abs(american), 4)


def fractional_to_decimal(fractional: str) -> Decimal:
    """Return the decimal price for fractional odds such as ``"5/2"``."""
    try:
        ratio = Fraction(fractional.strip())
    except (ValueError, ZeroDivisionError, AttributeError) as exc:
        raise ValidationError(f"Invalid fractional odds: {fractional!r}") from exc
    if ratio < 0:
        raise ValidationError(f"Invalid fractional odds: {fractional!r}")
    return round_half_up(
        ONE + Decimal(ratio.numerator) / Decimal(ratio.denominator), 4
    )


def implied_probability(price: Number) -> Decimal:
    """Return the implied probability in percent, rounded to 2 places."""
    price = to_decimal(price)
    if price <= 0:
        raise ValidationError("Odds price must be positive", field="price")
    return round_half_up(HUNDRED / price, 2)
