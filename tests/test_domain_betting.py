"""
Tests for the betting domain layer.

Tests value objects, the Bet aggregate and error classes in isolation.
No external dependencies or IO required.
"""

from decimal import Decimal

import pytest

from wagerbridge.domain.betting import odds_utils
from wagerbridge.domain.betting.entities import (
    MAX_TEXT_LENGTH,
    Bet,
    BetStatistics,
    BetStatus,
)
from wagerbridge.domain.betting.errors import (
    BetCannotCancelError,
    BetCannotSettleError,
    BetCannotVoidError,
    ValidationError,
)
from wagerbridge.domain.betting.value_objects import Money, OddsValue

from conftest import make_bet


class TestOddsValue:
    """Tests for the OddsValue value object."""

    def test_derived_representations_for_long_price(self) -> None:
        odds = OddsValue.create("2.50", "Home", "match-1")
        assert odds.fractional_odds == "2/1"
        assert odds.american_odds == 150
        assert odds.implied_probability == Decimal("40.00")

    def test_derived_representations_for_short_price(self) -> None:
        odds = OddsValue.create("1.50", "Away", "match-1")
        assert odds.fractional_odds == "1/2"
        assert odds.american_odds == -200
        assert odds.implied_probability == Decimal("66.67")

    def test_price_of_one_has_degenerate_conversions(self) -> None:
        odds = OddsValue.create(1, "Draw", "match-1")
        assert odds.fractional_odds == "0/1"
        assert odds.american_odds == 0

    def test_float_input_keeps_decimal_precision(self) -> None:
        assert OddsValue.create(2.1, "Home", "m").price == Decimal("2.1")

    @pytest.mark.parametrize("price", ["0", "-1.5", "1000.01"])
    def test_out_of_range_price_rejected(self, price: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            OddsValue.create(price, "Home", "match-1")
        assert exc_info.value.field == "price"

    def test_maximum_price_accepted(self) -> None:
        odds = OddsValue.create("1000", "Home", "match-1")
        assert odds.price == Decimal("1000")
        assert odds.american_odds == 99900

    @pytest.mark.parametrize(
        "price", ["1.01", "1.25", "1.5", "1.91", "2", "2.5", "3.75", "10", "1000"]
    )
    def test_derived_values_match_conversion_helpers(self, price: str) -> None:
        """The value object and the helper functions give the same answers."""
        odds = OddsValue.create(price, "Home", "match-1")
        assert odds.fractional_odds == odds_utils.decimal_to_fractional(price)
        assert odds.american_odds == odds_utils.decimal_to_american(price)
        assert odds.implied_probability == odds_utils.implied_probability(price)

    def test_selection_and_market_bounds(self) -> None:
        with pytest.raises(ValidationError):
            OddsValue.create("2", "", "match-1")
        with pytest.raises(ValidationError):
            OddsValue.create("2", "x" * 101, "match-1")
        with pytest.raises(ValidationError):
            OddsValue.create("2", "Home", "m" * 51)
        assert OddsValue.create("2", "x" * 100, "m" * 50).selection == "x" * 100

    def test_equality_ignores_timestamp(self) -> None:
        first = OddsValue.create("3", "Home", "match-1")
        second = OddsValue.create(Decimal("3"), "Home", "match-1")
        assert first == second
        assert first != OddsValue.create("3", "Away", "match-1")

    def test_favorite_and_long_shot(self) -> None:
        assert OddsValue.create("1.9", "Home", "m").is_favorite
        assert OddsValue.create("5", "Home", "m").is_long_shot
        assert not OddsValue.create("3", "Home", "m").is_long_shot

    def test_to_dict_uses_camel_case(self) -> None:
        data = OddsValue.create("2.5", "Home", "match-1").to_dict()
        assert data["marketId"] == "match-1"
        assert data["price"] == "2.5"


class TestOddsConversions:
    def test_american_to_decimal(self) -> None:
        assert odds_utils.american_to_decimal(150) == Decimal("2.5")
        assert odds_utils.american_to_decimal(-200) == Decimal("1.5")

    def test_american_inside_dead_zone_rejected(self) -> None:
        with pytest.raises(ValidationError):
            odds_utils.american_to_decimal(50)

    def test_fractional_to_decimal(self) -> None:
        assert odds_utils.fractional_to_decimal("5/2") == Decimal("3.5")
        with pytest.raises(ValidationError):
            odds_utils.fractional_to_decimal("five to two")

    @pytest.mark.parametrize("price", ["1.25", "1.5", "2", "2.5", "3", "11"])
    def test_american_round_trip(self, price: str) -> None:
        american = OddsValue.create(price, "Home", "m").american_odds
        assert odds_utils.american_to_decimal(american) == Decimal(price)

    @pytest.mark.parametrize("price", ["1.25", "1.5", "3", "11"])
    def test_fractional_round_trip(self, price: str) -> None:
        fractional = OddsValue.create(price, "Home", "m").fractional_odds
        assert odds_utils.fractional_to_decimal(fractional) == Decimal(price)

    def test_rounding_is_half_up(self) -> None:
        assert odds_utils.round_half_up(Decimal("2.5")) == Decimal("3")
        assert odds_utils.round_half_up(Decimal("0.125"), 2) == Decimal("0.13")


class TestMoney:
    def test_amount_quantized_to_cents(self) -> None:
        assert Money.of("10.005").amount == Decimal("10.01")

    def test_arithmetic(self) -> None:
        total = Money.of(10).add(Money.of("2.50")).subtract(Money.of(1))
        assert total == Money.of("11.50")
        assert Money.of(3).multiply("1.5") == Money.of("4.50")

    def test_currency_mismatch_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Money.of(1, "USD").add(Money.of(1, "EUR"))

    def test_currency_normalised(self) -> None:
        assert Money.of(1, "eur").currency == "EUR"
        with pytest.raises(ValidationError):
            Money.of(1, "EURO")


class TestBetLifecycle:
    """Tests for the Bet aggregate state machine."""

    def test_create_computes_potential_win_and_records_event(self) -> None:
        odds = OddsValue.create("2.50", "Home", "match-1")
        bet = Bet.create("cust-1", Decimal("10"), odds)

        assert bet.status is BetStatus.OPEN
        assert bet.potential_win == Decimal("25.00")
        events = bet.pull_domain_events()
        assert [e.event_type for e in events] == ["BetPlaced"]
        assert events[0].aggregate_id == bet.id
        assert bet.pull_domain_events() == []

    def test_direct_construction_is_refused(self) -> None:
        with pytest.raises(TypeError):
            Bet(
                object(),
                bet_id="x",
                customer_id="c",
                stake=Decimal("1"),
                potential_win=Decimal("2"),
                odds=OddsValue.create("2", "Home", "m"),
                placed_at=None,
            )

    def test_settle_as_won(self) -> None:
        bet = make_bet()
        bet.settle_as_won("2-1")

        assert bet.status is BetStatus.WON
        assert bet.actual_win == Decimal("25.00")
        assert bet.get_net_result() == Decimal("15.00")
        assert bet.get_total_payout() == Decimal("25.00")
        assert bet.market_result == "2-1"
        assert bet.settled_at is not None
        event = bet.pull_domain_events()[0]
        assert event.event_type == "BetWon"
        assert event.payload["actualWin"] == Decimal("25.00")

    def test_settle_as_lost(self) -> None:
        bet = make_bet()
        bet.settle_as_lost("0-1")

        assert bet.status is BetStatus.LOST
        assert bet.get_net_result() == Decimal("-10.00")
        assert bet.get_total_payout() == Decimal("0")
        assert bet.pull_domain_events()[0].event_type == "BetLost"

    def test_cancel_refunds_stake(self) -> None:
        bet = make_bet()
        bet.cancel("customer request")

        assert bet.status is BetStatus.CANCELLED
        assert bet.actual_win == Decimal("10.00")
        assert bet.get_net_result() == Decimal("0")
        event = bet.pull_domain_events()[0]
        assert event.event_type == "BetCancelled"
        assert event.payload["refundAmount"] == Decimal("10.00")
        assert event.payload["reason"] == "customer request"

    def test_void_refunds_stake(self) -> None:
        bet = make_bet()
        bet.void("match abandoned")

        assert bet.status is BetStatus.VOIDED
        assert bet.get_total_payout() == Decimal("10.00")
        assert bet.pull_domain_events()[0].event_type == "BetVoided"

    def test_terminal_states_refuse_transitions(self) -> None:
        bet = make_bet()
        bet.settle_as_lost("0-1")

        with pytest.raises(BetCannotSettleError) as exc_info:
            bet.settle_as_won("1-0")
        assert exc_info.value.code == "BET_CANNOT_SETTLE"
        assert exc_info.value.details["currentStatus"] == "LOST"
        with pytest.raises(BetCannotCancelError):
            bet.cancel()
        with pytest.raises(BetCannotVoidError):
            bet.void()
        assert bet.status is BetStatus.LOST

    @pytest.mark.parametrize("transition", ["cancel", "void", "settle_as_won", "settle_as_lost"])
    def test_overlong_outcome_text_rejected(self, transition: str) -> None:
        """Reasons and market results must fit the stored outcome column."""
        bet = make_bet()

        with pytest.raises(ValidationError) as exc_info:
            getattr(bet, transition)("x" * (MAX_TEXT_LENGTH + 1))
        assert exc_info.value.field in ("reason", "market_result")
        assert bet.status is BetStatus.OPEN
        assert bet.pull_domain_events() == []

    def test_outcome_text_at_limit_accepted(self) -> None:
        bet = make_bet()
        bet.cancel("r" * MAX_TEXT_LENGTH)
        assert bet.outcome == "r" * MAX_TEXT_LENGTH

    def test_equality_by_id(self) -> None:
        bet = make_bet()
        assert bet == bet
        assert bet != make_bet()
        assert len({bet, bet}) == 1


class TestBetStatistics:
    def test_from_bets(self) -> None:
        won, lost, cancelled, still_open = make_bet(), make_bet(), make_bet(), make_bet()
        won.settle_as_won("1-0")
        lost.settle_as_lost("1-0")
        cancelled.cancel()

        stats = BetStatistics.from_bets([won, lost, cancelled, still_open])

        assert stats.total_bets == 4
        assert stats.open_bets == 1
        assert stats.won_bets == 1
        assert stats.lost_bets == 1
        assert stats.cancelled_bets == 1
        assert stats.total_staked == Decimal("40.00")
        assert stats.total_payout == Decimal("35.00")
        assert stats.net_result == Decimal("5.00")
        assert stats.win_rate == Decimal("50.00")

    def test_empty(self) -> None:
        stats = BetStatistics.from_bets([])
        assert stats.total_bets == 0
        assert stats.win_rate == Decimal("0")
