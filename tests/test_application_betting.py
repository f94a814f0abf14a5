"""
Tests for the betting application layer (use cases).

Use cases run against the in-memory repository and event bus.
Each test verifies orchestration: validation, persistence and events.
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from wagerbridge.application.betting.cancel_bet import CancelBetUseCase
from wagerbridge.application.betting.dtos import (
    CancelBetCommand,
    ListCustomerBetsQuery,
    PlaceBetCommand,
    SettleBetCommand,
    SettleMarketCommand,
    VoidBetCommand,
)
from wagerbridge.application.betting.get_bet import GetBetUseCase
from wagerbridge.application.betting.get_bet_statistics import GetBetStatisticsUseCase
from wagerbridge.application.betting.list_customer_bets import ListCustomerBetsUseCase
from wagerbridge.application.betting.place_bet import PlaceBetUseCase
from wagerbridge.application.betting.settle_bet import SettleBetUseCase
from wagerbridge.application.betting.settle_market import SettleMarketUseCase
from wagerbridge.application.betting.void_bet import VoidBetUseCase
from wagerbridge.domain.betting.entities import BetStatus
from wagerbridge.domain.betting.errors import (
    BetAlreadySettledError,
    BetCannotCancelError,
    BetCannotVoidError,
    BetNotFoundError,
    ValidationError,
)

from conftest import make_bet


def _command(**overrides) -> PlaceBetCommand:
    values = dict(
        customer_id="cust-1",
        stake=Decimal("10"),
        odds_price=Decimal("2.50"),
        selection="Home",
        market_id="match-1",
    )
    values.update(overrides)
    return PlaceBetCommand(**values)


class TestPlaceBetUseCase:
    """Tests for the PlaceBetUseCase."""

    @pytest.mark.asyncio
    async def test_places_saves_and_publishes(self, repository, event_bus, recorder) -> None:
        """A valid bet is stored and BetPlaced is published once."""
        result = await PlaceBetUseCase(repository, event_bus).execute(_command())

        assert result.status == "OPEN"
        assert result.potential_win == Decimal("25.00")
        assert result.fractional_odds == "2/1"
        assert result.american_odds == 150
        assert result.implied_probability == Decimal("40.00")
        assert repository.find_by_id(result.bet_id) is not None
        assert recorder.types == ["BetPlaced"]
        assert recorder.events[0].aggregate_id == result.bet_id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"stake": Decimal("0")}, "stake"),
            ({"stake": Decimal("0.004")}, "stake"),
            ({"stake": Decimal("10000.01")}, "stake"),
            ({"odds_price": Decimal("1")}, "odds_price"),
            ({"odds_price": Decimal("100.5")}, "odds_price"),
            ({"customer_id": "  "}, "customer_id"),
            ({"customer_id": "c" * 101}, "customer_id"),
            ({"selection": ""}, "selection"),
            ({"market_id": "m" * 51}, "market_id"),
        ],
    )
    async def test_policy_violations(
        self, repository, event_bus, recorder, overrides, field
    ) -> None:
        """Requests outside the betting policy are rejected before saving."""
        with pytest.raises(ValidationError) as exc_info:
            await PlaceBetUseCase(repository, event_bus).execute(_command(**overrides))

        assert exc_info.value.field == field
        assert repository.get_statistics().total_bets == 0
        assert recorder.events == []

    @pytest.mark.asyncio
    async def test_limits_are_configurable(self, repository, event_bus) -> None:
        """A narrower stake limit is honoured."""
        use_case = PlaceBetUseCase(repository, event_bus, max_stake=Decimal("5"))
        with pytest.raises(ValidationError):
            await use_case.execute(_command(stake=Decimal("6")))

    @pytest.mark.asyncio
    async def test_stake_is_rounded_to_cents(self, repository, event_bus) -> None:
        """Sub-cent stakes are rounded half up before the bet is priced."""
        result = await PlaceBetUseCase(repository, event_bus).execute(
            _command(stake=Decimal("10.005"))
        )

        assert result.stake == Decimal("10.01")
        assert result.potential_win == Decimal("25.03")
        assert repository.find_by_id(result.bet_id).stake == Decimal("10.01")

    @pytest.mark.asyncio
    async def test_customer_id_is_trimmed(self, repository, event_bus) -> None:
        result = await PlaceBetUseCase(repository, event_bus).execute(
            _command(customer_id="  cust-1 ")
        )
        assert result.customer_id == "cust-1"

    @pytest.mark.asyncio
    async def test_publish_happens_after_save(self, repository) -> None:
        """The bet is already stored when its events go out."""
        seen = []

        async def publish_all(events):
            seen.append(repository.get_statistics().total_bets)

        publisher = MagicMock()
        publisher.publish_all = AsyncMock(side_effect=publish_all)

        await PlaceBetUseCase(repository, publisher).execute(_command())

        assert seen == [1]


class TestSettleBetUseCase:
    """Tests for the SettleBetUseCase."""

    @pytest.mark.asyncio
    async def test_settle_as_won(self, repository, event_bus, recorder) -> None:
        """Winning bets pay the potential win."""
        bet = make_bet()
        repository.save(bet)

        result = await SettleBetUseCase(repository, event_bus).execute(
            SettleBetCommand(bet_id=bet.id, won=True, market_result="2-0")
        )

        assert result.status == "WON"
        assert result.actual_win == Decimal("25.00")
        assert result.market_result == "2-0"
        assert recorder.types == ["BetWon"]
        assert repository.find_by_id(bet.id).status is BetStatus.WON

    @pytest.mark.asyncio
    async def test_settle_as_lost(self, repository, event_bus, recorder) -> None:
        """Losing bets pay nothing."""
        bet = make_bet()
        repository.save(bet)

        result = await SettleBetUseCase(repository, event_bus).execute(
            SettleBetCommand(bet_id=bet.id, won=False, market_result="0-1")
        )

        assert result.status == "LOST"
        assert result.actual_win == Decimal("0")
        assert recorder.types == ["BetLost"]

    @pytest.mark.asyncio
    async def test_unknown_bet(self, repository, event_bus) -> None:
        """Settling a missing bet raises BetNotFoundError."""
        with pytest.raises(BetNotFoundError):
            await SettleBetUseCase(repository, event_bus).execute(
                SettleBetCommand(bet_id="nope", won=True, market_result="x")
            )

    @pytest.mark.asyncio
    async def test_second_settlement_rejected(self, repository, event_bus, recorder) -> None:
        """A bet that left OPEN cannot be settled again."""
        bet = make_bet()
        bet.settle_as_lost("0-1")
        bet.pull_domain_events()
        repository.save(bet)

        with pytest.raises(BetAlreadySettledError) as exc_info:
            await SettleBetUseCase(repository, event_bus).execute(
                SettleBetCommand(bet_id=bet.id, won=True, market_result="1-0")
            )

        assert exc_info.value.code == "BET_ALREADY_SETTLED"
        assert recorder.events == []


class TestCancelAndVoid:
    """Tests for the CancelBetUseCase and VoidBetUseCase."""

    @pytest.mark.asyncio
    async def test_cancel_refunds_stake(self, repository, event_bus, recorder) -> None:
        """Cancelling returns the stake and records the reason."""
        bet = make_bet(stake="40")
        repository.save(bet)

        result = await CancelBetUseCase(repository, event_bus).execute(
            CancelBetCommand(bet.id, "customer request")
        )

        assert result.status == "CANCELLED"
        assert result.actual_win == Decimal("40.00")
        assert result.outcome == "customer request"
        assert recorder.types == ["BetCancelled"]
        assert recorder.events[0].payload["refundAmount"] == Decimal("40.00")

    @pytest.mark.asyncio
    async def test_void_refunds_stake(self, repository, event_bus, recorder) -> None:
        """Voiding returns the stake."""
        bet = make_bet(stake="40")
        repository.save(bet)

        result = await VoidBetUseCase(repository, event_bus).execute(VoidBetCommand(bet.id))

        assert result.status == "VOIDED"
        assert result.outcome == "voided"
        assert recorder.types == ["BetVoided"]

    @pytest.mark.asyncio
    async def test_settled_bets_cannot_be_cancelled_or_voided(
        self, repository, event_bus
    ) -> None:
        """Only OPEN bets can be cancelled or voided."""
        bet = make_bet()
        bet.settle_as_won("1-0")
        repository.save(bet)

        with pytest.raises(BetCannotCancelError):
            await CancelBetUseCase(repository, event_bus).execute(CancelBetCommand(bet.id))
        with pytest.raises(BetCannotVoidError):
            await VoidBetUseCase(repository, event_bus).execute(VoidBetCommand(bet.id))

    @pytest.mark.asyncio
    async def test_missing_bet(self, repository, event_bus) -> None:
        """Cancelling a missing bet raises BetNotFoundError."""
        with pytest.raises(BetNotFoundError):
            await CancelBetUseCase(repository, event_bus).execute(CancelBetCommand("nope"))


class TestQueries:
    """Tests for the read-only use cases."""

    def test_get_bet(self, repository) -> None:
        """GetBetUseCase flattens the bet and its odds."""
        bet = make_bet()
        repository.save(bet)

        result = GetBetUseCase(repository).execute(bet.id)

        assert result.bet_id == bet.id
        assert result.odds_price == Decimal("2.50")
        assert result.market_id == "match-1"

    def test_get_missing_bet(self, repository) -> None:
        """Unknown ids raise BetNotFoundError."""
        with pytest.raises(BetNotFoundError):
            GetBetUseCase(repository).execute("nope")

    def test_list_with_status_filter(self, repository) -> None:
        """Status filters are case-insensitive."""
        open_bet = make_bet()
        won = make_bet()
        won.settle_as_won("1-0")
        repository.save(open_bet)
        repository.save(won)

        results = ListCustomerBetsUseCase(repository).execute(
            ListCustomerBetsQuery(customer_id="cust-1", status="won")
        )

        assert [r.bet_id for r in results] == [won.id]

    @pytest.mark.parametrize(
        "query",
        [
            ListCustomerBetsQuery(customer_id="c", status="pending"),
            ListCustomerBetsQuery(customer_id="c", limit=0),
            ListCustomerBetsQuery(customer_id="c", limit=201),
            ListCustomerBetsQuery(customer_id="c", offset=-1),
        ],
    )
    def test_list_rejects_bad_queries(self, repository, query) -> None:
        """Unknown statuses and out-of-range paging are rejected."""
        with pytest.raises(ValidationError):
            ListCustomerBetsUseCase(repository).execute(query)

    def test_statistics(self, repository) -> None:
        """Statistics are scoped to the requested customer."""
        won = make_bet(stake="10", price="3.00")
        won.settle_as_won("1-0")
        repository.save(won)
        repository.save(make_bet(customer_id="other"))

        result = GetBetStatisticsUseCase(repository).execute("cust-1")

        assert result.customer_id == "cust-1"
        assert result.total_bets == 1
        assert result.net_result == Decimal("20.00")
        assert result.win_rate == Decimal("100.00")


class TestSettleMarketUseCase:
    """Tests for the SettleMarketUseCase."""

    @pytest.mark.asyncio
    async def test_settles_every_open_bet(self, repository, event_bus, recorder) -> None:
        """Winning selection wins, every other selection loses."""
        home = make_bet(selection="Home", market_id="m-1")
        away = make_bet(selection="Away", market_id="m-1")
        draw = make_bet(selection="Draw", market_id="m-1")
        other_market = make_bet(selection="Home", market_id="m-2")
        for bet in (home, away, draw, other_market):
            repository.save(bet)

        result = await SettleMarketUseCase(repository, event_bus).execute(
            SettleMarketCommand(market_id="m-1", winning_selection="Home", market_result="1-0")
        )

        assert result.settled == 3
        assert result.won == 1 and result.lost == 2
        assert set(result.bet_ids) == {home.id, away.id, draw.id}
        assert sorted(recorder.types) == ["BetLost", "BetLost", "BetWon"]
        assert repository.find_by_id(other_market.id).is_open()
        assert repository.find_open_by_market("m-1") == []

    @pytest.mark.asyncio
    async def test_empty_market(self, repository, event_bus) -> None:
        """A market with no open bets settles nothing."""
        result = await SettleMarketUseCase(repository, event_bus).execute(
            SettleMarketCommand(market_id="m-9", winning_selection="Home", market_result="")
        )
        assert result.settled == 0 and result.bet_ids == []

    @pytest.mark.asyncio
    async def test_requires_winning_selection(self, repository, event_bus) -> None:
        """A blank winning selection is rejected."""
        with pytest.raises(ValidationError):
            await SettleMarketUseCase(repository, event_bus).execute(
                SettleMarketCommand(market_id="m-1", winning_selection=" ", market_result="")
            )
