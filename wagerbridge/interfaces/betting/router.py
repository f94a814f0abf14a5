"""
FastAPI router for the betting bounded context.

All routes delegate to use cases. No business logic here.
Error mapping is handled by centralized error handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from wagerbridge.application.betting.cancel_bet import CancelBetUseCase
from wagerbridge.application.betting.dtos import (
    BetResult,
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
from wagerbridge.interfaces.betting.dependencies import (
    get_bet_statistics_use_case,
    get_cancel_bet_use_case,
    get_get_bet_use_case,
    get_list_customer_bets_use_case,
    get_place_bet_use_case,
    get_settle_bet_use_case,
    get_settle_market_use_case,
    get_void_bet_use_case,
)
from wagerbridge.interfaces.betting.schemas import (
    BetListResponse,
    BetResponse,
    BetStatisticsResponse,
    OddsSchema,
    PlaceBetRequest,
    ReasonRequest,
    SettleBetRequest,
    SettleMarketRequest,
    SettleMarketResponse,
)
from wagerbridge.interfaces.schemas import ErrorResponse
from wagerbridge.shared.security.rate_limiting import HEAVY_RATE_LIMIT, limiter

router = APIRouter(tags=["betting"])


def _to_response(result: BetResult) -> BetResponse:
    return BetResponse(
        bet_id=result.bet_id,
        customer_id=result.customer_id,
        stake=result.stake,
        potential_win=result.potential_win,
        odds=OddsSchema(
            price=result.odds_price,
            selection=result.selection,
            market_id=result.market_id,
            fractional=result.fractional_odds,
            american=result.american_odds,
            implied_probability=result.implied_probability,
        ),
        placed_at=result.placed_at,
        status=result.status,
        settled_at=result.settled_at,
        outcome=result.outcome,
        actual_win=result.actual_win,
        market_result=result.market_result,
    )


@router.post(
    "/bets",
    response_model=BetResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Place a bet",
)
@limiter.limit(HEAVY_RATE_LIMIT)
async def place_bet(
    request: Request,
    body: PlaceBetRequest,
    use_case: PlaceBetUseCase = Depends(get_place_bet_use_case),
) -> BetResponse:
    result = await use_case.execute(
        PlaceBetCommand(
            customer_id=body.customer_id,
            stake=body.stake,
            odds_price=body.odds_price,
            selection=body.selection,
            market_id=body.market_id,
        )
    )
    return _to_response(result)


@router.get(
    "/bets/statistics",
    response_model=BetStatisticsResponse,
    summary="Aggregated bet figures",
)
def get_bet_statistics(
    customer_id: Optional[str] = Query(default=None, alias="customerId"),
    use_case: GetBetStatisticsUseCase = Depends(get_bet_statistics_use_case),
) -> BetStatisticsResponse:
    result = use_case.execute(customer_id)
    return BetStatisticsResponse(
        customer_id=result.customer_id,
        total_bets=result.total_bets,
        open_bets=result.open_bets,
        won_bets=result.won_bets,
        lost_bets=result.lost_bets,
        cancelled_bets=result.cancelled_bets,
        voided_bets=result.voided_bets,
        total_staked=result.total_staked,
        total_payout=result.total_payout,
        net_result=result.net_result,
        win_rate=result.win_rate,
    )


@router.get(
    "/bets/{bet_id}",
    response_model=BetResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a bet",
)
def get_bet(
    bet_id: str,
    use_case: GetBetUseCase = Depends(get_get_bet_use_case),
) -> BetResponse:
    return _to_response(use_case.execute(bet_id))


@router.post(
    "/bets/{bet_id}/settle",
    response_model=BetResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Settle a bet as won or lost",
)
async def settle_bet(
    bet_id: str,
    body: SettleBetRequest,
    use_case: SettleBetUseCase = Depends(get_settle_bet_use_case),
) -> BetResponse:
    result = await use_case.execute(
        SettleBetCommand(
            bet_id=bet_id,
            won=body.outcome == "won",
            market_result=body.market_result,
        )
    )
    return _to_response(result)


@router.post(
    "/bets/{bet_id}/cancel",
    response_model=BetResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Cancel an open bet",
)
async def cancel_bet(
    bet_id: str,
    body: Optional[ReasonRequest] = None,
    use_case: CancelBetUseCase = Depends(get_cancel_bet_use_case),
) -> BetResponse:
    reason = body.reason if body else None
    return _to_response(await use_case.execute(CancelBetCommand(bet_id, reason)))


@router.post(
    "/bets/{bet_id}/void",
    response_model=BetResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Void an open bet",
)
async def void_bet(
    bet_id: str,
    body: Optional[ReasonRequest] = None,
    use_case: VoidBetUseCase = Depends(get_void_bet_use_case),
) -> BetResponse:
    reason = body.reason if body else None
    return _to_response(await use_case.execute(VoidBetCommand(bet_id, reason)))


@router.get(
    "/customers/{customer_id}/bets",
    response_model=BetListResponse,
    summary="List a customer's bets",
)
def list_customer_bets(
    customer_id: str,
    bet_status: Optional[str] = Query(default=None, alias="status"),
    limit: int = Query(default=50),
    offset: int = Query(default=0),
    use_case: ListCustomerBetsUseCase = Depends(get_list_customer_bets_use_case),
) -> BetListResponse:
    results = use_case.execute(
        ListCustomerBetsQuery(
            customer_id=customer_id, status=bet_status, limit=limit, offset=offset
        )
    )
    return BetListResponse(
        bets=[_to_response(r) for r in results],
        count=len(results),
        limit=limit,
        offset=offset,
    )


@router.post(
    "/markets/{market_id}/settle",
    response_model=SettleMarketResponse,
    summary="Settle every open bet on a market",
)
@limiter.limit(HEAVY_RATE_LIMIT)
async def settle_market(
    request: Request,
    market_id: str,
    body: SettleMarketRequest,
    use_case: SettleMarketUseCase = Depends(get_settle_market_use_case),
) -> SettleMarketResponse:
    result = await use_case.execute(
        SettleMarketCommand(
            market_id=market_id,
            winning_selection=body.winning_selection,
            market_result=body.market_result,
        )
    )
    return SettleMarketResponse(
        market_id=result.market_id,
        settled=result.settled,
        won=result.won,
        lost=result.lost,
        bet_ids=result.bet_ids,
    )
