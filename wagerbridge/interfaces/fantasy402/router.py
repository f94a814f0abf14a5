"""
FastAPI router for the Fantasy402 integration.

Routes delegate to use cases; the health route reads the gateway
directly since it has no business rules.
"""

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from wagerbridge.application.fantasy402.dtos import (
    PlaceExternalBetCommand,
    ReconcileAgentBalanceCommand,
)
from wagerbridge.application.fantasy402.get_agent_account import GetAgentAccountUseCase
from wagerbridge.application.fantasy402.list_live_events import ListLiveEventsUseCase
from wagerbridge.application.fantasy402.place_external_bet import PlaceExternalBetUseCase
from wagerbridge.application.fantasy402.reconcile_agent_balance import (
    ReconcileAgentBalanceUseCase,
)
from wagerbridge.domain.fantasy402.ports import Fantasy402GatewayPort, HealthState
from wagerbridge.interfaces.fantasy402.dependencies import (
    get_agent_account_use_case,
    get_fantasy402_gateway,
    get_list_live_events_use_case,
    get_place_external_bet_use_case,
    get_reconcile_agent_balance_use_case,
)
from wagerbridge.interfaces.fantasy402.schemas import (
    AccountResponse,
    ExternalBetResponse,
    ExternalHealthResponse,
    PlaceExternalBetRequest,
    ReconcileBalanceRequest,
    ReconcileBalanceResponse,
    SportEventListResponse,
    SportEventSchema,
)
from wagerbridge.interfaces.schemas import ErrorResponse
from wagerbridge.shared.security.rate_limiting import HEAVY_RATE_LIMIT, limiter

router = APIRouter(prefix="/fantasy402", tags=["fantasy402"])

EXTERNAL_ERRORS = {502: {"model": ErrorResponse}}


@router.get(
    "/events/live",
    response_model=SportEventListResponse,
    responses=EXTERNAL_ERRORS,
    summary="List live sport events",
)
async def list_live_events(
    sport: Optional[str] = Query(default=None, max_length=50),
    league: Optional[str] = Query(default=None, max_length=100),
    limit: int = Query(default=100, ge=1, le=500),
    use_case: ListLiveEventsUseCase = Depends(get_list_live_events_use_case),
) -> SportEventListResponse:
    events = await use_case.execute(sport=sport, league=league, limit=limit)
    return SportEventListResponse(
        events=[SportEventSchema(**asdict(e)) for e in events],
        count=len(events),
    )


@router.get(
    "/agents/{agent_id}/account",
    response_model=AccountResponse,
    responses={404: {"model": ErrorResponse}, **EXTERNAL_ERRORS},
    summary="Get an agent's account",
)
async def get_agent_account(
    agent_id: str,
    use_case: GetAgentAccountUseCase = Depends(get_agent_account_use_case),
) -> AccountResponse:
    return AccountResponse(**asdict(await use_case.execute(agent_id)))


@router.post(
    "/agents/{agent_id}/reconcile",
    response_model=ReconcileBalanceResponse,
    responses={404: {"model": ErrorResponse}, **EXTERNAL_ERRORS},
    summary="Compare an internal balance with the external account",
)
async def reconcile_agent_balance(
    agent_id: str,
    body: ReconcileBalanceRequest,
    use_case: ReconcileAgentBalanceUseCase = Depends(
        get_reconcile_agent_balance_use_case
    ),
) -> ReconcileBalanceResponse:
    result = await use_case.execute(
        ReconcileAgentBalanceCommand(
            agent_id=agent_id, internal_balance=body.internal_balance
        )
    )
    return ReconcileBalanceResponse(**asdict(result))


@router.post(
    "/bets",
    response_model=ExternalBetResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        **EXTERNAL_ERRORS,
    },
    summary="Place a bet on Fantasy402",
)
@limiter.limit(HEAVY_RATE_LIMIT)
async def place_external_bet(
    request: Request,
    body: PlaceExternalBetRequest,
    use_case: PlaceExternalBetUseCase = Depends(get_place_external_bet_use_case),
) -> ExternalBetResponse:
    result = await use_case.execute(
        PlaceExternalBetCommand(
            agent_id=body.agent_id,
            event_id=body.event_id,
            selection=body.selection,
            amount=body.amount,
            odds=body.odds,
            odds_format=body.odds_format,
            customer_id=body.customer_id,
            market=body.market,
        )
    )
    return ExternalBetResponse(**asdict(result))


@router.get(
    "/health",
    response_model=ExternalHealthResponse,
    summary="Fantasy402 connectivity",
    description="Healthy below the latency threshold, degraded above it, "
    "unhealthy (HTTP 503) when the ping fails.",
)
async def fantasy402_health(
    response: Response,
    gateway: Fantasy402GatewayPort = Depends(get_fantasy402_gateway),
) -> ExternalHealthResponse:
    health = await gateway.health_check()
    if health.status is HealthState.UNHEALTHY:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ExternalHealthResponse(
        status=health.status.value,
        latency_ms=health.latency_ms,
        checked_at=health.checked_at,
        error=health.error,
    )
