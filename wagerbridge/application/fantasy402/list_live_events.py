"""
Use case: List live sport events from Fantasy402.
"""

from typing import Optional

from wagerbridge.application.fantasy402.dtos import SportEventResult, to_sport_event_result
from wagerbridge.domain.fantasy402.dtos import SportEventQuery
from wagerbridge.domain.fantasy402.ports import Fantasy402GatewayPort


class ListLiveEventsUseCase:
    def __init__(self, gateway: Fantasy402GatewayPort) -> None:
        self._gateway = gateway

    async def execute(
        self,
        sport: Optional[str] = None,
        league: Optional[str] = None,
        limit: int = 100,
    ) -> list[SportEventResult]:
        events = await self._gateway.get_live_sport_events(
            SportEventQuery(sport=sport, league=league, status="live", limit=limit)
        )
        return [to_sport_event_result(event) for event in events]
