"""
Use case: Read an agent's account from Fantasy402.
"""

from wagerbridge.application.fantasy402.dtos import AccountResult, to_account_result
from wagerbridge.domain.fantasy402.errors import AgentNotFoundError
from wagerbridge.domain.fantasy402.ports import Fantasy402GatewayPort


class GetAgentAccountUseCase:
    def __init__(self, gateway: Fantasy402GatewayPort) -> None:
        self._gateway = gateway

    async def execute(self, agent_id: str) -> AccountResult:
        account = await self._gateway.get_agent_account(agent_id)
        if account is None:
            raise AgentNotFoundError(agent_id)
        return to_account_result(account)
