"""
Errors for the Fantasy402 integration context.

Business-rule violations extend DomainError and are surfaced as 4xx.
External-system failures are typed at the raise site so callers never
have to inspect message text to tell them apart.
No framework imports allowed.
"""

from typing import Optional

from wagerbridge.domain.betting.errors import DomainError


class InsufficientFundsError(DomainError):
    """Raised when an account cannot cover a debit or wager."""

    code = "INSUFFICIENT_FUNDS"

    def __init__(self, account_id: str, required: str, available: str) -> None:
        super().__init__(
            f"Insufficient funds: required {required}, available {available}",
            details={
                "accountId": account_id,
                "required": required,
                "available": available,
            },
        )
        self.account_id = account_id
        self.required = required
        self.available = available


class AccountInactiveError(DomainError):
    """Raised when a frozen or closed account is asked to move money."""

    code = "ACCOUNT_INACTIVE"

    def __init__(self, account_id: str, status: str) -> None:
        super().__init__(
            f"Account {account_id} is not active ({status})",
            details={"accountId": account_id, "status": status},
        )
        self.account_id = account_id
        self.status = status


class AgentNotFoundError(DomainError):
    """Raised when the external system has no such agent or account."""

    code = "AGENT_NOT_FOUND"

    def __init__(self, agent_id: str) -> None:
        super().__init__(f"Agent not found: {agent_id}", details={"agentId": agent_id})
        self.agent_id = agent_id


class ExternalServiceError(Exception):
    """Base error for failures talking to the Fantasy402 API."""

    def __init__(self, message: str, endpoint: Optional[str] = None) -> None:
        self.message = message
        self.endpoint = endpoint
        super().__init__(self.message)


class AuthenticationError(ExternalServiceError):
    """Raised when the remote system refuses or omits a session token."""


class ExternalRequestError(ExternalServiceError):
    """Raised when a request fails (non-2xx or transport failure).

    Once retries are exhausted, ``attempts`` holds the total number of
    attempts made.
    """

    def __init__(
        self,
        endpoint: str,
        attempts: int,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        detail = f"HTTP {status_code}" if status_code is not None else (reason or "transport error")
        super().__init__(
            f"Request to {endpoint} failed after {attempts} attempt(s): {detail}",
            endpoint=endpoint,
        )
        self.attempts = attempts
        self.status_code = status_code
        self.reason = reason


class ExternalTimeoutError(ExternalRequestError):
    """Raised when a request exceeds the hard timeout."""


class MalformedResponseError(ExternalServiceError):
    """Raised when a response body does not have the documented shape."""


class ExternalNotFoundError(ExternalServiceError):
    """Raised when the remote resource does not exist (HTTP 404)."""

    def __init__(self, endpoint: str) -> None:
        super().__init__(f"Resource not found: {endpoint}", endpoint=endpoint)
