"""
Adapter: Fantasy402 HTTP protocol.

Owns the authenticated session with the remote system and executes
resilient HTTP calls:

    ensure_valid_session ──▶ request (hard timeout) ──▶ 2xx? ──▶ decode
            ▲                                            │ no
            └──────── backoff 2^attempt s ◀──────────────┘

The session token is the only mutable state. It is refreshed lazily
before an authenticated call when missing or expired; concurrent
callers share one re-authentication through a lock.

Domain-facing methods are thin wrappers: query objects become URL
parameters, JSON envelopes become record dataclasses.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import quote

import httpx

from wagerbridge.domain.fantasy402.dtos import (
    AccountDTO,
    AgentDTO,
    AgentQuery,
    BalanceUpdateDTO,
    BetDTO,
    BetQuery,
    OddsDTO,
    PlaceBetParams,
    SportEventDTO,
    SportEventQuery,
)
from wagerbridge.domain.fantasy402.errors import (
    AuthenticationError,
    ExternalNotFoundError,
    ExternalRequestError,
    ExternalServiceError,
    ExternalTimeoutError,
    MalformedResponseError,
)
from wagerbridge.infrastructure.fantasy402 import wire
from wagerbridge.infrastructure.fantasy402.config import Fantasy402Config
from wagerbridge.shared.retry import retry_async

logger = logging.getLogger(__name__)

AUTH_ENDPOINT = "/System/authenticateCustomer"
AUTH_OPERATION = "authenticateCustomer"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _segment(value: str) -> str:
    return quote(str(value), safe="")


@dataclass(frozen=True)
class Fantasy402Session:
    """Bearer token issued by the remote system."""

    token: str
    customer_id: str
    expires_at: datetime

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        return bool(self.token) and self.expires_at > (now or _utcnow())


class Fantasy402Adapter:
    """HTTP client for the Fantasy402 API.

    Args:
        config: Connection, timeout and retry settings.
        client: Optional pre-built ``httpx.AsyncClient``. When omitted the
            adapter builds and owns one, and closes it on ``disconnect``.
        sleep: Awaitable used between retries.
        clock: Returns the current aware datetime; used for session expiry.
    """

    def __init__(
        self,
        config: Fantasy402Config,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.request_timeout)
        self._sleep = sleep
        self._clock = clock
        self._session: Optional[Fantasy402Session] = None
        self._auth_lock = asyncio.Lock()
        self._stats = {"requests": 0, "authentications": 0, "failures": 0}

    @property
    def session(self) -> Optional[Fantasy402Session]:
        return self._session

    @property
    def stats(self) -> dict:
        return dict(self._stats)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def authenticate(self) -> Fantasy402Session:
        """Log in and store a fresh session.

        Raises:
            AuthenticationError: On transport failure, a non-2xx answer,
                or a response without a token.
        """
        customer_id = self._config.customer_id.upper()
        form = {
            "customerID": customer_id,
            "password": self._config.password.upper(),
            "operation": AUTH_OPERATION,
        }
        self._stats["authentications"] += 1
        try:
            response = await self._client.request(
                "POST",
                f"{self._config.api_url}{AUTH_ENDPOINT}",
                data=form,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self._config.request_timeout,
            )
        except httpx.RequestError as exc:
            self._session = None
            logger.error("Fantasy402 authentication request failed: %s", type(exc).__name__)
            raise AuthenticationError(
                f"Authentication request failed: {type(exc).__name__}",
                endpoint=AUTH_ENDPOINT,
            ) from exc

        if not response.is_success:
            self._session = None
            logger.error("Fantasy402 authentication rejected: HTTP %d", response.status_code)
            raise AuthenticationError(
                f"Authentication failed with HTTP {response.status_code}",
                endpoint=AUTH_ENDPOINT,
            )

        token = wire.extract_token(response.text)
        if not token:
            self._session = None
            logger.error("Fantasy402 authentication returned no token")
            raise AuthenticationError(
                "No authentication token received", endpoint=AUTH_ENDPOINT
            )

        self._session = Fantasy402Session(
            token=token,
            customer_id=customer_id,
            expires_at=self._clock() + self._config.session_ttl,
        )
        logger.info(
            "Authenticated with Fantasy402 as %s (session valid until %s)",
            customer_id,
            self._session.expires_at.isoformat(),
        )
        return self._session

    def is_session_valid(self) -> bool:
        return self._session is not None and self._session.is_valid(self._clock())

    async def ensure_valid_session(self) -> Fantasy402Session:
        """Return a usable session, re-authenticating if needed."""
        if self.is_session_valid():
            return self._session
        async with self._auth_lock:
            # another caller may have refreshed while we waited
            if self.is_session_valid():
                return self._session
            logger.info("Fantasy402 session missing or expired; authenticating")
            return await self.authenticate()

    async def disconnect(self) -> None:
        self._session = None
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Fantasy402Adapter:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.disconnect()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def make_request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        retries: Optional[int] = None,
    ) -> Any:
        """Issue an authenticated request with retry and backoff.

        Args:
            endpoint: Path below ``api_url``, e.g. ``/bets``.
            method: HTTP method.
            params: Query parameters.
            json: JSON request body.
            retries: Attempt budget; defaults to the configured policy.

        Returns:
            The decoded JSON body, or None for an empty body.

        Raises:
            ExternalNotFoundError: The resource does not exist (not retried).
            ExternalRequestError: Every attempt failed.
            AuthenticationError: Re-authentication failed on the last attempt.
        """
        policy = self._config.retry_policy
        if retries is not None:
            policy = policy.with_attempts(retries)
        url = f"{self._config.api_url}{endpoint}"

        async def attempt(number: int) -> Any:
            session = await self.ensure_valid_session()
            self._stats["requests"] += 1
            try:
                response = await self._client.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers={
                        "Authorization": f"Bearer {session.token}",
                        "Accept": "application/json",
                    },
                    timeout=self._config.request_timeout,
                )
            except httpx.TimeoutException as exc:
                raise ExternalTimeoutError(endpoint, number, reason="timeout") from exc
            except httpx.RequestError as exc:
                raise ExternalRequestError(
                    endpoint, number, reason=type(exc).__name__
                ) from exc

            if response.status_code == 404:
                raise ExternalNotFoundError(endpoint)
            if response.status_code == 401:
                # token revoked server-side; next attempt logs in again
                self._session = None
            if not response.is_success:
                raise ExternalRequestError(endpoint, number, status_code=response.status_code)
            return self._decode(response, endpoint)

        try:
            return await retry_async(
                attempt,
                policy,
                retry_on=(ExternalRequestError, AuthenticationError),
                sleep=self._sleep,
                label=f"{method} {endpoint}",
            )
        except (ExternalRequestError, AuthenticationError):
            self._stats["failures"] += 1
            raise

    @staticmethod
    def _decode(response: httpx.Response, endpoint: str) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponseError(
                f"Response from {endpoint} is not JSON", endpoint=endpoint
            ) from exc

    async def _call(self, endpoint: str, **kwargs: Any) -> Any:
        try:
            return await self.make_request(endpoint, **kwargs)
        except ExternalNotFoundError:
            logger.info("Fantasy402 %s: not found", endpoint)
            raise
        except ExternalServiceError as exc:
            logger.error("Fantasy402 %s failed: %s", endpoint, exc.message)
            raise

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    async def get_sport_events(
        self, query: Optional[SportEventQuery] = None
    ) -> list[SportEventDTO]:
        payload = await self._call(
            "/sports/events", params=wire.sport_event_params(query or SportEventQuery())
        )
        return [wire.parse_sport_event(item) for item in wire.unwrap_list(payload, "events")]

    async def get_event_odds(self, event_id: str) -> list[OddsDTO]:
        payload = await self._call(f"/sports/events/{_segment(event_id)}/odds")
        return [wire.parse_odds(item) for item in wire.unwrap_list(payload, "odds")]

    async def get_agents(self, query: Optional[AgentQuery] = None) -> list[AgentDTO]:
        payload = await self._call("/agents", params=wire.agent_params(query or AgentQuery()))
        return [wire.parse_agent(item) for item in wire.unwrap_list(payload, "agents")]

    async def get_agent(self, agent_id: str) -> AgentDTO:
        payload = await self._call(f"/agents/{_segment(agent_id)}")
        return wire.parse_agent(wire.unwrap_record(payload, "agent"))

    async def get_agent_account(self, agent_id: str) -> AccountDTO:
        payload = await self._call(f"/agents/{_segment(agent_id)}/account")
        return wire.parse_account(wire.unwrap_record(payload, "account"), agent_id)

    async def get_bets(self, query: Optional[BetQuery] = None) -> list[BetDTO]:
        payload = await self._call("/bets", params=wire.bet_params(query or BetQuery()))
        return [wire.parse_bet(item) for item in wire.unwrap_list(payload, "bets")]

    async def get_bet(self, bet_id: str) -> BetDTO:
        payload = await self._call(f"/bets/{_segment(bet_id)}")
        return wire.parse_bet(wire.unwrap_record(payload, "bet"))

    async def place_bet(self, params: PlaceBetParams) -> BetDTO:
        payload = await self._call("/bets", method="POST", json=wire.place_bet_body(params))
        return wire.parse_bet(wire.unwrap_record(payload, "bet"))

    async def cancel_bet(self, bet_id: str, reason: Optional[str] = None) -> BetDTO:
        payload = await self._call(
            f"/bets/{_segment(bet_id)}/cancel",
            method="POST",
            json={"reason": reason} if reason else {},
        )
        return wire.parse_bet(wire.unwrap_record(payload, "bet"))

    async def update_balance(
        self, agent_id: str, amount: Decimal, reason: str
    ) -> BalanceUpdateDTO:
        payload = await self._call(
            f"/agents/{_segment(agent_id)}/balance",
            method="POST",
            json={"amount": str(amount), "reason": reason},
        )
        return wire.parse_balance_update(wire.unwrap_record(payload, "balance"), agent_id)

    async def health_check(self) -> dict[str, Any]:
        """Ping the API once. Health checks fail fast: no retries."""
        payload = await self._call("/health", retries=1)
        return payload if isinstance(payload, dict) else {"status": "ok"}
