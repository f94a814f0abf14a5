"""
Tests for the Fantasy402 HTTP adapter.

The httpx client is mocked; every answer is a real ``httpx.Response``
so status handling and JSON decoding run for real. Sleeps are
captured instead of awaited.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from wagerbridge.domain.fantasy402.dtos import SportEventQuery
from wagerbridge.domain.fantasy402.errors import (
    AuthenticationError,
    ExternalNotFoundError,
    ExternalRequestError,
)
from wagerbridge.infrastructure.fantasy402.adapter import Fantasy402Adapter
from wagerbridge.infrastructure.fantasy402.config import Fantasy402Config

API_URL = "https://fantasy402.test/api"


def _config(**overrides) -> Fantasy402Config:
    values = dict(api_url=API_URL, customer_id="agent01", password="secret")
    values.update(overrides)
    return Fantasy402Config(**values)


def _auth(token: str = "TOKEN1") -> httpx.Response:
    return httpx.Response(200, json={"code": token})


def _ok(payload) -> httpx.Response:
    return httpx.Response(200, json=payload)


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock()
    client.request = AsyncMock()
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def sleep() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def adapter(client: MagicMock, sleep: AsyncMock, clock: FakeClock) -> Fantasy402Adapter:
    return Fantasy402Adapter(_config(), client=client, sleep=sleep, clock=clock)


def _sleeps(sleep: AsyncMock) -> list[float]:
    return [c.args[0] for c in sleep.call_args_list]


def _bearer(call) -> str:
    return call.kwargs["headers"]["Authorization"]


class TestAuthentication:
    @pytest.mark.asyncio
    async def test_authenticate_posts_uppercased_credentials(
        self, adapter: Fantasy402Adapter, client: MagicMock, clock: FakeClock
    ) -> None:
        client.request.side_effect = [_auth()]

        session = await adapter.authenticate()

        method, url = client.request.call_args.args
        assert method == "POST"
        assert url == f"{API_URL}/System/authenticateCustomer"
        assert client.request.call_args.kwargs["data"] == {
            "customerID": "AGENT01",
            "password": "SECRET",
            "operation": "authenticateCustomer",
        }
        assert session.token == "TOKEN1"
        assert session.expires_at == clock.now + timedelta(minutes=20)
        assert adapter.is_session_valid()

    @pytest.mark.asyncio
    async def test_plain_text_token_accepted(
        self, adapter: Fantasy402Adapter, client: MagicMock
    ) -> None:
        client.request.side_effect = [httpx.Response(200, text="RAWTOKEN")]
        assert (await adapter.authenticate()).token == "RAWTOKEN"

    @pytest.mark.asyncio
    async def test_missing_token_leaves_no_session(
        self, adapter: Fantasy402Adapter, client: MagicMock
    ) -> None:
        client.request.side_effect = [_ok({"status": "error"})]

        with pytest.raises(AuthenticationError, match="No authentication token received"):
            await adapter.authenticate()

        assert adapter.session is None
        assert not adapter.is_session_valid()

    @pytest.mark.asyncio
    async def test_rejected_login(self, adapter: Fantasy402Adapter, client: MagicMock) -> None:
        client.request.side_effect = [httpx.Response(403)]
        with pytest.raises(AuthenticationError):
            await adapter.authenticate()
        assert adapter.session is None

    @pytest.mark.asyncio
    async def test_session_is_reused_until_expiry(
        self, adapter: Fantasy402Adapter, client: MagicMock, clock: FakeClock
    ) -> None:
        client.request.side_effect = [
            _auth("T1"),
            _ok({"bets": []}),
            _ok({"bets": []}),
            _auth("T2"),
            _ok({"bets": []}),
        ]

        await adapter.get_bets()
        await adapter.get_bets()
        clock.now += timedelta(minutes=21)
        await adapter.get_bets()

        calls = client.request.call_args_list
        assert len(calls) == 5
        assert _bearer(calls[2]) == "Bearer T1"
        assert _bearer(calls[4]) == "Bearer T2"

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_login(
        self, adapter: Fantasy402Adapter, client: MagicMock
    ) -> None:
        client.request.side_effect = [_auth()]

        sessions = await asyncio.gather(
            *(adapter.ensure_valid_session() for _ in range(3))
        )

        assert client.request.await_count == 1
        assert {s.token for s in sessions} == {"TOKEN1"}

    @pytest.mark.asyncio
    async def test_disconnect_clears_session_but_keeps_injected_client(
        self, adapter: Fantasy402Adapter, client: MagicMock
    ) -> None:
        client.request.side_effect = [_auth()]
        await adapter.authenticate()

        await adapter.disconnect()

        assert adapter.session is None
        client.aclose.assert_not_awaited()


class TestMakeRequest:
    @pytest.mark.asyncio
    async def test_success_sends_bearer_and_decodes_json(
        self, adapter: Fantasy402Adapter, client: MagicMock
    ) -> None:
        client.request.side_effect = [_auth(), _ok({"ok": True})]

        result = await adapter.make_request("/ping", params={"a": 1})

        assert result == {"ok": True}
        call = client.request.call_args_list[1]
        assert call.args == ("GET", f"{API_URL}/ping")
        assert call.kwargs["params"] == {"a": 1}
        assert _bearer(call) == "Bearer TOKEN1"
        assert call.kwargs["timeout"] == 30.0

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_with_attempt_count(
        self, adapter: Fantasy402Adapter, client: MagicMock, sleep: AsyncMock
    ) -> None:
        client.request.side_effect = [
            _auth(),
            httpx.Response(500),
            httpx.Response(500),
            httpx.Response(500),
        ]

        with pytest.raises(ExternalRequestError) as exc_info:
            await adapter.make_request("/bets")

        assert exc_info.value.attempts == 3
        assert exc_info.value.status_code == 500
        assert exc_info.value.endpoint == "/bets"
        assert "failed after 3 attempt(s)" in exc_info.value.message
        assert _sleeps(sleep) == [2.0, 4.0]
        assert adapter.stats["failures"] == 1

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failure(
        self, adapter: Fantasy402Adapter, client: MagicMock, sleep: AsyncMock
    ) -> None:
        client.request.side_effect = [
            _auth(),
            httpx.ReadTimeout("slow"),
            _ok({"bet": {"id": "1"}}),
        ]

        assert await adapter.make_request("/bets/1") == {"bet": {"id": "1"}}
        assert _sleeps(sleep) == [2.0]

    @pytest.mark.asyncio
    async def test_not_found_is_not_retried(
        self, adapter: Fantasy402Adapter, client: MagicMock, sleep: AsyncMock
    ) -> None:
        client.request.side_effect = [_auth(), httpx.Response(404)]

        with pytest.raises(ExternalNotFoundError):
            await adapter.make_request("/bets/missing")

        assert client.request.await_count == 2
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unauthorized_forces_new_login(
        self, adapter: Fantasy402Adapter, client: MagicMock
    ) -> None:
        client.request.side_effect = [
            _auth("T1"),
            httpx.Response(401),
            _auth("T2"),
            _ok({"ok": True}),
        ]

        assert await adapter.make_request("/agents") == {"ok": True}
        assert _bearer(client.request.call_args_list[3]) == "Bearer T2"

    @pytest.mark.asyncio
    async def test_login_failures_are_retried_then_surface(
        self, adapter: Fantasy402Adapter, client: MagicMock, sleep: AsyncMock
    ) -> None:
        client.request.side_effect = httpx.ConnectError("refused")

        with pytest.raises(AuthenticationError):
            await adapter.make_request("/agents")

        assert client.request.await_count == 3
        assert _sleeps(sleep) == [2.0, 4.0]

    @pytest.mark.asyncio
    async def test_explicit_retry_budget(
        self, adapter: Fantasy402Adapter, client: MagicMock, sleep: AsyncMock
    ) -> None:
        client.request.side_effect = [_auth(), httpx.Response(502)]

        with pytest.raises(ExternalRequestError) as exc_info:
            await adapter.make_request("/bets", retries=1)

        assert exc_info.value.attempts == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_body_decodes_to_none(
        self, adapter: Fantasy402Adapter, client: MagicMock
    ) -> None:
        client.request.side_effect = [_auth(), httpx.Response(204)]
        assert await adapter.make_request("/bets/1/cancel", method="POST") is None


class TestResourceWrappers:
    @pytest.mark.asyncio
    async def test_get_sport_events(self, adapter: Fantasy402Adapter, client: MagicMock) -> None:
        client.request.side_effect = [
            _auth(),
            _ok(
                {
                    "events": [
                        {
                            "id": "E1",
                            "sport": "football",
                            "league": "EPL",
                            "homeTeam": "Arsenal",
                            "awayTeam": "Chelsea",
                            "startTime": "2024-05-01T15:00:00Z",
                            "status": "live",
                        }
                    ]
                }
            ),
        ]

        events = await adapter.get_sport_events(SportEventQuery(sport="football"))

        assert [e.id for e in events] == ["E1"]
        call = client.request.call_args_list[1]
        assert call.args[1] == f"{API_URL}/sports/events"
        assert call.kwargs["params"] == {"sport": "football", "status": "live", "limit": 100}

    @pytest.mark.asyncio
    async def test_get_agent_account(self, adapter: Fantasy402Adapter, client: MagicMock) -> None:
        client.request.side_effect = [
            _auth(),
            _ok({"account": {"id": "ACC", "currentBalance": 1000, "pendingWagers": 100}}),
        ]

        account = await adapter.get_agent_account("A 1")

        assert account.available_balance == Decimal("900")
        assert client.request.call_args.args[1] == f"{API_URL}/agents/A%201/account"

    @pytest.mark.asyncio
    async def test_update_balance(self, adapter: Fantasy402Adapter, client: MagicMock) -> None:
        client.request.side_effect = [
            _auth(),
            _ok({"balance": {"newBalance": "1250.00", "transactionId": "TX9"}}),
        ]

        update = await adapter.update_balance("A1", Decimal("250"), "bonus")

        assert update.new_balance == Decimal("1250.00")
        assert update.transaction_id == "TX9"
        call = client.request.call_args
        assert call.args[0] == "POST"
        assert call.kwargs["json"] == {"amount": "250", "reason": "bonus"}

    @pytest.mark.asyncio
    async def test_health_check_is_single_attempt(
        self, adapter: Fantasy402Adapter, client: MagicMock, sleep: AsyncMock
    ) -> None:
        client.request.side_effect = [_auth(), httpx.Response(503)]

        with pytest.raises(ExternalRequestError):
            await adapter.health_check()

        sleep.assert_not_awaited()
