"""
Wire codec for the Fantasy402 API.

Turns JSON envelopes into record dataclasses and query objects into
URL parameters / request bodies. Shape translation only: no business
rules live here.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from dateutil import parser as dateparser

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
from wagerbridge.domain.fantasy402.errors import MalformedResponseError

_MISSING = object()


# ── Field helpers ────────────────────────────────────────────────────


def _pick(payload: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key; the API is inconsistent about casing."""
    for key in keys:
        value = payload.get(key, _MISSING)
        if value is not _MISSING and value is not None:
            return value
    return default


def _require(payload: Mapping[str, Any], kind: str, *keys: str) -> Any:
    value = _pick(payload, *keys)
    if value is None:
        raise MalformedResponseError(f"Malformed {kind} record: missing '{keys[0]}'")
    return value


def parse_decimal(value: Any, kind: str = "record") -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise MalformedResponseError(f"Malformed {kind} record: {value!r} is not a number") from exc


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse ISO strings or epoch seconds/milliseconds into aware datetimes."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        seconds = value / 1000 if value > 1e12 else value
        try:
            parsed = datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (ValueError, OverflowError, OSError) as exc:
            raise MalformedResponseError(f"Unparseable timestamp: {value!r}") from exc
    else:
        try:
            parsed = dateparser.isoparse(str(value))
        except (ValueError, OverflowError) as exc:
            raise MalformedResponseError(f"Unparseable timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _str(value: Any) -> str:
    return str(value).strip()


# ── Envelopes ────────────────────────────────────────────────────────


def unwrap(payload: Any, key: str) -> Any:
    """Return ``payload[key]``, accepting an unwrapped body as well."""
    if isinstance(payload, Mapping):
        if key in payload:
            return payload[key]
        data = payload.get("data")
        if isinstance(data, Mapping) and key in data:
            return data[key]
        return payload
    return payload


def unwrap_record(payload: Any, key: str) -> Mapping[str, Any]:
    record = unwrap(payload, key)
    if isinstance(record, Mapping):
        return record
    if isinstance(payload, Mapping):
        return payload
    raise MalformedResponseError(f"Expected an object under '{key}'")


def unwrap_list(payload: Any, key: str) -> list[Mapping[str, Any]]:
    items = unwrap(payload, key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise MalformedResponseError(f"Expected a list under '{key}'")
    return [item for item in items if isinstance(item, Mapping)]


def extract_token(body: str) -> Optional[str]:
    """Pull the session token out of an authentication response.

    The API answers either with JSON carrying ``code`` or ``token``, or
    with the bare token as plain text.
    """
    text = (body or "").strip()
    if not text:
        return None
    try:
        data = json.loads(text)
    except ValueError:
        return text if not any(ch.isspace() for ch in text) else None
    if isinstance(data, Mapping):
        token = _pick(data, "code", "token")
        return _str(token) if token else None
    if isinstance(data, str) and data.strip():
        return data.strip()
    return None


# ── Records ──────────────────────────────────────────────────────────


def parse_odds(payload: Mapping[str, Any]) -> OddsDTO:
    return OddsDTO(
        market_id=_str(_require(payload, "odds", "marketId", "market_id", "market")),
        selection=_str(_require(payload, "odds", "selection", "name")),
        price=parse_decimal(_require(payload, "odds", "price", "decimalOdds", "odds"), "odds"),
        updated_at=parse_datetime(_pick(payload, "updatedAt", "updated_at", "timestamp")),
    )


def parse_sport_event(payload: Mapping[str, Any]) -> SportEventDTO:
    raw_odds = _pick(payload, "odds", "markets", default=[])
    return SportEventDTO(
        id=_str(_require(payload, "event", "id", "eventId", "EventID")),
        sport=_str(_require(payload, "event", "sport", "sportType")),
        league=_str(_pick(payload, "league", "leagueName", default="")),
        home_team=_str(_require(payload, "event", "homeTeam", "home_team", "team1")),
        away_team=_str(_require(payload, "event", "awayTeam", "away_team", "team2")),
        start_time=parse_datetime(_require(payload, "event", "startTime", "start_time", "gameDateTime")),
        status=_str(_pick(payload, "status", default="scheduled")),
        home_score=_optional_int(_pick(payload, "homeScore", "home_score")),
        away_score=_optional_int(_pick(payload, "awayScore", "away_score")),
        odds=tuple(parse_odds(o) for o in raw_odds if isinstance(o, Mapping)),
    )


def parse_agent(payload: Mapping[str, Any]) -> AgentDTO:
    permissions = _pick(payload, "permissions", default=[])
    return AgentDTO(
        id=_str(_require(payload, "agent", "id", "agentId", "agentID")),
        name=_str(_pick(payload, "name", "agentName", default="")),
        level=_str(_pick(payload, "level", "agentType", default="retail")),
        status=_str(_pick(payload, "status", default="active")),
        parent_id=_pick(payload, "parentId", "parent_id", "masterAgentId"),
        permissions=tuple(_str(p) for p in permissions),
        commission_rate=parse_decimal(_pick(payload, "commissionRate", "commission_rate", default=0), "agent"),
    )


def parse_account(payload: Mapping[str, Any], agent_id: str) -> AccountDTO:
    current = parse_decimal(_require(payload, "account", "currentBalance", "balance"), "account")
    pending = parse_decimal(_pick(payload, "pendingWagers", "pending_wagers", default=0), "account")
    available = parse_decimal(_pick(payload, "availableBalance", "available_balance"), "account")
    return AccountDTO(
        id=_str(_pick(payload, "id", "accountId", default=agent_id)),
        agent_id=_str(_pick(payload, "agentId", "agent_id", default=agent_id)),
        current_balance=current,
        available_balance=available if available is not None else current - pending,
        pending_wagers=pending,
        credit_limit=parse_decimal(_pick(payload, "creditLimit", "credit_limit", default=0), "account"),
        currency=_str(_pick(payload, "currency", default="USD")),
        status=_str(_pick(payload, "status", default="active")),
    )


def parse_bet(payload: Mapping[str, Any]) -> BetDTO:
    return BetDTO(
        id=_str(_require(payload, "bet", "id", "betId", "wagerNumber")),
        agent_id=_str(_require(payload, "bet", "agentId", "agent_id")),
        event_id=_str(_require(payload, "bet", "eventId", "event_id")),
        selection=_str(_require(payload, "bet", "selection")),
        amount=parse_decimal(_require(payload, "bet", "amount", "stake", "riskAmount"), "bet"),
        odds=parse_decimal(_require(payload, "bet", "odds", "price"), "bet"),
        status=_str(_pick(payload, "status", default="pending")),
        placed_at=parse_datetime(_pick(payload, "placedAt", "placed_at", "createdAt"))
        or datetime.now(timezone.utc),
        customer_id=_pick(payload, "customerId", "customer_id", "customerID"),
        market=_pick(payload, "market", "marketType"),
        odds_format=_pick(payload, "oddsFormat", "odds_format"),
        currency=_str(_pick(payload, "currency", default="USD")),
        settled_at=parse_datetime(_pick(payload, "settledAt", "settled_at")),
        payout=parse_decimal(_pick(payload, "payout", "winAmount"), "bet"),
    )


def parse_balance_update(payload: Mapping[str, Any], agent_id: str) -> BalanceUpdateDTO:
    return BalanceUpdateDTO(
        agent_id=_str(_pick(payload, "agentId", "agent_id", default=agent_id)),
        new_balance=parse_decimal(_require(payload, "balance", "newBalance", "balance", "currentBalance"), "balance"),
        currency=_str(_pick(payload, "currency", default="USD")),
        transaction_id=_pick(payload, "transactionId", "transaction_id"),
    )


# ── Outbound ─────────────────────────────────────────────────────────


def _compact(params: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def sport_event_params(query: SportEventQuery) -> dict[str, Any]:
    return _compact(
        {
            "sport": query.sport,
            "league": query.league,
            "status": query.status,
            "startAfter": _iso(query.start_after),
            "startBefore": _iso(query.start_before),
            "limit": query.limit,
        }
    )


def agent_params(query: AgentQuery) -> dict[str, Any]:
    return _compact(
        {
            "parentId": query.parent_id,
            "level": query.level,
            "status": query.status,
            "limit": query.limit,
        }
    )


def bet_params(query: BetQuery) -> dict[str, Any]:
    return _compact(
        {
            "agentId": query.agent_id,
            "customerId": query.customer_id,
            "eventId": query.event_id,
            "status": query.status,
            "limit": query.limit,
        }
    )


def place_bet_body(params: PlaceBetParams) -> dict[str, Any]:
    return _compact(
        {
            "agentId": params.agent_id,
            "eventId": params.event_id,
            "selection": params.selection,
            "amount": str(params.amount),
            "odds": str(params.odds),
            "oddsFormat": params.odds_format,
            "customerId": params.customer_id,
            "market": params.market,
            "metadata": params.metadata or None,
        }
    )
