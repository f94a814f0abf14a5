"""
Fantasy402 connection settings.

Built from the application Settings in the composition root; tests
construct it directly.
"""

from dataclasses import dataclass, field
from datetime import timedelta

from wagerbridge.core.config import Settings
from wagerbridge.domain.fantasy402.odds_formats import OddsFormat
from wagerbridge.shared.retry import ADAPTER_RETRY_POLICY, RetryPolicy


@dataclass(frozen=True)
class Fantasy402Config:
    """Settings for the adapter and the gateway.

    Attributes:
        api_url: Base URL of the Fantasy402 API, without trailing slash.
        customer_id: Login id; sent uppercased.
        password: Login password; sent uppercased, never logged.
        request_timeout: Hard timeout in seconds for every HTTP call.
        retry_policy: Backoff for failed calls (no jitter by default).
        session_ttl: Lifetime assumed for a freshly issued token.
        default_odds_format: Format applied to bets whose record has no tag.
        enable_event_versioning: Prefix published event names with ``v1.``.
        health_latency_threshold_ms: Ping latency limit for ``healthy``.
    """

    api_url: str
    customer_id: str
    password: str = field(repr=False)
    request_timeout: float = 30.0
    retry_policy: RetryPolicy = ADAPTER_RETRY_POLICY
    session_ttl: timedelta = timedelta(minutes=20)
    default_odds_format: OddsFormat = OddsFormat.AMERICAN
    enable_event_versioning: bool = True
    health_latency_threshold_ms: float = 1000.0

    @property
    def retry_attempts(self) -> int:
        return self.retry_policy.max_attempts

    @classmethod
    def from_settings(cls, settings: Settings) -> "Fantasy402Config":
        return cls(
            api_url=settings.fantasy402_api_url.rstrip("/"),
            customer_id=settings.fantasy402_customer_id,
            password=settings.fantasy402_password.get_secret_value(),
            request_timeout=settings.fantasy402_request_timeout,
            retry_policy=RetryPolicy(
                max_attempts=settings.fantasy402_retry_attempts,
                base_delay=settings.fantasy402_retry_base_delay,
                multiplier=settings.fantasy402_retry_multiplier,
                max_delay=settings.fantasy402_retry_max_delay,
                jitter=False,
            ),
            session_ttl=timedelta(minutes=settings.fantasy402_session_ttl_minutes),
            default_odds_format=OddsFormat.parse(
                settings.fantasy402_default_odds_format, OddsFormat.AMERICAN
            ),
            enable_event_versioning=settings.enable_event_versioning,
            health_latency_threshold_ms=settings.health_latency_threshold_ms,
        )
