"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here.
"""

from decimal import Decimal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_heavy: Rate limit for bet placement endpoints.
        rate_limit_enabled: Turn rate limiting off, e.g. in tests.
        database_url: SQLAlchemy URL for the bet store. Empty keeps bets in memory.
        enable_event_versioning: Prefix gateway event names with ``v1.``.
        health_latency_threshold_ms: Ping latency above which the
            external system is reported as degraded.

    The ``fantasy402_*`` values configure the external adapter; see
    ``Fantasy402Config.from_settings``.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "WagerBridge"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "10/minute"
    rate_limit_enabled: bool = True

    database_url: str = ""

    # Betting policy caps enforced by the placement use case
    max_stake: Decimal = Decimal("10000")
    min_odds_price: Decimal = Decimal("1")
    max_odds_price: Decimal = Decimal("100")

    # Fantasy402 external API
    fantasy402_api_url: str = "https://fantasy402.com/cloud/api"
    fantasy402_customer_id: str = ""
    fantasy402_password: SecretStr = SecretStr("")
    fantasy402_request_timeout: float = 30.0
    fantasy402_retry_attempts: int = 3
    fantasy402_retry_base_delay: float = 1.0
    fantasy402_retry_multiplier: float = 2.0
    fantasy402_retry_max_delay: float = 30.0
    fantasy402_session_ttl_minutes: int = 20
    fantasy402_default_odds_format: str = "american"

    enable_event_versioning: bool = True
    health_latency_threshold_ms: float = 1000.0


settings = Settings()
