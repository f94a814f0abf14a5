"""
Health check router.

Liveness endpoint. Reports the version, where bets are stored and
whether Fantasy402 credentials are present. It never calls out to the
external system; ``/fantasy402/health`` does that.
"""

from fastapi import APIRouter

from wagerbridge.core.config import Settings, settings
from wagerbridge.interfaces.schemas import HealthResponse

router = APIRouter(tags=["health"])


def _storage_mode(config: Settings) -> str:
    return "sql" if config.database_url else "memory"


def _fantasy402_configured(config: Settings) -> bool:
    return bool(
        config.fantasy402_customer_id and config.fantasy402_password.get_secret_value()
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns version, bet storage mode and Fantasy402 credential status.",
)
def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=settings.version,
        storage=_storage_mode(settings),
        fantasy402_configured=_fantasy402_configured(settings),
    )
