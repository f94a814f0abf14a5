"""
Rate limiting configuration and setup.

Uses slowapi to enforce per-endpoint rate limits. Money-moving routes
(bet placement, settlement) are decorated with ``HEAVY_RATE_LIMIT``.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from wagerbridge.core.config import settings

DEFAULT_RATE_LIMIT = settings.rate_limit_default
HEAVY_RATE_LIMIT = settings.rate_limit_heavy

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[DEFAULT_RATE_LIMIT],
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Answer a throttled request with the standard error envelope.

    Args:
        _request: The incoming HTTP request.
        exc: The rate limit exceeded exception.

    Returns:
        A 429 JSON response.
    """
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": {
                "code": "RATE_LIMIT_EXCEEDED",
                "message": f"Rate limit exceeded: {exc.detail}",
            },
        },
    )
