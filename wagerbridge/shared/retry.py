"""
Retry policy shared by every outbound integration.

One configurable policy (base delay, multiplier, cap, optional jitter)
drives every backoff loop in the service.
The Fantasy402 adapter runs the no-jitter profile, generic callers
the jittered one.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff settings.

    Attributes:
        max_attempts: Total number of attempts, including the first one.
        base_delay: Delay unit in seconds.
        multiplier: Growth factor applied per failed attempt.
        max_delay: Upper bound for a single delay, or None for no cap.
        jitter: Add up to 50% random extra delay.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    multiplier: float = 2.0
    max_delay: float | None = 30.0
    jitter: bool = False

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.multiplier < 1:
            raise ValueError("base_delay must be >= 0 and multiplier >= 1")

    def delay_for(self, attempt: int) -> float:
        """Return the delay to wait after the given (1-indexed) failed attempt.

        With ``base_delay=1`` and ``multiplier=2`` this is ``2 ** attempt``.
        """
        delay = self.base_delay * (self.multiplier ** attempt)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        if self.jitter:
            delay += random.uniform(0, delay / 2)
        return delay

    def with_attempts(self, max_attempts: int) -> RetryPolicy:
        """Return a copy of this policy with a different attempt budget."""
        return RetryPolicy(
            max_attempts=max_attempts,
            base_delay=self.base_delay,
            multiplier=self.multiplier,
            max_delay=self.max_delay,
            jitter=self.jitter,
        )


ADAPTER_RETRY_POLICY = RetryPolicy(
    max_attempts=3, base_delay=1.0, multiplier=2.0, max_delay=30.0, jitter=False
)
DEFAULT_RETRY_POLICY = RetryPolicy(
    max_attempts=5, base_delay=0.25, multiplier=2.0, max_delay=8.0, jitter=True
)


async def retry_async(
    operation: Callable[[int], Awaitable[T]],
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    *,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    sleep: SleepFunc = asyncio.sleep,
    label: str = "operation",
) -> T:
    """Run ``operation`` until it succeeds or the attempt budget is spent.

    Attempts are strictly sequential. Exceptions outside ``retry_on``
    propagate immediately; the last retryable exception is re-raised
    once ``policy.max_attempts`` attempts have failed.

    Args:
        operation: Coroutine factory receiving the 1-indexed attempt number.
        policy: Backoff settings.
        retry_on: Exception types that trigger another attempt.
        sleep: Awaitable sleep, injectable for tests.
        label: Name used in log messages.

    Returns:
        Whatever ``operation`` returns on its first successful attempt.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return await operation(attempt)
        except retry_on as exc:
            if attempt >= policy.max_attempts:
                logger.error(
                    "%s failed after %d attempts: %s", label, attempt, exc
                )
                raise
            delay = policy.delay_for(attempt)
            logger.warning(
                "%s attempt %d/%d failed (%s); retrying in %.2fs",
                label,
                attempt,
                policy.max_attempts,
                exc,
                delay,
            )
            await sleep(delay)
