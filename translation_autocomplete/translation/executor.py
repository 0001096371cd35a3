"""
Retry-on-throttle wrapper for provider calls.

Only rate-limit signals are retried, with a fixed pause before each retry.
Every other failure propagates on the first attempt.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

import aiohttp
import structlog

from ..errors import RateLimitError, RateLimitExhaustedError

logger = structlog.get_logger(__name__)

T = TypeVar('T')

RATE_LIMIT_STATUS = 429


def is_rate_limited(error: BaseException) -> bool:
    """Whether ``error`` is a rate-limit signal from a provider."""
    if isinstance(error, RateLimitError):
        return True
    if isinstance(error, aiohttp.ClientResponseError):
        return error.status == RATE_LIMIT_STATUS
    return False


class RateLimitedExecutor:
    """
    Runs an async unit of work up to ``max_attempts`` times.

    Before every attempt after the first it waits ``delay`` seconds. The
    delay does not grow between attempts.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.delay = delay
        self._sleep = sleep

    async def execute(self, func: Callable[[], Awaitable[T]]) -> T:
        """Run ``func`` retrying on rate limits.

        Raises:
            RateLimitExhaustedError: If every attempt was rate limited
            Exception: Any other error raised by ``func``, unchanged
        """
        last_error: Optional[BaseException] = None

        for attempt in range(self.max_attempts):
            if attempt > 0:
                logger.warning(
                    "Rate limited, retrying",
                    attempt=attempt + 1,
                    max_attempts=self.max_attempts,
                    delay=self.delay,
                )
                await self._sleep(self.delay)

            try:
                result = await func()
            except Exception as e:
                if not is_rate_limited(e):
                    raise
                last_error = e
                continue

            if attempt > 0:
                logger.info("Call succeeded after retry", attempt=attempt + 1)
            return result

        logger.error("Max retry attempts reached", error=str(last_error), attempts=self.max_attempts)
        raise self._exhausted(last_error)

    def _exhausted(self, last_error: BaseException) -> RateLimitExhaustedError:
        context = dict(getattr(last_error, "context", {}) or {})
        error = RateLimitExhaustedError(
            f"Rate limit persisted after {self.max_attempts} attempts: {last_error}",
            attempts=self.max_attempts,
            service=context.get("service"),
            language=context.get("language"),
            previous_error=last_error,
        )
        error.__cause__ = last_error
        return error
