"""Retry-with-backoff policy for outbound provider calls.

A :class:`RetryPolicy` wraps one awaitable call and re-issues it when it
fails with one of the configured exception types.  Delays grow
exponentially from ``base_delay`` (``base_delay * 2 ** (attempt - 1)``),
are capped at ``max_delay``, and get a uniform random jitter in
``[0, jitter]`` added on top.

``sleep`` and ``rng`` are injectable so tests can drive the policy with a
fake clock instead of real ``asyncio.sleep`` calls::

    delays = []

    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    policy = RetryPolicy(max_attempts=3, base_delay=1.0, jitter=0.0, sleep=fake_sleep)
    await policy.run(flaky_call)
"""

from __future__ import annotations

import asyncio
import random
from typing import Any, Awaitable, Callable, TypeVar

import structlog

from design_copilot.utils.errors import ConfigurationError, ProviderRateLimitedError

logger = structlog.get_logger(logger_name=__name__)

_T = TypeVar("_T")


class RetryPolicy:
    """Bounded exponential backoff for a single call site.

    Parameters
    ----------
    max_attempts:
        Total number of attempts including the first one.  ``1`` disables
        retrying.
    base_delay:
        Delay in seconds before the second attempt.
    max_delay:
        Upper bound for the exponential part of the delay.
    jitter:
        Maximum random seconds added to each delay.
    retry_on:
        Exception types that trigger a retry.  Anything else propagates
        immediately.
    sleep:
        Awaitable sleep function, ``asyncio.sleep`` by default.
    rng:
        Source of randomness for jitter, ``random.Random()`` by default.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 0.5,
        max_delay: float = 8.0,
        jitter: float = 0.25,
        retry_on: tuple[type[BaseException], ...] = (ProviderRateLimitedError,),
        sleep: Callable[[float], Awaitable[Any]] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be >= 1, got {max_attempts}")
        if base_delay < 0 or max_delay < 0 or jitter < 0:
            raise ConfigurationError("Retry delays must be non-negative")
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._jitter = jitter
        self._retry_on = retry_on
        self._sleep = sleep or asyncio.sleep
        self._rng = rng or random.Random()

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def delay_for(self, attempt: int) -> float:
        """Return the delay to wait after failed attempt number *attempt* (1-based)."""
        backoff = min(self._base_delay * (2 ** (attempt - 1)), self._max_delay)
        if self._jitter:
            backoff += self._rng.uniform(0.0, self._jitter)
        return backoff

    async def run(
        self,
        fn: Callable[..., Awaitable[_T]],
        *args: Any,
        **kwargs: Any,
    ) -> _T:
        """Call ``await fn(*args, **kwargs)`` under this policy.

        The exception from the final attempt is re-raised unchanged.
        """
        attempt = 1
        while True:
            try:
                return await fn(*args, **kwargs)
            except self._retry_on as exc:
                if attempt >= self._max_attempts:
                    logger.warning(
                        "retry_exhausted",
                        attempts=attempt,
                        error_type=type(exc).__name__,
                        provider=getattr(exc, "provider_name", None),
                    )
                    raise
                delay = self.delay_for(attempt)
                logger.info(
                    "retrying_after_error",
                    attempt=attempt,
                    max_attempts=self._max_attempts,
                    delay_seconds=round(delay, 3),
                    error_type=type(exc).__name__,
                    provider=getattr(exc, "provider_name", None),
                )
                await self._sleep(delay)
                attempt += 1
