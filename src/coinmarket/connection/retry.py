"""
Retry with exponential backoff for asynchronous operations.

This module provides a policy object that wraps any fallible coroutine
factory and:
- Returns the first successful result immediately
- Propagates non-retryable errors without further attempts
- Sleeps min(current_delay, max_delay) between attempts, doubling the delay
- Never sleeps after the final attempt

A single policy instance holds no per-call state and can be shared by any
number of concurrent call sites.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from src.coinmarket.config import RetryConfig
from src.coinmarket.errors import is_retryable

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


class RetryPolicy:
    """Exponential backoff retry policy without jitter."""

    def __init__(
        self,
        max_attempts: int = 3,
        initial_delay: float = 1.0,
        max_delay: float = 10.0,
        should_retry: Callable[[BaseException], bool] = is_retryable,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """
        Initialize the retry policy.

        Args:
            max_attempts: Total invocations allowed, at least 1
            initial_delay: Delay before the second attempt in seconds
            max_delay: Backoff ceiling in seconds
            should_retry: Retryability predicate
            sleep: Awaitable sleep used between attempts

        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if initial_delay < 0 or max_delay < 0:
            raise ValueError("delays must be non-negative")

        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self._should_retry = should_retry
        self._sleep = sleep

    @classmethod
    def from_config(cls, config: RetryConfig, **kwargs: object) -> "RetryPolicy":
        """Build a policy from retry settings."""
        return cls(
            max_attempts=config.max_attempts,
            initial_delay=config.initial_delay,
            max_delay=config.max_delay,
            **kwargs,  # type: ignore[arg-type]
        )

    @classmethod
    def with_defaults(cls) -> "RetryPolicy":
        return cls(max_attempts=3, initial_delay=1.0, max_delay=8.0)

    @classmethod
    def aggressive(cls) -> "RetryPolicy":
        return cls(max_attempts=5, initial_delay=0.5, max_delay=5.0)

    @classmethod
    def conservative(cls) -> "RetryPolicy":
        return cls(max_attempts=2, initial_delay=2.0, max_delay=10.0)

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run an operation, retrying retryable failures.

        Args:
            operation: Zero-argument callable returning a fresh awaitable

        Returns:
            The operation's result

        Raises:
            Exception: The first non-retryable error, or the last error once
                all attempts are used

        """
        current_delay = self.initial_delay

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await operation()
            except Exception as e:
                if not self._should_retry(e):
                    raise

                if attempt == self.max_attempts:
                    logger.warning(
                        f"Giving up after {attempt} attempt(s): {e}"
                    )
                    raise

                delay = min(current_delay, self.max_delay)
                logger.info(
                    f"Attempt {attempt}/{self.max_attempts} failed ({e}); "
                    f"retrying in {delay}s"
                )
                await self._sleep(delay)
                current_delay *= 2

        raise AssertionError("unreachable")  # pragma: no cover


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """
    Run an operation once under a throwaway retry policy.

    Args:
        operation: Zero-argument callable returning a fresh awaitable
        max_attempts: Total invocations allowed
        initial_delay: Delay before the second attempt in seconds
        sleep: Awaitable sleep used between attempts

    Returns:
        The operation's result

    """
    policy = RetryPolicy(
        max_attempts=max_attempts, initial_delay=initial_delay, sleep=sleep
    )
    return await policy.execute(operation)
