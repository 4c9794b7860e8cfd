"""
Provider fallback and bounded retry.

fallback() walks an ordered list of endpoints and returns the first success.
retry_n_times() re-runs a whole operation a fixed number of times.
Neither runs anything concurrently.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from loguru import logger

from utxohandler.errors import AggregatedError, RetryExhaustedError

T = TypeVar("T")

Endpoint = Callable[[], Awaitable[T]]


async def fallback(endpoints: Sequence[Endpoint[T]]) -> T:
    """
    Try each endpoint in order and return the first result.

    Args:
        endpoints: Zero-argument coroutine factories, highest priority first

    Returns:
        Result of the first endpoint that does not raise

    Raises:
        AggregatedError: If every endpoint failed (or none were given)
    """
    errors: list[BaseException] = []

    for index, endpoint in enumerate(endpoints):
        try:
            return await endpoint()
        except Exception as e:
            logger.debug(f"Endpoint {index + 1}/{len(endpoints)} failed: {type(e).__name__}: {e}")
            errors.append(e)

    raise AggregatedError(errors)


async def retry_n_times(
    operation: Callable[[], Awaitable[T]],
    attempts: int,
    delay: float = 0.0,
    backoff: float = 1.0,
) -> T:
    """
    Run operation until it succeeds, at most ``attempts`` times.

    No delay is applied between attempts unless ``delay`` is set. After each
    failed attempt the delay is multiplied by ``backoff``.

    Raises:
        ValueError: If attempts < 1
        RetryExhaustedError: Wrapping the final failure
    """
    if attempts < 1:
        raise ValueError(f"attempts must be >= 1, got {attempts}")

    wait = delay
    attempt = 1

    while True:
        try:
            return await operation()
        except Exception as e:
            logger.debug(f"Attempt {attempt}/{attempts} failed: {e}")
            if attempt >= attempts:
                raise RetryExhaustedError(attempts, e) from e
        if wait > 0:
            await asyncio.sleep(wait)
            wait *= backoff
        attempt += 1


@dataclass(frozen=True)
class RetryPolicy:
    """Bundled retry settings."""

    attempts: int = 3
    delay: float = 0.0
    backoff: float = 1.0

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        return await retry_n_times(operation, self.attempts, self.delay, self.backoff)
