"""Retry and fallback combinators shared by the provider adapters."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


def linear_backoff(step: float = 2.0) -> Callable[[int], float]:
    """Delay grows by ``step`` each attempt: 2s, 4s, 6s for the default."""

    def backoff(attempt: int) -> float:
        return step * attempt

    return backoff


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    retries: int = 3,
    backoff: Callable[[int], float] = linear_backoff(),
    is_retryable: Callable[[BaseException], bool] = lambda e: True,
    sleep: Sleep = asyncio.sleep,
    label: str = "operation",
) -> T:
    """Run ``operation``, retrying up to ``retries`` times on retryable errors.

    Non-retryable errors propagate immediately. After the last retry the final
    error propagates unchanged.
    """
    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as e:
            if attempt >= retries or not is_retryable(e):
                raise
            attempt += 1
            delay = backoff(attempt)
            logger.warning(
                "%s failed (%s), retrying in %.1fs (%d/%d)",
                label,
                e,
                delay,
                attempt,
                retries,
            )
            await sleep(delay)


async def first_success(
    strategies: Sequence[tuple[str, Callable[[], Awaitable[list[T]]]]],
) -> list[T]:
    """Evaluate strategies in order and return the first non-empty result.

    A strategy that raises is logged and skipped. If no strategy produced
    results and every one of them raised, the last error propagates; if at
    least one returned cleanly, an empty list is returned.
    """
    last_error: Exception | None = None
    any_clean = False
    for name, strategy in strategies:
        try:
            result = await strategy()
        except Exception as e:
            logger.warning("Strategy '%s' failed: %s", name, e)
            last_error = e
            continue
        any_clean = True
        if result:
            logger.info("Strategy '%s' returned %d results", name, len(result))
            return result
        logger.debug("Strategy '%s' returned no results", name)

    if last_error is not None and not any_clean:
        raise last_error
    return []
