from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger

from merkle_rewards.core.constants.base import (
    DEFAULT_RPC_MAX_RETRIES,
    DEFAULT_RPC_RETRY_BASE_DELAY_S,
)

T = TypeVar("T")


def exponential_backoff_s(attempt: int, *, base_delay_s: float = 0.25) -> float:
    return base_delay_s * (2**attempt)


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    *,
    max_retries: int = DEFAULT_RPC_MAX_RETRIES,
    base_delay_s: float = DEFAULT_RPC_RETRY_BASE_DELAY_S,
    should_retry: Callable[[Exception], bool] | None = None,
    label: str = "call",
) -> T:
    """Await ``fn`` up to ``max_retries`` times in total.

    Only use this for idempotent reads. Cancellation is never retried since
    ``asyncio.CancelledError`` is not an ``Exception``.
    """
    if max_retries < 1:
        raise ValueError("max_retries must be >= 1")

    for attempt in range(max_retries):
        try:
            return await fn()
        except Exception as exc:  # noqa: BLE001
            if attempt >= max_retries - 1:
                raise
            if should_retry is not None and not should_retry(exc):
                raise

            delay_s = exponential_backoff_s(attempt, base_delay_s=base_delay_s)
            logger.warning(
                f"{label} failed (attempt {attempt + 1}/{max_retries}), retrying in {delay_s:.2f}s: {exc}"
            )
            await asyncio.sleep(delay_s)

    raise RuntimeError("retry_async exhausted retries")
