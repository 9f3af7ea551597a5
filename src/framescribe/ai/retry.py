from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from framescribe.ai.exceptions import RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how patiently a remote call is retried.

    Attributes:
        max_attempts: Total number of attempts, including the first one.
        delay: Fixed pause between attempts, in seconds.
    """

    max_attempts: int = 5
    delay: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay < 0:
            raise ValueError("delay must be non-negative")


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    is_retryable: Callable[[Exception], bool],
    *,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    description: str = "operation",
) -> T:
    """Await ``operation`` until it succeeds or the policy is exhausted.

    Non-retryable errors propagate immediately. The pause uses ``sleep`` so it
    suspends only the calling task.

    Raises:
        RetryExhaustedError: If every attempt failed with a retryable error.
    """
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await operation()
        except Exception as e:
            if not is_retryable(e):
                raise
            if attempt == policy.max_attempts:
                raise RetryExhaustedError(e, attempt) from e
            logger.warning(
                "%s failed (attempt %d/%d), retrying in %.1fs: %s",
                description,
                attempt,
                policy.max_attempts,
                policy.delay,
                e,
            )
            await sleep(policy.delay)

    raise AssertionError("unreachable")
