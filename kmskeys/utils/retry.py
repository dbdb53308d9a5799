from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

logger = logging.getLogger(__name__)


def compute_backoff(
    attempt: int, base: float = 0.5, multiplier: float = 1.0, jitter: float = 0.0
) -> float:
    """Compute the delay before ``attempt`` (1-based) is retried.

    With the default ``multiplier`` of 1 and no jitter the delay is fixed at ``base``.
    """
    delay = base * multiplier ** (attempt - 1)
    return delay + random.uniform(0, jitter)


async def schedule_retry(
    attempt: int, base: float = 0.5, multiplier: float = 1.0, jitter: float = 0.0
) -> None:
    """Sleep for computed backoff delay before retrying."""
    delay = compute_backoff(attempt, base=base, multiplier=multiplier, jitter=jitter)
    await asyncio.sleep(delay)


class RetryPolicy(BaseModel):
    """Bounded retry for eventually-consistent lookups.

    The defaults give two attempts with a fixed 500 ms pause; ``multiplier``
    and ``jitter`` turn the pause into an exponential, randomised one.
    """

    max_attempts: int = Field(default=2, ge=1)
    backoff: float = Field(default=0.5, ge=0)
    multiplier: float = Field(default=1.0, ge=1)
    jitter: float = Field(default=0.0, ge=0)

    model_config = {"frozen": True}

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        should_retry: Callable[[Exception], bool],
    ) -> T:
        """Call ``operation`` until it succeeds or the attempts run out.

        Only exceptions accepted by ``should_retry`` trigger another attempt;
        the last exception is re-raised unchanged.
        """
        attempt = 1
        while True:
            try:
                return await operation()
            except Exception as exc:
                if attempt >= self.max_attempts or not should_retry(exc):
                    raise
                logger.warning(
                    f"Attempt {attempt}/{self.max_attempts} failed ({exc}); retrying"
                )
                await schedule_retry(
                    attempt,
                    base=self.backoff,
                    multiplier=self.multiplier,
                    jitter=self.jitter,
                )
                attempt += 1
