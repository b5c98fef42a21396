"""
retry.py

Retry with exponential backoff for fallible Trakt calls.
Only transient failures (network errors, 5xx, 429) are retried; permanent
failures surface on the first attempt.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx

from followsync.core.config import settings
from followsync.services.trakt_client import TraktAPIError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def exponential_backoff(initial_delay: float = 1.0, multiplier: float = 2.0,
                        max_delay: float = 30.0) -> Callable[[int], float]:
    """Delay before the attempt following failed attempt `attempt` (1-based)."""
    def backoff(attempt: int) -> float:
        return min(initial_delay * (multiplier ** (attempt - 1)), max_delay)
    return backoff


def is_transient(exc: BaseException) -> bool:
    if isinstance(exc, TraktAPIError):
        return exc.transient
    # Timeouts, refused connections and resets that escaped the client
    return isinstance(exc, httpx.TransportError)


@dataclass
class RetryPolicy:
    max_attempts: int = 3
    backoff: Callable[[int], float] = field(default_factory=exponential_backoff)
    is_transient: Callable[[BaseException], bool] = is_transient
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(
            max_attempts=settings.trakt_retry_max_attempts,
            backoff=exponential_backoff(
                settings.trakt_retry_initial_delay,
                settings.trakt_retry_multiplier,
                settings.trakt_retry_max_delay,
            ),
        )

    def delay_for(self, attempt: int, exc: BaseException) -> float:
        delay = self.backoff(attempt)
        retry_after = getattr(exc, "retry_after", None)
        if retry_after is not None:
            delay = max(delay, retry_after)
        return delay


async def with_backoff(func: Callable[..., Awaitable[T]], *args, policy: Optional[RetryPolicy] = None,
                       operation: str = "trakt_api", **kwargs) -> T:
    """Execute `func(*args, **kwargs)` under `policy`, sleeping between transient failures.

    Returns the first successful result. A permanent failure is re-raised at once;
    when attempts run out the last transient failure is re-raised unchanged.
    Cancellation is never caught, so a cancelled caller starts no further attempts.
    """
    policy = policy or RetryPolicy.from_settings()

    for attempt in range(1, policy.max_attempts + 1):
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            if not policy.is_transient(e):
                raise
            if attempt >= policy.max_attempts:
                logger.error(f"{operation} failed after {attempt} attempt(s): {e}")
                raise
            delay = policy.delay_for(attempt, e)
            logger.warning(f"{operation} failed on attempt {attempt}/{policy.max_attempts}, retrying in {delay}s: {e}")
            await policy.sleep(delay)
            continue
        if attempt > 1:
            logger.info(f"{operation} succeeded on attempt {attempt}/{policy.max_attempts}")
        return result

    raise RuntimeError("retry loop exited without a result")
