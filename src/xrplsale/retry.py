"""Retry with capped exponential backoff."""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from .config import ClientConfig
from .errors import (
    APIError,
    NetworkError,
    RateLimitError,
    RetriesExhaustedError,
    ServerError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class RetryState:
    """Progress of a single retried call."""

    attempt: int = 0
    total_delay: float = 0.0
    last_error: Optional[Exception] = None


@dataclass(frozen=True)
class RetryPolicy:
    """
    Decides which failures are retried and how long to wait between attempts.

    The wait before retry number `attempt` (0-based) is
    `min(max_delay, base_delay * 2 ** attempt)`, plus up to `jitter` times that
    amount of random extra delay. A 429 carrying Retry-After waits at least
    `min(retry_after, max_delay)`.
    """

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    jitter: float = 0.0
    retry_statuses: tuple[int, ...] = (429,)
    retry_server_errors: bool = True

    @classmethod
    def from_config(cls, config: ClientConfig) -> "RetryPolicy":
        return cls(
            max_retries=config.max_retries,
            base_delay=config.retry_base_delay,
            max_delay=config.retry_max_delay,
            jitter=config.retry_jitter,
            retry_statuses=config.retry_statuses,
            retry_server_errors=config.retry_server_errors,
        )

    def is_retryable(self, error: Exception) -> bool:
        """Check whether a failure is transient."""
        if isinstance(error, NetworkError):
            return True
        if isinstance(error, ServerError):
            return self.retry_server_errors
        if isinstance(error, APIError):
            return error.status_code in self.retry_statuses
        return False

    def backoff(self, attempt: int, error: Optional[Exception] = None) -> float:
        """Seconds to wait before retry number `attempt`."""
        delay = min(self.max_delay, self.base_delay * (2**attempt))
        if self.jitter > 0:
            delay += random.uniform(0, self.jitter * delay)
        if isinstance(error, RateLimitError) and error.retry_after is not None:
            delay = max(delay, min(error.retry_after, self.max_delay))
        return delay

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        sleep: Optional[Sleep] = None,
    ) -> T:
        """
        Run `operation`, retrying transient failures.

        Cancelling the awaiting task interrupts a pending backoff wait and no
        further attempts are made.

        Raises:
            RetriesExhaustedError: If every attempt failed with a retryable error
            XRPLSaleError: Any non-retryable failure, unchanged
        """
        sleep = sleep or asyncio.sleep
        state = RetryState()

        while True:
            try:
                return await operation()
            except (APIError, NetworkError) as err:
                if not self.is_retryable(err):
                    raise
                state.last_error = err
                if state.attempt >= self.max_retries:
                    logger.warning(
                        "Giving up after %d attempts: %s", state.attempt + 1, err
                    )
                    raise RetriesExhaustedError(
                        err, attempts=state.attempt + 1, total_delay=state.total_delay
                    ) from err

                delay = self.backoff(state.attempt, err)
                logger.info(
                    "Attempt %d failed (%s), retrying in %.2fs",
                    state.attempt + 1,
                    err,
                    delay,
                )
                await sleep(delay)
                state.total_delay += delay
                state.attempt += 1
