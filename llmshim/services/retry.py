"""Bounded retry with exponential backoff around a single provider call.

Retryability comes from the error taxonomy: network failures, timeouts, rate
limits and 5xx responses are retried; everything else fails immediately.
"""

from __future__ import annotations

import asyncio
import random
import time
from enum import Enum
from typing import Awaitable, Callable, Optional, TypeVar

from llmshim.common.exceptions import LLMShimException, RateLimitException
from llmshim.config.log import get_logger
from llmshim.config.models import RetryConfig

logger = get_logger(__name__)

T = TypeVar('T')


class RetryState(str, Enum):
    IDLE = 'idle'
    ATTEMPTING = 'attempting'
    RETRY_WAIT = 'retry_wait'
    SUCCESS = 'success'
    FAILED = 'failed'


class RetryCoordinator:
    """Runs an operation under a :class:`RetryConfig`.

    The coordinator keeps no per-call state on the instance, so one
    coordinator can serve any number of concurrent calls.
    """

    def __init__(self, config: Optional[RetryConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or RetryConfig()
        self._rng = rng or random.Random()

    def compute_delay(self, failures: int, error: Optional[LLMShimException] = None) -> float:
        """Delay before the next attempt after ``failures`` consecutive failures (1-based)."""
        config = self.config
        if config.base_delay == 0:
            delay = 0.0
        else:
            try:
                delay = min(config.max_delay, config.base_delay * (config.backoff_factor ** (failures - 1)))
            except OverflowError:
                delay = config.max_delay
        if config.jitter:
            delay *= 0.5 + self._rng.random()
        if isinstance(error, RateLimitException) and error.retry_after is not None:
            delay = max(delay, error.retry_after)
        return min(delay, config.max_delay)

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        cancel_event: Optional[asyncio.Event] = None,
        on_transition: Optional[Callable[[RetryState], None]] = None,
    ) -> T:
        """Await ``operation()`` until it succeeds or the policy gives up.

        Raises the last classified error on failure, with ``attempts`` set.
        Exceptions outside the taxonomy propagate untouched and are never retried.
        """

        def transition(state: RetryState) -> None:
            if on_transition is not None:
                on_transition(state)

        config = self.config
        deadline = time.monotonic() + config.total_timeout if config.total_timeout else None
        attempt = 0
        transition(RetryState.IDLE)

        while True:
            attempt += 1
            transition(RetryState.ATTEMPTING)
            try:
                result = await operation()
            except LLMShimException as e:
                e.attempts = attempt
                if not e.retryable:
                    transition(RetryState.FAILED)
                    logger.debug('Non-retryable error', error_kind=e.kind.value, attempt=attempt)
                    raise
                if attempt >= config.max_attempts:
                    transition(RetryState.FAILED)
                    logger.warning('Retries exhausted', error_kind=e.kind.value, attempts=attempt)
                    raise

                delay = self.compute_delay(attempt, e)
                if deadline is not None and time.monotonic() + delay > deadline:
                    transition(RetryState.FAILED)
                    logger.warning('Retry deadline reached', error_kind=e.kind.value, attempts=attempt)
                    raise

                transition(RetryState.RETRY_WAIT)
                logger.warning(
                    'Retrying provider call',
                    error_kind=e.kind.value,
                    attempt=attempt,
                    max_attempts=config.max_attempts,
                    delay=round(delay, 3),
                )
                if await self._wait(delay, cancel_event):
                    transition(RetryState.FAILED)
                    logger.info('Retry cancelled', error_kind=e.kind.value, attempts=attempt)
                    raise
                continue

            transition(RetryState.SUCCESS)
            return result

    @staticmethod
    async def _wait(delay: float, cancel_event: Optional[asyncio.Event]) -> bool:
        """Sleep for ``delay``; return True if ``cancel_event`` fired first."""
        if cancel_event is None:
            await asyncio.sleep(delay)
            return False
        if cancel_event.is_set():
            return True
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True


__all__ = ['RetryCoordinator', 'RetryState']
