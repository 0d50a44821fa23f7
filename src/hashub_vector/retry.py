"""Retry configuration and logic for the request executor."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from .errors import HashubVectorError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    Attributes:
        max_attempts: Total number of attempts, including the first one.
        base_delay: Delay in seconds before the first retry.
        exponential_base: Multiplier applied to the delay after each retry.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    exponential_base: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def delay_for(self, attempt: int) -> float:
        """Backoff delay in seconds after the given 0-indexed attempt."""
        return self.base_delay * (self.exponential_base**attempt)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig,
    sleep: SleepFunc = asyncio.sleep,
    cancel_event: Optional[asyncio.Event] = None,
) -> T:
    """
    Execute an operation with exponential backoff retry.

    Args:
        operation: Async callable raising ``HashubVectorError`` on failure
        config: Retry configuration
        sleep: Coroutine used to wait between attempts
        cancel_event: When set, aborts before the next attempt or during backoff.
            Backoff still goes through ``sleep`` and is cut short by the event.

    Returns:
        Result of the operation

    Raises:
        HashubVectorError: Immediately for non-retryable kinds, otherwise the
            last attempt's error once attempts are exhausted
        asyncio.CancelledError: If ``cancel_event`` is set
    """
    attempt = 0
    while True:
        _check_cancelled(cancel_event)
        try:
            return await operation()
        except HashubVectorError as e:
            if not e.retryable:
                raise

            if attempt + 1 >= config.max_attempts:
                logger.error(
                    f"All {config.max_attempts} attempts failed. Last error: [{e.code}] {e}"
                )
                raise

            delay = config.delay_for(attempt)
            logger.warning(
                f"Attempt {attempt + 1} failed: [{e.code}] {e}. Retrying in {delay:.1f}s..."
            )
            await _backoff(delay, sleep, cancel_event)
            attempt += 1


async def _backoff(
    delay: float, sleep: SleepFunc, cancel_event: Optional[asyncio.Event]
) -> None:
    if cancel_event is None:
        await sleep(delay)
        return

    # Whichever finishes first wins: the backoff sleep or the cancel signal
    sleep_task = asyncio.ensure_future(sleep(delay))
    cancel_task = asyncio.ensure_future(cancel_event.wait())
    try:
        await asyncio.wait({sleep_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (sleep_task, cancel_task):
            if not task.done():
                task.cancel()
    _check_cancelled(cancel_event)
    sleep_task.result()


def _check_cancelled(cancel_event: Optional[asyncio.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise asyncio.CancelledError("request cancelled")
