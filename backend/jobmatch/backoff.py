"""Retry policy for provider capacity errors (HTTP 429 / 503)."""
import asyncio
import random
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from tenacity import AsyncRetrying, RetryCallState, RetryError, retry_if_exception, stop_after_attempt

from . import config
from .exceptions import ServiceBusyError
from .logging_utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

CAPACITY_MARKERS = ("429", "Too Many Requests", "503", "Service Unavailable")
RETRY_DELAY_PATTERN = re.compile(r'retryDelay"?\s*:\s*"(\d+(?:\.\d+)?)s"')


def is_capacity_error(error: BaseException) -> bool:
    message = str(error)
    return any(marker in message for marker in CAPACITY_MARKERS)


def suggested_retry_delay(error: BaseException) -> Optional[float]:
    """Return the provider's ``retryDelay`` hint in seconds, if present."""
    match = RETRY_DELAY_PATTERN.search(str(error))
    return float(match.group(1)) if match else None


class _CapacityWait:
    """Wait strategy for a single ``BackoffPolicy.run`` call.

    Every failed attempt advances the capped schedule. A ``retryDelay``
    hint in the error replaces that one wait without changing the schedule.
    """

    def __init__(self, policy: "BackoffPolicy", rng: Callable[[], float]):
        self.policy = policy
        self.rng = rng
        self.delay = policy.initial_delay

    def __call__(self, retry_state: RetryCallState) -> float:
        scheduled = self.delay
        self.delay = self.policy.next_delay(scheduled, self.rng)

        hint = suggested_retry_delay(retry_state.outcome.exception())
        return scheduled if hint is None else hint


@dataclass
class BackoffPolicy:
    max_retries: int = config.GEMINI_MAX_RETRIES
    initial_delay: float = config.GEMINI_INITIAL_DELAY_SECONDS
    factor: float = config.GEMINI_BACKOFF_FACTOR
    max_jitter: float = config.GEMINI_MAX_JITTER_SECONDS
    max_delay: float = config.GEMINI_MAX_DELAY_SECONDS

    def next_delay(self, delay: float, rng: Callable[[], float] = random.random) -> float:
        return min(delay * self.factor + rng() * self.max_jitter, self.max_delay)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        logger.warning(
            f"Service unavailable or rate limited, retrying in {retry_state.next_action.sleep:.1f}s "
            f"(attempt {retry_state.attempt_number}/{self.max_retries}): "
            f"{retry_state.outcome.exception()}"
        )

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Callable[[], float] = random.random,
    ) -> T:
        """
        Await ``operation`` until it succeeds, retrying capacity errors.

        Args:
            operation: Zero-argument coroutine factory, invoked once per attempt
            sleep: Awaitable used for waits
            rng: Source of jitter in [0, 1)

        Returns:
            The operation's result

        Raises:
            ServiceBusyError: If every attempt failed with a capacity error
            Exception: Any non-capacity error, re-raised on first occurrence
        """
        retrying = AsyncRetrying(
            retry=retry_if_exception(is_capacity_error),
            stop=stop_after_attempt(self.max_retries + 1),
            wait=_CapacityWait(self, rng),
            sleep=sleep,
            before_sleep=self._log_retry,
        )
        try:
            return await retrying(operation)
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.error(f"Provider still at capacity after {self.max_retries} retries: {cause}")
            raise ServiceBusyError() from cause
