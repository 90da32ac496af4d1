"""
Bounded exponential-backoff retry for remote calls.

Each call is turned into a ``CallOutcome`` (success, transient failure or
permanent failure) and ``with_retry`` decides from the outcome whether to
wait and try again. Only rate limiting and 5xx statuses are retried.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Awaitable, Callable, Optional

from .exceptions import TRANSIENT_STATUS_CODES

logger = logging.getLogger(__name__)


class OutcomeKind(Enum):
    SUCCESS = auto()
    TRANSIENT = auto()
    PERMANENT = auto()


def status_of(error: BaseException) -> Optional[int]:
    """Status code attached to a failure, if it carries one."""
    for attr in ("status_code", "status", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


@dataclass(frozen=True)
class CallOutcome:
    """Result of one attempt at a remote call."""
    kind: OutcomeKind
    value: Any = None
    error: Optional[BaseException] = None
    status: Optional[int] = None

    @classmethod
    def success(cls, value: Any) -> "CallOutcome":
        return cls(OutcomeKind.SUCCESS, value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "CallOutcome":
        status = status_of(error)
        kind = OutcomeKind.TRANSIENT if status in TRANSIENT_STATUS_CODES else OutcomeKind.PERMANENT
        return cls(kind, error=error, status=status)

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


@dataclass(frozen=True)
class RetryPolicy:
    """Retry budget and backoff timing (seconds)."""
    retries: int = 4
    base_delay: float = 0.8
    max_jitter: float = 0.2

    def __post_init__(self):
        if self.retries < 0:
            raise ValueError("retries must be non-negative")
        if self.base_delay <= 0:
            raise ValueError("base_delay must be positive")
        if self.max_jitter < 0:
            raise ValueError("max_jitter must be non-negative")

    def delay_for(self, attempt: int) -> float:
        """Backoff before retry number ``attempt + 1`` (attempt is 0-based)."""
        return self.base_delay * (2 ** attempt) + random.uniform(0, self.max_jitter)


async def attempt(operation: Callable[[], Awaitable[Any]]) -> CallOutcome:
    """Run one attempt and capture its outcome instead of raising."""
    try:
        value = await operation()
    except Exception as e:
        return CallOutcome.failure(e)
    return CallOutcome.success(value)


async def with_retry(
    operation: Callable[[], Awaitable[Any]],
    policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    on_retry: Optional[Callable[[int, CallOutcome], None]] = None
) -> Any:
    """
    Call ``operation`` until it succeeds or the retry budget runs out.

    Args:
        operation: Zero-argument coroutine function performing the remote call
        policy: Retry budget and backoff timing
        sleep: Awaitable sleep used between attempts
        on_retry: Called with (retry number, failed outcome) before each wait

    Returns:
        The operation's result

    Raises:
        The permanent failure, unchanged, on the first non-transient error;
        otherwise the last transient failure once retries are exhausted.
    """
    policy = policy or RetryPolicy()

    for attempt_no in range(policy.retries + 1):
        outcome = await attempt(operation)
        if outcome.ok:
            return outcome.value
        if outcome.kind is OutcomeKind.PERMANENT:
            raise outcome.error
        if attempt_no == policy.retries:
            break

        delay = policy.delay_for(attempt_no)
        logger.warning(
            f"Retry {attempt_no + 1}/{policy.retries} in {delay * 1000:.0f}ms (status {outcome.status})"
        )
        if on_retry:
            on_retry(attempt_no + 1, outcome)
        await sleep(delay)

    logger.error(f"Retries exhausted after {policy.retries + 1} attempts (status {outcome.status})")
    raise outcome.error
