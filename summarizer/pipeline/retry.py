"""Bounded retries with pure exponential backoff.

``BackoffExecutor.run`` turns every attempt into an :data:`OperationResult`
and decides what to do next purely from the ``retryable`` flag on the
failure: non-retryable failures are re-raised untouched, retryable ones wait
``base_delay * 2 ** attempt`` seconds before the next attempt, and once the
attempts are used up an :class:`ExhaustedRetriesError` is raised.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

from summarizer.errors import ExhaustedRetriesError
from summarizer.models import Failure, OperationResult, Success

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]
Sleep = Callable[[float], Awaitable[Any]]


def classify(error: BaseException) -> bool:
    """Return whether *error* may be retried.

    Errors raised by the pipeline carry an explicit ``retryable`` flag.
    Anything else (an unexpected client or library failure) is treated as
    transient.
    """
    return bool(getattr(error, "retryable", True))


async def attempt(operation: Operation[T]) -> OperationResult[T]:
    """Run *operation* once and capture its outcome."""
    try:
        return Success(await operation())
    except Exception as exc:  # noqa: BLE001
        return Failure(error=exc, retryable=classify(exc))


class BackoffExecutor:
    """Run one logical operation with up to ``max_retries`` retries.

    Create a fresh executor per logical operation; ``retries`` reports how
    many retries the last :meth:`run` needed.
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 2.0,
        label: str = "Operation",
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if base_delay < 0:
            raise ValueError("base_delay must be >= 0")
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.label = label
        self.retries = 0
        self._sleep = sleep
        self._running = False

    def delay_for(self, attempt_index: int) -> float:
        """Wait applied after the failed attempt number *attempt_index*."""
        return self.base_delay * (2 ** attempt_index)

    async def run(self, operation: Operation[T]) -> T:
        if self._running:
            raise RuntimeError(f"{self.label}: executor is already running an operation")
        self._running = True
        self.retries = 0
        try:
            return await self._run(operation)
        finally:
            self._running = False

    async def _run(self, operation: Operation[T]) -> T:
        total = self.max_retries + 1
        last: Failure | None = None

        for index in range(total):
            outcome = await attempt(operation)
            if isinstance(outcome, Success):
                return outcome.value

            last = outcome
            if not outcome.retryable:
                raise outcome.error

            if index < self.max_retries:
                delay = self.delay_for(index)
                logger.warning(
                    "%s failed (attempt %d/%d): %s. Retrying in %.2fs ...",
                    self.label,
                    index + 1,
                    total,
                    outcome.message,
                    delay,
                )
                self.retries += 1
                await self._sleep(delay)

        assert last is not None
        raise ExhaustedRetriesError(self.label, total, last.error) from last.error
