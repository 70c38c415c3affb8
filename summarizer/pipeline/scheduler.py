"""FIFO request scheduler with a concurrency cap and start-to-start spacing.

Callers hand :meth:`RequestScheduler.execute` a zero-argument coroutine
factory.  The scheduler owns it until it is dispatched; the caller gets the
result (or the exception) back through an ``asyncio.Future``.

Two bounds are enforced:

* no more than ``max_concurrent`` operations are in flight at once;
* the starts of any two consecutive dispatches are at least ``min_delay``
  seconds apart.

The scheduler never retries.  Compose it with
:class:`~summarizer.pipeline.retry.BackoffExecutor`::

    await scheduler.execute(lambda: BackoffExecutor(...).run(call_model))
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Set, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[], Awaitable[Any]]


class RequestScheduler:
    """Serialise operations behind a bounded, paced FIFO queue."""

    def __init__(
        self,
        max_concurrent: int = 2,
        min_delay: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be >= 1")
        if min_delay < 0:
            raise ValueError("min_delay must be >= 0")
        self.max_concurrent = max_concurrent
        self.min_delay = min_delay
        self._clock = clock
        self._sleep = sleep
        self._queue: Deque[Tuple[Operation, asyncio.Future]] = deque()
        self._running = 0
        self._last_dispatch: float | None = None
        self._tasks: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def running(self) -> int:
        """Number of operations currently dispatched."""
        return self._running

    @property
    def pending(self) -> int:
        """Number of operations still waiting in the queue."""
        return len(self._queue)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Queue *operation* and wait for its result."""
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._queue.append((operation, future))
        self._process_queue()
        return await future

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reserve_slot(self) -> float:
        """Claim the next dispatch instant and return how long to wait for it.

        The slot is claimed synchronously at dequeue time so two tasks
        dispatched back to back can never compute their wait from the same
        previous instant.
        """
        now = self._clock()
        start = now
        if self._last_dispatch is not None:
            start = max(now, self._last_dispatch + self.min_delay)
        self._last_dispatch = start
        return start - now

    def _process_queue(self) -> None:
        while self._running < self.max_concurrent and self._queue:
            operation, future = self._queue.popleft()
            if future.cancelled():
                continue
            self._running += 1
            wait = self._reserve_slot()
            task = asyncio.ensure_future(self._dispatch(operation, future, wait))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _dispatch(self, operation: Operation, future: asyncio.Future, wait: float) -> None:
        try:
            if wait > 0:
                logger.debug("scheduler: waiting %.3fs before dispatch", wait)
                await self._sleep(wait)
            result = await operation()
        except Exception as exc:  # noqa: BLE001
            if not future.done():
                future.set_exception(exc)
        else:
            if not future.done():
                future.set_result(result)
        finally:
            # Cancellation of the dispatch task must still release the caller.
            if not future.done():
                future.cancel()
            self._running -= 1
            self._process_queue()
