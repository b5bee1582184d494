"""
Predicate Waiter

Suspends a coroutine until the first inserted item that satisfies a predicate,
or until a cancellation event fires, or until a timeout elapses.

The waiter settles exactly once. The first decision taken under its guard
(match, predicate failure, or the end of the race) wins, and every change event
delivered after that is ignored. The queue subscription is removed on every exit
path, including task cancellation.
"""

import asyncio
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

from special_queue.core.logging import get_logger
from special_queue.queue.events import ChangeEvent, ChangeKind
from special_queue.queue.exceptions import (
    WaitCancelledError,
    WaitTimedOutError,
    WaiterAlreadyUsedError,
)
from special_queue.queue.notifying_queue import NotifyingQueue, Subscription

logger = get_logger(__name__)

T = TypeVar("T")

Predicate = Callable[[T], bool]


class WaitStatus(str, Enum):
    """Terminal result of a predicate wait."""

    MATCHED = "MATCHED"
    CANCELLED = "CANCELLED"
    TIMED_OUT = "TIMED_OUT"


class WaiterState(str, Enum):
    """Lifecycle of a single PredicateWaiter."""

    IDLE = "IDLE"
    SUBSCRIBED = "SUBSCRIBED"
    MATCHED = "MATCHED"
    CANCELLED = "CANCELLED"
    TIMED_OUT = "TIMED_OUT"
    FAILED = "FAILED"  # predicate raised


@dataclass(frozen=True)
class WaitOutcome(Generic[T]):
    """Outcome of wait_for_match(). ``item`` is only set when MATCHED."""

    status: WaitStatus
    item: Optional[T] = None

    @classmethod
    def matched(cls, item: T) -> "WaitOutcome[T]":
        return cls(WaitStatus.MATCHED, item)

    @classmethod
    def cancelled(cls) -> "WaitOutcome[T]":
        return cls(WaitStatus.CANCELLED)

    @classmethod
    def timed_out(cls) -> "WaitOutcome[T]":
        return cls(WaitStatus.TIMED_OUT)

    @property
    def is_match(self) -> bool:
        return self.status is WaitStatus.MATCHED

    def unwrap(self) -> T:
        """
        Return the matched item.

        Raises:
            WaitCancelledError: The wait was cancelled.
            WaitTimedOutError: The waiter's own deadline elapsed.
        """
        if self.status is WaitStatus.CANCELLED:
            raise WaitCancelledError("wait cancelled before a match")
        if self.status is WaitStatus.TIMED_OUT:
            raise WaitTimedOutError("no matching item before the deadline")
        return self.item


class PredicateWaiter(Generic[T]):
    """
    One-shot wait for the first inserted item matching *predicate*.

    Items already in the queue when wait() starts are not considered; only
    INSERT events observed while subscribed are evaluated, in FIFO order.
    """

    def __init__(self, queue: NotifyingQueue[T], predicate: Predicate):
        self._queue = queue
        self._predicate = predicate
        self.state = WaiterState.IDLE

        self._guard = threading.Lock()
        self._settled = False
        self._has_match = False
        self._item: Optional[T] = None
        self._error: Optional[BaseException] = None

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._signal: Optional[asyncio.Future] = None
        self._handle: Optional[Subscription] = None

    async def wait(
        self,
        cancel: Optional[asyncio.Event] = None,
        timeout: Optional[float] = None,
    ) -> WaitOutcome[T]:
        """
        Wait for a match, racing against *cancel* and *timeout*.

        Args:
            cancel: Event that aborts the wait when set.
            timeout: Seconds before the wait resolves as TIMED_OUT. None waits forever.

        Returns:
            The WaitOutcome. Raises whatever the predicate raised, if it raised.
        """
        if self.state is not WaiterState.IDLE:
            raise WaiterAlreadyUsedError("PredicateWaiter instances are one-shot")

        self._loop = asyncio.get_running_loop()
        self._signal = self._loop.create_future()
        self._handle = self._queue.subscribe(self._on_change)
        self.state = WaiterState.SUBSCRIBED

        cancel_task: Optional[asyncio.Future] = None
        try:
            contenders = {self._signal}
            if cancel is not None:
                cancel_task = asyncio.ensure_future(cancel.wait())
                contenders.add(cancel_task)

            await asyncio.wait(
                contenders, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            self.state = WaiterState.CANCELLED
            raise
        finally:
            with self._guard:
                self._settled = True
            self._queue.unsubscribe(self._handle)
            if cancel_task is not None:
                cancel_task.cancel()
            if not self._signal.done():
                self._signal.cancel()

        if self._error is not None:
            self.state = WaiterState.FAILED
            raise self._error
        if self._has_match:
            self.state = WaiterState.MATCHED
            return WaitOutcome.matched(self._item)
        if cancel is not None and cancel.is_set():
            self.state = WaiterState.CANCELLED
            logger.info("Wait cancelled before a match")
            return WaitOutcome.cancelled()
        self.state = WaiterState.TIMED_OUT
        logger.info("Wait timed out after %ss", timeout)
        return WaitOutcome.timed_out()

    def _on_change(self, event: ChangeEvent) -> None:
        if event.kind is not ChangeKind.INSERT:
            return

        with self._guard:
            if self._settled:
                return
            try:
                hit = self._predicate(event.item)
            except Exception as exc:
                self._settled = True
                self._error = exc
                logger.error(
                    "Predicate raised on %r: %s", event.item, exc, exc_info=True
                )
            else:
                if not hit:
                    logger.debug("NO MATCH: %s", event.item)
                    return
                self._settled = True
                self._has_match = True
                self._item = event.item
                logger.info("MATCH: %s", event.item)

        self._queue.unsubscribe(self._handle)
        self._wake()

    def _wake(self) -> None:
        # Inserts may come from another thread; futures are not thread-safe.
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._release()
        else:
            self._loop.call_soon_threadsafe(self._release)

    def _release(self) -> None:
        if not self._signal.done():
            self._signal.set_result(None)


async def wait_for_match(
    queue: NotifyingQueue[T],
    predicate: Predicate,
    cancel: Optional[asyncio.Event] = None,
    timeout: Optional[float] = None,
) -> WaitOutcome[T]:
    """Start a fresh PredicateWaiter on *queue* and wait for its outcome."""
    return await PredicateWaiter(queue, predicate).wait(cancel=cancel, timeout=timeout)


async def read(
    queue: NotifyingQueue[T],
    predicate: Predicate,
    cancel: Optional[asyncio.Event] = None,
    timeout: Optional[float] = None,
) -> T:
    """Like wait_for_match(), but returns the item and raises WaitError otherwise."""
    outcome = await wait_for_match(queue, predicate, cancel=cancel, timeout=timeout)
    return outcome.unwrap()
