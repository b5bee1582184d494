"""
Notifying Queue

A FIFO container that broadcasts a ChangeEvent to its subscribers on every
insert and remove. Broadcast happens synchronously on the caller's thread,
after storage is updated and before the mutating call returns.

Thread safety:
    One re-entrant lock covers storage, the subscriber list and the broadcast.
    A subscriber may call back into the queue (e.g. unsubscribe itself) from
    inside its callback; it will never observe events out of mutation order.
"""

import itertools
import threading
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Deque, Dict, Generic, Iterator, List, TypeVar

from special_queue.core.logging import get_logger
from special_queue.queue.events import ChangeCallback, ChangeEvent, ChangeKind
from special_queue.queue.exceptions import EmptyQueueError

logger = get_logger(__name__)

T = TypeVar("T")

_subscription_ids = itertools.count(1)


@dataclass(frozen=True)
class Subscription:
    """Handle returned by NotifyingQueue.subscribe()."""

    id: int = field(default_factory=lambda: next(_subscription_ids))


class NotifyingQueue(Generic[T]):
    """Unbounded FIFO queue with synchronous change notifications."""

    def __init__(self):
        self._items: Deque[T] = deque()
        self._subscribers: Dict[Subscription, ChangeCallback] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def insert(self, item: T) -> None:
        """Append *item* at the tail and notify subscribers."""
        with self._lock:
            self._items.append(item)
            self._broadcast(ChangeEvent(ChangeKind.INSERT, item))

    def remove(self) -> T:
        """
        Pop the head item and notify subscribers.

        Raises:
            EmptyQueueError: If the queue holds no items.
        """
        with self._lock:
            if not self._items:
                raise EmptyQueueError()
            item = self._items.popleft()
            self._broadcast(ChangeEvent(ChangeKind.REMOVE, item))
            return item

    def peek(self) -> T:
        """Return the head item without removing it."""
        with self._lock:
            if not self._items:
                raise EmptyQueueError()
            return self._items[0]

    def snapshot(self) -> List[T]:
        """Copy of the current contents in FIFO order."""
        with self._lock:
            return list(self._items)

    def subscribe(self, callback: ChangeCallback) -> Subscription:
        """Register *callback* for all future change events."""
        handle = Subscription()
        with self._lock:
            self._subscribers[handle] = callback
        logger.debug("Subscription %d registered", handle.id)
        return handle

    def unsubscribe(self, handle: Subscription) -> None:
        """Remove a subscription. Unknown or already removed handles are ignored."""
        with self._lock:
            removed = self._subscribers.pop(handle, None)
        if removed is not None:
            logger.debug("Subscription %d removed", handle.id)

    @contextmanager
    def subscription(self, callback: ChangeCallback) -> Iterator[Subscription]:
        """Subscribe for the duration of a ``with`` block."""
        handle = self.subscribe(callback)
        try:
            yield handle
        finally:
            self.unsubscribe(handle)

    def _broadcast(self, event: ChangeEvent) -> None:
        # Caller holds the lock. Iterate a copy so callbacks may unsubscribe.
        for handle, callback in list(self._subscribers.items()):
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "Subscriber %d failed on %s event", handle.id, event.kind.value
                )
