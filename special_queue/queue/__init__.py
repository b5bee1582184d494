from .events import ChangeEvent, ChangeKind
from .exceptions import (
    EmptyQueueError,
    QueueError,
    WaitCancelledError,
    WaitError,
    WaitTimedOutError,
    WaiterAlreadyUsedError,
)
from .notifying_queue import NotifyingQueue, Subscription
from .waiter import (
    PredicateWaiter,
    WaitOutcome,
    WaitStatus,
    WaiterState,
    read,
    wait_for_match,
)

__all__ = [
    "ChangeEvent",
    "ChangeKind",
    "EmptyQueueError",
    "NotifyingQueue",
    "PredicateWaiter",
    "QueueError",
    "Subscription",
    "WaitCancelledError",
    "WaitError",
    "WaitOutcome",
    "WaitStatus",
    "WaitTimedOutError",
    "WaiterAlreadyUsedError",
    "WaiterState",
    "read",
    "wait_for_match",
]
