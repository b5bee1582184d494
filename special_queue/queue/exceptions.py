"""
Queue and waiter errors.

Structural errors (EmptyQueueError) propagate to the immediate caller. Wait outcomes
are returned as data; the WaitError family only appears when a caller asks for the
raising form via WaitOutcome.unwrap() or read().
"""


class QueueError(Exception):
    """Base class for all errors raised by this package."""


class EmptyQueueError(QueueError):
    """Raised when removing or peeking from an empty queue."""

    def __init__(self, message: str = "queue is empty"):
        super().__init__(message)


class WaiterAlreadyUsedError(QueueError):
    """Raised when a one-shot PredicateWaiter is awaited a second time."""


class WaitError(QueueError):
    """A predicate wait settled without a match."""


class WaitCancelledError(WaitError):
    """The cancellation signal fired before any item matched."""


class WaitTimedOutError(WaitError):
    """The waiter's own deadline elapsed before any item matched."""
