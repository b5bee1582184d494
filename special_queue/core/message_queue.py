"""
Process-wide NotifyingQueue (singleton per process).

NOTE: If running multiple workers (uvicorn --workers N), each worker
gets its own queue. Nothing is shared across processes.
"""

from typing import Optional

from special_queue.queue import NotifyingQueue

# Global instance (lazily initialized)
_queue: Optional[NotifyingQueue[str]] = None


def get_notifying_queue() -> NotifyingQueue[str]:
    """Get or create the global message queue."""
    global _queue
    if _queue is None:
        _queue = NotifyingQueue()
    return _queue


def reset_notifying_queue() -> None:
    """Drop the global queue so the next get_notifying_queue() starts empty."""
    global _queue
    _queue = None
