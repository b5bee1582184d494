"""
Queue Dependencies
"""

from typing import Annotated

from fastapi import Depends

from special_queue.core.message_queue import get_notifying_queue
from special_queue.queue import NotifyingQueue


def get_queue() -> NotifyingQueue[str]:
    """Get the process-wide queue (Dependency Injection)."""
    return get_notifying_queue()


QueueDep = Annotated[NotifyingQueue[str], Depends(get_queue)]
