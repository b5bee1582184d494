"""
Public DTOs for the queue HTTP endpoints.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from special_queue.queue import WaitOutcome, WaitStatus


class ItemIn(BaseModel):
    """Request body for inserting an item."""

    item: str = Field(min_length=1, description="The message to insert.")


class QueueSize(BaseModel):
    size: int


class RemovedItem(BaseModel):
    item: str
    size: int


class QueueSnapshot(BaseModel):
    """Queue contents in FIFO order."""

    items: List[str]
    size: int
    subscribers: int


class WaitOutcomePublic(BaseModel):
    """Render-safe form of a WaitOutcome."""

    status: WaitStatus
    item: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: WaitOutcome[str]) -> "WaitOutcomePublic":
        return cls(status=outcome.status, item=outcome.item)
