"""
Change events emitted by NotifyingQueue.

Events are ephemeral: they are handed to the current subscribers at the moment
of mutation and never stored.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class ChangeKind(str, Enum):
    """Kind of queue mutation."""

    INSERT = "insert"
    REMOVE = "remove"


@dataclass(frozen=True)
class ChangeEvent(Generic[T]):
    """A single insert or remove, carrying the affected item."""

    kind: ChangeKind
    item: T


ChangeCallback = Callable[[ChangeEvent], None]
