"""Shared test fixtures."""

import pytest

from special_queue.core.message_queue import reset_notifying_queue
from special_queue.queue import NotifyingQueue


@pytest.fixture
def queue() -> NotifyingQueue:
    return NotifyingQueue()


@pytest.fixture(autouse=True)
def fresh_global_queue():
    reset_notifying_queue()
    yield
    reset_notifying_queue()
