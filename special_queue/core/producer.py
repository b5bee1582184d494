"""
Background producer that keeps a queue "receiving messages all the time".

Inserts a fixed list of messages at a fixed cadence, without waiting on any
consumer, until the list runs out or the stop event is set.
"""

import asyncio
from typing import Iterable, Optional

from special_queue.core.logging import get_logger
from special_queue.queue import NotifyingQueue

logger = get_logger(__name__)


async def produce_messages(
    queue: NotifyingQueue[str],
    messages: Iterable[str],
    interval: float,
    stop: Optional[asyncio.Event] = None,
) -> int:
    """
    Insert each message into *queue*, sleeping *interval* seconds after each.

    Args:
        queue: Target queue.
        messages: Messages to insert, in order.
        interval: Seconds between two inserts.
        stop: When set, no further message is inserted.

    Returns:
        The number of messages inserted.
    """
    produced = 0
    logger.info("Producer started (interval=%ss)", interval)

    for message in messages:
        if stop is not None and stop.is_set():
            logger.info("Producer stopped early after %d message(s)", produced)
            return produced

        queue.insert(message)
        produced += 1
        logger.debug("Produced: %s", message)

        if stop is None:
            await asyncio.sleep(interval)
        else:
            # Wake up as soon as stop fires instead of sleeping the full interval.
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass

    logger.info("Producer finished after %d message(s)", produced)
    return produced
