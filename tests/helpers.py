import asyncio

from special_queue.queue import NotifyingQueue


async def started(coro, queue: NotifyingQueue, timeout: float = 1.0) -> asyncio.Task:
    """Schedule *coro* and return once it has subscribed to *queue*."""
    before = queue.subscriber_count
    task = asyncio.ensure_future(coro)
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while queue.subscriber_count <= before:
        if task.done() or loop.time() > deadline:
            raise AssertionError("waiter never subscribed")
        await asyncio.sleep(0)
    return task
