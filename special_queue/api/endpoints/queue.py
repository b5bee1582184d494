import asyncio
from typing import AsyncGenerator

from fastapi import APIRouter, HTTPException, Query, Request, status
from sse_starlette.sse import EventSourceResponse

from special_queue.core.logging import get_logger
from special_queue.dependencies.queue import QueueDep
from special_queue.queue import (
    ChangeEvent,
    EmptyQueueError,
    NotifyingQueue,
    wait_for_match,
)
from special_queue.schemas.queue import (
    ItemIn,
    QueueSize,
    QueueSnapshot,
    RemovedItem,
    WaitOutcomePublic,
)

logger = get_logger(__name__)

router = APIRouter()

MAX_WAIT_SECONDS = 60.0
SSE_BUFFER_SIZE = 100
SSE_KEEPALIVE = 15.0


@router.get("/items", response_model=QueueSnapshot)
def list_items(queue: QueueDep):
    """Current queue contents, head first."""
    items = queue.snapshot()
    return QueueSnapshot(
        items=items, size=len(items), subscribers=queue.subscriber_count
    )


@router.post("/items", response_model=QueueSize, status_code=status.HTTP_201_CREATED)
def insert_item(body: ItemIn, queue: QueueDep):
    """Append an item; subscribers are notified before the response is built."""
    queue.insert(body.item)
    return QueueSize(size=len(queue))


@router.delete("/items/head", response_model=RemovedItem)
def remove_item(queue: QueueDep):
    """Pop the head item."""
    try:
        item = queue.remove()
    except EmptyQueueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return RemovedItem(item=item, size=len(queue))


@router.get("/wait", response_model=WaitOutcomePublic)
async def wait_for_item(
    queue: QueueDep,
    equals: str = Query(..., min_length=1),
    timeout: float = Query(10.0, gt=0, le=MAX_WAIT_SECONDS),
):
    """Block until an item equal to *equals* is inserted, or *timeout* elapses."""
    outcome = await wait_for_match(
        queue, lambda item: item == equals, timeout=timeout
    )
    return WaitOutcomePublic.from_outcome(outcome)


def to_sse(event: ChangeEvent) -> dict:
    """Format a change event for EventSourceResponse."""
    return {"event": event.kind.value, "data": str(event.item)}


def put_latest(events: asyncio.Queue, event: ChangeEvent) -> None:
    """
    Put *event* into *events*, dropping the oldest buffered event if full.
    This keeps a slow SSE client from growing its buffer without limit.
    """
    try:
        events.put_nowait(event)
    except asyncio.QueueFull:
        try:
            dropped = events.get_nowait()
            logger.debug("SSE buffer full, dropped %s event", dropped.kind.value)
        except asyncio.QueueEmpty:
            pass
        events.put_nowait(event)


async def change_event_stream(
    request: Request, queue: NotifyingQueue[str]
) -> AsyncGenerator[dict, None]:
    """Yield SSE payloads for queue changes until the client disconnects."""
    loop = asyncio.get_running_loop()
    events: asyncio.Queue = asyncio.Queue(maxsize=SSE_BUFFER_SIZE)

    def forward(event: ChangeEvent) -> None:
        # Inserts may happen on a worker thread (sync endpoints run in a threadpool).
        loop.call_soon_threadsafe(put_latest, events, event)

    with queue.subscription(forward):
        while True:
            if await request.is_disconnected():
                break
            try:
                event = await asyncio.wait_for(events.get(), timeout=SSE_KEEPALIVE)
            except asyncio.TimeoutError:
                # Keep-alive: re-check disconnect
                continue
            yield to_sse(event)
    logger.debug("SSE client disconnected")


@router.get("/sse-stream")
async def sse_stream(request: Request, queue: QueueDep):
    """SSE stream of every insert and remove on the queue."""
    return EventSourceResponse(change_event_stream(request, queue))
