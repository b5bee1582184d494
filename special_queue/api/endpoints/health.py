from fastapi import APIRouter

from special_queue.dependencies.queue import QueueDep

router = APIRouter()


@router.get("")
def health_check(queue: QueueDep):
    """
    Liveness check, with the current queue depth and subscriber count.
    """
    return {
        "status": "ok",
        "queue_size": len(queue),
        "subscribers": queue.subscriber_count,
    }
