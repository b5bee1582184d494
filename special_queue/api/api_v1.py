from fastapi import APIRouter
from special_queue.api.endpoints import health_router, queue_router

router = APIRouter(prefix="/api/v1")

router.include_router(health_router, prefix="/health", tags=["health"])
router.include_router(queue_router, prefix="/queue", tags=["queue"])
