from .health import router as health_router
from .queue import router as queue_router

__all__ = ["health_router", "queue_router"]
