import asyncio
from contextlib import asynccontextmanager
from fastapi import FastAPI

from special_queue.core.config import settings
from special_queue.core.logging import get_logger, setup_logging
from special_queue.core.message_queue import get_notifying_queue
from special_queue.core.producer import produce_messages

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Lifespan function for the FastAPI application.
    Handles startup and shutdown of the optional background producer.
    """
    # 1. Logging
    setup_logging(settings.LOG_LEVEL)

    # 2. Start the seed producer if enabled
    stop = asyncio.Event()
    producer_task = None
    if settings.PRODUCER_ENABLED:
        producer_task = asyncio.create_task(
            produce_messages(
                get_notifying_queue(),
                settings.SEED_MESSAGES,
                settings.PRODUCE_INTERVAL,
                stop,
            )
        )
        logger.info("Seed producer started.")

    yield

    # 3. Stop the producer
    if producer_task is not None:
        stop.set()
        await producer_task
        logger.info("Seed producer stopped.")
