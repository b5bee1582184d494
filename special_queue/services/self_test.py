"""
Self-test harness.

Runs the producer against a fresh queue and waits for TARGET_MESSAGE with a
stopwatch running. The waiter gets WAIT_TIMEOUT as its own deadline and the
caller's cancellation event directly, so both reach the innermost suspension
point rather than only an outer wrapper.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Optional

from special_queue.core.config import Settings, settings as default_settings
from special_queue.core.logging import get_logger
from special_queue.core.producer import produce_messages
from special_queue.queue import NotifyingQueue, WaitOutcome, wait_for_match

logger = get_logger(__name__)


@dataclass
class SelfTestReport:
    """Result of one self-test run."""

    passed: bool
    outcome: WaitOutcome[str]
    elapsed: float

    def summary(self) -> str:
        verdict = "PASSED" if self.passed else "FAILED"
        return f"{verdict} {self.elapsed:.3f}s ({self.outcome.status.value})"


async def run_self_test(
    config: Optional[Settings] = None,
    queue: Optional[NotifyingQueue[str]] = None,
    cancel: Optional[asyncio.Event] = None,
) -> SelfTestReport:
    """
    Produce the seed messages and wait for the target message.

    Args:
        config: Settings to use (defaults to the global settings).
        queue: Queue to run against (defaults to a fresh one).
        cancel: External cancellation event, handed to the waiter.

    Returns:
        SelfTestReport; passed is True only on a MATCHED outcome.
    """
    config = config or default_settings
    queue = queue if queue is not None else NotifyingQueue()
    target = config.TARGET_MESSAGE

    stop_producer = asyncio.Event()
    started = time.perf_counter()
    producer = asyncio.create_task(
        produce_messages(
            queue, config.SEED_MESSAGES, config.PRODUCE_INTERVAL, stop_producer
        )
    )

    try:
        outcome = await wait_for_match(
            queue,
            lambda message: message == target,
            cancel=cancel,
            timeout=config.WAIT_TIMEOUT,
        )
    finally:
        stop_producer.set()
        await producer

    report = SelfTestReport(
        passed=outcome.is_match,
        outcome=outcome,
        elapsed=time.perf_counter() - started,
    )
    if report.passed:
        logger.info(report.summary())
    else:
        logger.warning(report.summary())
    return report
