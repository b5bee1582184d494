"""
Console entry point for the self-test.

Usage:
    python -m special_queue.selftest
    WAIT_TIMEOUT=3 PRODUCE_INTERVAL=0.5 special-queue-selftest
"""

import asyncio
import sys

from dotenv import load_dotenv

from special_queue.core.config import settings
from special_queue.core.logging import setup_logging
from special_queue.services.self_test import run_self_test


def main() -> int:
    load_dotenv()
    setup_logging(settings.LOG_LEVEL)
    report = asyncio.run(run_self_test(settings))
    return 0 if report.passed else 1


if __name__ == "__main__":
    sys.exit(main())
