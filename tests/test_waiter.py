"""Tests for PredicateWaiter / wait_for_match."""

import asyncio
import logging
import threading
import time

import pytest

from special_queue.core.producer import produce_messages
from special_queue.queue import (
    PredicateWaiter,
    WaitCancelledError,
    WaitOutcome,
    WaitStatus,
    WaitTimedOutError,
    WaiterAlreadyUsedError,
    WaiterState,
    read,
    wait_for_match,
)

from tests.helpers import started

WAITER_LOGGER = "special_queue.queue.waiter"
UNIT = 0.05  # one "time unit" in seconds


class Message:
    """Value with identity, to tell equal items apart."""

    def __init__(self, text):
        self.text = text


async def test_matches_item_inserted_after_subscription(queue):
    task = await started(wait_for_match(queue, lambda x: x == "b"), queue)

    for item in ["a", "b", "c"]:
        queue.insert(item)

    assert await task == WaitOutcome.matched("b")


async def test_times_out_when_nothing_matches(queue):
    start = time.perf_counter()
    producer = asyncio.create_task(produce_messages(queue, ["a", "c"], UNIT))

    outcome = await wait_for_match(queue, lambda x: x == "b", timeout=2 * UNIT)
    elapsed = time.perf_counter() - start
    await producer

    assert outcome.status is WaitStatus.TIMED_OUT
    assert outcome.item is None
    assert elapsed >= 2 * UNIT * 0.9


async def test_cancel_before_any_insert(queue):
    cancel = asyncio.Event()
    asyncio.get_running_loop().call_later(UNIT / 2, cancel.set)

    outcome = await wait_for_match(queue, lambda x: x == "special", cancel=cancel)

    assert outcome == WaitOutcome.cancelled()
    assert queue.subscriber_count == 0


async def test_cancel_already_set_resolves_cancelled(queue):
    cancel = asyncio.Event()
    cancel.set()

    outcome = await wait_for_match(queue, lambda x: True, cancel=cancel, timeout=5)

    assert outcome.status is WaitStatus.CANCELLED


async def test_back_to_back_matches_resolve_once_with_first(queue, caplog):
    caplog.set_level(logging.DEBUG, logger=WAITER_LOGGER)
    first, second = Message("special"), Message("special")
    task = await started(wait_for_match(queue, lambda m: m.text == "special"), queue)

    queue.insert(first)
    queue.insert(second)
    outcome = await task

    assert outcome.item is first
    matches = [r for r in caplog.records if r.getMessage().startswith("MATCH")]
    assert len(matches) == 1


async def test_skips_non_matching_items_in_order(queue):
    task = await started(wait_for_match(queue, lambda x: x % 3 == 0 and x > 0), queue)

    for n in [1, 2, 4, 6, 9, 12]:
        queue.insert(n)

    assert (await task).item == 6


async def test_no_effect_after_settling(queue, caplog):
    caplog.set_level(logging.DEBUG, logger=WAITER_LOGGER)
    calls = []

    def predicate(x):
        calls.append(x)
        return x == "hit"

    task = await started(wait_for_match(queue, predicate), queue)
    queue.insert("miss")
    queue.insert("hit")
    await task
    records_after_settle = len(caplog.records)

    queue.insert("hit")
    queue.insert("miss")

    assert calls == ["miss", "hit"]
    assert len(caplog.records) == records_after_settle


@pytest.mark.parametrize("kind", ["match", "cancel", "timeout"])
async def test_subscriber_count_restored(queue, kind):
    unrelated = queue.subscribe(lambda event: None)
    cancel = asyncio.Event()
    task = await started(
        wait_for_match(queue, lambda x: x == "x", cancel=cancel, timeout=0.5), queue
    )
    assert queue.subscriber_count == 2

    if kind == "match":
        queue.insert("x")
    elif kind == "cancel":
        cancel.set()
    await task

    assert queue.subscriber_count == 1
    queue.unsubscribe(unrelated)


async def test_remove_events_are_ignored(queue):
    queue.insert("special")
    task = await started(wait_for_match(queue, lambda x: x == "special"), queue)

    queue.remove()
    assert not task.done()

    queue.insert("special")
    assert (await task).item == "special"


async def test_items_present_before_wait_are_not_matched(queue):
    queue.insert("special")

    outcome = await wait_for_match(queue, lambda x: x == "special", timeout=UNIT)

    assert outcome.status is WaitStatus.TIMED_OUT


async def test_state_machine(queue):
    waiter = PredicateWaiter(queue, lambda x: x == "b")
    assert waiter.state is WaiterState.IDLE

    task = await started(waiter.wait(), queue)
    assert waiter.state is WaiterState.SUBSCRIBED

    queue.insert("b")
    await task
    assert waiter.state is WaiterState.MATCHED

    with pytest.raises(WaiterAlreadyUsedError):
        await waiter.wait()


async def test_new_wait_after_completion_is_independent(queue):
    first = await started(wait_for_match(queue, lambda x: x == "a"), queue)
    queue.insert("a")
    assert (await first).item == "a"

    second = await started(wait_for_match(queue, lambda x: x == "a"), queue)
    assert not second.done()
    queue.insert("a")
    assert (await second).item == "a"


async def test_predicate_error_propagates_and_cleans_up(queue, caplog):
    def predicate(x):
        raise ValueError("bad predicate")

    waiter = PredicateWaiter(queue, predicate)
    task = await started(waiter.wait(), queue)
    queue.insert("a")

    with pytest.raises(ValueError, match="bad predicate"):
        await task
    assert waiter.state is WaiterState.FAILED
    assert queue.subscriber_count == 0
    assert queue.snapshot() == ["a"]

    failures = [r for r in caplog.records if r.getMessage().startswith("Predicate raised")]
    assert len(failures) == 1
    assert failures[0].exc_info is not None


async def test_caller_side_deadline_is_distinct_from_timed_out(queue):
    with pytest.raises(TimeoutError):
        async with asyncio.timeout(UNIT):
            await wait_for_match(queue, lambda x: False)

    assert queue.subscriber_count == 0


async def test_task_cancellation_unsubscribes(queue):
    waiter = PredicateWaiter(queue, lambda x: True)
    task = await started(waiter.wait(), queue)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert waiter.state is WaiterState.CANCELLED
    assert queue.subscriber_count == 0


async def test_insert_from_another_thread(queue):
    task = await started(wait_for_match(queue, lambda x: x == "special"), queue)

    producer = threading.Thread(target=queue.insert, args=("special",))
    producer.start()
    outcome = await asyncio.wait_for(task, timeout=1.0)
    producer.join()

    assert outcome.item == "special"


async def test_read_returns_item_or_raises(queue):
    task = await started(read(queue, lambda x: x == "b"), queue)
    queue.insert("b")
    assert await task == "b"

    with pytest.raises(WaitTimedOutError):
        await read(queue, lambda x: False, timeout=UNIT)

    cancel = asyncio.Event()
    cancel.set()
    with pytest.raises(WaitCancelledError):
        await read(queue, lambda x: False, cancel=cancel)
