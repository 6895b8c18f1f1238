"""Tests for ticket assignment, turn waiting and release."""

import asyncio

import pytest

from atlasgen.exceptions import QueueError
from atlasgen.models import ConversionJob, JobState
from atlasgen.services import QueueCoordinator


def make_job(name: str) -> ConversionJob:
    return ConversionJob(job_id=name, source_name=name)


async def enqueue_all(queue: QueueCoordinator, names):
    jobs = [make_job(name) for name in names]
    for job in jobs:
        await queue.enqueue(job)
    return jobs


@pytest.mark.asyncio
async def test_tickets_follow_creation_order(queue):
    """N enqueues without a release yield exactly 1..N in order."""
    jobs = await enqueue_all(queue, [f"job{i}" for i in range(6)])

    assert [job.ticket for job in jobs] == [1, 2, 3, 4, 5, 6]
    assert all(job.state == JobState.ENQUEUED for job in jobs)
    assert queue.max_live_ticket() == 6
    assert len(queue) == 6


@pytest.mark.asyncio
async def test_first_job_gets_ticket_one_on_empty_queue(queue):
    assert queue.max_live_ticket() == 0
    job = make_job("solo")
    assert await queue.enqueue(job) == 1


@pytest.mark.asyncio
async def test_double_enqueue_rejected(queue):
    job = make_job("a")
    await queue.enqueue(job)
    with pytest.raises(QueueError):
        await queue.enqueue(job)
    assert job.ticket == 1


@pytest.mark.asyncio
async def test_release_first_moves_everyone_up(queue):
    a, b, c = await enqueue_all(queue, ["a", "b", "c"])

    await queue.release(a)

    assert (b.ticket, c.ticket) == (1, 2)
    assert a.ticket == 0
    assert a not in queue


@pytest.mark.asyncio
async def test_release_middle_only_decrements_later_tickets(queue):
    a, b, c, d = await enqueue_all(queue, ["a", "b", "c", "d"])

    await queue.release(c)

    assert (a.ticket, b.ticket, d.ticket) == (1, 2, 3)
    assert sorted(job.ticket for job in queue.snapshot()) == [1, 2, 3]


@pytest.mark.asyncio
async def test_release_never_goes_negative(queue):
    a, b = await enqueue_all(queue, ["a", "b"])
    b.ticket = 0  # corrupted externally

    await queue.release(a)

    assert b.ticket == 0


@pytest.mark.asyncio
async def test_release_unknown_job_is_noop(queue):
    a, b = await enqueue_all(queue, ["a", "b"])

    await queue.release(make_job("stranger"))

    assert (a.ticket, b.ticket) == (1, 2)


@pytest.mark.asyncio
async def test_new_ticket_after_release_is_contiguous(queue):
    a, b = await enqueue_all(queue, ["a", "b"])
    await queue.release(a)

    c = make_job("c")
    await queue.enqueue(c)

    assert (b.ticket, c.ticket) == (1, 2)


@pytest.mark.asyncio
async def test_await_turn_returns_immediately_for_ticket_one(queue):
    (a,) = await enqueue_all(queue, ["a"])

    await asyncio.wait_for(queue.await_turn(a), timeout=1)

    assert a.ticket == 1
    assert a.state == JobState.WAITING


@pytest.mark.asyncio
async def test_await_turn_blocks_while_ticket_above_one(queue):
    a, b = await enqueue_all(queue, ["a", "b"])

    waiter = asyncio.create_task(queue.await_turn(b))
    await asyncio.sleep(0.05)

    assert not waiter.done()
    assert b.state == JobState.WAITING

    await queue.release(a)
    await asyncio.wait_for(waiter, timeout=1)
    assert b.ticket == 1


@pytest.mark.asyncio
async def test_await_turn_never_returns_for_third_in_line(queue):
    a, b, c = await enqueue_all(queue, ["a", "b", "c"])

    waiter = asyncio.create_task(queue.await_turn(c))
    await queue.release(a)
    await asyncio.sleep(0.05)

    assert c.ticket == 2
    assert not waiter.done()

    await queue.release(b)
    await asyncio.wait_for(waiter, timeout=1)
    assert c.ticket == 1


@pytest.mark.asyncio
async def test_await_turn_requires_enqueue(queue):
    with pytest.raises(QueueError):
        await queue.await_turn(make_job("ghost"))


@pytest.mark.asyncio
async def test_three_jobs_scenario(queue):
    """A, B, C get 1, 2, 3; after A releases, B is eligible and C is second."""
    a, b, c = await enqueue_all(queue, ["A", "B", "C"])
    assert (a.ticket, b.ticket, c.ticket) == (1, 2, 3)

    b_turn = asyncio.create_task(queue.await_turn(b))
    c_turn = asyncio.create_task(queue.await_turn(c))
    await queue.await_turn(a)
    await asyncio.sleep(0.01)
    assert not b_turn.done() and not c_turn.done()

    await queue.release(a)
    await asyncio.wait_for(b_turn, timeout=1)

    assert (b.ticket, c.ticket) == (1, 2)
    assert not c_turn.done()
    c_turn.cancel()
    with pytest.raises(asyncio.CancelledError):
        await c_turn


@pytest.mark.asyncio
async def test_snapshot_is_ordered_by_ticket(queue):
    await enqueue_all(queue, ["x", "y", "z"])
    assert [job.job_id for job in queue.snapshot()] == ["x", "y", "z"]
    assert queue.get("y").ticket == 2
    assert queue.get("missing") is None
