"""ConfirmationScheduler — deferred execution, error boundary, explicit shutdown."""

import asyncio
import logging

from app.infrastructure.confirmation_scheduler import ConfirmationScheduler


class _RecordingJob:
    def __init__(self, fail_for: set[int] | None = None):
        self.ran: list[int] = []
        self.fail_for = fail_for or set()

    async def __call__(self, order_id):
        if order_id in self.fail_for:
            raise RuntimeError("store unavailable")
        self.ran.append(order_id)


async def test_schedule_returns_before_job_runs():
    job = _RecordingJob()
    scheduler = ConfirmationScheduler(job, delay_seconds=0.05)

    scheduler.schedule(1)

    assert job.ran == []
    assert scheduler.pending_count == 1
    await scheduler.drain()
    assert job.ran == [1]
    assert scheduler.pending_count == 0


async def test_job_waits_for_delay():
    job = _RecordingJob()
    scheduler = ConfirmationScheduler(job, delay_seconds=0.2)

    scheduler.schedule(7)
    await asyncio.sleep(0.05)
    assert job.ran == []

    await scheduler.drain()
    assert job.ran == [7]


async def test_job_failure_is_logged_and_isolated(caplog):
    job = _RecordingJob(fail_for={2})
    scheduler = ConfirmationScheduler(job, delay_seconds=0)

    with caplog.at_level(logging.ERROR):
        scheduler.schedule(1)
        scheduler.schedule(2)
        scheduler.schedule(3)
        await scheduler.drain()

    assert sorted(job.ran) == [1, 3]
    assert "Confirmation job failed: store unavailable" in caplog.text


async def test_failed_job_is_not_retried():
    calls = []

    async def job(order_id):
        calls.append(order_id)
        raise RuntimeError("boom")

    scheduler = ConfirmationScheduler(job, delay_seconds=0)
    scheduler.schedule(5)
    await scheduler.drain()
    await asyncio.sleep(0.01)

    assert calls == [5]


async def test_shutdown_cancels_unfired_jobs(caplog):
    job = _RecordingJob()
    scheduler = ConfirmationScheduler(job, delay_seconds=60)
    scheduler.schedule(4)
    scheduler.schedule(9)

    with caplog.at_level(logging.WARNING):
        await scheduler.shutdown()

    assert job.ran == []
    assert scheduler.pending_count == 0
    assert "orders remain PENDING: [4, 9]" in caplog.text


async def test_shutdown_without_jobs_is_noop():
    scheduler = ConfirmationScheduler(_RecordingJob(), delay_seconds=1)
    await scheduler.shutdown()
    assert scheduler.pending_count == 0


async def test_shutdown_reports_running_job_as_possibly_pending(caplog):
    started = asyncio.Event()

    async def slow_job(order_id):
        started.set()
        await asyncio.Event().wait()

    scheduler = ConfirmationScheduler(slow_job, delay_seconds=0)
    scheduler.schedule(3)
    await started.wait()

    with caplog.at_level(logging.WARNING):
        await scheduler.shutdown()

    assert "orders may remain PENDING: [3]" in caplog.text
    assert "orders remain PENDING" not in caplog.text
    assert scheduler.pending_count == 0
