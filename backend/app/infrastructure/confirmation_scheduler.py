"""Confirmation Scheduler — deferred, fire-once jobs on the event loop.

Invariants:
    - schedule() never blocks and never raises because of the job
    - Each job runs at most once, after delay_seconds
    - Job exceptions are logged with the order id and swallowed (no retry, no propagation)
    - shutdown() cancels jobs that have not fired; their orders stay PENDING (logged)
    - A job already past its delay may have written CONFIRMED before cancellation;
      shutdown reports those orders separately as possibly PENDING

Design Decisions:
    - asyncio tasks owned by the scheduler, not FastAPI BackgroundTasks: the job
      outlives the request and has its own error boundary
    - Strong references kept in _tasks until done (asyncio only holds weak refs)
    - drain() for graceful stop and deterministic tests
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from app.core.domain_types import OrderId

logger = logging.getLogger(__name__)

ConfirmationJob = Callable[[OrderId], Awaitable[None]]


class ConfirmationScheduler:
    """Runs a confirmation job for each scheduled order after a fixed delay."""

    def __init__(self, job: ConfirmationJob, delay_seconds: float = 2.0):
        self._job = job
        self.delay_seconds = delay_seconds
        self._tasks: dict[asyncio.Task, OrderId] = {}
        self._fired: set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    def schedule(self, order_id: OrderId) -> None:
        task = asyncio.get_running_loop().create_task(
            self._run(order_id), name=f"confirm-order-{order_id}",
        )
        self._tasks[task] = order_id
        task.add_done_callback(self._forget)
        logger.info(
            f"Confirmation scheduled in {self.delay_seconds}s",
            extra={"order_id": order_id},
        )

    async def _run(self, order_id: OrderId) -> None:
        await asyncio.sleep(self.delay_seconds)
        self._fired.add(asyncio.current_task())
        try:
            await self._job(order_id)
        except Exception as e:
            logger.error(
                f"Confirmation job failed: {e}",
                extra={"order_id": order_id},
                exc_info=True,
            )

    def _forget(self, task: asyncio.Task) -> None:
        self._tasks.pop(task, None)
        self._fired.discard(task)

    async def drain(self) -> None:
        """Wait for every scheduled job to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel jobs that have not run yet."""
        if not self._tasks:
            return
        unfired = sorted(
            oid for t, oid in self._tasks.items() if t not in self._fired
        )
        running = sorted(
            oid for t, oid in self._tasks.items() if t in self._fired
        )
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
        if unfired:
            logger.warning(
                f"Shutdown cancelled {len(unfired)} pending confirmation(s); "
                f"orders remain PENDING: {unfired}",
                extra={"pending": len(unfired)},
            )
        if running:
            logger.warning(
                f"Shutdown interrupted {len(running)} running confirmation(s); "
                f"orders may remain PENDING: {running}",
                extra={"pending": len(running)},
            )
