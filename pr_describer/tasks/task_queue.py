import asyncio
import logging
import uuid
from collections.abc import Awaitable, Callable
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class Task(BaseModel):
    """Represents a unit of background work spawned for an accepted webhook."""

    id: str
    event_type: str
    delivery_id: str | None = None
    status: TaskStatus
    created_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None
    error: str | None = None


class TaskQueue:
    """
    In-memory runner for fire-and-forget background work.

    Each enqueued job runs as its own detached asyncio task, so a slow or hung
    job never delays the others. Failures are logged and recorded on the Task;
    they never propagate to the caller that enqueued the job.
    """

    def __init__(self, max_history: int = 1000):
        self.tasks: dict[str, Task] = {}
        self.max_history = max_history
        self._running: set[asyncio.Task] = set()

    def enqueue(
        self,
        func: Callable[..., Awaitable[Any]],
        event_type: str,
        *args: Any,
        delivery_id: str | None = None,
        **kwargs: Any,
    ) -> Task:
        """Schedule func(*args, **kwargs) in the background and return its Task record."""
        task = Task(
            id="_".join(filter(None, [event_type, delivery_id, uuid.uuid4().hex[:8]])),
            event_type=event_type,
            delivery_id=delivery_id,
            status=TaskStatus.PENDING,
            created_at=datetime.now(),
        )
        self.tasks[task.id] = task
        self._prune_history()

        runner = asyncio.create_task(self._process_task(task, func, *args, **kwargs))
        self._running.add(runner)
        runner.add_done_callback(self._running.discard)

        logger.info(f"Enqueued task {task.id}")
        return task

    async def _process_task(self, task: Task, func: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> None:
        """Run a single task, isolating its failures."""
        task.status = TaskStatus.RUNNING
        task.started_at = datetime.now()
        logger.info(f"Processing task {task.id}")

        try:
            await func(*args, **kwargs)
        except asyncio.CancelledError:
            task.status = TaskStatus.FAILED
            task.completed_at = datetime.now()
            task.error = "cancelled"
            logger.warning(f"Task {task.id} was cancelled")
            raise
        except Exception as e:
            task.status = TaskStatus.FAILED
            task.completed_at = datetime.now()
            task.error = str(e)
            logger.error(f"Task {task.id} failed: {e}", exc_info=True)
        else:
            task.status = TaskStatus.COMPLETED
            task.completed_at = datetime.now()
            logger.info(f"Task {task.id} completed successfully")

    async def join(self) -> None:
        """Wait until every running task has finished."""
        while self._running:
            await asyncio.gather(*list(self._running), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel in-flight tasks and wait for them to unwind."""
        running = list(self._running)
        for runner in running:
            runner.cancel()
        await asyncio.gather(*running, return_exceptions=True)
        if running:
            logger.info(f"Cancelled {len(running)} in-flight tasks")

    def cleanup_old_tasks(self, max_age_hours: int = 24) -> int:
        """Drop finished task records older than max_age_hours. Returns the number removed."""
        cutoff_time = datetime.now().timestamp() - (max_age_hours * 3600)

        old_task_ids = [
            task_id
            for task_id, task in self.tasks.items()
            if task.status in (TaskStatus.COMPLETED, TaskStatus.FAILED) and task.created_at.timestamp() < cutoff_time
        ]
        for task_id in old_task_ids:
            del self.tasks[task_id]

        if old_task_ids:
            logger.info(f"Cleaned up {len(old_task_ids)} old tasks")
        return len(old_task_ids)

    def _prune_history(self) -> None:
        # Oldest finished records go first; pending/running records are kept.
        if len(self.tasks) <= self.max_history:
            return
        for task_id in list(self.tasks):
            if len(self.tasks) <= self.max_history:
                break
            if self.tasks[task_id].status in (TaskStatus.COMPLETED, TaskStatus.FAILED):
                del self.tasks[task_id]

    def stats(self) -> dict[str, int]:
        """Task counts by status."""
        counts = {status.value: 0 for status in TaskStatus}
        for task in self.tasks.values():
            counts[task.status.value] += 1
        counts["in_flight"] = len(self._running)
        counts["total"] = len(self.tasks)
        return counts
