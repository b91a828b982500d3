"""Background task runner abstraction.

Imports run as in-process asyncio tasks so upload requests return
immediately. Each task carries a cancel flag that long-running work polls
between units of work; cancellation is cooperative, never a hard
``Task.cancel()`` mid-insert.
"""

import asyncio
import enum
import uuid
from collections.abc import Coroutine
from typing import Any, Protocol

from loguru import logger


class JobStatus(enum.StrEnum):
    """Status of a background task."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class BackgroundTaskRunner(Protocol):
    """Protocol for background task execution."""

    def submit_task(self, coro: Coroutine[Any, Any, Any], task_id: str | None = None) -> str:
        """Submit an async task for background execution and return its id."""
        ...

    def get_status(self, task_id: str) -> JobStatus:
        """Get the current status of a background task."""
        ...

    def request_cancel(self, task_id: str) -> bool:
        """Ask a running task to stop at its next checkpoint."""
        ...

    def is_cancel_requested(self, task_id: str) -> bool:
        """Whether cancellation has been requested for a task."""
        ...


class InProcessTaskRunner:
    """In-process background task runner using asyncio.

    Tasks run in the same process as the API server using
    asyncio.create_task(). Cancel flags live in memory, so a cancel request
    only reaches tasks started by this process.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, JobStatus] = {}
        self._tasks: dict[str, asyncio.Task[Any]] = {}
        self._cancel_requested: set[str] = set()

    def submit_task(self, coro: Coroutine[Any, Any, Any], task_id: str | None = None) -> str:
        """Submit an async task for background execution.

        Args:
            coro: The coroutine to execute.
            task_id: Optional id to track the task by (e.g. an import job id);
                a random id is generated when omitted.

        Returns:
            The task id.
        """
        task_id = task_id or str(uuid.uuid4())
        self._jobs[task_id] = JobStatus.PENDING
        self._cancel_requested.discard(task_id)

        async def _run() -> None:
            self._jobs[task_id] = JobStatus.RUNNING
            try:
                await coro
                self._jobs[task_id] = JobStatus.COMPLETED
            except Exception:
                self._jobs[task_id] = JobStatus.FAILED
                logger.exception(f"Background task {task_id} failed")

        task = asyncio.create_task(_run())
        self._tasks[task_id] = task

        def _finished(done: asyncio.Task[Any]) -> None:
            if self._tasks.get(task_id) is done:
                self._tasks.pop(task_id, None)
                self._cancel_requested.discard(task_id)

        task.add_done_callback(_finished)
        return task_id

    def get_status(self, task_id: str) -> JobStatus:
        """Get the current status of a background task.

        Raises:
            KeyError: If the task id is not found.
        """
        return self._jobs[task_id]

    def is_running(self, task_id: str) -> bool:
        return self._jobs.get(task_id) in (JobStatus.PENDING, JobStatus.RUNNING)

    def request_cancel(self, task_id: str) -> bool:
        """Flag a task for cancellation.

        Args:
            task_id: The id returned by submit_task.

        Returns:
            True if the task is pending or running and was flagged.
        """
        if not self.is_running(task_id):
            return False
        self._cancel_requested.add(task_id)
        logger.info(f"Cancellation requested for background task {task_id}")
        return True

    def is_cancel_requested(self, task_id: str) -> bool:
        return task_id in self._cancel_requested


# Singleton instance for the application
task_runner = InProcessTaskRunner()
