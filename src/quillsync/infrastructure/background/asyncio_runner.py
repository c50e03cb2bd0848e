"""Background runner on the running asyncio loop."""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from quillsync.application.ports import BackgroundResult

logger = logging.getLogger(__name__)


class AsyncioBackgroundRunner:
    """Runs submitted coroutines as tasks bounded by ``timeout_seconds``.

    Tasks are strongly referenced until done so they are not garbage collected
    mid-flight. Outcomes land on the returned ``BackgroundResult``.
    """

    def __init__(self, timeout_seconds: float = 30.0) -> None:
        self._timeout = timeout_seconds
        self._tasks: set[asyncio.Task] = set()

    def submit(self, name: str, work: Coroutine[Any, Any, Any]) -> BackgroundResult:
        result = BackgroundResult(name=name)
        task = asyncio.get_running_loop().create_task(
            asyncio.wait_for(work, self._timeout), name=name
        )
        self._tasks.add(task)
        task.add_done_callback(lambda t: self._finish(t, result))
        return result

    async def drain(self) -> None:
        """Wait for in-flight work, e.g. on shutdown."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def _finish(self, task: asyncio.Task, result: BackgroundResult) -> None:
        self._tasks.discard(task)
        result.finished = True
        if task.cancelled():
            result.error = "cancelled"
            logger.warning("Background task cancelled", extra={"ctx_task": result.name})
            return
        exc = task.exception()
        if isinstance(exc, TimeoutError):
            result.error = f"timed out after {self._timeout}s"
            logger.warning(
                "Background task timed out",
                extra={"ctx_task": result.name, "ctx_timeout_seconds": self._timeout},
            )
            return
        if exc is not None:
            result.error = str(exc) or type(exc).__name__
            logger.error(
                "Background task failed",
                exc_info=exc,
                extra={"ctx_task": result.name},
            )
            return
        result.outcome = task.result()
        if getattr(result.outcome, "success", True) is False:
            logger.warning(
                "Background task reported failure: %s",
                getattr(result.outcome, "error", None),
                extra={"ctx_task": result.name},
            )
