"""Background runner port - detached, fire-and-forget work."""

from collections.abc import Coroutine
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol


@dataclass
class BackgroundResult:
    """Handle for submitted work. Callers never await it.

    ``outcome`` and ``error`` are filled in by the runner when the work ends so
    tests and diagnostics can inspect it without coupling the caller to it.
    """

    name: str
    submitted_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    finished: bool = False
    outcome: Any = None
    error: str | None = None


class BackgroundRunner(Protocol):
    """Runs coroutines detached from the request, with a bounded timeout."""

    def submit(self, name: str, work: Coroutine[Any, Any, Any]) -> BackgroundResult: ...

    async def drain(self) -> None: ...
