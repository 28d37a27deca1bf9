"""
Scope - the structured-cancellation boundary that owns producer tasks.

Every cursor runs its producer routine in a task of its own. The scope
tracks those tasks and tears down whatever is still parked when it exits,
so a producer abandoned half-way still gets its ``finally`` blocks run.

Usage:
    async with Scope() as scope:
        numbers = scope.sequence(produce_numbers)

        async for x in numbers:
            if x == 3:
                break  # producer stays parked at its yield

    # scope exit cancelled the parked producer and waited for its cleanup

Cursors built without an explicit scope use GLOBAL_SCOPE, which is never
closed; its tasks are cancelled when the event loop shuts down.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Coroutine, Optional

from asynciterable.errors import ScopeClosedError
from asynciterable.utils.logging_utils import get_library_logger

if TYPE_CHECKING:
    from asynciterable.core.iterator import AsyncCursor, Producer
    from asynciterable.core.sequence import AsyncSequence

logger = get_library_logger(__name__)


@dataclass
class ScopeConfig:
    """Configuration for a scope."""

    name: str = "scope"
    # Seconds to wait for cancelled producers on exit (None = no limit)
    cleanup_timeout: Optional[float] = None


class Scope:
    """
    Owner of producer tasks.

    Exiting the scope, whether normally, by an exception, or because the
    owning task was cancelled, cancels every producer task that is still
    running and waits for it to finish.
    """

    def __init__(self, config: ScopeConfig | None = None):
        self.config = config or ScopeConfig()
        self._tasks: set[asyncio.Task] = set()
        self._closed = False
        self._log = logger.bind(scope=self.config.name)

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def active_tasks(self) -> int:
        """Number of producer tasks that have not finished yet."""
        return sum(1 for task in self._tasks if not task.done())

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> asyncio.Task:
        """Start ``coro`` as a task owned by this scope."""
        if self._closed:
            coro.close()
            raise ScopeClosedError("Scope has already exited", scope_name=self.name)

        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def sequence(self, producer: "Producer[Any]") -> "AsyncSequence[Any]":
        """Build a restartable sequence whose cursors run in this scope."""
        from asynciterable.core.sequence import AsyncSequence

        return AsyncSequence(producer, scope=self)

    def iterator(self, producer: "Producer[Any]") -> "AsyncCursor[Any]":
        """Build a single cursor whose producer runs in this scope."""
        from asynciterable.core.iterator import AsyncCursor

        return AsyncCursor(producer, scope=self)

    async def aclose(self) -> None:
        """Cancel all running producer tasks and wait for their cleanup."""
        self._closed = True

        pending = [task for task in self._tasks if not task.done()]
        if not pending:
            return

        self._log.debug("scope_cancelling", tasks=len(pending))
        for task in pending:
            task.cancel()

        try:
            done, still_pending = await asyncio.wait(
                pending, timeout=self.config.cleanup_timeout
            )
        except asyncio.CancelledError:
            # Owner cancelled again mid-cleanup: producers still get awaited.
            await asyncio.wait(pending, timeout=self.config.cleanup_timeout)
            raise
        if still_pending:
            self._log.warning(
                "scope_cleanup_timeout",
                tasks=len(still_pending),
                timeout=self.config.cleanup_timeout,
            )

    async def __aenter__(self) -> "Scope":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> bool:
        await self.aclose()
        return False

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"Scope(name={self.name!r}, {state}, active_tasks={self.active_tasks})"


GLOBAL_SCOPE = Scope(ScopeConfig(name="global"))
