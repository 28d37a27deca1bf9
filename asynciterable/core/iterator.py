"""
AsyncCursor - the producer/consumer handoff engine.

A producer routine runs in its own task and talks to the consumer through
two single-slot channels:

- the resume future (consumer -> producer): set when the consumer wants the
  next value; the producer waits on it at every yield_.
- the report future (producer -> consumer): set with Ready, Failed or Done;
  the consumer waits on it inside has_next()/next().

Exactly one side is runnable at a time. The producer only runs between a
consumer request and the next yield_ (or its return), so the consumer never
sees a value before the producer has suspended, and the producer never runs
while the consumer is processing the previous value.

Usage:
    async def numbers(producer):
        try:
            for x in range(1, 6):
                await asyncio.sleep(0)
                await producer.yield_(x)
        finally:
            release_resources()

    cursor = async_iterator(numbers)
    while await cursor.has_next():
        print(await cursor.next())
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Generic, NoReturn, Optional, TypeVar

from asynciterable.core.iterable import Cursor
from asynciterable.core.scope import GLOBAL_SCOPE, Scope
from asynciterable.core.status import DONE, NOT_READY, Done, Failed, NotReady, Ready, Status
from asynciterable.errors import (
    ExhaustedCursorError,
    ProducerStoppedError,
    ReentrantAdvanceError,
    UnexpectedYieldError,
    UseAfterFailureError,
)
from asynciterable.utils.logging_utils import get_library_logger

logger = get_library_logger(__name__)

T = TypeVar("T")

Producer = Callable[["ProducerScope[T]"], Awaitable[None]]


class ProducerScope(Generic[T]):
    """The view a producer routine gets of its cursor."""

    def __init__(self, cursor: "AsyncCursor[T]"):
        self._cursor = cursor

    @property
    def scope(self) -> Scope:
        """Scope owning the producer task, for spawning helpers."""
        return self._cursor.scope

    async def yield_(self, value: T) -> None:
        """Hand ``value`` to the consumer and wait until it asks for more."""
        await self._cursor._yield(value)


class AsyncCursor(Cursor[T]):
    """
    Pull-driven cursor over one execution of a producer routine.

    The producer task is spawned in ``scope`` on the first request. A
    producer cancelled by its scope records no status; any request pending
    at that moment, and every later one, raises asyncio.CancelledError.
    """

    def __init__(
        self,
        producer: Producer[T],
        scope: Scope | None = None,
        *,
        name: str | None = None,
    ):
        self.scope = scope or GLOBAL_SCOPE
        self.name = name or getattr(producer, "__qualname__", repr(producer))
        self._producer = producer
        self._status: Status = NOT_READY
        self._task: Optional[asyncio.Task] = None
        self._resume: Optional[asyncio.Future[None]] = None
        self._report: Optional[asyncio.Future[Status]] = None
        self._waiting = False
        self._cancelled = False
        self._log = logger.bind(cursor=self.name, scope=self.scope.name)

    @property
    def status(self) -> Status:
        return self._status

    @property
    def started(self) -> bool:
        """Whether the producer task has been spawned."""
        return self._task is not None

    async def has_next(self) -> bool:
        await self._ensure_advance()
        status = self._status
        if isinstance(status, Ready):
            return True
        if isinstance(status, Done):
            return False
        self._raise_failure(status)

    async def next(self) -> T:
        await self._ensure_advance()
        status = self._status
        if isinstance(status, Ready):
            self._status = NOT_READY
            return status.value
        if isinstance(status, Done):
            raise ExhaustedCursorError("Asynchronous iterator is exhausted", cursor=self.name)
        self._raise_failure(status)

    async def _ensure_advance(self) -> None:
        if not isinstance(self._status, NotReady):
            return
        if self._waiting:
            raise ReentrantAdvanceError(
                "Cursor already has a pending request", cursor=self.name
            )

        self._waiting = True
        try:
            # A report left over from a cancelled wait is picked up instead
            # of resuming the producer a second time.
            if self._report is None:
                self._request()
            status = await asyncio.shield(self._report)
        finally:
            self._waiting = False

        self._report = None
        self._status = status

    def _request(self) -> None:
        loop = asyncio.get_running_loop()

        if self._task is None:
            self._task = self.scope.spawn(self._drive(), name=f"producer:{self.name}")
            self._task.add_done_callback(self._on_producer_exit)
            self._report = loop.create_future()
            return

        self._report = loop.create_future()
        if self._cancelled:
            self._report.cancel()
            return
        self._resume.set_result(None)

    async def _yield(self, value: T) -> None:
        report = self._report
        if report is None or report.done():
            raise UnexpectedYieldError(
                "yield_() called with no outstanding request", cursor=self.name
            )

        self._resume = asyncio.get_running_loop().create_future()
        report.set_result(Ready(value))
        await self._resume

    async def _drive(self) -> None:
        self._log.debug("producer_started")
        try:
            await self._producer(ProducerScope(self))
        except StopAsyncIteration as e:
            # Re-raised raw, async for would read it as end of stream.
            error = ProducerStoppedError(
                "Producer raised StopAsyncIteration", cursor=self.name
            )
            error.__cause__ = e
            self._log.debug("producer_failed", error=repr(e))
            self._finish(Failed(error))
        except Exception as e:
            self._log.debug("producer_failed", error=repr(e))
            self._finish(Failed(e))
        else:
            self._log.debug("producer_done")
            self._finish(DONE)

    def _finish(self, status: Status) -> None:
        report = self._report
        if report is None or report.done():
            self._log.warning("producer_finished_without_request")
            return
        report.set_result(status)

    def _on_producer_exit(self, task: asyncio.Task) -> None:
        if task.cancelled():
            self._log.debug("producer_cancelled")
            self._cancelled = True
            if self._report is not None and not self._report.done():
                self._report.cancel()
            return

        # Exceptions are stored by _drive; anything else that ended the task
        # (a bare BaseException) is stored here.
        error = task.exception()
        if error is None:
            return
        self._log.debug("producer_aborted", error=repr(error))
        if self._report is not None and not self._report.done():
            self._report.set_result(Failed(error))

    def _raise_failure(self, status: Failed) -> NoReturn:
        if not status.reported:
            status.reported = True
            raise status.error
        raise UseAfterFailureError(
            "Asynchronous sequence producer previously raised an exception",
            cause=status.error,
            cursor=self.name,
        ) from status.error

    def __repr__(self) -> str:
        return f"AsyncCursor(name={self.name!r}, status={self._status!r})"


def async_iterator(producer: Producer[T], scope: Scope | None = None) -> AsyncCursor[T]:
    """Build a single-use cursor over one run of ``producer``."""
    return AsyncCursor(producer, scope=scope)
