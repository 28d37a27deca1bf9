from __future__ import annotations

from typing import TypeVar

from asynciterable.core.iterable import AsyncIterable
from asynciterable.core.iterator import AsyncCursor, Producer
from asynciterable.core.scope import GLOBAL_SCOPE, Scope

T = TypeVar("T")


class AsyncSequence(AsyncIterable[T]):
    """
    Restartable sequence backed by a producer routine.

    Every cursor() call returns a fresh AsyncCursor that runs the producer
    from the beginning. Creating a cursor has no side effects; nothing runs
    until the cursor is asked for a value.
    """

    def __init__(self, producer: Producer[T], scope: Scope | None = None):
        self.scope = scope or GLOBAL_SCOPE
        self._producer = producer

    def cursor(self) -> AsyncCursor[T]:
        return AsyncCursor(self._producer, scope=self.scope)

    def __repr__(self) -> str:
        name = getattr(self._producer, "__qualname__", repr(self._producer))
        return f"AsyncSequence(producer={name!r}, scope={self.scope.name!r})"


def async_sequence(producer: Producer[T], scope: Scope | None = None) -> AsyncSequence[T]:
    """Build a restartable sequence from ``producer``."""
    return AsyncSequence(producer, scope=scope)
