"""
Interfaces shared by sequences and cursors.

An AsyncIterable is anything that can hand out a Cursor. A Cursor is itself
an AsyncIterable whose cursor() returns the cursor itself, so every
combinator can accept either and always gets something it can drive.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Generic,
    MutableSequence,
    Protocol,
    TypeVar,
    Union,
    runtime_checkable,
)

if TYPE_CHECKING:
    from asynciterable.core.iterator import AsyncCursor
    from asynciterable.core.scope import Scope
    from asynciterable.memoize import MemoizedSequence

T = TypeVar("T")
R = TypeVar("R")

Predicate = Callable[[T], Union[bool, Awaitable[bool]]]
Transform = Callable[[T], Union[R, Awaitable[R]]]
Action = Callable[[T], Union[Any, Awaitable[Any]]]


@runtime_checkable
class SupportsCursor(Protocol[T]):
    """Protocol for anything that can manufacture a cursor."""

    def cursor(self) -> "Cursor[T]":
        ...


class AsyncIterable(ABC, Generic[T]):
    """
    Base for everything that produces cursors.

    Subclasses implement cursor(). The combinators are exposed as methods so
    they chain:

        squares = await numbers.filter(is_even).map(square).to_list()
    """

    scope: "Scope"

    @abstractmethod
    def cursor(self) -> "Cursor[T]":
        """Return a cursor positioned at the start of this iterable."""
        ...

    def __aiter__(self) -> "Cursor[T]":
        return self.cursor()

    def filter(self, predicate: Predicate[T]) -> "AsyncCursor[T]":
        from asynciterable.combinators import filter_sequence

        return filter_sequence(self, predicate)

    def map(self, transform: Transform[T, R]) -> "AsyncCursor[R]":
        from asynciterable.combinators import map_sequence

        return map_sequence(self, transform)

    def take_up_to(self, count: int) -> "AsyncCursor[T]":
        from asynciterable.combinators import take_up_to

        return take_up_to(self, count)

    async def to_list(self, into: MutableSequence[T] | None = None) -> MutableSequence[T]:
        from asynciterable.combinators import to_list

        return await to_list(self, into)

    async def for_each(self, action: Action[T]) -> None:
        from asynciterable.combinators import for_each

        await for_each(self, action)

    def to_memoized(self) -> "MemoizedSequence[T]":
        from asynciterable.memoize import to_memoized

        return to_memoized(self)


class Cursor(AsyncIterable[T]):
    """
    Single-use, stateful pull handle.

    cursor() and __aiter__() return the cursor itself, already advanced to
    wherever earlier consumers left it.
    """

    @abstractmethod
    async def has_next(self) -> bool:
        """Advance if needed and report whether a value is available."""
        ...

    @abstractmethod
    async def next(self) -> T:
        """Advance if needed and return the current value."""
        ...

    def cursor(self) -> "Cursor[T]":
        return self

    def __aiter__(self) -> "Cursor[T]":
        return self

    async def __anext__(self) -> T:
        if not await self.has_next():
            raise StopAsyncIteration
        return await self.next()
