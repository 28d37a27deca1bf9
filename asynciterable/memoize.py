"""
Memoizing adapter: replay one single-use source to many cursors.

All derived cursors share one source cursor, one append-only buffer and one
lock. The lock covers both the read-if-buffered path and the
fetch-and-append path, so the source producer runs at most once per
position however many cursors read it, and however they interleave.

Usage:
    pages = fetch_pages_sequence().to_memoized()

    first, again = await asyncio.gather(pages.to_list(), pages.to_list())
    # the producer ran once per page
"""

from __future__ import annotations

import asyncio
from typing import TypeVar

from asynciterable.core.iterable import AsyncIterable, Cursor, SupportsCursor
from asynciterable.utils.logging_utils import get_library_logger

logger = get_library_logger(__name__)

T = TypeVar("T")


class MemoizedSequence(AsyncIterable[T]):
    """Restartable, concurrency-safe replay of a single source cursor."""

    def __init__(self, source: SupportsCursor[T]):
        self.scope = getattr(source, "scope", None)
        self._source = source.cursor()
        self._values: list[T] = []
        self._lock = asyncio.Lock()
        self._log = logger.bind(source=getattr(self._source, "name", repr(self._source)))

    @property
    def buffered(self) -> int:
        """Number of values fetched from the source so far."""
        return len(self._values)

    def cursor(self) -> "MemoizedCursor[T]":
        return MemoizedCursor(self)

    async def _has_value_at(self, index: int) -> bool:
        async with self._lock:
            return index < len(self._values) or await self._source.has_next()

    async def _value_at(self, index: int) -> T:
        async with self._lock:
            if index < len(self._values):
                return self._values[index]
            value = await self._source.next()
            self._values.append(value)
            self._log.debug("value_memoized", index=len(self._values) - 1)
            return value

    def __repr__(self) -> str:
        return f"MemoizedSequence(buffered={len(self._values)})"


class MemoizedCursor(Cursor[T]):
    """Independently positioned cursor over a MemoizedSequence."""

    def __init__(self, memo: MemoizedSequence[T]):
        self.scope = memo.scope
        self._memo = memo
        self.index = 0

    async def has_next(self) -> bool:
        return await self._memo._has_value_at(self.index)

    async def next(self) -> T:
        value = await self._memo._value_at(self.index)
        self.index += 1
        return value

    def __repr__(self) -> str:
        return f"MemoizedCursor(index={self.index})"


def to_memoized(source: SupportsCursor[T]) -> MemoizedSequence[T]:
    """Wrap ``source`` so it can be replayed by any number of cursors."""
    return MemoizedSequence(source)
