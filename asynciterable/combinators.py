"""
Lazy combinators over sequences and cursors.

Each combinator returns a new AsyncCursor whose producer drives the
source's cursor and re-yields a transformed view of it. Nothing touches the
source until the returned cursor is itself asked for a value.

Callbacks (predicate, transform, action) may be plain functions or
coroutine functions.

Usage:
    evens = await filter_sequence(numbers, lambda x: x % 2 == 0).to_list()

    cursor = numbers.cursor()
    head = await take_up_to(cursor, 3).to_list()       # first three
    rest = await map_sequence(cursor, square).to_list()  # the remainder
"""

from __future__ import annotations

from typing import MutableSequence, TypeVar

from asynciterable.core.iterable import Action, Predicate, SupportsCursor, Transform
from asynciterable.core.iterator import AsyncCursor, ProducerScope
from asynciterable.errors import InvalidArgumentError
from asynciterable.utils.async_utils import maybe_await

T = TypeVar("T")
R = TypeVar("R")


def _describe(operation: str, source: SupportsCursor) -> str:
    return f"{operation}({getattr(source, 'name', type(source).__name__)})"


def filter_sequence(source: SupportsCursor[T], predicate: Predicate[T]) -> AsyncCursor[T]:
    """Yield the source values for which ``predicate`` holds."""

    async def produce(scope: ProducerScope[T]) -> None:
        async for element in source.cursor():
            if await maybe_await(predicate, element):
                await scope.yield_(element)

    return AsyncCursor(
        produce, scope=getattr(source, "scope", None), name=_describe("filter", source)
    )


def map_sequence(source: SupportsCursor[T], transform: Transform[T, R]) -> AsyncCursor[R]:
    """Yield ``transform(value)`` for every source value."""

    async def produce(scope: ProducerScope[R]) -> None:
        async for element in source.cursor():
            await scope.yield_(await maybe_await(transform, element))

    return AsyncCursor(
        produce, scope=getattr(source, "scope", None), name=_describe("map", source)
    )


def take_up_to(source: SupportsCursor[T], count: int) -> AsyncCursor[T]:
    """
    Yield at most ``count`` values from the source.

    Stops early if the source runs out and never advances it past the last
    value taken, so the rest of a cursor stays available to later readers.
    """
    if count < 0:
        raise InvalidArgumentError(
            "count must be non-negative", argument="count", value=count
        )

    async def produce(scope: ProducerScope[T]) -> None:
        cursor = source.cursor()
        taken = 0
        while taken < count and await cursor.has_next():
            taken += 1
            await scope.yield_(await cursor.next())

    return AsyncCursor(
        produce,
        scope=getattr(source, "scope", None),
        name=_describe(f"take_up_to[{count}]", source),
    )


async def to_list(
    source: SupportsCursor[T],
    into: MutableSequence[T] | None = None,
) -> MutableSequence[T]:
    """Drain the source into ``into`` (a new list by default) and return it."""
    result: MutableSequence[T] = [] if into is None else into
    async for element in source.cursor():
        result.append(element)
    return result


async def for_each(source: SupportsCursor[T], action: Action[T]) -> None:
    """Drain the source, calling ``action`` on each value in order."""
    async for element in source.cursor():
        await maybe_await(action, element)
