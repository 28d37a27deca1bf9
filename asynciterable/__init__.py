"""
asynciterable - lazy, pull-based asynchronous sequences for asyncio.

A producer routine yields values through its scope; consumers pull them one
at a time. The producer only runs when a consumer asks for a value it does
not already hold.

Usage:

    import asyncio
    import asynciterable as ai

    async def numbers(producer):
        for x in range(1, 6):
            await asyncio.sleep(0.01)
            await producer.yield_(x)

    async def main():
        async with ai.Scope() as scope:
            seq = scope.sequence(numbers)

            evens = await seq.filter(lambda x: x % 2 == 0).to_list()   # [2, 4]
            squares = await seq.map(lambda x: x * x).to_list()         # [1, 4, ..., 25]

            cursor = seq.cursor()
            head = await cursor.take_up_to(3).to_list()                # [1, 2, 3]
            rest = await cursor.to_list()                              # [4, 5]

            shared = seq.to_memoized()
            a, b = await asyncio.gather(shared.to_list(), shared.to_list())

    asyncio.run(main())
"""

from .core import (
    GLOBAL_SCOPE,
    AsyncCursor,
    AsyncIterable,
    AsyncSequence,
    Cursor,
    Producer,
    ProducerScope,
    Scope,
    ScopeConfig,
    SupportsCursor,
    async_iterator,
    async_sequence,
)

from .combinators import (
    filter_sequence,
    for_each,
    map_sequence,
    take_up_to,
    to_list,
)

from .memoize import (
    MemoizedCursor,
    MemoizedSequence,
    to_memoized,
)

from .errors import (
    CursorStateError,
    ExhaustedCursorError,
    InvalidArgumentError,
    ProducerStoppedError,
    ReentrantAdvanceError,
    ScopeClosedError,
    SequenceError,
    UnexpectedYieldError,
    UseAfterFailureError,
)

__version__ = "0.1.0"

__all__ = [
    # Builders
    "async_sequence",
    "async_iterator",
    # Core types
    "AsyncIterable",
    "AsyncSequence",
    "AsyncCursor",
    "Cursor",
    "SupportsCursor",
    "Producer",
    "ProducerScope",
    "Scope",
    "ScopeConfig",
    "GLOBAL_SCOPE",
    # Combinators
    "filter_sequence",
    "map_sequence",
    "take_up_to",
    "to_list",
    "for_each",
    # Memoization
    "MemoizedSequence",
    "MemoizedCursor",
    "to_memoized",
    # Errors
    "SequenceError",
    "ExhaustedCursorError",
    "UseAfterFailureError",
    "InvalidArgumentError",
    "ProducerStoppedError",
    "CursorStateError",
    "ReentrantAdvanceError",
    "UnexpectedYieldError",
    "ScopeClosedError",
]
