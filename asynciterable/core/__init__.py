"""
asynciterable core - the handoff engine and the sequence/cursor interfaces.

- AsyncCursor: runs a producer routine in its own task and hands its values
  to the consumer one at a time through has_next()/next().
- AsyncSequence: restartable factory of AsyncCursors.
- Scope: owner of producer tasks; tears them down on exit.
- Status: NotReady / Ready / Failed / Done, the per-cursor state.
"""

from asynciterable.core.iterable import AsyncIterable, Cursor, SupportsCursor
from asynciterable.core.iterator import AsyncCursor, Producer, ProducerScope, async_iterator
from asynciterable.core.scope import GLOBAL_SCOPE, Scope, ScopeConfig
from asynciterable.core.sequence import AsyncSequence, async_sequence
from asynciterable.core.status import DONE, NOT_READY, Done, Failed, NotReady, Ready, Status

__all__ = [
    "AsyncIterable",
    "Cursor",
    "SupportsCursor",
    "AsyncCursor",
    "Producer",
    "ProducerScope",
    "async_iterator",
    "AsyncSequence",
    "async_sequence",
    "Scope",
    "ScopeConfig",
    "GLOBAL_SCOPE",
    "Status",
    "NotReady",
    "Ready",
    "Failed",
    "Done",
    "NOT_READY",
    "DONE",
]
