"""
Error hierarchy for asynciterable.

Design:
- All errors inherit from SequenceError
- Errors are specific enough to handle programmatically
- Include context for debugging
"""

from __future__ import annotations

from typing import Any


class SequenceError(Exception):
    """Base class for all asynciterable errors."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


class ExhaustedCursorError(SequenceError):
    """next() was called on a cursor whose producer already completed."""

    pass


class UseAfterFailureError(SequenceError):
    """
    A cursor was used again after its producer failure was reported.

    The original producer error is available as ``cause`` and is also
    chained as ``__cause__`` when raised with ``raise ... from``.
    """

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        **context: Any,
    ):
        super().__init__(message, **context)
        self.cause = cause


class ProducerStoppedError(SequenceError, RuntimeError):
    """
    A producer raised StopAsyncIteration.

    Stored in place of the raw StopAsyncIteration (chained as its
    ``__cause__``) so ``async for`` cannot mistake it for end of stream.
    """

    pass


class InvalidArgumentError(SequenceError, ValueError):
    """An argument was outside its accepted range."""

    def __init__(
        self,
        message: str,
        *,
        argument: str | None = None,
        value: Any = None,
        **context: Any,
    ):
        super().__init__(message, argument=argument, value=value, **context)
        self.argument = argument
        self.value = value


class CursorStateError(SequenceError):
    """The handoff protocol of a cursor was violated."""

    pass


class ReentrantAdvanceError(CursorStateError):
    """A second request was made on a cursor while one is still pending."""

    pass


class UnexpectedYieldError(CursorStateError):
    """A producer yielded while no consumer request was outstanding."""

    pass


class ScopeClosedError(SequenceError):
    """A producer task was spawned in a scope that has already exited."""

    def __init__(
        self,
        message: str,
        *,
        scope_name: str | None = None,
        **context: Any,
    ):
        super().__init__(message, scope_name=scope_name, **context)
        self.scope_name = scope_name
