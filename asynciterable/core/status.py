"""Per-cursor status of the producer/consumer handoff."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class NotReady:
    """No value has been requested since the last one was consumed."""


@dataclass(frozen=True)
class Ready(Generic[T]):
    """A value has been produced and not yet consumed."""

    value: T


@dataclass
class Failed:
    """
    The producer raised; sticky.

    ``reported`` flips to True the first time the error is raised to a
    consumer, so later accesses can be told apart from the first one.
    """

    error: BaseException
    reported: bool = False


@dataclass(frozen=True)
class Done:
    """The producer returned normally; sticky."""


NOT_READY = NotReady()
DONE = Done()

Status = Union[NotReady, Ready[Any], Failed, Done]
