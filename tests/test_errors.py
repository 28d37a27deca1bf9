"""
Tests for the error hierarchy.
"""

from asynciterable import (
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


class TestSequenceError:
    """Tests for SequenceError formatting and hierarchy."""

    def test_message_only(self):
        """Test str() without context."""
        err = SequenceError("something broke")

        assert str(err) == "something broke"
        assert err.context == {}

    def test_message_with_context(self):
        """Test context is rendered into str()."""
        err = ExhaustedCursorError("Asynchronous iterator is exhausted", cursor="numbers")

        assert str(err) == "Asynchronous iterator is exhausted (cursor='numbers')"
        assert err.context == {"cursor": "numbers"}

    def test_use_after_failure_keeps_cause(self):
        """Test UseAfterFailureError exposes the original error."""
        original = ZeroDivisionError("division by zero")
        err = UseAfterFailureError("failed before", cause=original)

        assert err.cause is original

    def test_hierarchy(self):
        """Test all errors derive from SequenceError."""
        for error_type in (
            ExhaustedCursorError,
            UseAfterFailureError,
            InvalidArgumentError,
            CursorStateError,
            ReentrantAdvanceError,
            UnexpectedYieldError,
            ScopeClosedError,
            ProducerStoppedError,
        ):
            assert issubclass(error_type, SequenceError)

        assert issubclass(ReentrantAdvanceError, CursorStateError)
        assert issubclass(UnexpectedYieldError, CursorStateError)
        assert issubclass(InvalidArgumentError, ValueError)
        assert issubclass(ProducerStoppedError, RuntimeError)
