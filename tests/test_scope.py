"""
Tests for Scope: producer ownership, teardown and cleanup.
"""

import asyncio

import pytest

from asynciterable import GLOBAL_SCOPE, Scope, ScopeClosedError, ScopeConfig
from asynciterable.core.status import NotReady


class Cleanup:
    """Producer factory that counts how often its finally block runs."""

    def __init__(self):
        self.runs = 0

    async def __call__(self, producer):
        try:
            for x in range(1, 6):
                await producer.yield_(x)
        finally:
            self.runs += 1


class TestScopeTeardown:
    """Tests for cleanup of parked producers."""

    @pytest.mark.asyncio
    async def test_finalizer_runs_on_scope_exit(self):
        """Test breaking early then leaving the scope runs cleanup once."""
        produce = Cleanup()

        async with Scope() as scope:
            async for x in scope.iterator(produce):
                if x == 3:
                    break
            await asyncio.sleep(0.01)
            assert produce.runs == 0
            assert scope.active_tasks == 1

        assert produce.runs == 1
        assert scope.active_tasks == 0

    @pytest.mark.asyncio
    async def test_finalizer_runs_when_owner_cancelled(self):
        """Test cancelling the owning task tears down the parked producer."""
        produce = Cleanup()
        parked = asyncio.Event()

        async def owner():
            async with Scope() as scope:
                cursor = scope.iterator(produce)
                assert await cursor.next() == 1
                parked.set()
                await asyncio.Event().wait()

        task = asyncio.create_task(owner())
        await parked.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert produce.runs == 1

    @pytest.mark.asyncio
    async def test_cleanup_awaited_when_owner_cancelled_twice(self):
        """Test a second cancel during scope exit still waits for cleanup."""
        parked = asyncio.Event()
        release = asyncio.Event()
        finished = []

        async def slow_cleanup(producer):
            try:
                await producer.yield_(1)
            finally:
                await release.wait()
                finished.append(True)

        async def owner():
            async with Scope() as scope:
                cursor = scope.iterator(slow_cleanup)
                assert await cursor.next() == 1
                parked.set()
                await asyncio.Event().wait()

        task = asyncio.create_task(owner())
        await parked.wait()
        task.cancel()
        await asyncio.sleep(0.01)
        task.cancel()
        await asyncio.sleep(0.01)

        assert not task.done()
        assert finished == []

        release.set()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert finished == [True]

    @pytest.mark.asyncio
    async def test_finalizer_runs_once_when_drained(self):
        """Test a drained producer is not cleaned up a second time."""
        produce = Cleanup()

        async with Scope() as scope:
            assert await scope.sequence(produce).to_list() == [1, 2, 3, 4, 5]
            assert produce.runs == 1

        assert produce.runs == 1

    @pytest.mark.asyncio
    async def test_unstarted_cursor_needs_no_cleanup(self):
        """Test cursors never asked for a value spawn nothing."""
        produce = Cleanup()

        async with Scope() as scope:
            scope.iterator(produce)
            assert scope.active_tasks == 0

        assert produce.runs == 0

    @pytest.mark.asyncio
    async def test_cancellation_is_not_a_stream_error(self):
        """Test a torn-down cursor raises CancelledError, not a failure."""
        produce = Cleanup()
        scope = Scope()
        cursor = scope.iterator(produce)

        assert await cursor.next() == 1
        await scope.aclose()

        assert produce.runs == 1
        assert isinstance(cursor.status, NotReady)
        with pytest.raises(asyncio.CancelledError):
            await cursor.has_next()
        with pytest.raises(asyncio.CancelledError):
            await cursor.next()

    @pytest.mark.asyncio
    async def test_pending_request_cancelled_on_teardown(self):
        """Test a consumer waiting on a torn-down producer is cancelled."""
        scope = Scope()

        async def stuck(producer):
            await asyncio.Event().wait()
            await producer.yield_(1)

        cursor = scope.iterator(stuck)
        waiter = asyncio.create_task(cursor.next())
        await asyncio.sleep(0.01)

        await scope.aclose()

        with pytest.raises(asyncio.CancelledError):
            await waiter


class TestScopeLifecycle:
    """Tests for scope state and configuration."""

    @pytest.mark.asyncio
    async def test_spawn_after_close(self):
        """Test requesting from a cursor of a closed scope fails."""
        produce = Cleanup()

        async with Scope(ScopeConfig(name="short-lived")) as scope:
            pass

        assert scope.closed
        cursor = scope.iterator(produce)

        with pytest.raises(ScopeClosedError) as exc_info:
            await cursor.next()

        assert exc_info.value.scope_name == "short-lived"
        assert produce.runs == 0

    @pytest.mark.asyncio
    async def test_cleanup_timeout(self):
        """Test scope exit stops waiting after cleanup_timeout."""
        release = asyncio.Event()

        async def slow_cleanup(producer):
            try:
                await producer.yield_(1)
            finally:
                await asyncio.shield(release.wait())

        scope = Scope(ScopeConfig(name="impatient", cleanup_timeout=0.05))
        cursor = scope.iterator(slow_cleanup)
        assert await cursor.next() == 1

        await scope.aclose()
        assert scope.active_tasks == 1

        release.set()
        await asyncio.sleep(0.01)
        assert scope.active_tasks == 0

    def test_default_config(self):
        """Test default configuration values."""
        scope = Scope()

        assert scope.name == "scope"
        assert scope.config.cleanup_timeout is None
        assert not scope.closed
        assert "scope" in repr(scope)

    def test_global_scope(self):
        """Test cursors without a scope land in the global scope."""
        cursor = GLOBAL_SCOPE.iterator(Cleanup())

        assert GLOBAL_SCOPE.name == "global"
        assert cursor.scope is GLOBAL_SCOPE
