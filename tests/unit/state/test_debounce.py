"""Unit tests for Debouncer and WorkspaceRegistry"""

import asyncio

import pytest

from src.app.state import Debouncer, WorkspaceRegistry


@pytest.mark.asyncio
class TestDebouncer:
    async def test_only_last_call_runs(self):
        """
        Given: Three calls within the delay
        When: The delay passes
        Then: Only the last callback runs
        """
        # Arrange
        debouncer = Debouncer(0.01)
        calls = []

        async def record(value):
            calls.append(value)

        # Act
        debouncer.call(lambda: record(1))
        debouncer.call(lambda: record(2))
        task = debouncer.call(lambda: record(3))
        await task

        # Assert
        assert calls == [3]
        assert debouncer.pending is False

    async def test_cancel(self):
        debouncer = Debouncer(0.01)
        calls = []

        async def record():
            calls.append(True)

        task = debouncer.call(record)
        assert debouncer.pending is True
        debouncer.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert calls == []

    async def test_callback_errors_propagate_to_task(self):
        debouncer = Debouncer(0)

        async def fail():
            raise ValueError("bad filter")

        with pytest.raises(ValueError):
            await debouncer.call(fail)


class TestWorkspaceRegistry:
    def test_one_state_per_user(self):
        registry = WorkspaceRegistry(page_size=25)

        first = registry.get("user_a")
        again = registry.get("user_a")
        other = registry.get("user_b")

        assert first is again
        assert first is not other
        assert first.pagination.page_size == 25
        assert len(registry) == 2

    def test_discard(self):
        registry = WorkspaceRegistry()
        registry.get("user_a")

        registry.discard("user_a")
        registry.discard("never_seen")

        assert "user_a" not in registry
        assert len(registry) == 0
