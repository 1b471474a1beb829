"""Unit tests for the debounced auto-saver."""

import asyncio

import pytest

from jobtracker.services.autosave import DebouncedSaver


@pytest.mark.unit
def test_repeated_schedules_collapse_into_one_save():
    calls = []

    async def scenario():
        saver = DebouncedSaver(delay=0.05)
        for i in range(5):
            saver.schedule("user-1", lambda i=i: calls.append(i))
            await asyncio.sleep(0.01)
        assert saver.is_pending("user-1")
        await asyncio.sleep(0.15)
        return saver

    saver = asyncio.run(scenario())

    assert calls == [4]
    assert saver.status("user-1")["pending"] is False
    assert saver.status("user-1")["lastSavedAt"]
    assert saver.status("user-1")["error"] is None


@pytest.mark.unit
def test_flush_saves_immediately():
    calls = []

    async def scenario():
        saver = DebouncedSaver(delay=10)
        saver.schedule("user-1", lambda: calls.append("saved"))
        await saver.flush()
        assert not saver.is_pending("user-1")

    asyncio.run(scenario())
    assert calls == ["saved"]


@pytest.mark.unit
def test_async_callbacks_are_awaited():
    calls = []

    async def save():
        await asyncio.sleep(0)
        calls.append("async")

    async def scenario():
        saver = DebouncedSaver(delay=0.01)
        saver.schedule("user-1", save)
        await asyncio.sleep(0.05)

    asyncio.run(scenario())
    assert calls == ["async"]


@pytest.mark.unit
def test_failed_save_is_recorded():
    def boom():
        raise OSError("disk full")

    async def scenario():
        saver = DebouncedSaver(delay=0.01)
        saver.schedule("user-1", boom)
        await asyncio.sleep(0.05)
        return saver

    saver = asyncio.run(scenario())

    assert saver.last_error["user-1"] == "disk full"
    assert saver.status("user-1")["error"] == "disk full"

    saver.record_success("user-1")
    assert saver.status("user-1")["error"] is None


@pytest.mark.unit
def test_cancel_drops_pending_save():
    calls = []

    async def scenario():
        saver = DebouncedSaver(delay=0.02)
        saver.schedule("user-1", lambda: calls.append("saved"))
        saver.cancel("user-1")
        await asyncio.sleep(0.05)
        await saver.flush()

    asyncio.run(scenario())
    assert calls == []


@pytest.mark.unit
def test_keys_are_independent():
    calls = []

    async def scenario():
        saver = DebouncedSaver(delay=0.02)
        saver.schedule("user-1", lambda: calls.append("user-1"))
        saver.schedule("user-2", lambda: calls.append("user-2"))
        await asyncio.sleep(0.08)

    asyncio.run(scenario())
    assert sorted(calls) == ["user-1", "user-2"]
