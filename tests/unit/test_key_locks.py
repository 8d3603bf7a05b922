import asyncio

import pytest

from reservations.services import KeyedLockTable


@pytest.mark.asyncio
async def test_same_key_is_serialised():
    locks = KeyedLockTable()
    events = []

    async def worker(name):
        async with locks.hold("reservations", "slot", "2025-05-20", "19:00"):
            events.append(f"{name}-in")
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            events.append(f"{name}-out")

    await asyncio.gather(worker("a"), worker("b"))

    assert events == ["a-in", "a-out", "b-in", "b-out"]


@pytest.mark.asyncio
async def test_different_keys_do_not_block_each_other():
    locks = KeyedLockTable()
    release = asyncio.Event()
    entered = asyncio.Event()

    async def slow():
        async with locks.hold("slot", "A"):
            await release.wait()

    async def fast():
        async with locks.hold("slot", "B"):
            entered.set()

    slow_task = asyncio.create_task(slow())
    await asyncio.sleep(0)
    assert locks.is_held("slot", "A")

    await asyncio.wait_for(fast(), timeout=1)
    assert entered.is_set()

    release.set()
    await slow_task


@pytest.mark.asyncio
async def test_entries_are_dropped_when_idle():
    locks = KeyedLockTable()

    async with locks.hold("id", "r1"):
        assert len(locks) == 1

    assert len(locks) == 0
    assert not locks.is_held("id", "r1")


@pytest.mark.asyncio
async def test_lock_released_when_body_raises():
    locks = KeyedLockTable()

    with pytest.raises(RuntimeError):
        async with locks.hold("id", "r1"):
            raise RuntimeError("boom")

    async with locks.hold("id", "r1"):
        pass
    assert len(locks) == 0
