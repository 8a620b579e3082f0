"""
Test per-cell debounce timers
"""
import asyncio
import sys
from pathlib import Path

# Add server directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.debounce import DebounceScheduler

DELAY = 0.02


def test_fires_after_delay():
    async def scenario():
        scheduler = DebounceScheduler(delay=DELAY)
        fired = []
        scheduler.schedule("0-0", "가수", fired.append)

        assert scheduler.is_pending("0-0")
        assert fired == [], "Nothing fires before the delay"
        await scheduler.drain()
        assert fired == ["가수"]
        assert len(scheduler) == 0, "Finished timers unregister themselves"

    asyncio.run(scenario())


def test_last_edit_wins():
    async def scenario():
        scheduler = DebounceScheduler(delay=DELAY)
        fired = []
        for word in ["가", "가스", "가수"]:
            scheduler.schedule("1-1", word, fired.append)
            await asyncio.sleep(DELAY / 4)

        assert scheduler.pending_keys == ["1-1"], "One timer per cell"
        await scheduler.drain()
        assert fired == ["가수"]

    asyncio.run(scenario())


def test_cells_are_independent():
    async def scenario():
        scheduler = DebounceScheduler(delay=DELAY)
        fired = []
        scheduler.schedule("0-0", "가수", fired.append)
        scheduler.schedule("0-1", "사과", fired.append)
        await scheduler.drain()
        assert sorted(fired) == ["가수", "사과"]

    asyncio.run(scenario())


def test_async_callback_is_awaited():
    async def scenario():
        scheduler = DebounceScheduler(delay=DELAY)
        fired = []

        async def on_fire(word):
            await asyncio.sleep(0)
            fired.append(word)

        scheduler.schedule("2-2", "공사", on_fire)
        await scheduler.drain()
        assert fired == ["공사"]

    asyncio.run(scenario())


def test_cancel_all_leaves_nothing_behind():
    async def scenario():
        scheduler = DebounceScheduler(delay=DELAY)
        fired = []
        for i in range(5):
            scheduler.schedule(f"{i}-{i}", f"word{i}", fired.append)

        scheduler.cancel_all()
        assert len(scheduler) == 0
        await asyncio.sleep(DELAY * 3)
        assert fired == [], "Cancelled timers never fire"
        scheduler.cancel_all()

    asyncio.run(scenario())


def test_cancel_drops_in_flight_callback():
    async def scenario():
        scheduler = DebounceScheduler(delay=DELAY)
        finished = []

        async def slow(word):
            await asyncio.sleep(DELAY * 5)
            finished.append(word)

        scheduler.schedule("3-3", "가수", slow)
        await asyncio.sleep(DELAY * 2)
        assert scheduler.is_pending("3-3"), "Still registered while the callback runs"

        assert scheduler.cancel("3-3")
        await asyncio.sleep(DELAY * 6)
        assert finished == []
        assert not scheduler.cancel("3-3")

    asyncio.run(scenario())


def test_failing_callback_does_not_leak():
    async def scenario():
        scheduler = DebounceScheduler(delay=DELAY)

        def boom(word):
            raise RuntimeError("boom")

        scheduler.schedule("4-4", "가수", boom)
        await scheduler.drain()
        assert len(scheduler) == 0

    asyncio.run(scenario())
