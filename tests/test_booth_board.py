"""Tests for booths/board.py"""

import asyncio
from datetime import datetime, timedelta

import pytest

from concert_buddy.booths.board import BoardRegistry, BoothStatusBoard
from concert_buddy.store import StoreError

from fakes import FakeStore

NOW = datetime(2024, 6, 1, 20, 0, 0)


def seeded_store():
    store = FakeStore()
    store.rows("merch_booths").extend([
        {"id": "long", "venue_id": "v1", "name": "Main Stand", "description": "Shirts"},
        {"id": "empty", "venue_id": "v1", "name": "Side Table", "description": ""},
        {"id": "other", "venue_id": "v2", "name": "Elsewhere", "description": ""},
    ])
    for i, length in enumerate([3, 3, 3, 0, 0, 0]):
        store.rows("line_reports").append({
            "id": f"r{i}", "booth_id": "long", "user_id": "u1", "line_length": length,
            "wait_time_minutes": 20 if i == 0 else None,
            "reported_at": NOW - timedelta(minutes=i),
        })
    return store


class TestRefresh:
    @pytest.mark.asyncio
    async def test_statuses_sorted_shortest_first(self):
        board = BoothStatusBoard(seeded_store(), "v1")
        statuses = await board.refresh()
        assert [s.booth.id for s in statuses] == ["empty", "long"]
        long_status = statuses[1]
        assert long_status.avg_line_length == 2   # 1.5 rounds up
        assert long_status.avg_wait_time == 20
        assert long_status.trend == "up"
        assert long_status.report_count == 6

    @pytest.mark.asyncio
    async def test_on_update_receives_new_list(self):
        updates = []
        board = BoothStatusBoard(seeded_store(), "v1", on_update=updates.append)
        await board.refresh()
        assert len(updates) == 1
        assert updates[0] is board.statuses

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self):
        store = seeded_store()
        store.fail_on.add("list")
        with pytest.raises(StoreError):
            await BoothStatusBoard(store, "v1").refresh()


class TestSubmitReport:
    @pytest.mark.asyncio
    async def test_appends_and_refreshes(self):
        store = seeded_store()
        board = BoothStatusBoard(store, "v1")
        report = await board.submit_report("empty", "u9", 2, wait_time_minutes=None)

        assert report["id"].startswith("report_")
        assert report["wait_time_minutes"] is None
        assert len(store.rows("line_reports")) == 7
        empty = next(s for s in board.statuses if s.booth.id == "empty")
        assert empty.report_count == 1
        assert empty.avg_line_length == 2

    @pytest.mark.asyncio
    async def test_requires_booth(self):
        with pytest.raises(ValueError):
            await BoothStatusBoard(FakeStore(), "v1").submit_report("", "u1", 1)

    @pytest.mark.asyncio
    async def test_failed_create_skips_refresh(self):
        store = seeded_store()
        store.fail_on.add("create")
        board = BoothStatusBoard(store, "v1")
        with pytest.raises(StoreError):
            await board.submit_report("empty", "u1", 1)
        assert "list" not in store.calls


class TestPolling:
    @pytest.mark.asyncio
    async def test_start_refreshes_then_polls(self):
        updates = []
        board = BoothStatusBoard(seeded_store(), "v1", on_update=updates.append, interval=0.01)
        await board.start()
        assert board.running
        assert len(updates) == 1
        await asyncio.sleep(0.05)
        await board.stop()
        assert len(updates) >= 2
        assert not board.running

    @pytest.mark.asyncio
    async def test_stop_is_idempotent(self):
        board = BoothStatusBoard(seeded_store(), "v1", interval=10)
        await board.start()
        await board.stop()
        await board.stop()
        assert not board.running

    @pytest.mark.asyncio
    async def test_poll_survives_store_errors(self):
        store = seeded_store()
        board = BoothStatusBoard(store, "v1", interval=0.01)
        await board.start()
        store.fail_on.add("list")
        await asyncio.sleep(0.05)
        assert board.running
        await board.stop()


class TestBoardRegistry:
    @pytest.mark.asyncio
    async def test_reference_counted(self):
        registry = BoardRegistry(seeded_store())
        first = await registry.acquire("v1")
        second = await registry.acquire("v1")
        assert first is second
        assert first.running

        await registry.release("v1")
        assert first.running
        await registry.release("v1")
        assert not first.running
        assert registry.get("v1") is None

    @pytest.mark.asyncio
    async def test_update_factory_per_venue(self):
        seen = []
        registry = BoardRegistry(seeded_store(), on_update_factory=lambda venue_id: (
            lambda statuses: seen.append((venue_id, len(statuses)))
        ))
        await registry.acquire("v2")
        assert seen == [("v2", 1)]
        await registry.shutdown()
        assert registry.boards == {}


class SlowStore(FakeStore):
    """Every list call yields to the loop first."""

    async def list(self, collection, where=None, order_by=None, limit=None):
        await asyncio.sleep(0.01)
        return await super().list(collection, where=where, order_by=order_by, limit=limit)


class BrokenStore(FakeStore):
    async def list(self, collection, where=None, order_by=None, limit=None):
        raise RuntimeError("driver exploded")


def poll_tasks():
    return [
        t for t in asyncio.all_tasks()
        if not t.done() and t.get_coro().__qualname__ == "BoothStatusBoard._poll"
    ]


class TestConcurrentWatchers:
    @pytest.mark.asyncio
    async def test_simultaneous_acquires_share_one_poll_task(self):
        store = SlowStore()
        store.collections = seeded_store().collections
        registry = BoardRegistry(store)

        first, second = await asyncio.gather(registry.acquire("v1"), registry.acquire("v1"))
        assert first is second
        assert len(poll_tasks()) == 1

        await registry.release("v1")
        await registry.release("v1")
        assert poll_tasks() == []
        assert registry.get("v1") is None

    @pytest.mark.asyncio
    async def test_concurrent_start_and_stop(self):
        board = BoothStatusBoard(SlowStore(), "v1", interval=10)
        await asyncio.gather(board.start(), board.stop())
        await board.stop()
        assert not board.running
        assert poll_tasks() == []

    @pytest.mark.asyncio
    async def test_failed_start_does_not_keep_watcher(self):
        registry = BoardRegistry(BrokenStore())
        with pytest.raises(RuntimeError):
            await registry.acquire("v1")
        assert registry.get("v1") is None
        assert registry.watchers == {}
