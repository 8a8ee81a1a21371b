"""
Tests for chatmute/services/mute_scheduler.py

Covers single sweeps, the background loop, and error resilience.
"""

import asyncio
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from chatmute.core.constants import MUTE_DATA_KEY
from chatmute.services.mute_scheduler import MuteScheduler
from chatmute.services.persistence import MutePersistence, decode_mutes


@pytest.fixture
def scheduler(store, slot):
    return MuteScheduler(store, MutePersistence(store, slot), interval=0.01)


class TestSweepOnce:
    """Tests for a single sweep."""

    def test_removes_expired_and_saves(self, scheduler, store, slot, clock):
        store.put("a", clock() + timedelta(minutes=1))
        store.put("b", clock() + timedelta(hours=1))
        clock.advance(minutes=2)

        assert scheduler.sweep_once() == 1
        assert slot.writes == 1
        assert [key for key, _ in decode_mutes(slot.data[MUTE_DATA_KEY])] == ["b"]

    def test_nothing_expired_no_save(self, scheduler, store, slot, clock):
        store.put("a", clock() + timedelta(minutes=1))

        assert scheduler.sweep_once() == 0
        assert slot.writes == 0

    def test_save_failure_still_removes(self, scheduler, store, slot, clock):
        store.put("a", clock() - timedelta(minutes=1))
        slot.fail_set = True

        assert scheduler.sweep_once() == 1
        assert len(store) == 0


class TestSchedulerLoop:
    """Tests for the background task."""

    @pytest.mark.asyncio
    async def test_start_sweeps_and_stop_cancels(self, scheduler, store, clock):
        store.put("a", clock() - timedelta(seconds=1))

        await scheduler.start()
        await asyncio.sleep(0.05)

        assert scheduler.running is True
        assert len(store) == 0

        await scheduler.stop()
        assert scheduler.running is False
        assert scheduler.task is None

    @pytest.mark.asyncio
    async def test_loop_survives_errors(self):
        calls = []

        def flaky_sweep():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")
            return 0

        store = MagicMock()
        store.sweep_expired.side_effect = flaky_sweep
        scheduler = MuteScheduler(store, MagicMock(), interval=0.01)

        await scheduler.start()
        await asyncio.sleep(0.05)
        await scheduler.stop()

        assert len(calls) >= 2

    @pytest.mark.asyncio
    async def test_restart_replaces_task(self, scheduler):
        await scheduler.start()
        first = scheduler.task
        await scheduler.start()

        assert scheduler.task is not first
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self, scheduler):
        await scheduler.stop()
        assert scheduler.task is None
