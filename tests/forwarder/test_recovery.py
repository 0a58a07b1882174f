"""Tests for the periodic inventory recovery scan."""
import asyncio

import pytest

from src.forwarder.dispatcher import OfferDispatcher
from src.forwarder.flag import RecoveryFlag
from src.forwarder.recovery import RecoveryLoop
from src.steam.exceptions import InventoryError, SteamError, TradeError, TransientSteamError


class RecordingDispatcher:
    """Captures dispatched items and the flag value seen at dispatch time."""

    def __init__(self, flag: RecoveryFlag) -> None:
        self.flag = flag
        self.calls: list[tuple[list, bool]] = []

    def dispatch(self, items):
        self.calls.append((list(items), self.flag.is_set))
        return []


@pytest.fixture
def recording(flag) -> RecordingDispatcher:
    return RecordingDispatcher(flag)


@pytest.fixture
def loop(identity, manager, recording, flag, timings, sleep) -> RecoveryLoop:
    return RecoveryLoop(identity, manager, recording, flag, timings=timings, sleep=sleep)


class TestRecoveryFlag:
    def test_starts_set(self) -> None:
        assert RecoveryFlag().is_set
        assert bool(RecoveryFlag())

    def test_set_and_clear(self) -> None:
        flag = RecoveryFlag(initial=False)
        flag.set("send failed")
        assert flag.is_set
        flag.clear()
        assert not flag


class TestTick:
    @pytest.mark.asyncio
    async def test_clear_flag_skips_inventory(self, loop, manager, recording, flag) -> None:
        flag.clear()
        assert await loop.tick() == 0
        assert manager.inventory_calls == []
        assert recording.calls == []

    @pytest.mark.asyncio
    async def test_reads_tradable_inventory_for_configured_context(self, loop, manager, items) -> None:
        manager.inventory = items(3)
        await loop.tick()
        assert manager.inventory_calls == [(730, 2, True)]

    @pytest.mark.asyncio
    async def test_clears_flag_before_dispatch(self, loop, manager, recording, flag, items) -> None:
        manager.inventory = items(12)
        assert await loop.tick() == 12
        assert recording.calls == [(items(12), False)]
        assert not flag.is_set

    @pytest.mark.asyncio
    async def test_empty_inventory_keeps_flag(self, loop, manager, recording, flag) -> None:
        manager.inventory = []
        assert await loop.tick() == 0
        assert flag.is_set
        assert recording.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        TransientSteamError("Failure reading inventory: 503"),
        SteamError("Failure"),
        InventoryError("This profile is private."),
    ])
    async def test_inventory_error_keeps_flag(self, loop, manager, recording, flag, error) -> None:
        manager.inventory = error
        assert await loop.tick() == 0
        assert flag.is_set
        assert recording.calls == []


class TestRecoveryWithDispatcher:
    @pytest.mark.asyncio
    async def test_failed_send_sets_flag_again(self, identity, manager, flag, timings, sleep, items) -> None:
        dispatcher = OfferDispatcher(identity, manager, flag)
        loop = RecoveryLoop(identity, manager, dispatcher, flag, timings=timings, sleep=sleep)
        manager.inventory = items(60)
        manager.send_results = {2: [TradeError("Trade offer service unavailable")]}

        assert await loop.tick() == 60
        assert not flag.is_set
        await dispatcher.tasks.join()

        assert flag.is_set
        assert [len(o.added) for o in manager.created] == [50, 10]

    @pytest.mark.asyncio
    async def test_successful_sends_leave_flag_clear(self, identity, manager, flag, timings, sleep, items) -> None:
        dispatcher = OfferDispatcher(identity, manager, flag)
        loop = RecoveryLoop(identity, manager, dispatcher, flag, timings=timings, sleep=sleep)
        manager.inventory = items(5)

        await loop.tick()
        await dispatcher.tasks.join()
        assert not flag.is_set
        assert await loop.tick() == 0
        assert len(manager.inventory_calls) == 1


class TestRun:
    @pytest.mark.asyncio
    async def test_run_sleeps_interval_between_ticks(self, loop, manager, sleep, items) -> None:
        manager.inventory = items(2)
        task = loop.start()
        while len(sleep.calls) < 3:
            await asyncio.sleep(0)
        loop.stop()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert sleep.calls[:3] == [60.0, 60.0, 60.0]
        assert len(manager.inventory_calls) == 1
        assert not loop.running

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, loop) -> None:
        first = loop.start()
        assert loop.start() is first
        loop.stop()
        with pytest.raises(asyncio.CancelledError):
            await first
