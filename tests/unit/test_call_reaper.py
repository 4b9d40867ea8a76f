from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from signal_relay.domain.value_objects.enums import CallStatus
from signal_relay.workers.call_reaper import CallReaper


def test_sweep_removes_only_expired_calls(calls, clock):
    calls.create("O", "doc1", "pat1", "video", "stale")
    clock.advance(minutes=50)
    calls.create("O", "doc2", "pat2", "video", "fresh")
    clock.advance(minutes=15)

    reaper = CallReaper(calls, max_age=timedelta(hours=1), clock=clock)
    removed = reaper.sweep()

    assert removed == ["stale"]
    assert calls.get("fresh").status == CallStatus.PENDING


def test_sweep_ignores_status(calls, clock):
    calls.create("O", "doc1", "pat1", "video", "c1")
    calls.apply_answer("c1", "A")
    clock.advance(hours=2)

    CallReaper(calls, clock=clock).sweep()

    assert len(calls) == 0


@pytest.mark.asyncio
async def test_background_loop_sweeps_and_stops(calls, clock):
    calls.create("O", "doc1", "pat1", "video", "c1")
    clock.advance(hours=2)
    reaper = CallReaper(calls, interval_seconds=0.01, clock=clock)

    await reaper.start()
    assert reaper.running
    await asyncio.sleep(0.05)
    await reaper.stop()

    assert not reaper.running
    assert calls.get("c1") is None


@pytest.mark.asyncio
async def test_loop_survives_sweep_errors(clock):
    class FlakyStore:
        def __init__(self) -> None:
            self.attempts = 0

        def sweep_expired(self, max_age, now):
            self.attempts += 1
            if self.attempts == 1:
                raise RuntimeError("boom")
            return []

    store = FlakyStore()
    reaper = CallReaper(store, interval_seconds=0.01, clock=clock)

    await reaper.start()
    await asyncio.sleep(0.08)
    await reaper.stop()

    assert store.attempts >= 2
