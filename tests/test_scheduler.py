from __future__ import annotations

import asyncio

from resonance_engine.scheduler import AsyncioScheduler, ManualScheduler


def test_manual_scheduler_fires_on_cadence():
    scheduler = ManualScheduler()
    times = []
    scheduler.schedule_repeating(lambda: times.append(scheduler.now), 0.5, 2.0)

    assert scheduler.advance(0.25) == 0
    assert scheduler.advance(1.0) == 1
    assert scheduler.advance(1.0) == 0
    assert scheduler.advance(1.0) == 1
    assert times == [0.5, 2.5]


def test_manual_cancel_drops_pending_tick():
    scheduler = ManualScheduler()
    calls = []
    timer = scheduler.schedule_repeating(lambda: calls.append(1), 0.0, 1.0)
    timer.cancel()
    timer.cancel()

    assert timer.cancelled
    assert scheduler.advance(10.0) == 0
    assert scheduler.pending == 0
    assert calls == []


def test_manual_cancel_from_inside_callback():
    scheduler = ManualScheduler()
    calls = []

    def tick():
        calls.append(1)
        if len(calls) == 3:
            timer.cancel()

    timer = scheduler.schedule_repeating(tick, 0.0, 1.0)
    assert scheduler.run_until_idle() == 3
    assert len(calls) == 3


def test_manual_run_until_idle_respects_limit():
    scheduler = ManualScheduler()
    calls = []
    scheduler.schedule_repeating(lambda: calls.append(1), 0.0, 1.0)

    assert scheduler.run_until_idle(max_ticks=7) == 7
    assert scheduler.pending == 1


def test_asyncio_scheduler_repeats_until_cancelled():
    async def scenario():
        calls = []
        timer = AsyncioScheduler().schedule_repeating(lambda: calls.append(1), 0.0, 0.01)
        await asyncio.sleep(0.1)
        timer.cancel()
        seen = len(calls)
        await asyncio.sleep(0.05)
        return seen, len(calls)

    seen, after = asyncio.run(scenario())
    assert seen >= 2
    assert after == seen


def test_asyncio_cancel_inside_callback_stops_timer():
    async def scenario():
        calls = []

        def tick():
            calls.append(1)
            timer.cancel()

        timer = AsyncioScheduler().schedule_repeating(tick, 0.0, 0.01)
        await asyncio.sleep(0.08)
        return calls

    assert asyncio.run(scenario()) == [1]
