from __future__ import annotations

from typing import Callable, List, Optional
import asyncio
import logging

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class RepeatingTimer:
    """Handle for a periodic callback.

    After ``cancel()`` returns the callback is never invoked again, including
    a tick that was already queued.
    """

    def __init__(self, callback: TickCallback, interval: float) -> None:
        self._callback = callback
        self.interval = interval
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._release()

    def _release(self) -> None:
        pass

    def _fire(self) -> bool:
        """Run one tick; return True if the timer should keep going."""
        if self._cancelled:
            return False
        self._callback()
        return not self._cancelled


class _LoopTimer(RepeatingTimer):
    def __init__(self, loop: asyncio.AbstractEventLoop, callback: TickCallback, first_delay: float, interval: float) -> None:
        super().__init__(callback, interval)
        self._loop = loop
        self._next_at = loop.time() + first_delay
        self._handle: Optional[asyncio.TimerHandle] = loop.call_at(self._next_at, self._tick)

    def _tick(self) -> None:
        self._handle = None
        if not self._fire():
            return
        # next tick is queued only after this one returned, so ticks never overlap
        self._next_at += self.interval
        now = self._loop.time()
        while self._next_at <= now:
            self._next_at += self.interval
        self._handle = self._loop.call_at(self._next_at, self._tick)

    def _release(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioScheduler:
    """Fixed-cadence timers on an asyncio event loop.

    Without an explicit loop the running loop at scheduling time is used,
    so ``schedule_repeating`` must then be called from inside a coroutine or
    loop callback.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def schedule_repeating(self, callback: TickCallback, first_delay: float, interval: float) -> RepeatingTimer:
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        return _LoopTimer(loop, callback, first_delay, interval)


class _ManualTimer(RepeatingTimer):
    def __init__(self, callback: TickCallback, due: float, interval: float) -> None:
        super().__init__(callback, interval)
        self.due = due


class ManualScheduler:
    """Virtual clock that fires timers only when advanced explicitly."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: List[_ManualTimer] = []

    @property
    def pending(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled)

    def schedule_repeating(self, callback: TickCallback, first_delay: float, interval: float) -> RepeatingTimer:
        timer = _ManualTimer(callback, self.now + first_delay, interval)
        self._timers.append(timer)
        return timer

    def _next_due(self) -> Optional[_ManualTimer]:
        self._timers = [t for t in self._timers if not t.cancelled]
        if not self._timers:
            return None
        # min() keeps the earliest-scheduled timer on equal due times
        return min(self._timers, key=lambda t: t.due)

    def _run_one(self, timer: _ManualTimer) -> None:
        self.now = max(self.now, timer.due)
        if timer._fire():
            timer.due += timer.interval

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every tick that falls due. Returns the tick count."""
        target = self.now + seconds
        fired = 0
        while True:
            timer = self._next_due()
            if timer is None or timer.due > target:
                break
            self._run_one(timer)
            fired += 1
        self.now = target
        return fired

    def run_until_idle(self, max_ticks: int = 10_000) -> int:
        """Fire ticks in due order until no timer is active or ``max_ticks`` is reached."""
        fired = 0
        while fired < max_ticks:
            timer = self._next_due()
            if timer is None:
                break
            self._run_one(timer)
            fired += 1
        if fired >= max_ticks and self.pending:
            logger.warning("manual scheduler stopped after %d ticks with %d timers active", fired, self.pending)
        return fired
