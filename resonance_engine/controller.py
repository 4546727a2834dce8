from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import asyncio
import logging

from .config import EngineConfig
from .engine import Iteration, IterationEngine
from .history import IterationHistory
from .scheduler import AsyncioScheduler, RepeatingTimer
from .scorer import CombinationScorer, ResonanceResult
from .subgoals import Subgoal, SubgoalGenerator
from .utils import RandomSource, make_rng

logger = logging.getLogger(__name__)


class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    CONVERGED = "converged"
    CAPPED = "capped"
    STOPPED = "stopped"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.CONVERGED, RunState.CAPPED, RunState.STOPPED, RunState.FAILED)


@dataclass(frozen=True)
class RunSnapshot:
    """Read-only view of a run, handed to consumers after every change."""

    state: RunState
    goal: str
    constraints: Tuple[str, ...]
    subgoals: Tuple[Subgoal, ...]
    resonance_data: ResonanceResult
    iterations: Tuple[Iteration, ...]
    current_iteration: int
    convergence_threshold: float

    @property
    def is_processing(self) -> bool:
        return self.state is RunState.RUNNING

    @property
    def is_converging(self) -> bool:
        return self.state is RunState.RUNNING

    @property
    def progress_to_target(self) -> float:
        """Latest best probability as a percentage of the convergence threshold."""
        if not self.iterations:
            return 0.0
        return self.iterations[-1].best_probability / self.convergence_threshold * 100.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "goal": self.goal,
            "constraints": list(self.constraints),
            "is_processing": self.is_processing,
            "is_converging": self.is_converging,
            "current_iteration": self.current_iteration,
            "progress_to_target": self.progress_to_target,
            "subgoals": [s.to_dict() for s in self.subgoals],
            "resonance_data": self.resonance_data.to_dict(),
            "iterations": [it.to_dict() for it in self.iterations],
            "summary": IterationHistory(list(self.iterations)).summarize(),
        }


Listener = Callable[[RunSnapshot], None]


class RunController:
    """Owns one run at a time and drives it with a repeating timer.

    IDLE -> RUNNING on ``start``; RUNNING ends in CONVERGED, CAPPED,
    STOPPED, or FAILED when a step raises. A later ``start`` discards the
    previous run entirely.

    ``config`` drives the loop: timing and ``max_iterations``. Completion is
    decided by the engine, so an injected ``engine`` or ``generator`` keeps
    its own config and the snapshot reports the engine's convergence
    threshold.
    """

    def __init__(
        self,
        generator: Optional[SubgoalGenerator] = None,
        engine: Optional[IterationEngine] = None,
        scheduler=None,
        config: Optional[EngineConfig] = None,
        seed: RandomSource = None,
    ) -> None:
        self.config = (config or EngineConfig()).validate()
        self.generator = generator or SubgoalGenerator(config=self.config)
        self.engine = engine or IterationEngine(scorer=CombinationScorer(config=self.config), config=self.config)
        self.scheduler = scheduler or AsyncioScheduler()
        self.rng = make_rng(seed)
        if self.engine.config != self.config or self.generator.config != self.config:
            logger.warning("injected engine or generator config differs from the controller config")

        self._state = RunState.IDLE
        self._timer: Optional[RepeatingTimer] = None
        self._run_id = 0
        self._goal = ""
        self._constraints: Tuple[str, ...] = ()
        self._subgoals: Tuple[Subgoal, ...] = ()
        self._resonance = ResonanceResult()
        self._history = IterationHistory()
        self._counter = 0
        self._current_iteration = 0
        self._listeners: List[Listener] = []

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def history(self) -> IterationHistory:
        return self._history

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> RunSnapshot:
        return RunSnapshot(
            state=self._state,
            goal=self._goal,
            constraints=self._constraints,
            subgoals=self._subgoals,
            resonance_data=self._resonance,
            iterations=self._history.as_tuple(),
            current_iteration=self._current_iteration,
            convergence_threshold=self.engine.config.convergence_threshold,
        )

    def start(self, goal: str, constraints: Sequence[str] = ()) -> None:
        self._cancel_timer()
        self._run_id += 1
        self._state = RunState.IDLE

        self._goal = goal
        self._constraints = tuple(c for c in constraints if c.strip())
        self._history = IterationHistory()
        self._counter = 1
        self._current_iteration = 1
        self._resonance = ResonanceResult()
        self._subgoals = tuple(self.generator.generate(goal, self._constraints, self.rng))

        run_id = self._run_id
        self._timer = self.scheduler.schedule_repeating(
            lambda: self._tick(run_id),
            self.config.first_tick_delay,
            self.config.tick_interval,
        )
        self._state = RunState.RUNNING
        logger.info("run %d started: goal=%r subgoals=%d", run_id, goal, len(self._subgoals))
        self._publish()

    def stop(self) -> None:
        self._cancel_timer()
        if self._state is not RunState.RUNNING:
            return
        self._state = RunState.STOPPED
        logger.info("run %d stopped after %d iterations", self._run_id, len(self._history))
        self._publish()

    def _tick(self, run_id: int) -> None:
        if run_id != self._run_id or self._state is not RunState.RUNNING:
            return
        previous = self._history.latest()
        previous_best = previous.best_probability if previous is not None else 0.0

        try:
            result = self.engine.step(self._goal, self._subgoals, self._counter, previous_best, self.rng)
            self._history.append(result.new_iteration)
        except Exception:
            logger.exception("run %d failed at iteration %d", self._run_id, self._counter)
            self._finish(RunState.FAILED)
            self._publish()
            raise
        self._subgoals = result.updated_subgoals
        self._resonance = result.resonance_result
        self._current_iteration = self._counter

        if result.new_iteration.is_complete:
            self._finish(RunState.CONVERGED)
        else:
            self._counter += 1
            if self._counter > self.config.max_iterations:
                self._finish(RunState.CAPPED)
        self._publish()

    def _finish(self, state: RunState) -> None:
        self._cancel_timer()
        self._state = state
        latest = self._history.latest()
        logger.info(
            "run %d %s after %d iterations (best=%.6g)",
            self._run_id, state.value, len(self._history),
            latest.best_probability if latest is not None else 0.0,
        )

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _publish(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("snapshot listener %r failed", listener)


async def run_until_done(controller: RunController, goal: str, constraints: Sequence[str] = ()) -> RunSnapshot:
    """Start a run on ``controller`` and wait for it to reach a terminal state."""
    done: asyncio.Future = asyncio.get_running_loop().create_future()

    def on_snapshot(snap: RunSnapshot) -> None:
        if snap.state.is_terminal and not done.done():
            done.set_result(snap)

    unsubscribe = controller.subscribe(on_snapshot)
    try:
        controller.start(goal, constraints)
        return await done
    except asyncio.CancelledError:
        controller.stop()
        raise
    finally:
        unsubscribe()
