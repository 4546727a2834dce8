"""Goal decomposition and resonance iteration engine.

Modules:
- subgoals: subgoal records and the fixed candidate pool generator
- scorer: 3-way combination enumeration, resonance scoring and ranking
- engine: single iteration step, probability growth and convergence rate
- history: append-only iteration log
- scheduler: cancellable repeating timers (asyncio and virtual clock)
- controller: run state machine and read-only snapshots
- config: numeric constants and TOML loading
- errors: exception hierarchy
- utils: seedable random source helpers
"""

from .config import EngineConfig, load_config
from .controller import RunController, RunSnapshot, RunState, run_until_done
from .engine import Iteration, IterationEngine, StepResult
from .errors import ConfigError, HistoryError, ResonanceError
from .history import IterationHistory
from .scheduler import AsyncioScheduler, ManualScheduler, RepeatingTimer
from .scorer import Combination, CombinationScorer, ResonanceResult
from .subgoals import SUBGOAL_POOL, Subgoal, SubgoalGenerator

__all__ = [
    "AsyncioScheduler",
    "Combination",
    "CombinationScorer",
    "ConfigError",
    "EngineConfig",
    "HistoryError",
    "Iteration",
    "IterationEngine",
    "IterationHistory",
    "ManualScheduler",
    "RepeatingTimer",
    "ResonanceError",
    "ResonanceResult",
    "RunController",
    "RunSnapshot",
    "RunState",
    "StepResult",
    "SUBGOAL_POOL",
    "Subgoal",
    "SubgoalGenerator",
    "load_config",
    "run_until_done",
]
