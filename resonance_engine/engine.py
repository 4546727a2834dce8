from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Sequence, Tuple
import logging

import numpy as np

from .config import EngineConfig
from .scorer import CombinationScorer, ResonanceResult
from .subgoals import Subgoal
from .utils import draw

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Iteration:
    id: int
    goal: str
    best_probability: float
    resonance_score: float
    convergence_rate: float
    is_complete: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "goal": self.goal,
            "best_probability": self.best_probability,
            "resonance_score": self.resonance_score,
            "convergence_rate": self.convergence_rate,
            "is_complete": self.is_complete,
        }


@dataclass(frozen=True)
class StepResult:
    updated_subgoals: Tuple[Subgoal, ...]
    resonance_result: ResonanceResult
    new_iteration: Iteration


@dataclass
class IterationEngine:
    scorer: CombinationScorer = field(default_factory=CombinationScorer)
    config: EngineConfig = field(default_factory=EngineConfig)

    def step(
        self,
        goal: str,
        subgoals: Sequence[Subgoal],
        iteration_number: int,
        previous_best_probability: float,
        rng: np.random.Generator,
    ) -> StepResult:
        result = self.scorer.score(subgoals, rng)
        selected = set(result.best_combination.subgoal_indices) if result.best_combination is not None else set()

        updated: List[Subgoal] = []
        for index, subgoal in enumerate(subgoals):
            if index in selected:
                factor = draw(rng, self.config.selected_growth_range)
                probability = min(subgoal.probability * factor, self.config.probability_clamp)
                updated.append(replace(subgoal, probability=probability, is_active=True))
            else:
                # not clamped: only members of the best combination are capped
                factor = draw(rng, self.config.unselected_growth_range)
                updated.append(replace(subgoal, probability=subgoal.probability * factor, is_active=False))

        best_probability = result.best_probability
        convergence_rate = best_probability - previous_best_probability if iteration_number > 1 else 0.0
        iteration = Iteration(
            id=iteration_number,
            goal=goal,
            best_probability=best_probability,
            resonance_score=result.best_resonance,
            convergence_rate=convergence_rate,
            is_complete=best_probability >= self.config.convergence_threshold,
        )
        logger.debug(
            "iteration %d: best=%.6g rate=%+.6g selected=%s",
            iteration_number, best_probability, convergence_rate, sorted(selected),
        )
        return StepResult(updated_subgoals=tuple(updated), resonance_result=result, new_iteration=iteration)
