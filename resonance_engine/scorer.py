from __future__ import annotations

from dataclasses import dataclass, field
from itertools import combinations
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

import numpy as np

from .config import EngineConfig
from .subgoals import Subgoal
from .utils import draw

logger = logging.getLogger(__name__)

COMBINATION_SIZE = 3


@dataclass(frozen=True)
class Combination:
    id: str
    subgoal_indices: Tuple[int, int, int]
    probability: float
    resonance_amplitude: float
    frequency: float

    @staticmethod
    def key(indices: Sequence[int]) -> str:
        return "-".join(str(i) for i in indices)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "subgoal_indices": list(self.subgoal_indices),
            "probability": self.probability,
            "resonance_amplitude": self.resonance_amplitude,
            "frequency": self.frequency,
        }


@dataclass(frozen=True)
class ResonanceResult:
    combinations: Tuple[Combination, ...] = ()
    best_combination: Optional[Combination] = None

    @property
    def best_probability(self) -> float:
        return self.best_combination.probability if self.best_combination is not None else 0.0

    @property
    def best_resonance(self) -> float:
        return self.best_combination.resonance_amplitude if self.best_combination is not None else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "combinations": [c.to_dict() for c in self.combinations],
            "best_combination": self.best_combination.to_dict() if self.best_combination is not None else None,
        }


@dataclass
class CombinationScorer:
    config: EngineConfig = field(default_factory=EngineConfig)

    def score(self, subgoals: Sequence[Subgoal], rng: np.random.Generator) -> ResonanceResult:
        """Rank every increasing index triple by boosted joint probability.

        Only ``frequency`` consumes the random source; probability, amplitude
        and order are fixed by the subgoal values.
        """
        triples = list(combinations(range(len(subgoals)), COMBINATION_SIZE))
        if not triples:
            logger.debug("fewer than %d subgoals, nothing to score", COMBINATION_SIZE)
            return ResonanceResult()

        idx = np.array(triples, dtype=int)
        probs = np.array([s.probability for s in subgoals], dtype=float)
        scores = np.array([s.resonance_score for s in subgoals], dtype=float)

        joint = probs[idx[:, 0]] * probs[idx[:, 1]] * probs[idx[:, 2]]
        amplitude = (scores[idx[:, 0]] + scores[idx[:, 1]] + scores[idx[:, 2]]) / COMBINATION_SIZE
        boosted = joint * (1.0 + amplitude * self.config.resonance_boost)
        frequency = draw(rng, self.config.frequency_range, size=len(triples))

        # stable: equal probabilities keep enumeration order
        order = np.argsort(-boosted, kind="stable")[: self.config.top_k]
        ranked: List[Combination] = []
        for pos in order:
            indices = tuple(int(i) for i in idx[pos])
            ranked.append(Combination(
                id=Combination.key(indices),
                subgoal_indices=indices,
                probability=float(boosted[pos]),
                resonance_amplitude=float(amplitude[pos]),
                frequency=float(frequency[pos]),
            ))
        return ResonanceResult(combinations=tuple(ranked), best_combination=ranked[0])
