from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple
import logging

import numpy as np

from .config import EngineConfig
from .errors import ConfigError
from .utils import draw

logger = logging.getLogger(__name__)


SUBGOAL_POOL: Tuple[str, ...] = (
    "Develop nanobots for telomere restoration and cellular rejuvenation",
    "Create mitochondrial repair systems for energy optimization",
    "Engineer molecular-level oxidative stress reduction mechanisms",
    "Build neural interface systems for neurogenesis stimulation",
    "Design immune system nanobots for chronic inflammation elimination",
    "Develop self-replicating nanobot maintenance networks",
    "Create glucose-to-energy conversion systems for autonomous power",
    "Engineer DNA repair mechanisms with real-time error correction",
    "Build organ-nanobot communication protocols for system integration",
    "Design entropy-reversing metabolic processes for cellular regeneration",
)


@dataclass(frozen=True)
class Subgoal:
    id: int
    text: str
    probability: float
    resonance_score: float
    is_active: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "probability": self.probability,
            "resonance_score": self.resonance_score,
            "is_active": self.is_active,
        }


@dataclass
class SubgoalGenerator:
    pool: Sequence[str] = SUBGOAL_POOL
    config: EngineConfig = field(default_factory=EngineConfig)

    def __post_init__(self) -> None:
        if not self.pool:
            raise ConfigError("subgoal pool must not be empty")
        self.pool = tuple(self.pool)

    def generate(self, goal: str, constraints: Sequence[str], rng: np.random.Generator) -> List[Subgoal]:
        """Return one low-probability subgoal per pool entry, in pool order.

        ``goal`` and ``constraints`` do not influence the result yet; the
        pool is fixed and only the starting scores are randomised.
        """
        logger.debug("generating %d subgoals for goal %r (%d constraints)", len(self.pool), goal, len(constraints))
        subgoals: List[Subgoal] = []
        for index, text in enumerate(self.pool):
            probability = draw(rng, self.config.initial_probability_range)
            resonance = draw(rng, self.config.initial_resonance_range)
            subgoals.append(Subgoal(id=index, text=text, probability=probability, resonance_score=resonance))
        return subgoals
