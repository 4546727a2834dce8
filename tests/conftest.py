from __future__ import annotations

from typing import List, Sequence

import numpy as np
import pytest

from resonance_engine.subgoals import Subgoal


def make_subgoals(probabilities: Sequence[float], resonances: Sequence[float] = None) -> List[Subgoal]:
    if resonances is None:
        resonances = [1.0] * len(probabilities)
    return [
        Subgoal(id=i, text=f"subgoal {i}", probability=p, resonance_score=r)
        for i, (p, r) in enumerate(zip(probabilities, resonances))
    ]


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
