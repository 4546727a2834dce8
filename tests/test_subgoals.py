from __future__ import annotations

import numpy as np
import pytest

from resonance_engine.config import EngineConfig
from resonance_engine.errors import ConfigError
from resonance_engine.subgoals import SUBGOAL_POOL, SubgoalGenerator


def test_generates_one_subgoal_per_pool_entry(rng):
    subgoals = SubgoalGenerator().generate("goal", ["c1"], rng)

    assert len(subgoals) == len(SUBGOAL_POOL) == 10
    assert [s.id for s in subgoals] == list(range(10))
    assert [s.text for s in subgoals] == list(SUBGOAL_POOL)


def test_initial_scores_within_ranges(rng):
    for _ in range(20):
        for s in SubgoalGenerator().generate("goal", [], rng):
            assert 0.001 <= s.probability < 0.101
            assert 0.1 <= s.resonance_score < 2.1
            assert s.is_active is False


def test_goal_and_constraints_do_not_change_output():
    gen = SubgoalGenerator()
    a = gen.generate("cure aging", ["cheap"], np.random.default_rng(7))
    b = gen.generate("something else", [], np.random.default_rng(7))
    assert a == b


def test_custom_pool_and_config(rng):
    cfg = EngineConfig(initial_probability_range=(0.2, 0.3))
    subgoals = SubgoalGenerator(pool=["x", "y"], config=cfg).generate("g", [], rng)

    assert [s.text for s in subgoals] == ["x", "y"]
    assert all(0.2 <= s.probability < 0.3 for s in subgoals)


def test_empty_pool_rejected():
    with pytest.raises(ConfigError):
        SubgoalGenerator(pool=[])
