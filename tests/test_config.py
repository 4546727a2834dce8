from __future__ import annotations

import pytest

from resonance_engine.config import EngineConfig, load_config
from resonance_engine.errors import ConfigError


def test_defaults_are_valid():
    cfg = EngineConfig().validate()
    assert cfg.convergence_threshold == 0.95
    assert cfg.probability_clamp == 0.95
    assert cfg.max_iterations == 20
    assert cfg.top_k == 10
    assert cfg.tick_interval == 2.0


def test_load_overrides_from_toml(tmp_path):
    path = tmp_path / "engine.toml"
    path.write_text(
        "[engine]\n"
        "max_iterations = 5\n"
        "tick_interval = 0.25\n"
        "selected_growth_range = [1.1, 1.3]\n"
    )
    cfg = load_config(path)

    assert cfg.max_iterations == 5
    assert cfg.tick_interval == 0.25
    assert cfg.selected_growth_range == (1.1, 1.3)
    assert cfg.top_k == 10


def test_missing_engine_table_gives_defaults(tmp_path):
    path = tmp_path / "empty.toml"
    path.write_text("[other]\nx = 1\n")
    assert load_config(path) == EngineConfig()


@pytest.mark.parametrize("body", [
    "[engine]\nunknown_key = 1\n",
    "[engine]\nfrequency_range = [2.0, 1.0]\n",
    "[engine]\nfrequency_range = [1.0]\n",
    "[engine]\ntop_k = 0\n",
    "[engine]\ntick_interval = 0\n",
    "[engine]\nfirst_tick_delay = -1\n",
    "engine = 3\n",
    "[engine\n",
])
def test_invalid_config_rejected(tmp_path, body):
    path = tmp_path / "bad.toml"
    path.write_text(body)
    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.toml")


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        EngineConfig(max_iterations=0).validate()
