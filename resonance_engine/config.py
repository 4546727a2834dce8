from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Tuple, Union
import logging

import tomli

from .errors import ConfigError

logger = logging.getLogger(__name__)

Range = Tuple[float, float]

_RANGE_FIELDS = (
    "initial_probability_range",
    "initial_resonance_range",
    "frequency_range",
    "selected_growth_range",
    "unselected_growth_range",
)


@dataclass(frozen=True)
class EngineConfig:
    """Numeric constants driving generation, scoring and the run loop.

    Ranges are half-open ``[low, high)`` intervals sampled uniformly.
    """

    initial_probability_range: Range = (0.001, 0.101)
    initial_resonance_range: Range = (0.1, 2.1)
    frequency_range: Range = (0.5, 2.5)
    selected_growth_range: Range = (1.2, 1.5)
    unselected_growth_range: Range = (1.05, 1.15)
    probability_clamp: float = 0.95
    resonance_boost: float = 0.1
    convergence_threshold: float = 0.95
    top_k: int = 10
    max_iterations: int = 20
    tick_interval: float = 2.0
    first_tick_delay: float = 0.5

    def validate(self) -> "EngineConfig":
        for name in _RANGE_FIELDS:
            low, high = getattr(self, name)
            if not low < high:
                raise ConfigError(f"{name} must satisfy low < high, got ({low}, {high})")
        if self.initial_probability_range[0] < 0.0:
            raise ConfigError("initial_probability_range must be non-negative")
        if self.initial_resonance_range[0] < 0.0:
            raise ConfigError("initial_resonance_range must be non-negative")
        if self.top_k < 1:
            raise ConfigError(f"top_k must be positive, got {self.top_k}")
        if self.max_iterations < 1:
            raise ConfigError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.tick_interval <= 0.0:
            raise ConfigError(f"tick_interval must be positive, got {self.tick_interval}")
        if self.first_tick_delay < 0.0:
            raise ConfigError(f"first_tick_delay must be non-negative, got {self.first_tick_delay}")
        return self

    def with_overrides(self, overrides: Dict[str, Any]) -> "EngineConfig":
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(unknown)}")
        coerced: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key in _RANGE_FIELDS:
                if not isinstance(value, (list, tuple)) or len(value) != 2:
                    raise ConfigError(f"{key} must be a two-element list")
                coerced[key] = (float(value[0]), float(value[1]))
            elif key in ("top_k", "max_iterations"):
                coerced[key] = int(value)
            else:
                coerced[key] = float(value)
        return replace(self, **coerced).validate()


def load_config(path: Union[str, Path]) -> EngineConfig:
    """Load an ``EngineConfig`` from the ``[engine]`` table of a TOML file."""
    config_path = Path(path)
    try:
        with open(config_path, "rb") as f:
            data = tomli.load(f)
    except FileNotFoundError as exc:
        raise ConfigError(f"config file not found: {config_path}") from exc
    except tomli.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {config_path}: {exc}") from exc

    section = data.get("engine", {})
    if not isinstance(section, dict):
        raise ConfigError("[engine] must be a table")
    logger.debug("loaded %d engine overrides from %s", len(section), config_path)
    return EngineConfig().with_overrides(section)
