from __future__ import annotations


class ResonanceError(Exception):
    """Base class for errors raised by the resonance engine."""


class ConfigError(ResonanceError, ValueError):
    """Invalid engine configuration or subgoal pool."""


class HistoryError(ResonanceError):
    """An iteration could not be appended to the run history."""
