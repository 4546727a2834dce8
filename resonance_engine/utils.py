from __future__ import annotations

from typing import Optional, Tuple, Union
import numpy as np

RandomSource = Union[None, int, np.random.Generator]


def make_rng(source: RandomSource = None) -> np.random.Generator:
    if isinstance(source, np.random.Generator):
        return source
    return np.random.default_rng(source)


def draw(rng: np.random.Generator, bounds: Tuple[float, float], size: Optional[int] = None):
    # uniform on [low, high)
    low, high = bounds
    if size is None:
        return float(rng.uniform(low, high))
    return rng.uniform(low, high, size=size)
