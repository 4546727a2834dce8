from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .engine import Iteration
from .errors import HistoryError


@dataclass
class IterationHistory:
    """Append-only record of the iterations of a single run."""

    entries: List[Iteration] = field(default_factory=list)

    def append(self, iteration: Iteration) -> None:
        expected = len(self.entries) + 1
        if iteration.id != expected:
            raise HistoryError(f"expected iteration {expected}, got {iteration.id}")
        self.entries.append(iteration)

    def clear(self) -> None:
        self.entries = []

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Iteration]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> Iteration:
        return self.entries[index]

    def latest(self) -> Optional[Iteration]:
        return self.entries[-1] if self.entries else None

    def best(self) -> Optional[Iteration]:
        if not self.entries:
            return None
        return max(self.entries, key=lambda it: it.best_probability)

    def as_tuple(self) -> Tuple[Iteration, ...]:
        return tuple(self.entries)

    def summarize(self) -> Dict[str, Any]:
        best = self.best()
        rates = [it.convergence_rate for it in self.entries[1:]]
        return {
            "iterations": len(self.entries),
            "best_probability": best.best_probability if best is not None else 0.0,
            "best_iteration": best.id if best is not None else None,
            "mean_convergence_rate": sum(rates) / len(rates) if rates else 0.0,
            "converged": any(it.is_complete for it in self.entries),
        }
