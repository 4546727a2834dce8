from __future__ import annotations

from typing import List, Tuple


def sample_goal_and_constraints() -> Tuple[str, List[str]]:
    goal = "Achieve indefinite healthy human lifespan"
    constraints = [
        "No irreversible genetic modification of the germline",
        "Interventions must be reversible or removable",
        "Energy supply must be self-sustaining inside the body",
    ]
    return goal, constraints
