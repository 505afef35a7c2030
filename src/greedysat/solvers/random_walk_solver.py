"""
Unguided random walk, the baseline the greedy search is measured against.
"""

from typing import Any

from greedysat.assignment import FALSE, TRUE, Move

from .base import LocalSearchSolver
from .registry import register_solver


@register_solver("random")
class RandomWalkSolver(LocalSearchSolver):
    """
    Set a uniformly chosen variable to a uniformly chosen value until the
    formula is satisfied.

    There is no history, closed set or neighborhood restriction, so on an
    unsatisfiable formula the walk only stops at ``max_iterations`` or
    ``timeout``.
    """

    solver_name = "random"

    def step(self) -> None:
        variable = int(self.rng.integers(self.formula.num_variables))
        value = TRUE if self.rng.integers(2) else FALSE
        self.assignment.apply_move(Move(variable, value))
        # nothing is ever undone
        self.assignment.clear_history()
        self.iterations += 1

    def statistics(self) -> dict[str, Any]:
        stats = super().statistics()
        stats["flips"] = self.iterations
        return stats
