"""
Local-search solvers with a unified interface.
"""

from greedysat.formula import Formula

from .base import LocalSearchSolver, SearchState, SolverResult, SolverStatus
from .config import SolverConfig, get_config, load_config, reset_config
from .registry import SolverRegistry, register_solver

# Importing the algorithm modules registers them
from .greedy_solver import GreedySolver
from .random_walk_solver import RandomWalkSolver


def create_solver(
    formula: Formula, algorithm: str | None = None, **kwargs
) -> LocalSearchSolver:
    """
    Build the solver for ``algorithm``.

    Args:
        formula: Formula to solve
        algorithm: "greedy" or "random"; defaults to ``solver.name`` from the
            configuration
        **kwargs: Solver options (seed, initialization, max_iterations,
            timeout, event_logger)

    Raises:
        ConfigurationError: If the algorithm is unknown
    """
    return SolverRegistry.create(formula, algorithm, **kwargs)


def solve(formula: Formula, algorithm: str | None = None, **kwargs) -> SolverResult:
    """
    Search for a satisfying assignment of ``formula``.

    Returns:
        SolverResult with ``satisfied``, ``assignment`` (when satisfied) and
        ``iterations``
    """
    return create_solver(formula, algorithm, **kwargs).solve()


__all__ = [
    "LocalSearchSolver",
    "SearchState",
    "SolverResult",
    "SolverStatus",
    "GreedySolver",
    "RandomWalkSolver",
    "SolverRegistry",
    "register_solver",
    "SolverConfig",
    "get_config",
    "load_config",
    "reset_config",
    "create_solver",
    "solve",
]
