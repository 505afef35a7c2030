"""
greedysat: greedy local search for CNF satisfiability.
"""

# utils first: greedysat.utils.cnf needs greedysat.formula fully loaded
from greedysat import utils
from greedysat.assignment import Assignment, Move
from greedysat.formula import (
    Clause,
    Formula,
    Literal,
    candidate_variables,
    is_formula_satisfied,
    is_satisfied,
    unsatisfied_count,
)
from greedysat.solvers import (
    GreedySolver,
    RandomWalkSolver,
    SolverResult,
    SolverStatus,
    create_solver,
    solve,
)
from greedysat.utils.cnf import load_cnf_file, parse_dimacs

__version__ = "0.1.0"

__all__ = [
    "Assignment",
    "Move",
    "Clause",
    "Formula",
    "Literal",
    "candidate_variables",
    "is_formula_satisfied",
    "is_satisfied",
    "unsatisfied_count",
    "GreedySolver",
    "RandomWalkSolver",
    "SolverResult",
    "SolverStatus",
    "create_solver",
    "solve",
    "load_cnf_file",
    "parse_dimacs",
]
