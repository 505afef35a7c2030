"""
Base interface for the local-search solvers.
Defines the result object and the solve loop that every search algorithm
plugs its ``step`` into.
"""

import logging
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

import numpy as np

from greedysat.assignment import Assignment
from greedysat.formula import Formula, satisfied_count, unsatisfied_count

from .config import get_config, validate_initialization

# Set up logging
logger = logging.getLogger(__name__)


class SearchState(Enum):
    """Where a solver is in its run."""

    SEARCHING = "searching"
    SOLVED = "solved"
    EXHAUSTED = "exhausted"


class SolverStatus(Enum):
    """Enum representing the outcome of a solver run."""

    SATISFIABLE = "satisfiable"
    # the heuristic ran out of moves; says nothing about satisfiability
    EXHAUSTED = "exhausted"
    # stopped by max_iterations or timeout
    TIMEOUT = "timeout"


class SolverResult:
    """
    Result returned by ``solve``.
    """

    def __init__(
        self,
        status: SolverStatus,
        iterations: int = 0,
        assignment: list[bool] | None = None,
        runtime: float = 0.0,
        satisfied_clauses: int = 0,
        total_clauses: int = 0,
        algorithm: str | None = None,
        statistics: dict[str, Any] | None = None,
    ):
        self.status = status
        self.iterations = iterations
        self.assignment = assignment
        self.runtime = runtime
        self.satisfied_clauses = satisfied_clauses
        self.total_clauses = total_clauses
        self.algorithm = algorithm
        self.statistics = statistics or {}

    @property
    def satisfied(self) -> bool:
        """Returns True if a satisfying assignment was found."""
        return self.status == SolverStatus.SATISFIABLE

    @property
    def model(self) -> list[int] | None:
        """Satisfying assignment as signed DIMACS literals."""
        if self.assignment is None:
            return None
        return [i + 1 if value else -(i + 1) for i, value in enumerate(self.assignment)]

    @property
    def satisfaction_ratio(self) -> float:
        """Returns the ratio of satisfied clauses."""
        if self.total_clauses == 0:
            return 1.0
        return self.satisfied_clauses / self.total_clauses

    def to_dict(self) -> dict[str, Any]:
        return {
            "algorithm": self.algorithm,
            "status": self.status.value,
            "satisfied": self.satisfied,
            "iterations": self.iterations,
            "runtime": self.runtime,
            "satisfied_clauses": self.satisfied_clauses,
            "total_clauses": self.total_clauses,
            "assignment": self.assignment,
            "statistics": dict(self.statistics),
        }

    def __str__(self) -> str:
        """String representation of the result."""
        status_str = str(self.status.value).upper()
        if self.satisfied:
            return (
                f"SAT Result: {status_str} ({self.iterations} iterations, "
                f"{self.runtime:.4f}s)"
            )
        return (
            f"SAT Result: {status_str} ({self.satisfied_clauses}/{self.total_clauses} "
            f"clauses, {self.iterations} iterations, {self.runtime:.4f}s)"
        )

    def __repr__(self) -> str:
        return f"SolverResult(status={self.status}, iterations={self.iterations})"


class LocalSearchSolver(ABC):
    """
    Abstract base class for local-search algorithms.

    Subclasses implement ``step``, a single search iteration. ``solve`` resets
    all run state, then calls ``step`` until the formula is satisfied, the
    algorithm gives up, or a caller-imposed cap is hit.
    """

    solver_name: str = "base"

    def __init__(
        self,
        formula: Formula,
        seed: int | None = None,
        initialization: str | None = None,
        max_iterations: int | None = None,
        timeout: float | None = None,
        event_logger=None,
    ):
        """
        Initialize the solver.

        Args:
            formula: Formula to solve
            seed: Seed of the random generator, re-applied on every ``solve``
            initialization: "random" (seeded total assignment) or
                "unassigned" (every variable starts unassigned)
            max_iterations: Stop after this many iterations
            timeout: Stop after this many seconds
            event_logger: Optional StructuredLogger receiving progress events

        Unset arguments are taken from the global configuration.
        """
        config = get_config()

        self.formula = formula
        self.seed = seed if seed is not None else config.get("solver.seed", 0)
        self.initialization = validate_initialization(
            initialization or config.get("solver.initialization", "random")
        )
        self.max_iterations = (
            max_iterations
            if max_iterations is not None
            else config.get("solver.max_iterations")
        )
        self.timeout = timeout if timeout is not None else config.get("solver.timeout")
        self.event_logger = event_logger

        self.rng: np.random.Generator = np.random.default_rng(self.seed)
        self.assignment = Assignment.unassigned(formula.num_variables)
        self.state = SearchState.SEARCHING
        self.iterations = 0
        self.runs = 0
        self.best_unsatisfied = len(formula)

    def reset(self) -> None:
        """Re-seed the generator and start from a fresh assignment."""
        self.rng = np.random.default_rng(self.seed)
        if self.initialization == "unassigned":
            self.assignment = Assignment.unassigned(self.formula.num_variables)
        else:
            self.assignment = Assignment.random(self.formula.num_variables, self.rng)
        self.iterations = 0
        self.state = SearchState.SEARCHING
        self.best_unsatisfied = self.unsatisfied_count()
        self._update_state()

    def unsatisfied_count(self) -> int:
        return unsatisfied_count(self.formula, self.assignment)

    def _update_state(self) -> int:
        """Re-score the assignment and mark the run solved when nothing is violated."""
        unsatisfied = self.unsatisfied_count()
        if unsatisfied < self.best_unsatisfied:
            self.best_unsatisfied = unsatisfied
            logger.debug(
                f"{self.solver_name}: {unsatisfied} unsatisfied clauses "
                f"after {self.iterations} iterations"
            )
            if self.event_logger is not None:
                self.event_logger.log_progress(
                    self.runs, self.iterations, unsatisfied, len(self.formula)
                )
        if unsatisfied == 0:
            self.state = SearchState.SOLVED
        return unsatisfied

    @abstractmethod
    def step(self) -> None:
        """
        Perform one search iteration on an unsatisfied assignment.
        """

    def statistics(self) -> dict[str, Any]:
        """Algorithm-specific counters for the last run."""
        return {"best_unsatisfied": self.best_unsatisfied}

    def solve(self) -> SolverResult:
        """
        Search for a satisfying assignment.

        Returns:
            SolverResult; ``status`` tells solved, exhausted, and capped runs apart
        """
        self.runs += 1
        start_time = time.time()
        self.reset()

        status = None
        while self.state == SearchState.SEARCHING:
            if self.max_iterations is not None and self.iterations >= self.max_iterations:
                status = SolverStatus.TIMEOUT
                logger.info(
                    f"{self.solver_name}: iteration limit {self.max_iterations} reached"
                )
                break
            if self.timeout is not None and time.time() - start_time >= self.timeout:
                status = SolverStatus.TIMEOUT
                logger.info(f"{self.solver_name}: timeout of {self.timeout}s reached")
                break

            self.step()
            if self.state == SearchState.SEARCHING:
                self._update_state()

        if status is None:
            status = (
                SolverStatus.SATISFIABLE
                if self.state == SearchState.SOLVED
                else SolverStatus.EXHAUSTED
            )

        runtime = time.time() - start_time
        statistics = self.statistics()
        statistics["runtime"] = runtime

        result = SolverResult(
            status=status,
            iterations=self.iterations,
            # variables left unassigned occur in no violated clause; report them false
            assignment=(
                [bool(v) for v in self.assignment.to_bools()]
                if status == SolverStatus.SATISFIABLE
                else None
            ),
            runtime=runtime,
            satisfied_clauses=satisfied_count(self.formula, self.assignment),
            total_clauses=len(self.formula),
            algorithm=self.solver_name,
            statistics=statistics,
        )

        if status == SolverStatus.SATISFIABLE:
            logger.info(f"{self.solver_name}: solved in {self.iterations} iterations")
        else:
            logger.info(
                f"{self.solver_name}: no solution found by this heuristic "
                f"({status.value}, {self.iterations} iterations)"
            )

        if self.event_logger is not None:
            self.event_logger.log_result(self.runs, result.to_dict())

        return result
