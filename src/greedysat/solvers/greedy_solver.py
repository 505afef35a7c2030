"""
Greedy local search with a closed set and single-step backtracking.
"""

import logging
from typing import Any

from greedysat.assignment import Move
from greedysat.formula import candidate_variables, unsatisfied_count

from .base import LocalSearchSolver, SearchState
from .registry import register_solver

# Set up logging
logger = logging.getLogger(__name__)


@register_solver("greedy")
class GreedySolver(LocalSearchSolver):
    """
    Steepest-descent hill climbing over single-variable flips.

    Each step considers only variables of unsatisfied clauses, never moves
    into an assignment it has already left (closed set), and backs up one move
    along its path when every neighbor is closed. The search gives up once it
    is back at its start with no open neighbor left.
    """

    solver_name = "greedy"

    def __init__(self, formula, **kwargs):
        super().__init__(formula, **kwargs)
        self.closed: set[bytes] = set()
        self.moves_applied = 0
        self.backtracks = 0

    def reset(self) -> None:
        self.closed = set()
        self.moves_applied = 0
        self.backtracks = 0
        super().reset()

    def candidate_moves(self) -> list[Move]:
        """One move per value each candidate variable can change to, in candidate order."""
        moves = []
        for variable in candidate_variables(self.formula, self.assignment):
            moves.extend(self.assignment.flip_moves(variable))
        return moves

    def select_move(self, moves: list[Move]) -> Move | None:
        """
        Best open move by resulting unsatisfied-clause count.

        Moves leading into a closed state are discarded before scoring. The
        first of several equally good moves wins.
        """
        best_move = None
        best_score = None
        for move in moves:
            if self.assignment.fingerprint_after(move) in self.closed:
                continue
            with self.assignment.tentative(move):
                score = unsatisfied_count(self.formula, self.assignment)
            if best_score is None or score < best_score:
                best_move, best_score = move, score
        return best_move

    def step(self) -> None:
        moves = self.candidate_moves()

        # the state being left is never entered again
        self.closed.add(self.assignment.fingerprint())

        move = self.select_move(moves)
        if move is None:
            if self.assignment.history_length == 0:
                self.state = SearchState.EXHAUSTED
                return
            self.assignment.undo_last_move()
            self.backtracks += 1
        else:
            self.assignment.apply_move(move)
            self.moves_applied += 1

        self.iterations += 1

    def statistics(self) -> dict[str, Any]:
        stats = super().statistics()
        stats.update(
            {
                "moves": self.moves_applied,
                "backtracks": self.backtracks,
                "closed_states": len(self.closed),
                "path_length": self.assignment.history_length,
            }
        )
        return stats
