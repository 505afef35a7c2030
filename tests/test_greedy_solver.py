"""
Unit tests for the greedy local-search driver.
"""

import itertools
import unittest

from greedysat.assignment import Assignment
from greedysat.formula import Formula, is_formula_satisfied
from greedysat.generator import generate_random_ksat
from greedysat.solvers import GreedySolver, SearchState, SolverStatus, reset_config
from greedysat.utils.cnf import parse_dimacs


def brute_force_satisfiable(formula):
    for values in itertools.product([False, True], repeat=formula.num_variables):
        if is_formula_satisfied(formula, values):
            return True
    return False


class CheckedGreedySolver(GreedySolver):
    """GreedySolver that records closed-set violations while it runs."""

    def reset(self):
        super().reset()
        self.violations = []

    def step(self):
        closed_before = set(self.closed)
        history_before = self.assignment.history_length
        super().step()
        if not closed_before <= self.closed:
            self.violations.append("closed set shrank")
        if self.assignment.history_length > history_before:
            if self.assignment.fingerprint() in closed_before:
                self.violations.append(f"re-entered closed state {self.assignment}")


class TestEndToEnd(unittest.TestCase):
    """End-to-end scenarios from DIMACS text to result."""

    def tearDown(self):
        reset_config()

    def test_single_positive_clause(self):
        formula = parse_dimacs("p cnf 1 1\n1 0\n")
        result = GreedySolver(formula).solve()
        self.assertTrue(result.satisfied)
        self.assertEqual(result.assignment, [True])
        self.assertIn(result.iterations, (0, 1))

    def test_single_positive_clause_from_unassigned(self):
        formula = parse_dimacs("p cnf 1 1\n1 0\n")
        result = GreedySolver(formula, initialization="unassigned").solve()
        self.assertTrue(result.satisfied)
        self.assertEqual(result.assignment, [True])
        self.assertEqual(result.iterations, 1)

    def test_contradiction_exhausts_both_states(self):
        """Test that x and not x explores both assignments, then gives up."""
        formula = parse_dimacs("p cnf 1 2\n1 0\n-1 0\n")
        for seed in range(4):
            solver = GreedySolver(formula, seed=seed)
            result = solver.solve()
            self.assertFalse(result.satisfied)
            self.assertEqual(result.status, SolverStatus.EXHAUSTED)
            self.assertIsNone(result.assignment)
            self.assertEqual(solver.state, SearchState.EXHAUSTED)
            self.assertEqual(result.statistics["closed_states"], 2)
            # one move out, one backtrack
            self.assertEqual(result.iterations, 2)
            self.assertEqual(result.statistics["backtracks"], 1)

    def test_exactly_one_of_two(self):
        formula = parse_dimacs("p cnf 2 2\n1 2 0\n-1 -2 0\n")
        for seed in range(8):
            result = GreedySolver(formula, seed=seed).solve()
            self.assertTrue(result.satisfied)
            self.assertLessEqual(result.iterations, 4)
            self.assertTrue(is_formula_satisfied(formula, result.assignment))
            self.assertEqual(result.assignment[0], not result.assignment[1])

    def test_empty_formula(self):
        result = GreedySolver(Formula(3, [])).solve()
        self.assertTrue(result.satisfied)
        self.assertEqual(result.iterations, 0)
        self.assertEqual(len(result.assignment), 3)


class TestSearchProperties(unittest.TestCase):
    """Invariants of the greedy search."""

    def tearDown(self):
        reset_config()

    def test_closed_set_only_grows_and_is_never_reentered(self):
        for seed in range(20):
            formula = generate_random_ksat(6, 30, k=3, seed=seed)
            for initialization in ("random", "unassigned"):
                solver = CheckedGreedySolver(formula, seed=seed, initialization=initialization)
                solver.solve()
                self.assertEqual(solver.violations, [])

    def test_termination_bound(self):
        """Test that moves never exceed the number of assignments."""
        for seed in range(20):
            num_vars = 5
            formula = generate_random_ksat(num_vars, 28, k=3, seed=100 + seed)
            result = GreedySolver(formula, seed=seed).solve()
            self.assertLess(result.statistics["moves"], 2**num_vars)
            self.assertLessEqual(result.statistics["backtracks"], result.statistics["moves"])
            self.assertEqual(
                result.iterations,
                result.statistics["moves"] + result.statistics["backtracks"],
            )

    def test_full_exploration_of_unsatisfiable_formula(self):
        """Test that all 8 clauses over 3 variables force a visit to every state."""
        clauses = [
            [s1 * 1, s2 * 2, s3 * 3]
            for s1 in (1, -1)
            for s2 in (1, -1)
            for s3 in (1, -1)
        ]
        formula = Formula.from_dimacs_clauses(3, clauses)
        result = GreedySolver(formula, seed=5).solve()
        self.assertEqual(result.status, SolverStatus.EXHAUSTED)
        self.assertEqual(result.statistics["closed_states"], 8)
        self.assertEqual(result.statistics["moves"], 7)
        self.assertEqual(result.statistics["backtracks"], 7)
        self.assertEqual(result.iterations, 14)
        self.assertEqual(result.statistics["path_length"], 0)

    def test_agrees_with_brute_force_on_small_formulas(self):
        """Test that total-assignment search finds a model whenever one exists."""
        for seed in range(30):
            formula = generate_random_ksat(5, 22, k=3, seed=seed)
            result = GreedySolver(formula, seed=seed).solve()
            self.assertEqual(result.satisfied, brute_force_satisfiable(formula))
            if result.satisfied:
                self.assertTrue(is_formula_satisfied(formula, result.assignment))

    def test_resolve_is_idempotent(self):
        formula = generate_random_ksat(10, 40, k=3, seed=3)
        solver = GreedySolver(formula, seed=11)
        first = solver.solve()
        second = solver.solve()
        self.assertEqual(first.status, second.status)
        self.assertEqual(first.iterations, second.iterations)
        self.assertEqual(first.assignment, second.assignment)
        for key in ("moves", "backtracks", "closed_states", "best_unsatisfied"):
            self.assertEqual(first.statistics[key], second.statistics[key])

    def test_same_seed_same_trajectory(self):
        formula = generate_random_ksat(10, 42, k=3, seed=8)
        first = GreedySolver(formula, seed=4).solve()
        second = GreedySolver(formula, seed=4).solve()
        self.assertEqual(first.iterations, second.iterations)
        self.assertEqual(first.assignment, second.assignment)

    def test_selects_lowest_score_first_on_ties(self):
        """Test steepest descent with ties broken by candidate order."""
        # from all-false: flipping x1 fixes clauses 0 and 1, x2 and x3 fix one each
        formula = Formula.from_dimacs_clauses(3, [[2, 1], [1], [3]])
        solver = GreedySolver(formula, initialization="unassigned")
        solver.reset()
        solver.assignment = Assignment([False, False, False])
        moves = solver.candidate_moves()
        self.assertEqual([m.variable for m in moves], [1, 0, 2])
        self.assertEqual(solver.select_move(moves).variable, 0)

        # x2 and x3 tie once x1 is true; x2 comes first
        formula = Formula.from_dimacs_clauses(3, [[2], [3]])
        solver = GreedySolver(formula)
        solver.reset()
        solver.assignment = Assignment([True, False, False])
        self.assertEqual(solver.select_move(solver.candidate_moves()).variable, 1)

    def test_iteration_cap_is_a_forced_stop(self):
        clauses = [
            [s1 * 1, s2 * 2, s3 * 3]
            for s1 in (1, -1)
            for s2 in (1, -1)
            for s3 in (1, -1)
        ]
        formula = Formula.from_dimacs_clauses(3, clauses)
        result = GreedySolver(formula, max_iterations=3).solve()
        self.assertEqual(result.status, SolverStatus.TIMEOUT)
        self.assertFalse(result.satisfied)
        self.assertEqual(result.iterations, 3)

    def test_zero_timeout_stops_before_first_step(self):
        formula = parse_dimacs("p cnf 1 2\n1 0\n-1 0\n")
        result = GreedySolver(formula, timeout=0.0).solve()
        self.assertEqual(result.status, SolverStatus.TIMEOUT)
        self.assertEqual(result.iterations, 0)


if __name__ == "__main__":
    unittest.main()
