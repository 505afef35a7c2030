"""
Random k-CNF instance generator for benchmarking the solvers.
"""

import numpy as np

from greedysat.formula import Clause, Formula


def generate_random_ksat(n_vars, n_clauses, k=3, seed=None) -> Formula:
    """
    Generate a uniform random k-SAT formula.

    Each clause draws ``k`` distinct variables and negates each with
    probability 1/2.
    """
    if k > n_vars:
        raise ValueError(f"Clause size {k} exceeds number of variables {n_vars}")

    rng = np.random.default_rng(seed)
    clauses = []
    for _ in range(n_clauses):
        vars_ = rng.choice(np.arange(1, n_vars + 1), size=k, replace=False)
        signs = rng.choice([-1, 1], size=k)
        clauses.append([int(v) for v in vars_ * signs])

    comments = [f"random {k}-SAT, {n_vars} variables, {n_clauses} clauses, seed {seed}"]
    return Formula(n_vars, (Clause.from_dimacs(c) for c in clauses), comments=comments)


def batch_generate_ksat(n_vars, n_clauses, k=3, n_instances=10, seed=None) -> list[Formula]:
    """Batch-generate random k-SAT formulas with consecutive seeds."""
    seeds = [seed + i if seed is not None else None for i in range(n_instances)]
    return [generate_random_ksat(n_vars, n_clauses, k, s) for s in seeds]
