"""
Compare the greedy search with the random-walk baseline.

Every (instance, algorithm, seed) combination is solved once under the same
iteration cap. Results are collected in a pandas DataFrame.
"""

import logging
from collections.abc import Sequence

import pandas as pd

from greedysat.formula import Formula
from greedysat.solvers import create_solver

logger = logging.getLogger(__name__)

ALGORITHMS = ("greedy", "random")


def run_benchmark(
    formulas: Sequence[Formula],
    algorithms: Sequence[str] = ALGORITHMS,
    seeds: Sequence[int] = (0,),
    max_iterations: int | None = 10000,
    timeout: float | None = None,
) -> pd.DataFrame:
    """
    Solve every formula with every algorithm and seed.

    Args:
        formulas: Instances to solve
        algorithms: Registered algorithm names
        seeds: Seeds of the solvers' random generators
        max_iterations: Iteration cap applied to every run
        timeout: Wall-clock cap in seconds applied to every run

    Returns:
        DataFrame with one row per run
    """
    rows = []
    for instance, formula in enumerate(formulas):
        for algorithm in algorithms:
            for seed in seeds:
                solver = create_solver(
                    formula,
                    algorithm,
                    seed=seed,
                    max_iterations=max_iterations,
                    timeout=timeout,
                )
                result = solver.solve()
                rows.append(
                    {
                        "instance": instance,
                        "num_variables": formula.num_variables,
                        "num_clauses": len(formula),
                        "algorithm": algorithm,
                        "seed": seed,
                        "status": result.status.value,
                        "satisfied": result.satisfied,
                        "iterations": result.iterations,
                        "runtime": result.runtime,
                        "best_unsatisfied": result.statistics.get("best_unsatisfied"),
                    }
                )
                logger.debug(f"instance {instance} {algorithm} seed {seed}: {result}")

    return pd.DataFrame(rows)


def summarize(results: pd.DataFrame) -> pd.DataFrame:
    """
    Per-algorithm solve rate, mean iterations and mean runtime.

    Mean iterations only count solved runs.
    """
    if results.empty:
        return pd.DataFrame(
            columns=["runs", "solve_rate", "mean_iterations", "mean_runtime"]
        )

    grouped = results.groupby("algorithm")
    summary = pd.DataFrame(
        {
            "runs": grouped.size(),
            "solve_rate": grouped["satisfied"].mean(),
            "mean_iterations": results[results["satisfied"]]
            .groupby("algorithm")["iterations"]
            .mean(),
            "mean_runtime": grouped["runtime"].mean(),
        }
    )
    return summary
