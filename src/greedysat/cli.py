"""
greedysat command line: solve a DIMACS file or benchmark the algorithms.
"""

import argparse
import logging
import os
import sys
import traceback

from greedysat.benchmark import run_benchmark, summarize
from greedysat.generator import batch_generate_ksat
from greedysat.solvers import (
    SolverRegistry,
    create_solver,
    get_config,
    load_config,
    reset_config,
)
from greedysat.solvers.config import (
    EVENT_FORMATS,
    INITIALIZATIONS,
    validate_events_format,
)
from greedysat.utils.cnf import load_cnf_file
from greedysat.utils.exceptions import SATBaseException
from greedysat.utils.logging_utils import create_logger, setup_logging

logger = logging.getLogger(__name__)

EXIT_SOLVED = 0
EXIT_NOT_SOLVED = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="greedysat", description="Greedy local search for CNF satisfiability"
    )
    parser.add_argument("--config", type=str, help="YAML configuration file")
    parser.add_argument("--log-level", type=str, help="Logging level (default: INFO)")
    subparsers = parser.add_subparsers(dest="command")

    solve_parser = subparsers.add_parser("solve", help="Solve a DIMACS CNF file")
    solve_parser.add_argument("file", type=str)
    solve_parser.add_argument("--algorithm", choices=SolverRegistry.list_solvers())
    solve_parser.add_argument("--seed", type=int)
    solve_parser.add_argument("--max-iterations", type=int)
    solve_parser.add_argument("--timeout", type=float)
    solve_parser.add_argument("--initialization", choices=INITIALIZATIONS)
    solve_parser.add_argument(
        "--events-dir", type=str, help="Write progress/result events to this directory"
    )
    solve_parser.add_argument("--events-format", choices=EVENT_FORMATS)

    bench_parser = subparsers.add_parser(
        "benchmark", help="Compare algorithms on random k-SAT instances"
    )
    bench_parser.add_argument("--variables", type=int)
    bench_parser.add_argument("--ratio", type=float, help="Clauses per variable")
    bench_parser.add_argument("--clause-size", type=int)
    bench_parser.add_argument("--instances", type=int)
    bench_parser.add_argument("--seeds", type=int, help="Number of solver seeds per instance")
    bench_parser.add_argument("--max-iterations", type=int)
    bench_parser.add_argument("--output", type=str, help="CSV file for the per-run table")

    return parser


def _apply_overrides(config, args) -> None:
    overrides = {
        "solver.name": getattr(args, "algorithm", None),
        "solver.seed": getattr(args, "seed", None),
        "solver.initialization": getattr(args, "initialization", None),
        "solver.timeout": getattr(args, "timeout", None),
        "events.dir": getattr(args, "events_dir", None),
        "events.format": getattr(args, "events_format", None),
        "logging.level": args.log_level,
    }
    if args.command == "solve":
        overrides["solver.max_iterations"] = args.max_iterations
    elif args.command == "benchmark":
        overrides.update(
            {
                "benchmark.num_variables": args.variables,
                "benchmark.clause_ratio": args.ratio,
                "benchmark.clause_size": args.clause_size,
                "benchmark.instances": args.instances,
                "benchmark.seeds": args.seeds,
                "benchmark.max_iterations": args.max_iterations,
            }
        )
    for key, value in overrides.items():
        if value is not None:
            config.set(key, value)


def run_solve(args) -> int:
    config = get_config()
    formula = load_cnf_file(args.file)

    event_logger = None
    events_dir = config.get("events.dir")
    if events_dir:
        name = os.path.splitext(os.path.basename(args.file))[0]
        event_logger = create_logger(
            name,
            output_dir=events_dir,
            format_type=validate_events_format(config.get("events.format", "json")),
            visualize_ready=True,
        )

    solver = None
    try:
        solver = create_solver(formula, event_logger=event_logger)
        result = solver.solve()
    except Exception as e:
        if event_logger is not None:
            event_logger.log_exception(
                solver.runs if solver is not None else 0,
                e.__class__.__name__,
                str(e),
                traceback.format_exc(),
            )
        raise
    finally:
        if event_logger is not None:
            event_logger.finalize()

    if result.satisfied:
        print("SATISFIABLE")
        print("v " + " ".join(str(lit) for lit in result.model) + " 0")
    else:
        print("NO SOLUTION FOUND")
    print(f"iterations: {result.iterations}")
    print(f"runtime: {result.runtime:.4f}s")

    return EXIT_SOLVED if result.satisfied else EXIT_NOT_SOLVED


def run_benchmark_command(args) -> int:
    config = get_config()
    num_variables = int(config.get("benchmark.num_variables"))
    num_clauses = int(round(num_variables * float(config.get("benchmark.clause_ratio"))))

    formulas = batch_generate_ksat(
        num_variables,
        num_clauses,
        k=int(config.get("benchmark.clause_size")),
        n_instances=int(config.get("benchmark.instances")),
        seed=int(config.get("solver.seed", 0)),
    )
    results = run_benchmark(
        formulas,
        seeds=range(int(config.get("benchmark.seeds"))),
        max_iterations=config.get("benchmark.max_iterations"),
        timeout=config.get("solver.timeout"),
    )

    if args.output:
        results.to_csv(args.output, index=False)
        logger.info(f"Wrote {len(results)} runs to {args.output}")

    print(summarize(results).to_string())
    return EXIT_SOLVED


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_ERROR

    try:
        reset_config()
        config = load_config(args.config)
        _apply_overrides(config, args)
        setup_logging(
            config.get("logging.level", "INFO"),
            config.get("logging.format"),
            config.get("logging.file"),
        )

        if args.command == "solve":
            return run_solve(args)
        return run_benchmark_command(args)
    except (SATBaseException, OSError) as e:
        logger.error(str(e))
        logger.debug(traceback.format_exc())
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
