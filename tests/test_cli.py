"""
Unit tests for the greedysat command line.
"""

import io
import json
import logging
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

import pandas as pd

from greedysat.cli import EXIT_ERROR, EXIT_NOT_SOLVED, EXIT_SOLVED, main
from greedysat.solvers import reset_config


class TestCli(unittest.TestCase):
    """Test cases for greedysat.cli.main."""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        logger = logging.getLogger("greedysat")
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)
        shutil.rmtree(self.test_dir)
        reset_config()

    def _write(self, name, content):
        path = os.path.join(self.test_dir, name)
        with open(path, "w") as f:
            f.write(content)
        return path

    def _run(self, *argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = main(["--log-level", "WARNING", *argv])
        return code, stdout.getvalue()

    def test_solve_satisfiable(self):
        path = self._write("sat.cnf", "p cnf 2 2\n1 2 0\n-1 -2 0\n")
        code, output = self._run("solve", path)
        self.assertEqual(code, EXIT_SOLVED)
        self.assertIn("SATISFIABLE", output)
        self.assertTrue(any(line.startswith("v ") and line.endswith(" 0") for line in output.splitlines()))
        self.assertIn("iterations:", output)

    def test_solve_exhausted(self):
        path = self._write("unsat.cnf", "p cnf 1 2\n1 0\n-1 0\n")
        code, output = self._run("solve", path)
        self.assertEqual(code, EXIT_NOT_SOLVED)
        self.assertIn("NO SOLUTION FOUND", output)
        self.assertIn("iterations: 2", output)

    def test_random_walk_with_cap(self):
        path = self._write("unsat.cnf", "p cnf 1 2\n1 0\n-1 0\n")
        code, output = self._run(
            "solve", path, "--algorithm", "random", "--max-iterations", "25", "--seed", "4"
        )
        self.assertEqual(code, EXIT_NOT_SOLVED)
        self.assertIn("iterations: 25", output)

    def test_malformed_input(self):
        path = self._write("bad.cnf", "p cnf 3 2\n1 2 3 0\n")
        code, output = self._run("solve", path)
        self.assertEqual(code, EXIT_ERROR)
        self.assertEqual(output, "")

    def test_missing_file(self):
        code, _ = self._run("solve", os.path.join(self.test_dir, "missing.cnf"))
        self.assertEqual(code, EXIT_ERROR)

    def test_missing_config_file(self):
        path = self._write("sat.cnf", "p cnf 1 1\n1 0\n")
        code, _ = self._run("--config", os.path.join(self.test_dir, "none.yaml"), "solve", path)
        self.assertEqual(code, EXIT_ERROR)

    def test_config_file(self):
        path = self._write("sat.cnf", "p cnf 1 1\n1 0\n")
        config = self._write("config.yaml", "solver:\n  initialization: unassigned\n")
        code, output = self._run("--config", config, "solve", path)
        self.assertEqual(code, EXIT_SOLVED)
        self.assertIn("iterations: 1", output)

    def test_events_dir(self):
        path = self._write("sat.cnf", "p cnf 1 1\n1 0\n")
        events = os.path.join(self.test_dir, "events")
        code, _ = self._run("solve", path, "--initialization", "unassigned", "--events-dir", events)
        self.assertEqual(code, EXIT_SOLVED)
        self.assertTrue(os.path.exists(os.path.join(events, "sat_result.jsonl")))
        self.assertTrue(os.path.exists(os.path.join(events, "sat_metadata.json")))

    def test_unknown_events_format(self):
        path = self._write("sat.cnf", "p cnf 1 1\n1 0\n")
        config = self._write("config.yaml", "events:\n  format: xml\n")
        events = os.path.join(self.test_dir, "events")
        code, output = self._run("--config", config, "solve", path, "--events-dir", events)
        self.assertEqual(code, EXIT_ERROR)
        self.assertEqual(output, "")

    def test_events_format_option(self):
        path = self._write("sat.cnf", "p cnf 1 1\n1 0\n")
        events = os.path.join(self.test_dir, "events")
        code, _ = self._run("solve", path, "--events-dir", events, "--events-format", "csv")
        self.assertEqual(code, EXIT_SOLVED)
        self.assertTrue(os.path.exists(os.path.join(events, "sat_result.csv")))

    def test_solver_error_is_recorded_as_event(self):
        path = self._write("sat.cnf", "p cnf 1 1\n1 0\n")
        config = self._write("config.yaml", "solver:\n  initialization: zeros\n")
        events = os.path.join(self.test_dir, "events")
        code, _ = self._run("--config", config, "solve", path, "--events-dir", events)
        self.assertEqual(code, EXIT_ERROR)

        with open(os.path.join(events, "sat_exception.jsonl")) as f:
            event = json.loads(f.readline())
        self.assertEqual(event["exception_type"], "ConfigurationError")
        self.assertIn("zeros", event["exception_message"])
        self.assertIn("Traceback", event["stack_trace"])

    def test_non_utf8_input(self):
        path = os.path.join(self.test_dir, "binary.cnf")
        with open(path, "wb") as f:
            f.write(b"p cnf 1 1\n\xff 0\n")
        code, output = self._run("solve", path)
        self.assertEqual(code, EXIT_ERROR)
        self.assertEqual(output, "")

    def test_directory_as_input(self):
        code, _ = self._run("solve", self.test_dir)
        self.assertEqual(code, EXIT_ERROR)

    def test_unknown_log_level(self):
        path = self._write("sat.cnf", "p cnf 1 1\n1 0\n")
        code, output = self._run("--log-level", "chatty", "solve", path)
        self.assertEqual(code, EXIT_ERROR)
        self.assertEqual(output, "")

    def test_no_command(self):
        code, _ = self._run()
        self.assertEqual(code, EXIT_ERROR)

    def test_benchmark(self):
        output_csv = os.path.join(self.test_dir, "runs.csv")
        code, output = self._run(
            "benchmark",
            "--variables", "6",
            "--ratio", "2",
            "--instances", "2",
            "--seeds", "2",
            "--max-iterations", "500",
            "--output", output_csv,
        )
        self.assertEqual(code, EXIT_SOLVED)
        self.assertIn("greedy", output)
        self.assertIn("random", output)
        runs = pd.read_csv(output_csv)
        self.assertEqual(len(runs), 2 * 2 * 2)


if __name__ == "__main__":
    unittest.main()
