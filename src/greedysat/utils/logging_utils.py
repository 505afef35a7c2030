"""
Logging utilities for greedysat.

This module configures Python's logging from the ``logging`` configuration
section and provides a StructuredLogger that records search events (progress
and results) as JSON Lines or CSV, one file per event type.
"""

import csv
import json
import logging
import os
import time
from datetime import datetime
from typing import Any

import numpy as np

from .exceptions import ConfigurationError

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class NumpyJSONEncoder(json.JSONEncoder):
    """JSON encoder that can handle NumPy arrays and scalars."""

    def default(self, obj):
        """Convert numpy objects to standard Python types."""
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.bool_):
            return bool(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, (set, frozenset)):
            return sorted(obj)
        return super().default(obj)


def setup_logging(
    level: str | int = "INFO",
    fmt: str | None = None,
    log_file: str | None = None,
) -> logging.Logger:
    """
    Configure the ``greedysat`` logger hierarchy.

    Args:
        level: Logging level name or number
        fmt: Format string for both handlers
        log_file: Optional file that receives the same records as the console

    Returns:
        The package logger

    Raises:
        ConfigurationError: If the level name is not a logging level
    """
    if isinstance(level, str):
        name = level
        level = logging.getLevelName(name.upper())
        if not isinstance(level, int):
            raise ConfigurationError(
                f"Unknown logging level '{name}'", key="logging.level"
            )

    logger = logging.getLogger("greedysat")
    logger.setLevel(level)

    # Remove any existing handlers
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(fmt or DEFAULT_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


class StructuredLogger:
    """
    A logger for structured search events.

    This logger can output data in JSON Lines or CSV format.
    It maintains separate files for different event types.
    """

    FORMAT_JSON = "json"
    FORMAT_CSV = "csv"

    def __init__(
        self,
        output_dir: str,
        experiment_name: str,
        format_type: str = "json",
        visualize_ready: bool = False,
    ):
        """
        Initialize the structured logger.

        Args:
            output_dir: Directory to save log files in
            experiment_name: Name of the experiment (used in filenames)
            format_type: Format to save logs in ("json" or "csv")
            visualize_ready: Whether to write a metadata file on finalize
        """
        if format_type not in (self.FORMAT_JSON, self.FORMAT_CSV):
            raise ValueError(f"Unknown log format: {format_type}")

        self.output_dir = output_dir
        self.experiment_name = experiment_name
        self.format_type = format_type
        self.visualize_ready = visualize_ready

        # Ensure the output directory exists
        os.makedirs(output_dir, exist_ok=True)

        self.files = {}
        self.write_counts = {}

        self.metadata = {
            "experiment_name": experiment_name,
            "start_time": datetime.now().isoformat(),
            "log_files": {},
        }

    def _get_file(self, event_type: str) -> tuple:
        """
        Get the file handle for a given event type.

        Returns:
            Tuple of (file_handle, is_new)
        """
        if event_type not in self.files:
            ext = ".jsonl" if self.format_type == self.FORMAT_JSON else ".csv"
            filename = f"{self.experiment_name}_{event_type}{ext}"
            filepath = os.path.join(self.output_dir, filename)

            self.metadata["log_files"][event_type] = filepath

            file = open(
                filepath,
                "w",
                newline="" if self.format_type == self.FORMAT_CSV else None,
            )
            self.files[event_type] = file
            self.write_counts[event_type] = 0
            return file, True

        return self.files[event_type], False

    def _write_event(self, event_type: str, data: dict[str, Any]):
        file, is_new = self._get_file(event_type)

        if self.format_type == self.FORMAT_JSON:
            file.write(json.dumps(data, cls=NumpyJSONEncoder) + "\n")
        else:
            writer = csv.DictWriter(file, fieldnames=list(data.keys()))
            if is_new:
                writer.writeheader()
            writer.writerow(
                {
                    k: json.dumps(v, cls=NumpyJSONEncoder)
                    if isinstance(v, (dict, list))
                    else v
                    for k, v in data.items()
                }
            )
        file.flush()

        self.write_counts[event_type] += 1

    def log_progress(
        self, run: int, iteration: int, unsatisfied_count: int, total_count: int
    ):
        """
        Log an improvement of the best unsatisfied-clause count.

        Args:
            run: Number of the solve call on the solver
            iteration: Iteration at which the count was reached
            unsatisfied_count: Clauses still unsatisfied
            total_count: Total number of clauses
        """
        data = {
            "run": run,
            "iteration": iteration,
            "unsatisfied_count": unsatisfied_count,
            "total_count": total_count,
            "satisfaction_ratio": (
                (total_count - unsatisfied_count) / total_count if total_count > 0 else 1.0
            ),
            "timestamp": time.time(),
        }
        self._write_event("progress", data)

    def log_result(self, run: int, result: dict[str, Any]):
        """
        Log the outcome of a solve call.

        Args:
            run: Number of the solve call on the solver
            result: ``SolverResult.to_dict()`` output
        """
        data = {"run": run, **result, "timestamp": time.time()}
        self._write_event("result", data)

    def log_exception(
        self, run: int, exception_type: str, exception_message: str, stack_trace: str
    ):
        """Log an error that ended a solve call."""
        data = {
            "run": run,
            "exception_type": exception_type,
            "exception_message": exception_message,
            "stack_trace": stack_trace,
            "timestamp": time.time(),
        }
        self._write_event("exception", data)

    def close(self):
        """Close all open file handles."""
        for file in self.files.values():
            file.close()
        self.files = {}

    def finalize(self) -> str:
        """
        Close the log files and write the metadata file if enabled.

        Returns:
            Path to metadata file if visualization is enabled, empty string otherwise
        """
        self.close()

        if self.visualize_ready:
            self.metadata["end_time"] = datetime.now().isoformat()
            self.metadata["record_counts"] = self.write_counts

            metadata_path = os.path.join(
                self.output_dir, f"{self.experiment_name}_metadata.json"
            )
            with open(metadata_path, "w") as f:
                json.dump(self.metadata, f, indent=2)

            return metadata_path

        return ""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.finalize()


def create_logger(
    experiment_name: str,
    output_dir: str = "logs",
    format_type: str = "json",
    visualize_ready: bool = False,
) -> StructuredLogger:
    """
    Create a structured logger with default settings.

    Args:
        experiment_name: Name of the experiment
        output_dir: Directory to save logs in
        format_type: Format to save logs in ("json" or "csv")
        visualize_ready: Whether to write a metadata file on finalize

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(
        output_dir=output_dir,
        experiment_name=experiment_name,
        format_type=format_type,
        visualize_ready=visualize_ready,
    )
