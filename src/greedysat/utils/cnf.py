"""
CNF file handling utilities.

This module reads and writes formulas in the DIMACS CNF format. Every
problem in the input is reported before a formula is returned, so a solver is
never built from a partially read file.
"""

import logging
import os
from typing import TextIO

from greedysat.formula import Clause, Formula, Literal

from .exceptions import (
    ClauseCountMismatchError,
    DimacsFormatError,
    InvalidClauseError,
    MalformedHeaderError,
)

logger = logging.getLogger(__name__)


def load_cnf_file(file_path: str) -> Formula:
    """
    Load a CNF formula from a DIMACS file.

    Args:
        file_path: Path to the CNF file in DIMACS format

    Returns:
        Parsed formula

    Raises:
        FileNotFoundError: If the file doesn't exist
        OSError: If the file cannot be read
        DimacsFormatError: If the file is not text or its format is invalid
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"CNF file not found: {file_path}")

    try:
        with open(file_path, encoding="utf-8") as f:
            formula = parse_dimacs(f)
    except UnicodeDecodeError as e:
        raise DimacsFormatError(f"{file_path} is not UTF-8 text: {e.reason}") from e

    logger.info(
        f"Loaded {file_path}: {formula.num_variables} variables, {len(formula)} clauses"
    )
    return formula


def _parse_header(line: str, line_number: int) -> tuple[int, int]:
    parts = line.split()
    if len(parts) != 4 or parts[0] != "p":
        raise MalformedHeaderError(f"Invalid problem line: {line}", line_number)
    if parts[1] != "cnf":
        raise MalformedHeaderError(f"file format unknown: {parts[1]}", line_number)

    try:
        num_variables = int(parts[2])
        num_clauses = int(parts[3])
    except ValueError:
        raise MalformedHeaderError(
            f"Invalid numbers in problem line: {line}", line_number
        ) from None

    if num_variables < 0 or num_clauses < 0:
        raise MalformedHeaderError(f"Negative counts in problem line: {line}", line_number)

    return num_variables, num_clauses


def _parse_clause_line(line: str, line_number: int) -> list[int]:
    """Signed literals of one clause line, up to the first 0."""
    values = []
    for token in line.split():
        try:
            value = int(token)
        except ValueError:
            raise InvalidClauseError(
                f"Invalid literal '{token}'", line_number=line_number
            ) from None
        # 0 terminates the clause; anything after it on the line is ignored
        if value == 0:
            break
        values.append(value)
    return values


def parse_dimacs(source: str | TextIO) -> Formula:
    """
    Parse CNF formula from DIMACS format.

    Comment lines start with ``c``. The single ``p cnf <vars> <clauses>``
    line declares the problem size. Each other non-blank line is one clause;
    lines without literals are dropped.

    Args:
        source: DIMACS content as a string or file-like object

    Returns:
        Parsed formula, with its comment lines attached

    Raises:
        MalformedHeaderError: If the problem line is missing or invalid
        InvalidClauseError: If a clause has a bad token or an undeclared variable
        ClauseCountMismatchError: If the clause count differs from the declared one
    """
    # Convert string to lines if needed
    if isinstance(source, str):
        lines = source.splitlines()
    else:
        lines = source.readlines()

    comments = []
    header = None
    clause_lines = []

    for line_number, line in enumerate(lines, start=1):
        line = line.strip()

        # Skip empty lines
        if not line:
            continue

        if line.startswith("c"):
            comments.append(line[1:].strip())
            continue

        if line.startswith("p"):
            if header is not None:
                raise MalformedHeaderError("Multiple problem lines in CNF file", line_number)
            header = _parse_header(line, line_number)
            continue

        values = _parse_clause_line(line, line_number)
        if values:
            clause_lines.append((line_number, values))

    if header is None:
        raise MalformedHeaderError("No problem line found in CNF file")

    num_variables, num_clauses = header

    clauses = []
    for line_number, values in clause_lines:
        for value in values:
            if abs(value) > num_variables:
                raise InvalidClauseError(
                    f"Variable {abs(value)} exceeds declared count {num_variables}",
                    clause=values,
                    line_number=line_number,
                )
        clauses.append(Clause(Literal.from_dimacs(v) for v in values))

    if len(clauses) != num_clauses:
        raise ClauseCountMismatchError(num_clauses, len(clauses))

    return Formula(num_variables, clauses, comments=comments)


def formula_to_dimacs(formula: Formula, comments: list[str] | None = None) -> str:
    """
    Convert a formula to DIMACS format.

    Args:
        formula: Formula to write
        comments: Comment lines to include; defaults to the formula's own

    Returns:
        DIMACS format string representation
    """
    if comments is None:
        comments = list(formula.comments)

    lines = [f"c {comment}" if comment else "c" for comment in comments]
    lines.append(f"p cnf {formula.num_variables} {len(formula)}")
    for clause in formula:
        lines.append(" ".join(map(str, clause.to_dimacs())) + " 0")

    return "\n".join(lines) + "\n"


def save_cnf_file(
    file_path: str, formula: Formula, comments: list[str] | None = None
) -> None:
    """
    Save a CNF formula to a DIMACS file.

    Args:
        file_path: Path to save the CNF file
        formula: Formula to write
        comments: Comment lines to include
    """
    dimacs_str = formula_to_dimacs(formula, comments)

    with open(file_path, "w", encoding="utf-8") as f:
        f.write(dimacs_str)
