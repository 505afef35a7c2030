"""
Utilities for the greedysat package.
"""

from greedysat.utils import exceptions, logging_utils
from greedysat.utils.cnf import (
    formula_to_dimacs,
    load_cnf_file,
    parse_dimacs,
    save_cnf_file,
)

__all__ = [
    "load_cnf_file",
    "save_cnf_file",
    "parse_dimacs",
    "formula_to_dimacs",
    "exceptions",
    "logging_utils",
]
