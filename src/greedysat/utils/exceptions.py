"""
Custom exceptions for greedysat.

Input errors are raised while reading a formula, before any search starts.
Running out of moves is a normal solver outcome and has no exception here.
"""


class SATBaseException(Exception):
    """Base class for all greedysat specific exceptions."""

    def __init__(self, message: str = None):
        """
        Initialize the exception.

        Args:
            message: Optional error message
        """
        self.message = message
        super().__init__(message)


class DimacsFormatError(SATBaseException, ValueError):
    """Exception raised when DIMACS input cannot be turned into a formula."""

    def __init__(self, message: str = "Invalid DIMACS input", line_number: int = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            line_number: 1-based line of the input where the problem was found
        """
        self.line_number = line_number

        if line_number is not None:
            message = f"{message} (line {line_number})"

        super().__init__(message)


class MalformedHeaderError(DimacsFormatError):
    """
    Exception raised when the problem line is missing, repeated, misshapen,
    or declares a format other than cnf.
    """

    def __init__(self, message: str = "Malformed problem line", line_number: int = None):
        super().__init__(message, line_number)


class ClauseCountMismatchError(DimacsFormatError):
    """Exception raised when the declared clause count differs from the parsed one."""

    def __init__(self, declared: int, parsed: int):
        """
        Initialize the exception.

        Args:
            declared: Clause count from the problem line
            parsed: Number of non-empty clauses actually read
        """
        self.declared = declared
        self.parsed = parsed
        super().__init__(f"cnf claims {declared} clauses, but file contains {parsed}")


class InvalidClauseError(DimacsFormatError):
    """
    Exception raised when an invalid clause is detected.

    This occurs for empty clauses, unreadable tokens, or literals that
    reference a variable outside the declared range.
    """

    def __init__(
        self,
        message: str = "Invalid clause detected",
        clause=None,
        line_number: int = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Error message
            clause: The invalid clause
            line_number: 1-based line of the input, if read from DIMACS
        """
        self.clause = clause

        if clause is not None:
            message = f"{message}: {clause}"

        super().__init__(message, line_number)


class EmptyHistoryError(SATBaseException, RuntimeError):
    """
    Exception raised when a move is undone with nothing on the history stack.

    The greedy driver only backtracks with a non-empty history, so seeing this
    means the driver itself is broken.
    """

    def __init__(self, message: str = "Cannot undo: move history is empty"):
        super().__init__(message)


class ConfigurationError(SATBaseException):
    """Exception raised when there's a problem with solver configuration."""

    def __init__(self, message: str = "Invalid configuration", key: str = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            key: Configuration key that holds the bad value
        """
        self.key = key

        if key is not None:
            message = f"{message} for '{key}'"

        super().__init__(message)
