"""
Formula model for CNF problems and the satisfiability evaluator.

Variables are referenced by zero-based index. An assignment is any sequence
indexable by variable whose values are booleans, 0/1, or an unassigned
marker (``-1`` or ``None``). The evaluator functions are pure: they never
modify the formula or the assignment.
"""

from collections.abc import Iterable, Sequence
from typing import Any, NamedTuple

from greedysat.utils.exceptions import InvalidClauseError

# Value stored for a variable that has not been given a truth value yet
UNASSIGNED = -1


def is_unassigned(value: Any) -> bool:
    """Returns True if ``value`` is the unassigned marker."""
    return value is None or value == UNASSIGNED


class Literal(NamedTuple):
    """A variable or its negation."""

    variable: int
    negated: bool = False

    @classmethod
    def from_dimacs(cls, value: int) -> "Literal":
        """
        Build a literal from a signed DIMACS integer.

        Args:
            value: Non-zero integer; ``-3`` is variable 2 negated

        Returns:
            Literal for that integer
        """
        if value == 0:
            raise InvalidClauseError("0 is a clause terminator, not a literal")
        return cls(abs(value) - 1, value < 0)

    def to_dimacs(self) -> int:
        """Signed 1-based integer for this literal."""
        return -(self.variable + 1) if self.negated else self.variable + 1

    def evaluate(self, value: Any) -> bool | None:
        """
        Truth value of the literal when its variable holds ``value``.

        Returns:
            True or False, or None if the variable is unassigned
        """
        if is_unassigned(value):
            return None
        return bool(value) != self.negated

    def __str__(self) -> str:
        return str(self.to_dimacs())


class Clause(tuple):
    """
    A non-empty disjunction of literals.

    Clauses are immutable tuples, so they can be shared between formulas and
    used as dictionary keys.
    """

    def __new__(cls, literals: Iterable[Literal]):
        literals = tuple(literals)
        if not literals:
            raise InvalidClauseError("Clause must contain at least one literal")
        for literal in literals:
            if not isinstance(literal, Literal):
                raise InvalidClauseError("Clause members must be literals", clause=literals)
        return super().__new__(cls, literals)

    @classmethod
    def from_dimacs(cls, values: Iterable[int]) -> "Clause":
        """Build a clause from signed DIMACS integers (without the trailing 0)."""
        return cls(Literal.from_dimacs(v) for v in values)

    def to_dimacs(self) -> list[int]:
        return [literal.to_dimacs() for literal in self]

    @property
    def variables(self) -> list[int]:
        """Variable indices of the clause, in literal order."""
        return [literal.variable for literal in self]

    def __repr__(self) -> str:
        return f"Clause({self.to_dimacs()})"


class Formula:
    """
    A CNF formula: an ordered collection of clauses over ``num_variables``
    variables.

    A formula is built once and never mutated. Every literal must reference a
    variable below ``num_variables``.
    """

    def __init__(
        self,
        num_variables: int,
        clauses: Iterable[Clause],
        comments: Sequence[str] | None = None,
    ):
        """
        Initialize the formula.

        Args:
            num_variables: Declared number of variables (assignment length)
            clauses: Clauses of the formula
            comments: Comment lines that accompanied the formula, if any

        Raises:
            InvalidClauseError: If a literal references an undeclared variable
        """
        if num_variables < 0:
            raise ValueError(f"Number of variables must be non-negative, got {num_variables}")

        self._num_variables = num_variables
        self._clauses = tuple(
            c if isinstance(c, Clause) else Clause(c) for c in clauses
        )
        self._comments = tuple(comments or ())

        for clause in self._clauses:
            for literal in clause:
                if not 0 <= literal.variable < num_variables:
                    raise InvalidClauseError(
                        f"Literal {literal} out of range for {num_variables} variables",
                        clause=clause.to_dimacs(),
                    )

    @classmethod
    def from_dimacs_clauses(
        cls, num_variables: int, clauses: Iterable[Iterable[int]]
    ) -> "Formula":
        """
        Build a formula from lists of signed DIMACS integers.

        Example:
            ``Formula.from_dimacs_clauses(2, [[1, 2], [-1, -2]])``
        """
        return cls(num_variables, (Clause.from_dimacs(c) for c in clauses))

    def to_dimacs_clauses(self) -> list[list[int]]:
        return [clause.to_dimacs() for clause in self._clauses]

    @property
    def num_variables(self) -> int:
        return self._num_variables

    @property
    def clauses(self) -> tuple[Clause, ...]:
        return self._clauses

    @property
    def comments(self) -> tuple[str, ...]:
        return self._comments

    def __len__(self) -> int:
        return len(self._clauses)

    def __iter__(self):
        return iter(self._clauses)

    def __getitem__(self, index: int) -> Clause:
        return self._clauses[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Formula):
            return NotImplemented
        return (
            self._num_variables == other._num_variables
            and self._clauses == other._clauses
        )

    def __hash__(self) -> int:
        return hash((self._num_variables, self._clauses))

    def __repr__(self) -> str:
        return f"Formula(num_variables={self._num_variables}, clauses={len(self._clauses)})"


def is_satisfied(clause: Clause, assignment: Sequence[Any]) -> bool:
    """
    Check whether a clause is satisfied by an assignment.

    A literal over an unassigned variable neither satisfies nor falsifies the
    clause.

    Args:
        clause: Clause to evaluate
        assignment: Values indexed by variable

    Returns:
        True if at least one literal matches its variable's value
    """
    for literal in clause:
        value = assignment[literal.variable]
        if is_unassigned(value):
            continue
        if bool(value) != literal.negated:
            return True
    return False


def is_formula_satisfied(formula: Formula, assignment: Sequence[Any]) -> bool:
    """True iff every clause is satisfied. An empty formula is satisfied."""
    return all(is_satisfied(clause, assignment) for clause in formula)


def satisfied_count(formula: Formula, assignment: Sequence[Any]) -> int:
    return sum(1 for clause in formula if is_satisfied(clause, assignment))


def unsatisfied_count(formula: Formula, assignment: Sequence[Any]) -> int:
    """
    Number of clauses not satisfied by the assignment.

    This is the objective the local search minimizes; 0 means solved.
    """
    return len(formula) - satisfied_count(formula, assignment)


def unsatisfied_clauses(formula: Formula, assignment: Sequence[Any]) -> list[int]:
    """Indices of the clauses not satisfied by the assignment."""
    return [
        i for i, clause in enumerate(formula) if not is_satisfied(clause, assignment)
    ]


def candidate_variables(formula: Formula, assignment: Sequence[Any]) -> list[int]:
    """
    Distinct variables that appear in a currently unsatisfied clause.

    Only these variables can repair a violated clause, so they form the
    neighborhood of the greedy search. The order is fixed: first appearance
    when scanning unsatisfied clauses in formula order and their literals in
    clause order. Ties between equally good moves are broken by this order.

    Args:
        formula: Formula being solved
        assignment: Current values indexed by variable

    Returns:
        List of variable indices without duplicates
    """
    seen = set()
    candidates = []
    for index in unsatisfied_clauses(formula, assignment):
        for literal in formula[index]:
            if literal.variable not in seen:
                seen.add(literal.variable)
                candidates.append(literal.variable)
    return candidates
