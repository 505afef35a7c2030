"""
Mutable search state: variable values plus the history needed to undo moves.

Values are kept in a numpy ``int8`` array (1 true, 0 false, -1 unassigned).
The array is only changed through ``apply_move`` and ``undo_last_move`` so the
history stack can always take the search back along its path.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import NamedTuple

import numpy as np

from greedysat.formula import UNASSIGNED
from greedysat.utils.exceptions import EmptyHistoryError

TRUE, FALSE = 1, 0


class Move(NamedTuple):
    """Proposed new value for one variable."""

    variable: int
    value: int


class HistoryEntry(NamedTuple):
    """Value a variable held before a move changed it."""

    variable: int
    previous_value: int


def _to_value(value) -> int:
    if value is None or value == UNASSIGNED:
        return UNASSIGNED
    return TRUE if value else FALSE


class Assignment:
    """
    Fixed-length variable assignment with an undo stack.
    """

    def __init__(self, values):
        """
        Initialize the assignment.

        Args:
            values: Initial values; booleans, 0/1, or -1/None for unassigned
        """
        self._values = np.array([_to_value(v) for v in values], dtype=np.int8)
        self._history: list[HistoryEntry] = []

    @classmethod
    def unassigned(cls, num_variables: int) -> "Assignment":
        return cls([UNASSIGNED] * num_variables)

    @classmethod
    def random(cls, num_variables: int, rng: np.random.Generator) -> "Assignment":
        """Uniformly random total assignment drawn from ``rng``."""
        return cls(rng.integers(0, 2, size=num_variables).tolist())

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, variable: int) -> int:
        return int(self._values[variable])

    def __iter__(self) -> Iterator[int]:
        return iter(self._values.tolist())

    def __repr__(self) -> str:
        return f"Assignment('{self}')"

    def __str__(self) -> str:
        symbols = {TRUE: "T", FALSE: "F", UNASSIGNED: "U"}
        return "".join(symbols[v] for v in self._values.tolist())

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the value array."""
        view = self._values.view()
        view.flags.writeable = False
        return view

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._history)

    @property
    def history_length(self) -> int:
        return len(self._history)

    def is_total(self) -> bool:
        """True when no variable is unassigned."""
        return not bool(np.any(self._values == UNASSIGNED))

    def fingerprint(self) -> bytes:
        """
        Canonical key for the current values.

        Two assignments share a fingerprint exactly when every variable holds
        the same value.
        """
        return self._values.tobytes()

    def fingerprint_after(self, move: Move) -> bytes:
        """Fingerprint of the state ``move`` would lead to, without applying it."""
        values = self._values.copy()
        values[move.variable] = _to_value(move.value)
        return values.tobytes()

    def flip_moves(self, variable: int) -> list[Move]:
        """
        Moves that change ``variable``: its opposite value, or both values
        (true first) when it is unassigned.
        """
        current = self[variable]
        if current == UNASSIGNED:
            return [Move(variable, TRUE), Move(variable, FALSE)]
        return [Move(variable, FALSE if current == TRUE else TRUE)]

    def apply_move(self, move: Move) -> None:
        """Record the variable's current value, then set the new one."""
        self._history.append(HistoryEntry(move.variable, self[move.variable]))
        self._values[move.variable] = _to_value(move.value)

    def undo_last_move(self) -> None:
        """
        Restore the value changed by the most recent move.

        The history is left exactly as if that move had never been applied.

        Raises:
            EmptyHistoryError: If no move has been recorded
        """
        if not self._history:
            raise EmptyHistoryError()
        entry = self._history.pop()
        self.apply_move(Move(entry.variable, entry.previous_value))
        # drop the entry recorded by the restoring move
        self._history.pop()

    def clear_history(self) -> None:
        self._history.clear()

    @contextmanager
    def tentative(self, move: Move):
        """Apply ``move`` for the duration of the block, then undo it."""
        self.apply_move(move)
        try:
            yield self
        finally:
            self.undo_last_move()

    def to_bools(self) -> list[bool | None]:
        """Values as Python booleans, None for unassigned variables."""
        return [None if v == UNASSIGNED else bool(v) for v in self._values.tolist()]

    def to_dimacs(self) -> list[int]:
        """
        Model in DIMACS form: ``i + 1`` if true, ``-(i + 1)`` if false.
        Unassigned variables are left out.
        """
        return [
            i + 1 if v == TRUE else -(i + 1)
            for i, v in enumerate(self._values.tolist())
            if v != UNASSIGNED
        ]
