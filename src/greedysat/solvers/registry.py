"""
Algorithm lookup for ``solver.name``.

Solver modules register their class under an algorithm name when imported;
callers then build solvers by name without importing the classes.
"""

import logging
from collections.abc import Callable

from greedysat.utils.exceptions import ConfigurationError

from .base import LocalSearchSolver
from .config import get_config

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "greedy"


class SolverRegistry:
    """Algorithm name -> LocalSearchSolver subclass."""

    _registry: dict[str, type[LocalSearchSolver]] = {}

    @classmethod
    def register(cls, name: str, solver_cls: type) -> None:
        if not (isinstance(solver_cls, type) and issubclass(solver_cls, LocalSearchSolver)):
            raise TypeError(f"{solver_cls!r} is not a LocalSearchSolver subclass")

        previous = cls._registry.get(name)
        if previous is not None and previous is not solver_cls:
            logger.warning(
                f"Algorithm '{name}' moved from {previous.__name__} to {solver_cls.__name__}"
            )
        cls._registry[name] = solver_cls

    @classmethod
    def register_as(
        cls, name: str
    ) -> Callable[[type[LocalSearchSolver]], type[LocalSearchSolver]]:
        """Class decorator form of ``register``."""

        def decorator(solver_cls: type[LocalSearchSolver]) -> type[LocalSearchSolver]:
            cls.register(name, solver_cls)
            return solver_cls

        return decorator

    @classmethod
    def get(cls, name: str | None = None) -> type[LocalSearchSolver]:
        """
        Look up the class for an algorithm.

        Args:
            name: Algorithm name; None means ``solver.name`` from the
                configuration

        Raises:
            ConfigurationError: If no solver is registered under the name
        """
        if name is None:
            name = get_config().get("solver.name", DEFAULT_ALGORITHM)

        solver_cls = cls._registry.get(name)
        if solver_cls is None:
            raise ConfigurationError(
                f"Unknown algorithm '{name}', expected one of "
                f"{', '.join(cls.list_solvers())}",
                key="solver.name",
            )
        return solver_cls

    @classmethod
    def list_solvers(cls) -> list[str]:
        return sorted(cls._registry)

    @classmethod
    def create(cls, formula, name: str | None = None, **kwargs) -> LocalSearchSolver:
        return cls.get(name)(formula, **kwargs)


register_solver = SolverRegistry.register_as
