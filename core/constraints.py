"""
Constraint solving for the Sudoku puzzle engine.

ConstraintSolver is the capability the engine calls when it needs one full
completion of a grid (generation, hints, validation) or fractional per-value
scores (guessing). Implementations never modify the grid they are given.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

from core.backtracking import find_first_solution
from core.types import SolverUnavailableError

logger = logging.getLogger(__name__)

Solution = List[List[int]]


class ConstraintSolver(ABC):
    """Abstract base class for constraint solvers."""

    name = "abstract"

    @abstractmethod
    def solve_any(self, grid) -> Optional[Solution]:
        """
        Find one legal completion consistent with every filled cell.

        Returns:
            The completed value matrix, or None if the grid is unsolvable

        Raises:
            SolverUnavailableError: If the solver could not reach an answer
        """
        pass

    @abstractmethod
    def relaxed_scores(self, grid) -> Optional[np.ndarray]:
        """
        Score every (row, col, value) of a relaxed, non-integer formulation.

        Returns:
            Array of shape (N, N, N); scores[r, c, v - 1] is the weight of
            value v in cell (r, c). None if the grid is unsolvable.

        Raises:
            SolverUnavailableError: If the solver could not reach an answer
        """
        pass

    def is_solvable(self, grid) -> bool:
        return self.solve_any(grid) is not None


class BacktrackingConstraintSolver(ConstraintSolver):
    """
    Existence-only solver built on the backtracking search.

    It has no relaxed formulation, so relaxed_scores() reports the solver
    as unavailable.
    """

    name = "backtracking"

    def solve_any(self, grid) -> Optional[Solution]:
        solution = find_first_solution(grid.copy())
        logger.debug("Backtracking solve: %s", "solved" if solution else "unsolvable")
        return solution

    def relaxed_scores(self, grid) -> Optional[np.ndarray]:
        raise SolverUnavailableError("backtracking solver has no relaxed scores")


def create_solver(name: str, rng=None) -> ConstraintSolver:
    """
    Build a solver by configuration name.

    Args:
        name: "lp" or "backtracking"
        rng: Random source for the relaxed objective (LP only)

    Raises:
        ValueError: For an unknown solver name
    """
    if name == "backtracking":
        return BacktrackingConstraintSolver()
    if name == "lp":
        # Deferred: lp_solver imports this module for the base class
        from core.lp_solver import LinearProgrammingSolver
        return LinearProgrammingSolver(rng=rng)
    raise ValueError(f"Unknown solver: {name!r} (expected 'lp' or 'backtracking')")
