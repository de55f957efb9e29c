"""
Linear-programming constraint solver backed by scipy's HiGHS interface.

The board is modelled with one binary variable per (row, col, value):
x[(r * N + c) * N + (v - 1)] = 1 when cell (r, c) holds v. Four families of
equality constraints each sum to one:
- every cell holds exactly one value
- every value appears once per row
- every value appears once per column
- every value appears once per block
Filled cells are pinned by raising the lower bound of their variable to 1.

solve_any() runs the integer program with a zero objective; relaxed_scores()
drops integrality and maximises a random positive weighting, so repeated
calls spread the fractional mass differently across equally good values.
"""
import logging
import random
from typing import Optional, Tuple

import numpy as np
from scipy import sparse
from scipy.optimize import Bounds, LinearConstraint, linprog, milp

from core.constraints import ConstraintSolver, Solution
from core.types import AllocationFailedError, SolverUnavailableError

logger = logging.getLogger(__name__)

# HiGHS status code shared by milp() and linprog() for an infeasible model
STATUS_INFEASIBLE = 2

# Values above this count as "set" when reading back a binary variable
ROUNDING_THRESHOLD = 0.5


def variable_index(n: int, row: int, col: int, value: int) -> int:
    """Column of the (row, col, value) variable; value is 1-based."""
    return (row * n + col) * n + (value - 1)


def build_constraint_matrix(block_rows: int, block_cols: int) -> sparse.csr_matrix:
    """
    Build the 4*N*N x N**3 equality matrix for a board shape.

    Every row has exactly N ones; the right-hand side is all ones.
    """
    n = block_rows * block_cols
    rows, cols = [], []
    constraint = 0

    # Cell
    for r in range(n):
        for c in range(n):
            for v in range(1, n + 1):
                rows.append(constraint)
                cols.append(variable_index(n, r, c, v))
            constraint += 1

    # Row
    for r in range(n):
        for v in range(1, n + 1):
            for c in range(n):
                rows.append(constraint)
                cols.append(variable_index(n, r, c, v))
            constraint += 1

    # Column
    for c in range(n):
        for v in range(1, n + 1):
            for r in range(n):
                rows.append(constraint)
                cols.append(variable_index(n, r, c, v))
            constraint += 1

    # Block
    for r0 in range(0, n, block_rows):
        for c0 in range(0, n, block_cols):
            for v in range(1, n + 1):
                for r in range(r0, r0 + block_rows):
                    for c in range(c0, c0 + block_cols):
                        rows.append(constraint)
                        cols.append(variable_index(n, r, c, v))
                constraint += 1

    data = np.ones(len(rows), dtype=float)
    return sparse.coo_matrix((data, (rows, cols)), shape=(constraint, n ** 3)).tocsr()


class LinearProgrammingSolver(ConstraintSolver):
    """
    ConstraintSolver using scipy.optimize.milp and linprog(method='highs').

    Attributes:
        rng: Random source for relaxed objective weights (module random by default)
    """

    name = "lp"

    def __init__(self, rng=None):
        self.rng = rng if rng is not None else random
        self._matrix_cache = {}

    # =============================================================================
    # MODEL
    # =============================================================================

    def _constraints(self, grid) -> sparse.csr_matrix:
        key = (grid.block_rows, grid.block_cols)
        if key not in self._matrix_cache:
            self._matrix_cache[key] = build_constraint_matrix(*key)
        return self._matrix_cache[key]

    def _bounds(self, grid) -> Tuple[np.ndarray, np.ndarray]:
        n = grid.n
        lower = np.zeros(n ** 3)
        upper = np.ones(n ** 3)
        for row, col in grid.filled_cells():
            lower[variable_index(n, row, col, grid.values[row][col])] = 1.0
        return lower, upper

    def _model(self, grid):
        try:
            a_eq = self._constraints(grid)
            b_eq = np.ones(a_eq.shape[0])
            lower, upper = self._bounds(grid)
        except MemoryError as exc:
            raise AllocationFailedError("constraint model construction") from exc
        return a_eq, b_eq, lower, upper

    @staticmethod
    def _extract_solution(n: int, x: np.ndarray) -> Solution:
        cube = np.asarray(x).reshape(n, n, n)
        solution = [[0] * n for _ in range(n)]
        for r in range(n):
            for c in range(n):
                picked = np.flatnonzero(cube[r, c] > ROUNDING_THRESHOLD)
                if len(picked) != 1:
                    raise SolverUnavailableError(f"non-integral assignment at ({r}, {c})")
                solution[r][c] = int(picked[0]) + 1
        return solution

    # =============================================================================
    # SOLVING
    # =============================================================================

    def solve_any(self, grid) -> Optional[Solution]:
        """Solve the integer program; see ConstraintSolver.solve_any."""
        a_eq, b_eq, lower, upper = self._model(grid)
        n_vars = a_eq.shape[1]

        result = milp(
            c=np.zeros(n_vars),
            constraints=LinearConstraint(a_eq, b_eq, b_eq),
            integrality=np.ones(n_vars),
            bounds=Bounds(lower, upper),
        )
        logger.debug("milp status %s: %s", result.status, result.message)

        if result.status == STATUS_INFEASIBLE:
            return None
        if not result.success or result.x is None:
            logger.warning("Integer solve did not finish: %s", result.message)
            raise SolverUnavailableError(result.message)
        return self._extract_solution(grid.n, result.x)

    def relaxed_scores(self, grid) -> Optional[np.ndarray]:
        """Solve the continuous relaxation; see ConstraintSolver.relaxed_scores."""
        a_eq, b_eq, lower, upper = self._model(grid)
        n_vars = a_eq.shape[1]
        n = grid.n

        # linprog minimises, so negate a positive weighting in 1..N
        weights = np.array([1.0 + self.rng.random() * (n - 1) for _ in range(n_vars)])

        result = linprog(
            -weights,
            A_eq=a_eq,
            b_eq=b_eq,
            bounds=np.column_stack((lower, upper)),
            method="highs",
        )
        logger.debug("linprog status %s: %s", result.status, result.message)

        if result.status == STATUS_INFEASIBLE:
            return None
        if not result.success or result.x is None:
            logger.warning("Relaxed solve did not finish: %s", result.message)
            raise SolverUnavailableError(result.message)

        scores = np.clip(np.asarray(result.x).reshape(n, n, n), 0.0, 1.0)
        return scores
