"""
LinearProgrammingSolver tests on small boards (HiGHS through scipy).
"""

import random

import numpy as np
import pytest

from conftest import grid_from_rows
from core.constraints import BacktrackingConstraintSolver, create_solver
from core.lp_solver import LinearProgrammingSolver, build_constraint_matrix, variable_index
from core.sudoku_grid import SudokuGrid
from core.types import SolverUnavailableError


@pytest.fixture
def solver():
    return LinearProgrammingSolver(rng=random.Random(11))


def _assert_valid_completion(grid, solution):
    solved = SudokuGrid.from_values(grid.block_rows, grid.block_cols, solution)
    assert solved.is_complete()
    assert solved.recompute_errors() is False
    for r, c in grid.filled_cells():
        assert solution[r][c] == grid.values[r][c]


def test_constraint_matrix_shape_and_row_sums():
    a = build_constraint_matrix(2, 2)
    assert a.shape == (4 * 16, 64)
    assert np.all(np.asarray(a.sum(axis=1)).ravel() == 4)
    # Each variable appears once per family
    assert np.all(np.asarray(a.sum(axis=0)).ravel() == 4)


def test_variable_index_layout():
    assert variable_index(9, 0, 0, 1) == 0
    assert variable_index(9, 1, 2, 3) == (1 * 9 + 2) * 9 + 2
    assert variable_index(4, 3, 3, 4) == 63


def test_solve_any_on_empty_board(empty_4x4, solver):
    solution = solver.solve_any(empty_4x4)
    _assert_valid_completion(empty_4x4, solution)
    assert empty_4x4.empty_count == 16, "solver does not modify the grid"


def test_solve_any_respects_givens(solver, load_puzzle):
    g = load_puzzle("puzzle_4x4.txt")
    assert solver.solve_any(g) == [[1, 2, 3, 4], [3, 4, 1, 2], [2, 1, 4, 3], [4, 3, 2, 1]]


def test_solve_any_rectangular_blocks(solver, load_puzzle):
    g = load_puzzle("puzzle_2x3.json")
    solution = solver.solve_any(g)
    _assert_valid_completion(g, solution)
    assert solution[5][5] == 2


def test_unsolvable_board_returns_none(solver):
    g = grid_from_rows(2, 2, ["1230", "0004", "0000", "0000"])
    assert solver.solve_any(g) is None
    assert solver.is_solvable(g) is False


def test_relaxed_scores_shape_and_bounds(solver):
    g = grid_from_rows(2, 2, ["1200", "0000", "0030", "0000"])
    scores = solver.relaxed_scores(g)
    assert scores.shape == (4, 4, 4)
    assert np.all(scores >= 0.0) and np.all(scores <= 1.0)
    assert np.allclose(scores.sum(axis=2), 1.0, atol=1e-6)
    assert scores[0, 0, 0] == pytest.approx(1.0)
    assert scores[2, 2, 2] == pytest.approx(1.0)


def test_relaxed_scores_infeasible(solver):
    g = grid_from_rows(2, 2, ["1100", "0000", "0000", "0000"])
    assert solver.relaxed_scores(g) is None


def test_backtracking_solver_agrees_and_has_no_scores(load_puzzle):
    g = load_puzzle("puzzle_4x4.txt")
    bt = BacktrackingConstraintSolver()
    assert bt.solve_any(g) == [[1, 2, 3, 4], [3, 4, 1, 2], [2, 1, 4, 3], [4, 3, 2, 1]]
    with pytest.raises(SolverUnavailableError):
        bt.relaxed_scores(g)


def test_create_solver_by_name():
    assert isinstance(create_solver("lp"), LinearProgrammingSolver)
    assert isinstance(create_solver("backtracking"), BacktrackingConstraintSolver)
    with pytest.raises(ValueError):
        create_solver("simplex")
