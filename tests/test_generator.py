"""
PuzzleGenerator tests on 4x4 boards with the backtracking solver:
- keep_count bounds (all cells / no cells)
- entry rejection and retry budget
- failed retries leave the board untouched
"""

import random

import pytest

from conftest import grid_from_rows
from core.commands import MoveHistory
from core.constraints import BacktrackingConstraintSolver, ConstraintSolver
from core.generator import AttemptOutcome, PuzzleGenerator
from core.types import GenerationFailedError, NotEnoughEmptyCellsError


class CountingSolver(BacktrackingConstraintSolver):
    def __init__(self):
        self.calls = 0

    def solve_any(self, grid):
        self.calls += 1
        return super().solve_any(grid)


class NeverSolves(ConstraintSolver):
    def __init__(self):
        self.calls = 0

    def solve_any(self, grid):
        self.calls += 1
        return None

    def relaxed_scores(self, grid):
        return None


@pytest.fixture
def generator():
    return PuzzleGenerator(BacktrackingConstraintSolver(), rng=random.Random(7))


def test_keep_all_cells_clears_nothing(empty_4x4, generator):
    g = empty_4x4
    h = MoveHistory()
    move = generator.generate(g, 3, 16, h)

    assert g.is_complete()
    assert g.recompute_errors() is False
    assert len(move) == 16, "every previously empty cell changed"
    assert all(ch.before == 0 and ch.after == g.values[ch.row][ch.col] for ch in move)
    assert len(h) == 1 and h.cursor == 1


def test_keep_zero_records_nothing_and_restores_grid(generator):
    g = grid_from_rows(2, 2, ["1000", "0000", "0000", "0004"])
    before = g.snapshot()
    h = MoveHistory()
    move = generator.generate(g, 4, 0, h)

    assert move.is_empty()
    assert len(h) == 0
    assert g.values == before
    assert g.empty_count == 14


def test_keep_count_cells_remain_and_board_is_solvable(empty_4x4, generator):
    g = empty_4x4
    generator.generate(g, 2, 6)
    assert 16 - g.empty_count == 6
    assert g.recompute_errors() is False
    assert BacktrackingConstraintSolver().is_solvable(g)


def test_existing_values_survive_when_keeping_everything(generator):
    g = grid_from_rows(2, 2, ["1200", "0000", "0000", "0000"])
    move = generator.generate(g, 1, 16)
    assert g.values[0][0] == 1 and g.values[0][1] == 2
    assert all((ch.row, ch.col) not in {(0, 0), (0, 1)} for ch in move)
    assert len(move) == 14


def test_move_is_symmetric_difference(generator):
    g = grid_from_rows(2, 2, ["1200", "0000", "0000", "0000"])
    before = g.snapshot()
    move = generator.generate(g, 2, 5)
    changed = {(r, c) for r, c in g.cells() if before[r][c] != g.values[r][c]}
    assert {(ch.row, ch.col) for ch in move} == changed
    for ch in move:
        assert ch.before == before[ch.row][ch.col]
        assert ch.after == g.values[ch.row][ch.col]


def test_not_enough_empty_cells_rejected_without_a_retry():
    solver = CountingSolver()
    gen = PuzzleGenerator(solver, rng=random.Random(1))
    g = grid_from_rows(2, 2, ["1234", "3412", "2100", "4300"])
    h = MoveHistory()
    with pytest.raises(NotEnoughEmptyCellsError):
        gen.generate(g, 5, 10, h)
    assert solver.calls == 0
    assert len(h) == 0


def test_budget_exhausted_reports_failure_and_restores(empty_4x4):
    solver = NeverSolves()
    gen = PuzzleGenerator(solver, rng=random.Random(3), max_tries=25)
    with pytest.raises(GenerationFailedError) as info:
        gen.generate(empty_4x4, 4, 8)
    assert info.value.tries == 25
    assert solver.calls == 25
    assert empty_4x4.empty_count == 16
    assert all(v == 0 for row in empty_4x4.values for v in row)


def test_fill_failure_outcome_when_a_cell_has_no_candidate():
    # (0,3) can only be 4, which the column already holds
    g = grid_from_rows(2, 2, ["1230", "0004", "0000", "0000"])
    gen = PuzzleGenerator(BacktrackingConstraintSolver(), rng=random.Random(0))
    trial = g.copy()
    trial_outcomes = set()
    for _ in range(30):
        trial.restore(g.snapshot())
        trial_outcomes.add(gen._random_fill(trial, trial.empty_count))
    assert AttemptOutcome.FILL_FAILED in trial_outcomes


def test_invalid_budget_rejected():
    with pytest.raises(ValueError):
        PuzzleGenerator(BacktrackingConstraintSolver(), max_tries=0)
