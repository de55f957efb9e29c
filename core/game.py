"""
GameState - the single owned game-state value of the Sudoku engine.

Holds one grid, one move history and the current mode, and exposes every
user-level operation. Operations check their mode first and raise GameError
subclasses for recoverable failures; the state is unchanged in that case.
"""
import functools
import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from core import guessing
from core.autofill import autofill
from core.backtracking import count_solutions
from core.commands import Move, MoveHistory
from core.constraints import ConstraintSolver, create_solver
from core.generator import PuzzleGenerator
from core.settings import EngineConfig
from core.sudoku_grid import SudokuGrid
from core.types import (
    CellFixedError,
    CellNotEmptyError,
    ErroneousBoardError,
    GameMode,
    InvalidModeError,
    NothingToRedoError,
    NothingToUndoError,
    PuzzleStatus,
    UnsolvableBoardError,
)
from render.board_render import BoardRenderer
from utils.file_io import load_puzzle, save_puzzle

logger = logging.getLogger(__name__)

SOLVE_ONLY = (GameMode.SOLVE,)
SOLVE_OR_EDIT = (GameMode.SOLVE, GameMode.EDIT)
EDIT_ONLY = (GameMode.EDIT,)


def requires_mode(*modes: GameMode):
    """Restrict a GameState method to the given modes."""
    def decorator(method):
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            if self.mode not in modes:
                raise InvalidModeError(method.__name__, modes)
            return method(self, *args, **kwargs)
        wrapper.allowed_modes = modes
        return wrapper
    return decorator


@dataclass
class MoveResult:
    """A recorded (possibly empty) Move and the completion status after it."""
    move: Move
    status: PuzzleStatus = PuzzleStatus.IN_PROGRESS


class GameState:
    """
    Game state manager.

    Attributes:
        config: EngineConfig in use
        grid: Current grid (None until solve/edit)
        history: Undo/redo history of the current grid
        mode: Current GameMode
        mark_errors: Whether erroneous cells are marked when rendering in Solve mode
        solver: ConstraintSolver for validation, hints, guesses and generation
        generator: PuzzleGenerator sharing the same solver and random source
        rng: Random source (module random by default)
    """

    def __init__(self, config: Optional[EngineConfig] = None, solver: Optional[ConstraintSolver] = None,
                 rng=None):
        self.config: EngineConfig = config if config is not None else EngineConfig()
        self.rng = rng if rng is not None else random
        self.solver: ConstraintSolver = solver if solver is not None else create_solver(self.config.solver, self.rng)
        self.generator = PuzzleGenerator(self.solver, rng=self.rng, max_tries=self.config.max_generate_tries)

        self.grid: Optional[SudokuGrid] = None
        self.history: MoveHistory = MoveHistory()
        self.mode: GameMode = GameMode.INIT
        self.mark_errors: bool = self.config.mark_errors

    # =============================================================================
    # LOADING
    # =============================================================================

    def _start(self, grid: SudokuGrid, mode: GameMode) -> None:
        self.grid = grid
        self.history.reset()
        self.mode = mode
        self.grid.recompute_errors()
        logger.info("Started %s mode on a %dx%d board", mode.value, grid.n, grid.n)

    def solve(self, path: str) -> None:
        """Load a puzzle with its fixed cells and enter Solve mode."""
        self._start(load_puzzle(path, keep_fixed=True), GameMode.SOLVE)

    def edit(self, path: Optional[str] = None) -> None:
        """Load a puzzle (fixed markers ignored) or an empty default board; enter Edit mode."""
        if path:
            grid = load_puzzle(path, keep_fixed=False)
        else:
            grid = SudokuGrid(self.config.default_block_rows, self.config.default_block_cols)
        self._start(grid, GameMode.EDIT)

    # =============================================================================
    # CHECKS
    # =============================================================================

    def is_erroneous(self) -> bool:
        """Refresh the error matrix and report whether any filled cell conflicts."""
        return self.grid.recompute_errors()

    def _require_consistent(self) -> None:
        if self.is_erroneous():
            raise ErroneousBoardError()

    def _require_empty_cell(self, row: int, col: int) -> None:
        self._require_consistent()
        if self.grid.is_fixed(row, col):
            raise CellFixedError((row, col))
        if not self.grid.is_empty(row, col):
            raise CellNotEmptyError((row, col))

    def _completion_status(self) -> PuzzleStatus:
        """After a Solve-mode move: finish the game when the board is complete and valid."""
        if self.mode is not GameMode.SOLVE or not self.grid.is_complete():
            return PuzzleStatus.IN_PROGRESS
        if self.is_erroneous():
            return PuzzleStatus.ERRONEOUS
        logger.info("Puzzle solved: %s", self.get_statistics())
        self.mode = GameMode.INIT
        return PuzzleStatus.SOLVED

    # =============================================================================
    # EDITING
    # =============================================================================

    @requires_mode(*SOLVE_ONLY)
    def set_mark_errors(self, flag: bool) -> None:
        self.mark_errors = bool(flag)

    @requires_mode(*SOLVE_OR_EDIT)
    def set_value(self, row: int, col: int, value: int) -> MoveResult:
        """
        Set one cell and record it as a Move.

        Args:
            row: Row coordinate
            col: Column coordinate
            value: 0..N, 0 clears the cell

        Raises:
            CellFixedError: In Solve mode, if the cell is fixed
        """
        if self.mode is GameMode.SOLVE and self.grid.is_fixed(row, col):
            raise CellFixedError((row, col))

        move = Move(f"set {col + 1} {row + 1} {value}")
        move.add_change(self.grid.set_cell(row, col, value))
        self.history.record(move)
        self.grid.recompute_errors()
        return MoveResult(move, self._completion_status())

    @requires_mode(*EDIT_ONLY)
    def generate(self, fill_count: int, keep_count: int) -> Move:
        """Run the puzzle generator on the current board (see PuzzleGenerator.generate)."""
        move = self.generator.generate(self.grid, fill_count, keep_count, self.history)
        self.grid.recompute_errors()
        return move

    @requires_mode(*SOLVE_ONLY)
    def autofill(self) -> MoveResult:
        """
        Fill every cell that has a single legal value.

        Raises:
            ErroneousBoardError: If the board already conflicts
        """
        self._require_consistent()
        move = autofill(self.grid, self.history)
        self.grid.recompute_errors()
        return MoveResult(move, self._completion_status())

    @requires_mode(*SOLVE_ONLY)
    def guess(self, threshold: float) -> MoveResult:
        """
        Fill cells from relaxed solver scores of at least threshold.

        Raises:
            ErroneousBoardError: If the board already conflicts
            UnsolvableBoardError: If the relaxed model is infeasible
        """
        self._require_consistent()
        move = guessing.guess(self.solver, self.grid, threshold, self.rng, self.history)
        self.grid.recompute_errors()
        return MoveResult(move, self._completion_status())

    # =============================================================================
    # UNDO/REDO
    # =============================================================================

    @requires_mode(*SOLVE_OR_EDIT)
    def undo(self) -> Move:
        """Revert the last applied Move and return it."""
        if not self.history.can_undo():
            raise NothingToUndoError()
        move = self.history.undo()
        for change in reversed(move.changes):
            self.grid.apply_change(change, reverse=True)
        self.grid.recompute_errors()
        return move

    @requires_mode(*SOLVE_OR_EDIT)
    def redo(self) -> Move:
        """Reapply the next Move and return it."""
        if not self.history.can_redo():
            raise NothingToRedoError()
        move = self.history.redo()
        for change in move.changes:
            self.grid.apply_change(change)
        self.grid.recompute_errors()
        return move

    @requires_mode(*SOLVE_OR_EDIT)
    def reset(self) -> List[Move]:
        """Undo every applied Move; the redo branch is kept."""
        undone: List[Move] = []
        while self.history.can_undo():
            move = self.history.undo()
            for change in reversed(move.changes):
                self.grid.apply_change(change, reverse=True)
            undone.append(move)
        self.grid.recompute_errors()
        return undone

    # =============================================================================
    # QUERIES
    # =============================================================================

    @requires_mode(*SOLVE_OR_EDIT)
    def validate(self) -> bool:
        """
        Check whether the current board has a completion.

        Raises:
            ErroneousBoardError: If the board already conflicts
        """
        self._require_consistent()
        return self.solver.is_solvable(self.grid)

    @requires_mode(*SOLVE_OR_EDIT)
    def num_solutions(self) -> int:
        """
        Count every completion with the backtracking search.

        Raises:
            ErroneousBoardError: If the board already conflicts
        """
        self._require_consistent()
        return count_solutions(self.grid.copy())

    @requires_mode(*SOLVE_ONLY)
    def hint(self, row: int, col: int) -> int:
        """
        Return the value of (row, col) in one solution of the board.

        Raises:
            ErroneousBoardError, CellFixedError, CellNotEmptyError: Checked in that order
            UnsolvableBoardError: If the board has no completion
        """
        self._require_empty_cell(row, col)
        solution = self.solver.solve_any(self.grid)
        if solution is None:
            raise UnsolvableBoardError()
        return solution[row][col]

    @requires_mode(*SOLVE_ONLY)
    def guess_hint(self, row: int, col: int) -> List[guessing.Candidate]:
        """Return (value, score) pairs with a positive relaxed score for (row, col)."""
        self._require_empty_cell(row, col)
        return guessing.guess_hint(self.solver, self.grid, row, col)

    # =============================================================================
    # OUTPUT
    # =============================================================================

    @requires_mode(*SOLVE_OR_EDIT)
    def save(self, path: str) -> None:
        """
        Save the board.

        In Edit mode the board must be consistent and solvable, and every
        filled cell is saved as fixed.

        Raises:
            ErroneousBoardError: Edit mode, board conflicts
            UnsolvableBoardError: Edit mode, board has no completion
            PuzzleSaveError: If the file cannot be written
        """
        if self.mode is GameMode.EDIT:
            self._require_consistent()
            if not self.solver.is_solvable(self.grid):
                raise UnsolvableBoardError()
            save_puzzle(self.grid, path, all_fixed=True)
        else:
            save_puzzle(self.grid, path)

    @requires_mode(*SOLVE_OR_EDIT)
    def render(self) -> str:
        """Board text; errors are always marked in Edit mode."""
        return self.board_text()

    def board_text(self) -> str:
        """Board text regardless of mode (used to show a board that was just solved)."""
        assert self.grid is not None, "no board loaded"
        self.grid.recompute_errors()
        mark = self.mark_errors or self.mode is GameMode.EDIT
        return BoardRenderer(mark_errors=mark).render(self.grid)

    def get_statistics(self):
        """Grid statistics merged with the history state."""
        stats = {"mode": self.mode.value, "mark_errors": self.mark_errors}
        if self.grid is not None:
            stats.update(self.grid.get_statistics())
        stats.update(self.history.get_history_info())
        return stats
