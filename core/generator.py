"""
Randomized puzzle generation: fill, solve, then reduce.

Each retry seeds a few random empty cells with random legal values, asks the
constraint solver for a full completion and, on success, keeps a random
subset of the cells. Failed retries restore the board exactly. The whole
result is recorded as one Move.
"""
import logging
import random
from enum import Enum
from typing import List, Optional

from core.commands import Change, Move, MoveHistory
from core.constraints import ConstraintSolver
from core.legality import legal_values
from core.types import AllocationFailedError, GenerationFailedError, NotEnoughEmptyCellsError

logger = logging.getLogger(__name__)

DEFAULT_MAX_TRIES = 1000


class AttemptOutcome(Enum):
    """Result of a single generation retry."""
    SOLVED = "solved"
    FILL_FAILED = "fill_failed"     # A seeded cell had no legal value
    UNSOLVABLE = "unsolvable"       # The seeded board has no completion


class PuzzleGenerator:
    """
    Generates a solvable puzzle on an existing grid.

    Attributes:
        solver: ConstraintSolver used to complete the seeded board
        rng: Random source (module random by default)
        max_tries: Retry budget before giving up
    """

    def __init__(self, solver: ConstraintSolver, rng=None, max_tries: int = DEFAULT_MAX_TRIES):
        if max_tries <= 0:
            raise ValueError(f"max_tries must be positive: {max_tries}")
        self.solver = solver
        self.rng = rng if rng is not None else random
        self.max_tries = max_tries

    def _random_fill(self, grid, fill_count: int) -> AttemptOutcome:
        """Seed fill_count random empty cells with random legal values."""
        empty = list(grid.empty_cells())
        for row, col in self.rng.sample(empty, fill_count):
            candidates = legal_values(grid, row, col)
            if not candidates:
                return AttemptOutcome.FILL_FAILED
            grid.set_cell(row, col, self.rng.choice(candidates))
        return AttemptOutcome.SOLVED

    def _attempt(self, grid, fill_count: int) -> AttemptOutcome:
        outcome = self._random_fill(grid, fill_count)
        if outcome is not AttemptOutcome.SOLVED:
            return outcome

        solution = self.solver.solve_any(grid)
        if solution is None:
            return AttemptOutcome.UNSOLVABLE

        for row, col in grid.empty_cells():
            grid.set_cell(row, col, solution[row][col])
        return AttemptOutcome.SOLVED

    def _reduce(self, grid, keep_count: int) -> None:
        """Keep keep_count random cells and clear every other one."""
        cells = list(grid.cells())
        keep = set(self.rng.sample(cells, keep_count))
        for row, col in cells:
            if (row, col) not in keep:
                grid.set_cell(row, col, 0)

    def generate(self, grid, fill_count: int, keep_count: int,
                 history: Optional[MoveHistory] = None) -> Move:
        """
        Turn the grid into a solvable puzzle with keep_count filled cells.

        Args:
            grid: The live grid (modified in place)
            fill_count: Empty cells to seed randomly before solving
            keep_count: Cells to keep once a full solution is found
            history: When given, the resulting Move is recorded into it

        Returns:
            The Move describing every changed cell (empty when keep_count is 0)

        Raises:
            NotEnoughEmptyCellsError: If fewer than fill_count cells are empty
            GenerationFailedError: If no retry succeeded within max_tries
            AllocationFailedError: If scratch structures could not be allocated
        """
        total = grid.n * grid.n
        assert 0 <= fill_count <= total, f"fill_count {fill_count} out of range [0, {total}]"
        assert 0 <= keep_count <= total, f"keep_count {keep_count} out of range [0, {total}]"

        if grid.empty_count < fill_count:
            raise NotEnoughEmptyCellsError(fill_count, grid.empty_count)

        try:
            before: List[List[int]] = grid.snapshot()
        except MemoryError as exc:
            raise AllocationFailedError("puzzle generation") from exc

        for attempt in range(1, self.max_tries + 1):
            outcome = self._attempt(grid, fill_count)
            if outcome is AttemptOutcome.SOLVED:
                logger.debug("Generation attempt %d solved", attempt)
                break
            logger.debug("Generation attempt %d failed: %s", attempt, outcome.value)
            grid.restore(before)
        else:
            logger.warning("Puzzle generator gave up after %d tries", self.max_tries)
            raise GenerationFailedError(self.max_tries)

        if keep_count == 0:
            # Nothing would remain: the board is left as it was
            grid.restore(before)
            return Move("generate")

        self._reduce(grid, keep_count)

        move = Move(f"generate {fill_count} {keep_count}")
        for row, col in grid.cells():
            if before[row][col] != grid.values[row][col]:
                move.add_change(Change(row, col, before[row][col], grid.values[row][col]))
        if history is not None:
            history.record(move)
        logger.info("Generated puzzle with %d filled cells (%d changes)", keep_count, len(move))
        return move
