"""
Exhaustive backtracking search over the empty cells of a grid.

The search walks empty cells in row-major order with an explicit stack of
SearchFrame records instead of recursion, so the depth (up to N*N) never
depends on the interpreter's recursion limit.

Both entry points mutate the grid they are given: cells visited by the search
end up cleared again, so callers pass a disposable copy, never the live grid.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from core.legality import is_legal
from core.types import AllocationFailedError

logger = logging.getLogger(__name__)

# Coordinate of the frame pushed once no empty cell is left
SENTINEL = -1


@dataclass
class SearchFrame:
    """One level of the search: a cell and the next candidate to try there."""
    row: int
    col: int
    next_value: int = 1

    def is_sentinel(self) -> bool:
        return self.row == SENTINEL


def next_empty_cell(grid, row: int, col: int) -> SearchFrame:
    """
    Find the first empty cell strictly after (row, col) in row-major order.

    Returns:
        A fresh frame for that cell, or a sentinel frame if none is left
    """
    n = grid.n
    index = row * n + col + 1
    while index < n * n:
        r, c = divmod(index, n)
        if grid.values[r][c] == 0:
            return SearchFrame(r, c)
        index += 1
    return SearchFrame(SENTINEL, SENTINEL)


def _first_frame(grid) -> SearchFrame:
    if grid.values[0][0] == 0:
        return SearchFrame(0, 0)
    return next_empty_cell(grid, 0, 0)


def _search(grid, stop_at_first: bool):
    """
    Run the stack machine.

    Returns:
        (solutions_found, first_solution) where first_solution is a value
        matrix captured when the first complete assignment was reached
    """
    n = grid.n
    count = 0
    first: Optional[List[List[int]]] = None
    pushed = 0

    try:
        stack: List[SearchFrame] = [_first_frame(grid)]
        while stack:
            frame = stack[-1]

            if frame.is_sentinel():
                # Complete assignment reached
                count += 1
                if first is None:
                    first = [row[:] for row in grid.values]
                    if stop_at_first:
                        break
                stack.pop()
                continue

            row, col, value = frame.row, frame.col, frame.next_value
            grid.values[row][col] = 0

            if value > n:
                # Candidates exhausted for this cell
                stack.pop()
                continue

            frame.next_value = value + 1
            if is_legal(grid, row, col, value):
                grid.values[row][col] = value
                stack.append(next_empty_cell(grid, row, col))
                pushed += 1
    except MemoryError as exc:
        raise AllocationFailedError("backtracking search") from exc

    if stop_at_first:
        # Leave the searched cells cleared as in a full run
        for frame in stack:
            if not frame.is_sentinel():
                grid.values[frame.row][frame.col] = 0

    logger.debug("Backtracking search: %d frames pushed, %d solution(s)", pushed, count)
    return count, first


def count_solutions(grid) -> int:
    """
    Count every completion of the grid.

    Args:
        grid: A disposable grid (it is modified by the search)

    Returns:
        Number of distinct complete legal assignments

    Raises:
        AllocationFailedError: If the search runs out of memory
    """
    count, _ = _search(grid, stop_at_first=False)
    return count


def find_first_solution(grid) -> Optional[List[List[int]]]:
    """
    Find the first completion of the grid in search order.

    Args:
        grid: A disposable grid (it is modified by the search)

    Returns:
        The completed value matrix, or None if the grid has no completion
    """
    _, first = _search(grid, stop_at_first=True)
    return first


def is_solvable(grid) -> bool:
    """True if the grid has at least one completion (grid is modified)."""
    return find_first_solution(grid) is not None
