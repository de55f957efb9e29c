"""
Legality checks for candidate values.

A value is legal in a cell when it does not already appear elsewhere in the
same row, the same column or the same block. The target cell is expected to
be empty (or treated as such by the caller); its own content is never read.
"""
from typing import List

from utils.block_geometry import block_cells


def is_legal(grid, row: int, col: int, value: int) -> bool:
    """
    Check whether value may occupy (row, col).

    Args:
        grid: Any object exposing n, block_rows, block_cols and values
        row: Row coordinate
        col: Column coordinate
        value: Candidate value in 1..N

    Returns:
        False if value appears in the row, column or block of the cell

    Raises:
        AssertionError: If coordinates are out of bounds
    """
    values = grid.values

    for r, c in block_cells(grid.block_rows, grid.block_cols, row, col):
        if (r, c) != (row, col) and values[r][c] == value:
            return False

    for i in range(grid.n):
        if i != col and values[row][i] == value:
            return False
        if i != row and values[i][col] == value:
            return False
    return True


def legal_values(grid, row: int, col: int) -> List[int]:
    """
    List the values legal in (row, col), ascending.

    The cell is cleared for the duration of the check and restored afterwards.
    """
    current = grid.values[row][col]
    grid.values[row][col] = 0
    try:
        return [v for v in range(1, grid.n + 1) if is_legal(grid, row, col, v)]
    finally:
        grid.values[row][col] = current
