# utils/block_geometry.py
"""
Row, column and block geometry for an N x N board split into
block_rows x block_cols rectangles.

Layout:
- N = block_rows * block_cols
- block_cols blocks fit across a row, block_rows blocks fit down a column
- The block holding (r, c) starts at ((r // block_rows) * block_rows,
  (c // block_cols) * block_cols)
"""

from __future__ import annotations
from typing import Iterator, Tuple


def block_origin(block_rows: int, block_cols: int, r: int, c: int) -> Tuple[int, int]:
    """
    Return the top-left cell of the block containing (r, c).

    Args:
        block_rows: Rows per block
        block_cols: Columns per block
        r: Row index (0-based)
        c: Column index (0-based)

    Returns:
        (row, col) of the block's first cell

    Raises:
        AssertionError: If coordinates are out of bounds
    """
    n = block_rows * block_cols
    assert 0 <= r < n, f"row {r} out of range [0, {n})"
    assert 0 <= c < n, f"col {c} out of range [0, {n})"
    return (r // block_rows) * block_rows, (c // block_cols) * block_cols


def block_cells(block_rows: int, block_cols: int, r: int, c: int) -> Iterator[Tuple[int, int]]:
    """Yield every cell of the block containing (r, c), row-major."""
    r0, c0 = block_origin(block_rows, block_cols, r, c)
    for br in range(r0, r0 + block_rows):
        for bc in range(c0, c0 + block_cols):
            yield br, bc
