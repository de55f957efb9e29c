"""
User-facing coordinate helpers.

Users address cells as "x,y": x is the column and y is the row, both 1-based.
Internally cells are (row, col), 0-based.
"""
from typing import Tuple


def coordinate_to_string(row: int, col: int) -> str:
    """Convert an internal (row, col) to the user's "x,y" form."""
    return f"{col + 1},{row + 1}"


def user_to_cell(x: int, y: int) -> Tuple[int, int]:
    """Convert 1-based user column/row numbers to an internal (row, col)."""
    return y - 1, x - 1
