"""
SudokuGrid - grid state manager for the Sudoku puzzle engine.

This module provides the N x N board model (N = block_rows * block_cols):
cell values, fixed-cell flags, the error matrix and the empty-cell counter.

Notes:
- Values are integers in 0..N, 0 meaning empty.
- The empty counter is maintained on every write; the error matrix is only
  refreshed by recompute_errors() and may be stale in between.
- The grid never records history itself: set_cell() returns the Change and
  the caller decides which Move it belongs to.
"""
import copy
from typing import Dict, Iterator, List, Optional

from core.types import Cell
from core.commands import Change
from core.legality import is_legal


class SudokuGrid:
    """
    Grid state manager for Sudoku-like puzzles.

    Responsibilities:
        - Store cell values, fixed flags and error flags
        - Keep the empty-cell counter consistent with the values
        - Recompute the error matrix on demand
        - Convert to and from JSON-compatible dicts

    Attributes:
        block_rows: Rows per block
        block_cols: Columns per block
        n: Side length (block_rows * block_cols)
        values: values[row][col] in 0..n
        fixed: fixed[row][col], True when ordinary edits may not change the cell
        errors: errors[row][col] as of the last recompute_errors()
        empty_count: Number of cells whose value is 0
    """

    def __init__(self, block_rows: int = 3, block_cols: int = 3):
        """
        Initialize an empty grid.

        Args:
            block_rows: Rows per block (must be > 0)
            block_cols: Columns per block (must be > 0)
        """
        if block_rows <= 0 or block_cols <= 0:
            raise ValueError(f"Block dimensions must be positive: {block_rows}x{block_cols}")

        self.block_rows: int = block_rows
        self.block_cols: int = block_cols
        self.n: int = block_rows * block_cols

        self.values: List[List[int]] = [[0] * self.n for _ in range(self.n)]
        self.fixed: List[List[bool]] = [[False] * self.n for _ in range(self.n)]
        self.errors: List[List[bool]] = [[False] * self.n for _ in range(self.n)]
        self.empty_count: int = self.n * self.n

    @classmethod
    def from_values(cls, block_rows: int, block_cols: int, values: List[List[int]],
                    fixed: Optional[List[List[bool]]] = None) -> 'SudokuGrid':
        """
        Build a grid from a value matrix (and optionally a fixed matrix).

        Raises:
            ValueError: If the matrices do not match the block dimensions or a
                value is outside 0..N
        """
        grid = cls(block_rows, block_cols)
        if len(values) != grid.n or any(len(row) != grid.n for row in values):
            raise ValueError(f"Expected a {grid.n}x{grid.n} value matrix")
        if fixed is not None and (len(fixed) != grid.n or any(len(row) != grid.n for row in fixed)):
            raise ValueError(f"Expected a {grid.n}x{grid.n} fixed matrix")

        for row in range(grid.n):
            for col in range(grid.n):
                value = int(values[row][col])
                if not 0 <= value <= grid.n:
                    raise ValueError(f"Value {value} at ({row}, {col}) out of range [0, {grid.n}]")
                grid.set_cell(row, col, value)
                if fixed is not None and fixed[row][col] and value != 0:
                    grid.fixed[row][col] = True
        return grid

    def copy(self) -> 'SudokuGrid':
        """Return an independent deep copy of the grid."""
        return copy.deepcopy(self)

    # =============================================================================
    # CELL QUERIES
    # =============================================================================

    def _check_cell(self, row: int, col: int) -> None:
        assert 0 <= row < self.n, f"row {row} out of range [0, {self.n})"
        assert 0 <= col < self.n, f"col {col} out of range [0, {self.n})"

    def get_value(self, row: int, col: int) -> int:
        self._check_cell(row, col)
        return self.values[row][col]

    def is_empty(self, row: int, col: int) -> bool:
        return self.get_value(row, col) == 0

    def is_fixed(self, row: int, col: int) -> bool:
        self._check_cell(row, col)
        return self.fixed[row][col]

    def is_erroneous(self, row: int, col: int) -> bool:
        """Error flag as of the last recompute_errors()."""
        self._check_cell(row, col)
        return self.errors[row][col]

    def is_complete(self) -> bool:
        return self.empty_count == 0

    def cells(self) -> Iterator[Cell]:
        """Yield every cell, row-major."""
        for row in range(self.n):
            for col in range(self.n):
                yield row, col

    def empty_cells(self) -> Iterator[Cell]:
        """Yield every empty cell, row-major."""
        for row, col in self.cells():
            if self.values[row][col] == 0:
                yield row, col

    def filled_cells(self) -> Iterator[Cell]:
        """Yield every filled cell, row-major."""
        for row, col in self.cells():
            if self.values[row][col] != 0:
                yield row, col

    # =============================================================================
    # DIRECT MUTATIONS (not recorded in history)
    # =============================================================================

    def set_cell(self, row: int, col: int, value: int) -> Change:
        """
        Write a value and keep the empty counter consistent.

        Args:
            row: Row coordinate
            col: Column coordinate
            value: New value in 0..N (0 clears the cell)

        Returns:
            The Change describing the transition; recording it is up to the caller
        """
        self._check_cell(row, col)
        assert 0 <= value <= self.n, f"value {value} out of range [0, {self.n}]"

        before = self.values[row][col]
        self.values[row][col] = value
        self.empty_count -= (value != 0) - (before != 0)
        return Change(row, col, before, value)

    def apply_change(self, change: Change, reverse: bool = False) -> None:
        """Apply a Change forward (after over before) or in reverse."""
        self.set_cell(change.row, change.col, change.before if reverse else change.after)

    def set_fixed(self, row: int, col: int, fixed: bool = True) -> None:
        self._check_cell(row, col)
        self.fixed[row][col] = fixed

    def snapshot(self) -> List[List[int]]:
        """Copy of the value matrix, for restore()."""
        return [row[:] for row in self.values]

    def restore(self, values: List[List[int]]) -> None:
        """Write back a value matrix taken by snapshot()."""
        for row, col in self.cells():
            self.set_cell(row, col, values[row][col])

    # =============================================================================
    # VALIDATION
    # =============================================================================

    def recompute_errors(self) -> bool:
        """
        Refresh the error matrix.

        Every filled cell is checked by clearing it temporarily and asking
        whether its own value is still legal there. Non-fixed conflicting
        cells are flagged in the matrix; fixed cells are never flagged but
        still count towards the result.

        Returns:
            True if any filled cell conflicts with another
        """
        found = False
        for row, col in self.cells():
            self.errors[row][col] = False
            value = self.values[row][col]
            if value == 0:
                continue

            self.values[row][col] = 0
            legal = is_legal(self, row, col, value)
            self.values[row][col] = value

            if not legal:
                found = True
                if not self.fixed[row][col]:
                    self.errors[row][col] = True
        return found

    def get_statistics(self) -> Dict:
        """
        Get grid statistics.

        Returns:
            Dict with cell counts and error count
        """
        total = self.n * self.n
        fixed = sum(1 for row, col in self.cells() if self.fixed[row][col])
        return {
            "size": self.n,
            "block_rows": self.block_rows,
            "block_cols": self.block_cols,
            "total_cells": total,
            "empty_cells": self.empty_count,
            "filled_cells": total - self.empty_count,
            "fixed_cells": fixed,
            "erroneous_cells": sum(sum(row) for row in self.errors),
            "is_complete": self.is_complete(),
        }

    # =============================================================================
    # JSON IMPORT/EXPORT
    # =============================================================================

    @classmethod
    def from_json(cls, json_data: Dict, keep_fixed: bool = True) -> 'SudokuGrid':
        """
        Create a SudokuGrid from a dict produced by to_json().

        Args:
            json_data: Dict with block_rows, block_cols, values and optional fixed
            keep_fixed: When False the fixed flags are ignored

        Raises:
            KeyError, TypeError, ValueError: If the document is malformed
        """
        block_rows = int(json_data["block_rows"])
        block_cols = int(json_data["block_cols"])
        fixed = json_data.get("fixed") if keep_fixed else None
        return cls.from_values(block_rows, block_cols, json_data["values"], fixed)

    def to_json(self) -> Dict:
        """Export the grid as a JSON-compatible dict."""
        return {
            "block_rows": self.block_rows,
            "block_cols": self.block_cols,
            "values": self.snapshot(),
            "fixed": [row[:] for row in self.fixed],
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, SudokuGrid):
            return NotImplemented
        return (self.block_rows == other.block_rows and self.block_cols == other.block_cols
                and self.values == other.values and self.fixed == other.fixed)

    def __repr__(self) -> str:
        return f"SudokuGrid({self.block_rows}x{self.block_cols}, empty={self.empty_count})"
