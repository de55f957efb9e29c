"""
Text rendering of a SudokuGrid for the console.
"""
from typing import List


class BoardRenderer:
    """
    Renders a grid as fixed-width text.

    Layout per row: each horizontal block opens with "|", each cell prints a
    space, its value as %2d (two spaces when empty) and a marker ("." fixed,
    "*" erroneous when errors are marked, " " otherwise); the row closes
    with "|". A dashed separator of 4*N + block_rows + 1 characters frames
    every band of block_rows rows.
    """

    FIXED_MARK = "."
    ERROR_MARK = "*"

    def __init__(self, mark_errors: bool = True):
        self.mark_errors = mark_errors

    def separator(self, grid) -> str:
        return "-" * (4 * grid.n + grid.block_rows + 1)

    def cell_text(self, grid, row: int, col: int) -> str:
        value = grid.values[row][col]
        if value == 0:
            return "    "
        if grid.fixed[row][col]:
            mark = self.FIXED_MARK
        elif self.mark_errors and grid.errors[row][col]:
            mark = self.ERROR_MARK
        else:
            mark = " "
        return f" {value:2d}{mark}"

    def render_lines(self, grid) -> List[str]:
        """
        Render the grid line by line.

        The error marks come from grid.errors; callers refresh them with
        recompute_errors() first.
        """
        sep = self.separator(grid)
        lines = [sep]
        for row in range(grid.n):
            parts = []
            for col in range(grid.n):
                if col % grid.block_cols == 0:
                    parts.append("|")
                parts.append(self.cell_text(grid, row, col))
            parts.append("|")
            lines.append("".join(parts))
            if (row + 1) % grid.block_rows == 0:
                lines.append(sep)
        return lines

    def render(self, grid) -> str:
        return "\n".join(self.render_lines(grid)) + "\n"
