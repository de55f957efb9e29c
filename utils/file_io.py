"""
Puzzle persistence.

Text format:
- first line: block_rows block_cols
- then N lines of N values; a value immediately followed by "." is fixed

Paths ending in ".json" are read and written as SudokuGrid.to_json() documents.
"""
import json
import logging
import re
from typing import List

from core.sudoku_grid import SudokuGrid
from core.types import MalformedPuzzleError, PuzzleNotFoundError, PuzzleSaveError

logger = logging.getLogger(__name__)

FIXED_MARKER = "."
_CELL_TOKEN = re.compile(r"^(\d+)(\.?)$")


def _is_json_path(path: str) -> bool:
    return str(path).lower().endswith(".json")


def parse_puzzle_text(text: str, path: str = "<string>", keep_fixed: bool = True) -> SudokuGrid:
    """
    Parse the text format into a grid.

    Args:
        text: File content
        path: Name used in error messages
        keep_fixed: When False, "." markers are accepted but ignored

    Raises:
        MalformedPuzzleError: On missing, extra or invalid tokens
    """
    tokens: List[str] = text.split()
    if len(tokens) < 2:
        raise MalformedPuzzleError(path, "missing block dimensions")
    try:
        block_rows, block_cols = int(tokens[0]), int(tokens[1])
    except ValueError:
        raise MalformedPuzzleError(path, "block dimensions must be integers") from None
    if block_rows <= 0 or block_cols <= 0:
        raise MalformedPuzzleError(path, "block dimensions must be positive")

    n = block_rows * block_cols
    cells = tokens[2:]
    if len(cells) != n * n:
        raise MalformedPuzzleError(path, f"expected {n * n} cells, found {len(cells)}")

    values = [[0] * n for _ in range(n)]
    fixed = [[False] * n for _ in range(n)]
    for index, token in enumerate(cells):
        row, col = divmod(index, n)
        match = _CELL_TOKEN.match(token)
        if match is None:
            raise MalformedPuzzleError(path, f"invalid cell {token!r} at row {row + 1}")
        value = int(match.group(1))
        if value > n:
            raise MalformedPuzzleError(path, f"value {value} out of range at row {row + 1}")
        values[row][col] = value
        fixed[row][col] = keep_fixed and bool(match.group(2)) and value != 0

    return SudokuGrid.from_values(block_rows, block_cols, values, fixed)


def format_puzzle_text(grid: SudokuGrid, all_fixed: bool = False) -> str:
    """
    Render a grid in the text format.

    Args:
        grid: Grid to write
        all_fixed: Mark every filled cell fixed, regardless of its flag
    """
    lines = [f"{grid.block_rows:2d} {grid.block_cols:2d}"]
    for row in range(grid.n):
        parts = []
        for col in range(grid.n):
            value = grid.values[row][col]
            is_fixed = value != 0 and (all_fixed or grid.fixed[row][col])
            parts.append(f"{value:2d}{FIXED_MARKER if is_fixed else ' '} ")
        lines.append("".join(parts))
    return "\n".join(lines) + "\n"


def load_puzzle(path: str, keep_fixed: bool = True) -> SudokuGrid:
    """
    Load a grid from disk.

    Raises:
        PuzzleNotFoundError: If the file cannot be opened
        MalformedPuzzleError: If the content is not a valid puzzle
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError:
        raise PuzzleNotFoundError(path) from None
    except UnicodeDecodeError as e:
        raise MalformedPuzzleError(path, "not a text file") from e

    if _is_json_path(path):
        try:
            grid = SudokuGrid.from_json(json.loads(content), keep_fixed=keep_fixed)
        except (ValueError, KeyError, TypeError) as e:
            raise MalformedPuzzleError(path, str(e)) from e
    else:
        grid = parse_puzzle_text(content, path, keep_fixed)

    logger.info("Loaded %dx%d puzzle from %s", grid.n, grid.n, path)
    return grid


def save_puzzle(grid: SudokuGrid, path: str, all_fixed: bool = False) -> None:
    """
    Write a grid to disk.

    Raises:
        PuzzleSaveError: If the file cannot be written
    """
    if _is_json_path(path):
        data = grid.to_json()
        if all_fixed:
            data["fixed"] = [[v != 0 for v in row] for row in grid.values]
        content = json.dumps(data, indent=2)
    else:
        content = format_puzzle_text(grid, all_fixed)

    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError:
        raise PuzzleSaveError(path) from None
    logger.info("Saved puzzle to %s", path)
