import os
import random
import sys
import pytest

# Add project root to sys.path (so tests can import core.*)
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.append(PROJECT_ROOT)

from core.sudoku_grid import SudokuGrid

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")


@pytest.fixture
def data_path():
    """Returns a function mapping a file name to its path under tests/data."""
    def _path(name):
        return os.path.join(DATA_DIR, name)
    return _path


@pytest.fixture
def load_puzzle(data_path):
    """Returns a function that loads a SudokuGrid from tests/data."""
    from utils.file_io import load_puzzle as _load_puzzle

    def _load(name, keep_fixed=True):
        return _load_puzzle(data_path(name), keep_fixed=keep_fixed)
    return _load


@pytest.fixture
def empty_4x4():
    return SudokuGrid(2, 2)


@pytest.fixture
def empty_9x9():
    return SudokuGrid(3, 3)


@pytest.fixture
def rng():
    return random.Random(1234)


def grid_from_rows(block_rows, block_cols, rows):
    """Build a grid from strings of digits (0 = empty); sizes up to 9 only."""
    values = [[int(ch) for ch in row] for row in rows]
    return SudokuGrid.from_values(block_rows, block_cols, values)
