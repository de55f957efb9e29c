"""
Sudoku Puzzle Engine - Core Package
Grid model, legality checks, move history and shared types.

GameState lives in core.game and is imported from there; it depends on the
persistence and rendering packages, which in turn import this package.
"""
from .sudoku_grid import SudokuGrid
from .types import GameMode, PuzzleStatus, GameError, FatalGameError
from .commands import Change, Move, MoveHistory
from .legality import is_legal, legal_values

__all__ = ['SudokuGrid', 'GameMode', 'PuzzleStatus', 'GameError', 'FatalGameError',
           'Change', 'Move', 'MoveHistory', 'is_legal', 'legal_values']
