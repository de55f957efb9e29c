"""
Shared types for the Sudoku puzzle engine.
Separated to avoid circular imports between modules.
"""
from enum import Enum
from typing import Optional, Tuple

Cell = Tuple[int, int]


class GameMode(Enum):
    """Modes of the game state; each operation is available in a subset of them."""
    INIT = "init"     # Nothing loaded yet (or a puzzle was just solved)
    SOLVE = "solve"   # Playing a loaded puzzle, fixed cells protected
    EDIT = "edit"     # Building a puzzle, no fixed cells


class PuzzleStatus(Enum):
    """Outcome of a completion check after the last empty cell was filled."""
    IN_PROGRESS = "in_progress"
    SOLVED = "solved"
    ERRONEOUS = "erroneous"


# =============================================================================
# RECOVERABLE ERRORS
# =============================================================================

class GameError(Exception):
    """Base class for failures reported to the user; game state is left unchanged."""


class InvalidModeError(GameError):
    def __init__(self, operation: str, modes):
        names = " or ".join(m.value.capitalize() for m in modes)
        super().__init__(f"Error: {operation} is only available in {names} mode")
        self.operation = operation
        self.modes = tuple(modes)


class CellFixedError(GameError):
    def __init__(self, cell: Optional[Cell] = None):
        super().__init__("Error: cell is fixed")
        self.cell = cell


class CellNotEmptyError(GameError):
    def __init__(self, cell: Optional[Cell] = None):
        super().__init__("Error: cell already contains a value")
        self.cell = cell


class ErroneousBoardError(GameError):
    def __init__(self):
        super().__init__("Error: board contains erroneous values")


class UnsolvableBoardError(GameError):
    def __init__(self):
        super().__init__("Error: board is unsolvable")


class NothingToUndoError(GameError):
    def __init__(self):
        super().__init__("Error: no moves to undo")


class NothingToRedoError(GameError):
    def __init__(self):
        super().__init__("Error: no moves to redo")


class NotEnoughEmptyCellsError(GameError):
    def __init__(self, requested: int, available: int):
        super().__init__(f"Error: number of empty cells too low ({available} available, {requested} requested)")
        self.requested = requested
        self.available = available


class GenerationFailedError(GameError):
    def __init__(self, tries: int):
        super().__init__(f"Error: puzzle generator failed after {tries} tries")
        self.tries = tries


class PuzzleFileError(GameError):
    """Base class for persistence failures."""
    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class PuzzleNotFoundError(PuzzleFileError):
    def __init__(self, path: str):
        super().__init__(f"Error: File {path} doesn't exist or cannot be opened", path)


class MalformedPuzzleError(PuzzleFileError):
    def __init__(self, path: str, detail: str = ""):
        message = f"Error: File {path} not formatted correctly!"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message, path)
        self.detail = detail


class PuzzleSaveError(PuzzleFileError):
    def __init__(self, path: str):
        super().__init__(f"Error: File {path} cannot be created or modified", path)


# =============================================================================
# FATAL ERRORS
# =============================================================================

class FatalGameError(Exception):
    """Unrecoverable failure; the process is expected to exit without cleanup."""


class AllocationFailedError(FatalGameError):
    def __init__(self, where: str):
        super().__init__(f"Error: memory allocation failed during {where}")
        self.where = where


class SolverUnavailableError(FatalGameError):
    def __init__(self, reason: str):
        super().__init__(f"Error: constraint solver failed: {reason}")
        self.reason = reason
