"""
Move records and the undo/redo history for the Sudoku puzzle engine.

A Change is one cell's value transition; a Move groups the Changes of one
user-visible or composite operation (generate, autofill, guess) into a single
undo/redo unit. MoveHistory is a linear timeline: recording after an undo
drops every Move that was ahead of the cursor.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from utils.coords import coordinate_to_string


@dataclass(frozen=True)
class Change:
    """One cell's value transition (before -> after)."""
    row: int
    col: int
    before: int
    after: int

    def get_description(self) -> str:
        return f"{coordinate_to_string(self.row, self.col)}: from {self.before} to {self.after}"


class Move:
    """Ordered Changes that are undone and redone together."""

    def __init__(self, description: str = "", changes: Optional[List[Change]] = None):
        self.description = description
        self.changes: List[Change] = []
        for change in changes or ():
            self.add_change(change)

    def add_change(self, change: Change) -> None:
        """Append a Change; no-op transitions are skipped."""
        if change.before != change.after:
            self.changes.append(change)

    def is_empty(self) -> bool:
        return not self.changes

    def __iter__(self) -> Iterator[Change]:
        return iter(self.changes)

    def __len__(self) -> int:
        return len(self.changes)

    def get_description(self) -> str:
        """Get human-readable description of the move."""
        if self.description:
            return self.description
        return f"{len(self.changes)} change(s)"

    def __repr__(self) -> str:
        return f"Move({self.description!r}, {self.changes!r})"


class MoveHistory:
    """
    Manages the move history for undo/redo operations.

    The cursor counts how many moves, read from the oldest, are applied:
    0 is the initial state and len(moves) means everything is applied.
    undo() and redo() only move the cursor and hand back the Move; applying
    its Changes to the grid is the caller's job.
    """

    def __init__(self):
        self.moves: List[Move] = []
        self.cursor: int = 0

    def record(self, move: Move) -> bool:
        """
        Append a move after the cursor, discarding any redo branch.

        Returns:
            False if the move had no Changes and was not recorded
        """
        if move.is_empty():
            return False

        # Drop the moves ahead of the cursor
        del self.moves[self.cursor:]
        self.moves.append(move)
        self.cursor = len(self.moves)
        return True

    def can_undo(self) -> bool:
        """Check if undo is possible."""
        return self.cursor > 0

    def can_redo(self) -> bool:
        """Check if redo is possible."""
        return self.cursor < len(self.moves)

    def undo(self) -> Move:
        """Step back one move and return it; its Changes must be reverse-applied."""
        assert self.can_undo(), "no moves to undo"
        move = self.moves[self.cursor - 1]
        self.cursor -= 1
        return move

    def redo(self) -> Move:
        """Step forward one move and return it; its Changes must be applied."""
        assert self.can_redo(), "no moves to redo"
        self.cursor += 1
        return self.moves[self.cursor - 1]

    def get_undo_description(self) -> Optional[str]:
        """Get description of the move that would be undone."""
        if not self.can_undo():
            return None
        return self.moves[self.cursor - 1].get_description()

    def get_redo_description(self) -> Optional[str]:
        """Get description of the move that would be redone."""
        if not self.can_redo():
            return None
        return self.moves[self.cursor].get_description()

    def reset(self) -> None:
        """Clear all move history."""
        self.moves.clear()
        self.cursor = 0

    def __len__(self) -> int:
        return len(self.moves)

    def get_history_info(self) -> Dict[str, Any]:
        """Get information about current history state."""
        return {
            "total_moves": len(self.moves),
            "cursor": self.cursor,
            "can_undo": self.can_undo(),
            "can_redo": self.can_redo(),
            "undo_description": self.get_undo_description(),
            "redo_description": self.get_redo_description()
        }
