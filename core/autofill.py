"""
Autofill: single-candidate deduction pass.

Every empty cell whose legal-value set holds exactly one value is filled with
it. Candidates are always computed against the board as it was before the
pass, so the result does not depend on scan order.
"""
import logging
from typing import Optional

from core.commands import Move, MoveHistory
from core.legality import legal_values

logger = logging.getLogger(__name__)


def autofill(grid, history: Optional[MoveHistory] = None) -> Move:
    """
    Fill every obvious cell of the grid.

    Args:
        grid: The live grid (modified in place)
        history: When given, the resulting Move is recorded into it

    Returns:
        One Move holding a Change per filled cell, row-major (possibly empty)
    """
    original = grid.copy()
    move = Move("autofill")

    for row, col in original.empty_cells():
        candidates = legal_values(original, row, col)
        if len(candidates) == 1:
            move.add_change(grid.set_cell(row, col, candidates[0]))

    if history is not None:
        history.record(move)
    logger.info("Autofill set %d cell(s)", len(move))
    return move
