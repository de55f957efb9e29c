"""
Score-weighted guessing from a relaxed constraint model.

Sampling rule for a cell with several candidates: candidates are ordered by
ascending value, u = random() * total_score is drawn, and the first candidate
whose running score total exceeds u is picked. If rounding leaves no running
total above u, the last candidate is picked. Only candidates with a strictly
positive score take part.
"""
import logging
import random
from typing import List, Optional, Sequence, Tuple

from core.commands import Move, MoveHistory
from core.constraints import ConstraintSolver
from core.legality import is_legal
from core.types import UnsolvableBoardError

logger = logging.getLogger(__name__)

Candidate = Tuple[int, float]


def cell_candidates(scores, row: int, col: int, threshold: float = 0.0) -> List[Candidate]:
    """
    Return (value, score) pairs of one cell with score > 0 and >= threshold.

    Args:
        scores: Array of shape (N, N, N) from ConstraintSolver.relaxed_scores
        row: Row coordinate
        col: Column coordinate
        threshold: Minimum score to keep a value

    Returns:
        Pairs ordered by ascending value
    """
    result: List[Candidate] = []
    for index, score in enumerate(scores[row][col]):
        score = float(score)
        if score > 0.0 and score >= threshold:
            result.append((index + 1, score))
    return result


def weighted_choice(candidates: Sequence[Candidate], rng=None) -> int:
    """
    Draw a value with probability proportional to its score.

    Raises:
        ValueError: If no candidate has a positive score
    """
    positive = sorted((c for c in candidates if c[1] > 0.0), key=lambda c: c[0])
    if not positive:
        raise ValueError("no candidate with a positive score")
    rng = rng if rng is not None else random

    total = sum(score for _, score in positive)
    u = rng.random() * total
    running = 0.0
    for value, score in positive:
        running += score
        if running > u:
            return value
    return positive[-1][0]


def guess_hint(solver: ConstraintSolver, grid, row: int, col: int) -> List[Candidate]:
    """
    List the values the relaxed model gives a positive score in one cell.

    Raises:
        UnsolvableBoardError: If the relaxed model is infeasible
    """
    scores = solver.relaxed_scores(grid)
    if scores is None:
        raise UnsolvableBoardError()
    return cell_candidates(scores, row, col)


def guess(solver: ConstraintSolver, grid, threshold: float, rng=None,
          history: Optional[MoveHistory] = None) -> Move:
    """
    Fill empty cells from relaxed scores.

    Cells are visited row-major against the progressively filled board; a
    value is a candidate when its score is >= threshold, positive, and still
    legal at that point. A single candidate is placed directly, several are
    sampled with weighted_choice().

    Args:
        solver: Solver providing relaxed_scores
        grid: The live grid (modified in place)
        threshold: Minimum score, between 0 and 1
        rng: Random source (module random by default)
        history: When given, the resulting Move is recorded into it

    Returns:
        One Move with a Change per placed value (possibly empty)

    Raises:
        UnsolvableBoardError: If the relaxed model is infeasible
    """
    assert 0.0 <= threshold <= 1.0, f"threshold {threshold} out of range [0, 1]"
    scores = solver.relaxed_scores(grid)
    if scores is None:
        raise UnsolvableBoardError()

    move = Move(f"guess {threshold}")
    for row, col in list(grid.empty_cells()):
        candidates = [(value, score) for value, score in cell_candidates(scores, row, col, threshold)
                      if is_legal(grid, row, col, value)]
        if not candidates:
            continue
        if len(candidates) == 1:
            value = candidates[0][0]
        else:
            value = weighted_choice(candidates, rng)
        move.add_change(grid.set_cell(row, col, value))

    if history is not None:
        history.record(move)
    logger.info("Guess with threshold %.3f set %d cell(s)", threshold, len(move))
    return move
