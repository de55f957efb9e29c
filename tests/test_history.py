"""
MoveHistory tests:
- truncate-on-record after undo
- undo/redo round trips restore the grid exactly
- empty moves are never recorded
"""

import pytest

from core.commands import Change, Move, MoveHistory


def _move(name, *changes):
    return Move(name, [Change(*c) for c in changes])


def _undo(history, grid):
    move = history.undo()
    for change in reversed(move.changes):
        grid.apply_change(change, reverse=True)


def _redo(history, grid):
    move = history.redo()
    for change in move:
        grid.apply_change(change)


def test_record_after_undo_truncates_redo_branch():
    h = MoveHistory()
    a, b, c, d = (_move(n, (0, 0, 0, 1)) for n in "ABCD")
    for m in (a, b, c):
        h.record(m)
    assert h.cursor == 3

    h.undo()
    h.undo()
    h.record(d)

    assert h.moves == [a, d]
    assert h.cursor == 2
    assert not h.can_redo()
    with pytest.raises(AssertionError):
        h.redo()


def test_empty_move_is_not_recorded():
    h = MoveHistory()
    h.record(_move("A", (0, 0, 0, 1)))
    h.undo()
    assert h.record(Move("noop")) is False
    assert len(h) == 1, "redo branch kept when nothing is recorded"
    assert h.cursor == 0
    assert h.can_redo()


def test_undo_on_fresh_history_is_precondition_violation():
    h = MoveHistory()
    assert not h.can_undo()
    with pytest.raises(AssertionError):
        h.undo()


def test_move_skips_no_op_changes():
    m = Move("x")
    m.add_change(Change(0, 0, 2, 2))
    assert m.is_empty()
    m.add_change(Change(0, 0, 2, 3))
    assert len(m) == 1


def test_move_constructor_filters_no_op_changes():
    h = MoveHistory()
    assert h.record(_move("same", (0, 0, 2, 2), (1, 1, 0, 0))) is False
    assert len(h) == 0

    m = _move("mixed", (0, 0, 2, 2), (1, 1, 0, 4))
    assert [(c.row, c.col) for c in m] == [(1, 1)]


@pytest.mark.parametrize("steps", [1, 2, 3])
def test_undo_then_redo_restores_grid_exactly(empty_4x4, steps):
    g = empty_4x4
    h = MoveHistory()
    writes = [[(0, 0, 1)], [(1, 1, 2), (2, 2, 3)], [(0, 0, 4), (3, 3, 1)]]
    for i, batch in enumerate(writes):
        move = Move(f"m{i}")
        for r, c, v in batch:
            move.add_change(g.set_cell(r, c, v))
        h.record(move)

    before_values = g.snapshot()
    before_empty = g.empty_count

    for _ in range(steps):
        _undo(h, g)
    assert g.values != before_values
    for _ in range(steps):
        _redo(h, g)

    assert g.values == before_values
    assert g.empty_count == before_empty
    assert h.cursor == len(writes)


def test_undo_all_returns_to_initial_grid(empty_4x4):
    g = empty_4x4
    h = MoveHistory()
    for v in (1, 2, 3):
        move = Move()
        move.add_change(g.set_cell(0, 0, v))
        h.record(move)
    while h.can_undo():
        _undo(h, g)
    assert g.values[0][0] == 0
    assert g.empty_count == 16


def test_history_info_and_reset():
    h = MoveHistory()
    h.record(_move("first", (0, 0, 0, 1)))
    h.record(_move("second", (0, 1, 0, 2)))
    h.undo()

    info = h.get_history_info()
    assert info["total_moves"] == 2
    assert info["cursor"] == 1
    assert info["undo_description"] == "first"
    assert info["redo_description"] == "second"

    h.reset()
    assert len(h) == 0 and h.cursor == 0
    assert h.get_undo_description() is None


def test_change_description_uses_user_coordinates():
    assert Change(2, 0, 0, 5).get_description() == "1,3: from 0 to 5"
