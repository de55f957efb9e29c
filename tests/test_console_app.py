"""
Console application tests driven through in-memory streams.
"""

import io
import random

import pytest

from app.main import SudokuConsoleApp, build_arg_parser, build_config, main
from core.constraints import BacktrackingConstraintSolver
from core.game import GameState
from core.settings import EngineConfig
from core.types import AllocationFailedError, GameMode


def _run(lines, game=None):
    game = game or GameState(EngineConfig(solver="backtracking"), rng=random.Random(2))
    out = io.StringIO()
    app = SudokuConsoleApp(game, stdin=io.StringIO("".join(l + "\n" for l in lines)), stdout=out)
    status = app.run()
    return status, out.getvalue(), game


def test_init_mode_only_accepts_solve_and_edit():
    status, out, game = _run(["set 1 1 1", "print_board", "exit"])
    assert status == 0
    assert out.count("only available in Solve or Edit mode") == 2
    assert "Exiting..." in out


def test_solve_set_undo_redo_messages(data_path):
    status, out, game = _run([
        f"solve {data_path('puzzle_4x4.txt')}",
        "set 3 1 3",
        "undo",
        "redo",
        "exit",
    ])
    assert "Undo 3,1: from 3 to 0" in out
    assert "Redo 3,1: from 0 to 3" in out
    assert game.grid.values[0][2] == 3


def test_range_and_fixed_errors(data_path):
    _, out, game = _run([
        f"solve {data_path('puzzle_4x4.txt')}",
        "set 5 1 1",
        "set 1 1 9",
        "set 1 1 2",
        "mark_errors 2",
        "hint 1 1",
    ])
    assert "Error: column not in range 1-4" in out
    assert "Error: value not in range 0-4" in out
    assert out.count("Error: cell is fixed") == 2
    assert "Error: the value should be 0 or 1" in out
    assert len(game.history) == 0


def test_autofill_and_solved_message(data_path):
    _, out, game = _run([f"solve {data_path('puzzle_4x4.txt')}"] + ["autofill"] * 4)
    assert "Cell <4,1> set to 4" in out
    assert "Puzzle solved successfully" in out
    assert "print_board" not in out


def test_num_solutions_and_validate(data_path):
    _, out, _ = _run([f"edit {data_path('empty_4x4.txt')}", "num_solutions", "validate"])
    assert "Number of solutions: 288" in out
    assert "more than 1 solution" in out
    assert "Validation passed" in out


def test_long_lines_and_unknown_commands():
    config = EngineConfig(solver="backtracking", max_line_length=10)
    game = GameState(config, rng=random.Random(0))
    _, out, _ = _run(["edit " + "x" * 20, "frobnicate", "", "exit"], game)
    assert "longer than 10 characters" in out
    assert "Error: invalid command" in out


def test_missing_file_keeps_state(tmp_path):
    _, out, game = _run([f"solve {tmp_path / 'missing.txt'}"])
    assert "doesn't exist" in out
    assert game.grid is None


def test_binary_file_reports_error_and_continues(tmp_path, data_path):
    image = tmp_path / "board.png"
    image.write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe\x00")
    status, out, game = _run([f"solve {image}", f"solve {data_path('puzzle_4x4.txt')}", "exit"])
    assert status == 0
    assert "not formatted correctly" in out
    assert game.mode is GameMode.SOLVE


def test_fatal_error_exits_with_status_1(data_path, monkeypatch):
    game = GameState(EngineConfig(solver="backtracking"))

    def boom(self):
        raise AllocationFailedError("backtracking search")

    monkeypatch.setattr(GameState, "num_solutions", boom)
    status, out, _ = _run([f"edit {data_path('empty_4x4.txt')}", "num_solutions", "exit"], game)
    assert status == 1
    assert "memory allocation failed" in out
    assert "Exiting..." not in out


def test_end_of_input_exits_cleanly():
    status, out, _ = _run([])
    assert status == 0
    assert out.startswith("Enter a command:")


def test_build_config_overrides(monkeypatch):
    monkeypatch.delenv("SUDOKU_SOLVER", raising=False)
    args = build_arg_parser().parse_args(["--seed", "9", "--solver", "backtracking", "--log-level", "debug"])
    config = build_config(args)
    assert config.seed == 9
    assert config.solver == "backtracking"
    assert config.log_level == "DEBUG"


def test_main_runs_until_exit(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("edit\nexit\n"))
    assert main(["--solver", "backtracking", "--seed", "1"]) == 0
    out = capsys.readouterr().out
    assert "-" * 40 in out


def test_main_rejects_bad_config(tmp_path, capsys):
    path = tmp_path / "cfg.json"
    path.write_text('{"colour": "blue"}')
    assert main(["--config", str(path)]) == 2
    assert "Unknown configuration keys" in capsys.readouterr().err
