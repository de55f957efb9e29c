"""
Console application for the Sudoku puzzle engine.
Reads commands line by line, dispatches them to a GameState and prints results.
"""

import argparse
import logging
import os
import random
import sys
from typing import Callable, Dict, List, Optional, TextIO

# Add project root to path first
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Then import project modules
from app.parser import CommandParseError, ParsedCommand, parse_command
from core.game import GameState
from core.settings import LOG_LEVELS, SOLVER_CHOICES, EngineConfig, load_config
from core.types import FatalGameError, GameError, InvalidModeError, PuzzleStatus
from utils.coords import coordinate_to_string, user_to_cell

logger = logging.getLogger(__name__)

PROMPT = "Enter a command:"

# Console command -> GameState method, where the names differ
_METHOD_NAMES = {
    "set": "set_value",
    "print_board": "render",
    "mark_errors": "set_mark_errors",
}


class InputRangeError(GameError):
    """A numeric parameter is outside its allowed range."""


class SudokuConsoleApp:
    """Line-oriented console front end for a GameState."""

    def __init__(self, game: GameState, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        """
        Initialize the application.

        Args:
            game: Game state to drive
            stdin: Command source (sys.stdin by default)
            stdout: Output sink (sys.stdout by default)
        """
        self.game = game
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.running = True

        self._handlers: Dict[str, Callable[[List], None]] = {
            "solve": self._cmd_solve,
            "edit": self._cmd_edit,
            "mark_errors": self._cmd_mark_errors,
            "print_board": self._cmd_print_board,
            "set": self._cmd_set,
            "validate": self._cmd_validate,
            "guess": self._cmd_guess,
            "generate": self._cmd_generate,
            "undo": self._cmd_undo,
            "redo": self._cmd_redo,
            "save": self._cmd_save,
            "hint": self._cmd_hint,
            "guess_hint": self._cmd_guess_hint,
            "num_solutions": self._cmd_num_solutions,
            "autofill": self._cmd_autofill,
            "reset": self._cmd_reset,
            "exit": self._cmd_exit,
        }

    # =============================================================================
    # LOOP
    # =============================================================================

    def _print(self, text: str = "") -> None:
        self.stdout.write(text if text.endswith("\n") else text + "\n")

    def run(self) -> int:
        """
        Read and execute commands until exit or end of input.

        Returns:
            Process exit status: 0 on exit/EOF, 1 after a fatal error
        """
        while self.running:
            self._print(PROMPT)
            line = self.stdin.readline()
            if not line:
                break
            try:
                self.execute_line(line)
            except FatalGameError as e:
                logger.critical("Fatal error: %s", e)
                self._print(str(e))
                return 1
        return 0

    def execute_line(self, line: str) -> None:
        """Parse and run one line; recoverable errors are printed, fatal ones propagate."""
        line = line.rstrip("\n")
        if not line.strip():
            return
        if len(line) > self.game.config.max_line_length:
            self._print(f"Error: command is longer than {self.game.config.max_line_length} characters")
            return

        try:
            command = parse_command(line)
            self.dispatch(command)
        except (CommandParseError, GameError) as e:
            logger.debug("Command %r rejected: %s", line, e)
            self._print(str(e))

    def dispatch(self, command: ParsedCommand) -> None:
        """Check the command's mode, then run its handler."""
        method = getattr(GameState, _METHOD_NAMES.get(command.name, command.name), None)
        modes = getattr(method, "allowed_modes", None)
        if modes is not None and self.game.mode not in modes:
            raise InvalidModeError(command.name, modes)
        self._handlers[command.name](command.args)

    # =============================================================================
    # RANGE CHECKS
    # =============================================================================

    def _check_range(self, value, low, high, what: str = "value") -> None:
        if not low <= value <= high:
            raise InputRangeError(f"Error: {what} not in range {low}-{high}")

    def _user_cell(self, x: int, y: int):
        n = self.game.grid.n
        self._check_range(x, 1, n, "column")
        self._check_range(y, 1, n, "row")
        return user_to_cell(x, y)

    # =============================================================================
    # OUTPUT HELPERS
    # =============================================================================

    def _print_board(self) -> None:
        self._print(self.game.render())

    def _print_status(self, status: PuzzleStatus) -> None:
        if status is PuzzleStatus.SOLVED:
            self._print("Puzzle solved successfully")
        elif status is PuzzleStatus.ERRONEOUS:
            self._print("Puzzle solution erroneous")

    def _after_move(self, status: PuzzleStatus) -> None:
        # Ungated: a solved board has already left Solve mode
        self._print(self.game.board_text())
        self._print_status(status)

    # =============================================================================
    # COMMANDS
    # =============================================================================

    def _cmd_solve(self, args: List) -> None:
        self.game.solve(args[0])
        self._print_board()

    def _cmd_edit(self, args: List) -> None:
        self.game.edit(args[0] if args else None)
        self._print_board()

    def _cmd_mark_errors(self, args: List) -> None:
        if args[0] not in (0, 1):
            raise InputRangeError("Error: the value should be 0 or 1")
        self.game.set_mark_errors(args[0] == 1)

    def _cmd_print_board(self, args: List) -> None:
        self._print_board()

    def _cmd_set(self, args: List) -> None:
        x, y, z = args
        row, col = self._user_cell(x, y)
        self._check_range(z, 0, self.game.grid.n)
        result = self.game.set_value(row, col, z)
        self._after_move(result.status)

    def _cmd_validate(self, args: List) -> None:
        if self.game.validate():
            self._print("Validation passed: board is solvable")
        else:
            self._print("Validation failed: board is unsolvable")

    def _cmd_guess(self, args: List) -> None:
        self._check_range(args[0], 0.0, 1.0, "threshold")
        result = self.game.guess(args[0])
        self._after_move(result.status)

    def _cmd_generate(self, args: List) -> None:
        total = self.game.grid.n ** 2
        self._check_range(args[0], 0, total)
        self._check_range(args[1], 0, total)
        self.game.generate(args[0], args[1])
        self._print_board()

    def _cmd_undo(self, args: List) -> None:
        move = self.game.undo()
        for change in move:
            self._print(f"Undo {coordinate_to_string(change.row, change.col)}: from {change.after} to {change.before}")
        self._print_board()

    def _cmd_redo(self, args: List) -> None:
        move = self.game.redo()
        for change in move:
            self._print(f"Redo {change.get_description()}")
        self._print_board()

    def _cmd_save(self, args: List) -> None:
        self.game.save(args[0])
        self._print(f"Saved to: {args[0]}")

    def _cmd_hint(self, args: List) -> None:
        row, col = self._user_cell(*args)
        self._print(f"Hint: set cell to {self.game.hint(row, col)}")

    def _cmd_guess_hint(self, args: List) -> None:
        row, col = self._user_cell(*args)
        candidates = self.game.guess_hint(row, col)
        if not candidates:
            self._print("No value has a positive score for this cell")
        for value, score in candidates:
            self._print(f"Value {value}: score {score:.3f}")

    def _cmd_num_solutions(self, args: List) -> None:
        count = self.game.num_solutions()
        self._print(f"Number of solutions: {count}")
        if count == 1:
            self._print("This is a good board!")
        elif count > 1:
            self._print("The puzzle has more than 1 solution, try to edit it further")

    def _cmd_autofill(self, args: List) -> None:
        result = self.game.autofill()
        for change in result.move:
            self._print(f"Cell <{coordinate_to_string(change.row, change.col)}> set to {change.after}")
        self._after_move(result.status)

    def _cmd_reset(self, args: List) -> None:
        self.game.reset()
        self._print("Board reset")
        self._print_board()

    def _cmd_exit(self, args: List) -> None:
        self._print("Exiting...")
        self.running = False


# =============================================================================
# ENTRY POINT
# =============================================================================

def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive Sudoku puzzle editor and solver")
    parser.add_argument("--config", help="JSON configuration file")
    parser.add_argument("--seed", type=int, help="Seed for the random source")
    parser.add_argument("--solver", choices=SOLVER_CHOICES, help="Constraint solver backend")
    parser.add_argument("--log-level", choices=LOG_LEVELS, type=str.upper, help="Logging level")
    return parser


def build_config(args: argparse.Namespace) -> EngineConfig:
    """Load the configuration and apply command-line overrides."""
    config = load_config(args.config)
    if args.seed is not None:
        config.seed = args.seed
    if args.solver is not None:
        config.solver = args.solver
    if args.log_level is not None:
        config.log_level = args.log_level
    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_arg_parser().parse_args(argv)
    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=config.log_level_value,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    random.seed(config.seed)
    logger.info("Starting with solver=%s seed=%s", config.solver, config.seed)

    app = SudokuConsoleApp(GameState(config))
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
