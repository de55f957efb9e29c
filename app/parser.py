"""
Command-line parsing for the console application.

A line is split on whitespace; the first word names the command and the
rest are its parameters, converted to int/float/str per command.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


class CommandParseError(ValueError):
    """Raised for unknown commands, wrong parameter counts or bad parameter types."""


@dataclass(frozen=True)
class CommandSpec:
    """Parameter types of one command; optional ones come last."""
    name: str
    params: Tuple[type, ...] = ()
    optional: int = 0

    @property
    def min_params(self) -> int:
        return len(self.params) - self.optional


@dataclass
class ParsedCommand:
    name: str
    args: List[Any] = field(default_factory=list)


COMMANDS: Dict[str, CommandSpec] = {spec.name: spec for spec in (
    CommandSpec("solve", (str,)),
    CommandSpec("edit", (str,), optional=1),
    CommandSpec("mark_errors", (int,)),
    CommandSpec("print_board"),
    CommandSpec("set", (int, int, int)),
    CommandSpec("validate"),
    CommandSpec("guess", (float,)),
    CommandSpec("generate", (int, int)),
    CommandSpec("undo"),
    CommandSpec("redo"),
    CommandSpec("save", (str,)),
    CommandSpec("hint", (int, int)),
    CommandSpec("guess_hint", (int, int)),
    CommandSpec("num_solutions"),
    CommandSpec("autofill"),
    CommandSpec("reset"),
    CommandSpec("exit"),
)}


def _convert(raw: str, kind: type) -> Any:
    if kind is str:
        return raw
    try:
        return kind(raw)
    except ValueError:
        noun = "an integer" if kind is int else "a number"
        raise CommandParseError(f"Error: parameter {raw!r} must be {noun}") from None


def parse_command(line: str) -> ParsedCommand:
    """
    Parse one input line.

    Args:
        line: Raw line without length checks applied

    Returns:
        ParsedCommand with typed arguments

    Raises:
        CommandParseError: If the line is blank, unknown or has bad parameters
    """
    words = line.split()
    if not words:
        raise CommandParseError("Error: empty command")

    name, raw_args = words[0], words[1:]
    spec = COMMANDS.get(name)
    if spec is None:
        raise CommandParseError("Error: invalid command")

    if not spec.min_params <= len(raw_args) <= len(spec.params):
        if spec.optional:
            expected = f"{spec.min_params} to {len(spec.params)}"
        else:
            expected = str(len(spec.params))
        raise CommandParseError(f"Error: {name} expects {expected} parameter(s), got {len(raw_args)}")

    args = [_convert(raw, kind) for raw, kind in zip(raw_args, spec.params)]
    return ParsedCommand(name, args)
