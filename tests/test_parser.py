import pytest

from app.parser import CommandParseError, parse_command


@pytest.mark.parametrize("line,name,args", [
    ("set 1 2 3", "set", [1, 2, 3]),
    ("  edit   ", "edit", []),
    ("edit puzzles/a.txt", "edit", ["puzzles/a.txt"]),
    ("guess 0.25", "guess", [0.25]),
    ("generate 10 20\n", "generate", [10, 20]),
    ("print_board", "print_board", []),
    ("mark_errors 0", "mark_errors", [0]),
])
def test_parse_valid_commands(line, name, args):
    cmd = parse_command(line)
    assert cmd.name == name
    assert cmd.args == args


@pytest.mark.parametrize("line,fragment", [
    ("", "empty"),
    ("jump 1", "invalid command"),
    ("set 1 2", "expects 3"),
    ("undo now", "expects 0"),
    ("edit a b", "expects 0 to 1"),
    ("set 1 two 3", "integer"),
    ("guess high", "number"),
])
def test_parse_errors(line, fragment):
    with pytest.raises(CommandParseError) as info:
        parse_command(line)
    assert fragment in str(info.value)


def test_user_coordinate_conversion():
    from utils.coords import coordinate_to_string, user_to_cell

    assert coordinate_to_string(2, 0) == "1,3"
    assert user_to_cell(4, 1) == (0, 3)
