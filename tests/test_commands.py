import pytest

from chatbot.commands import Command, parse_command


@pytest.mark.parametrize(
    "text,expected",
    [
        ("!start", Command("start")),
        ("  !call  ", Command("call")),
        ("!CHECK", Command("check")),
        ("!fold now please", Command("fold")),
        ("!status", Command("status")),
        ("!bet 25", Command("bet", 25)),
        ("!raise 100", Command("raise", 100)),
    ],
)
def test_parse_known_commands(text, expected):
    assert parse_command(text) == expected


@pytest.mark.parametrize("text", ["", "hello", "start", "!unknown", "!"])
def test_chatter_is_ignored(text):
    assert parse_command(text) is None


def test_amount_commands_validate_their_argument():
    with pytest.raises(ValueError, match="usage: !bet <amount>"):
        parse_command("!bet")
    with pytest.raises(ValueError, match="invalid amount: ten"):
        parse_command("!raise ten")
    with pytest.raises(ValueError, match="must be positive"):
        parse_command("!bet 0")
    with pytest.raises(ValueError, match="must be positive"):
        parse_command("!raise -5")
