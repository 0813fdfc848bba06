import pytest

from shellout.shell import ShellError


def test_shell_error_keeps_only_first_line() -> None:
    error = ShellError("Command failed: make\nTraceback (most recent call last):\n  ...")

    assert error.message == "Command failed: make"
    assert str(error) == "Command failed: make"


def test_shell_error_single_line_message_is_unchanged() -> None:
    assert str(ShellError("Command timeout: sleep 9")) == "Command timeout: sleep 9"


def test_shell_error_accepts_empty_message() -> None:
    assert ShellError().message == ""
    assert ShellError("\nsecond").message == ""


def test_shell_error_is_an_exception() -> None:
    with pytest.raises(ShellError, match="^boom$"):
        raise ShellError("boom\nmore")
