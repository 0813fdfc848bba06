"""Error text helpers."""

from typing import Any


def first_line(text: Any) -> str:
    """Return the text before the first newline, or an empty string."""
    if text is None:
        return ""
    return str(text).split("\n", 1)[0]


def describe_error(error: BaseException) -> str:
    """One-line ``Type: message`` summary of an exception."""
    message = first_line(error)
    if not message:
        return error.__class__.__name__
    return f"{error.__class__.__name__}: {message}"
