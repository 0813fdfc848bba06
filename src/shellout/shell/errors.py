"""Shell runner error type."""

from ..util.error import first_line


class ShellError(Exception):
    """Raised when a command fails to start, exits non-zero, or times out.

    Only the first line of the message is kept; the full diagnostic of the
    underlying failure stays reachable through ``__cause__``.
    """

    def __init__(self, message: str = ""):
        self.message = first_line(message)
        super().__init__(self.message)
