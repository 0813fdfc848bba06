"""Shell command execution.

Runs a command through the system shell, either blocking or as a coroutine,
and reports every failure as a single-line ``ShellError``.

Example:
    from shellout.shell import Shell, shell

    # Block until the command exits; output is returned and echoed
    text = shell("git rev-parse HEAD", silent=True)

    # Await the command, forwarding labelled output as it arrives
    await shell("npm run build", asynchronous=True, prefix="[build]")

    # Same, through the namespace helpers
    await Shell.run("pytest", timeout=600)
"""

from .errors import ShellError
from .options import NormalizedOptions, ShellOptions, normalize_options
from .runner import Shell, ShellResult, shell
from .transforms import TransformFunction, prefix_transform, transform_string

__all__ = [
    "NormalizedOptions",
    "Shell",
    "ShellError",
    "ShellOptions",
    "ShellResult",
    "TransformFunction",
    "normalize_options",
    "prefix_transform",
    "shell",
    "transform_string",
]
