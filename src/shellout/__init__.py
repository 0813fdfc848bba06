"""shellout - run shell commands synchronously or asynchronously.

Captures or streams output, labels concurrent output with a prefix, and
reports every failure as a single ``ShellError``.
"""

__version__ = "0.1.0"

from .shell import (
    Shell,
    ShellError,
    ShellOptions,
    ShellResult,
    TransformFunction,
    prefix_transform,
    shell,
    transform_string,
)

__all__ = [
    "__version__",
    "Shell",
    "ShellError",
    "ShellOptions",
    "ShellResult",
    "TransformFunction",
    "prefix_transform",
    "shell",
    "transform_string",
]
