"""The ``shell()`` entry point and the ``Shell`` namespace."""

from typing import Any, Coroutine, Literal, Optional, Union, overload

from ..core.config import ShellConfig
from .options import ShellOptions, normalize_options
from .spawn import run_async
from .sync import run_sync

ShellResult = Optional[str]


def resolve_options(options: Optional[ShellOptions] = None, **overrides: Any) -> ShellOptions:
    """Layer keyword overrides over ``options``, returning a new validated value."""
    if not overrides:
        return options or ShellOptions()
    base = dict(options) if options is not None else {}
    return ShellOptions(**{**base, **overrides})


@overload
def shell(
    command: str,
    options: Optional[ShellOptions] = None,
    *,
    config: Optional[ShellConfig] = None,
    asynchronous: Literal[True],
    **overrides: Any,
) -> Coroutine[Any, Any, ShellResult]: ...


@overload
def shell(
    command: str,
    options: Optional[ShellOptions] = None,
    *,
    config: Optional[ShellConfig] = None,
    asynchronous: Literal[False],
    **overrides: Any,
) -> ShellResult: ...


@overload
def shell(
    command: str,
    options: Optional[ShellOptions] = None,
    *,
    config: Optional[ShellConfig] = None,
    **overrides: Any,
) -> Union[ShellResult, Coroutine[Any, Any, ShellResult]]: ...


def shell(
    command: str,
    options: Optional[ShellOptions] = None,
    *,
    config: Optional[ShellConfig] = None,
    **overrides: Any,
) -> Union[ShellResult, Coroutine[Any, Any, ShellResult]]:
    """Run ``command`` through the shell.

    In synchronous mode (the default) this blocks and returns the captured
    stdout, or None. With ``asynchronous=True`` it returns a coroutine that
    resolves to the same value once the process exits.

    Example:
        shell("git status")
        await shell("npm test", asynchronous=True, prefix="[test]")

    Raises:
        ShellError: the command failed to start, exited non-zero or timed out.
    """
    normalized = normalize_options(resolve_options(options, **overrides), config)
    if normalized.asynchronous:
        return run_async(command, normalized)
    return run_sync(command, normalized)


class Shell:
    """Mode-specific shortcuts over ``shell()``."""

    @staticmethod
    async def run(command: str, options: Optional[ShellOptions] = None, **overrides: Any) -> ShellResult:
        """Run asynchronously regardless of ``options.asynchronous``."""
        return await shell(command, options, **{**overrides, "asynchronous": True})

    @staticmethod
    def run_sync(command: str, options: Optional[ShellOptions] = None, **overrides: Any) -> ShellResult:
        """Run synchronously regardless of ``options.asynchronous``."""
        return shell(command, options, **{**overrides, "asynchronous": False})
