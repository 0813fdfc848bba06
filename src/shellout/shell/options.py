"""Shell options and their normalization.

``ShellOptions`` is what callers build; ``normalize_options`` derives a fully
populated ``NormalizedOptions`` from it and never mutates the caller's value.
"""

import asyncio
import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..core.config import ShellConfig
from .transforms import TransformFunction

StdioMode = Literal["inherit", "pipe", "ignore"]
Stdio = Tuple[StdioMode, StdioMode, StdioMode]

SpawnFunction = Callable[..., Awaitable[Any]]
RunFunction = Callable[..., Any]

STDIO_INHERIT: Stdio = ("inherit", "inherit", "inherit")
STDIO_SILENT: Stdio = ("inherit", "ignore", "ignore")
STDIO_PIPE: Stdio = ("inherit", "pipe", "pipe")


class ShellOptions(BaseModel):
    """Options for a single ``shell()`` invocation."""
    cwd: Optional[Path] = Field(None, description="Working directory (default: current directory)")
    env: Optional[Dict[str, str]] = Field(None, description="Variables layered over the inherited environment")
    environ: Optional[Dict[str, str]] = Field(None, description="Inherited environment (default: os.environ)")
    timeout: Optional[float] = Field(None, gt=0, description="Timeout in seconds; unlimited when unset")
    asynchronous: bool = Field(False, description="Return an awaitable instead of blocking")
    nopipe: bool = Field(False, description="Let the child write straight to the parent streams")
    silent: bool = Field(False, description="Suppress echoing and forwarding of output")
    stdio: Optional[Stdio] = Field(None, description="Explicit stdin/stdout/stderr disposition")
    transform: Optional[TransformFunction] = Field(None, description="Applied to output and error messages")
    prefix: Optional[str] = Field(None, description="Label prepended to forwarded chunks (async only)")
    accumulate: Optional[bool] = Field(None, description="Capture every stdout chunk instead of the last one")
    stdout: Optional[Any] = Field(None, description="Parent stdout stream (default: sys.stdout)")
    stderr: Optional[Any] = Field(None, description="Parent stderr stream (default: sys.stderr)")
    spawn: Optional[SpawnFunction] = Field(None, description="Async spawn primitive (default: asyncio.create_subprocess_shell)")
    run: Optional[RunFunction] = Field(None, description="Blocking run primitive (default: subprocess.run)")

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)


@dataclass(frozen=True)
class NormalizedOptions:
    """Fully resolved options consumed by the sync and async runners."""
    cwd: Optional[str]
    env: Dict[str, str]
    stdio: Stdio
    timeout: Optional[float]
    asynchronous: bool
    silent: bool
    echo: bool
    accumulate: bool
    transform: Optional[TransformFunction]
    prefix: Optional[str]
    stdout: Any
    stderr: Any
    spawn: SpawnFunction
    run: RunFunction


def default_stdio(*, nopipe: bool, silent: bool) -> Stdio:
    """Stream disposition implied by the ``nopipe`` and ``silent`` flags."""
    if nopipe:
        return STDIO_SILENT if silent else STDIO_INHERIT
    return STDIO_PIPE


def build_env(
    environ: Mapping[str, str],
    env: Optional[Mapping[str, str]],
    config: ShellConfig,
) -> Dict[str, str]:
    """Child environment: color flag, then inherited variables, then caller overrides."""
    merged: Dict[str, str] = {}
    if config.force_color_var:
        merged[config.force_color_var] = config.force_color_value
    merged.update(environ)
    merged.update(env or {})
    return merged


def normalize_options(
    options: Optional[ShellOptions] = None,
    config: Optional[ShellConfig] = None,
) -> NormalizedOptions:
    """Fill every default of ``options``; the input value is left unchanged.

    Runner settings come from ``config``, or from ``SHELLOUT_*`` variables in
    the process environment when it is omitted. Never raises: unparseable
    settings fall back to their defaults.
    """
    options = options or ShellOptions()
    environ: Mapping[str, str] = options.environ if options.environ is not None else os.environ
    config = config or ShellConfig.runner_from_env()

    return NormalizedOptions(
        cwd=str(options.cwd) if options.cwd is not None else None,
        env=build_env(environ, options.env, config),
        stdio=options.stdio or default_stdio(nopipe=options.nopipe, silent=options.silent),
        timeout=options.timeout,
        asynchronous=options.asynchronous,
        silent=options.silent,
        echo=config.echo and not options.silent,
        accumulate=config.accumulate if options.accumulate is None else options.accumulate,
        transform=options.transform,
        prefix=options.prefix,
        stdout=options.stdout if options.stdout is not None else sys.stdout,
        stderr=options.stderr if options.stderr is not None else sys.stderr,
        spawn=options.spawn or asyncio.create_subprocess_shell,
        run=options.run or subprocess.run,
    )


_STDIO_TARGETS: Dict[str, Optional[int]] = {
    "inherit": None,
    "pipe": subprocess.PIPE,
    "ignore": subprocess.DEVNULL,
}


def stdio_kwargs(stdio: Stdio) -> Dict[str, Optional[int]]:
    """Translate a disposition triple into ``stdin``/``stdout``/``stderr`` arguments."""
    stdin, stdout, stderr = stdio
    return {
        "stdin": _STDIO_TARGETS[stdin],
        "stdout": _STDIO_TARGETS[stdout],
        "stderr": _STDIO_TARGETS[stderr],
    }
