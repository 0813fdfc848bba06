"""Runtime logging bootstrap helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.config import ShellConfig
from ..util.log import Log, LogFormat, LogLevel


@dataclass(frozen=True)
class LogSettings:
    level: LogLevel
    format: LogFormat
    console: bool
    file: bool
    dev_file: bool


def _resolve(
    cfg: ShellConfig,
    *,
    level: Optional[str],
    format: Optional[str],
    console: Optional[bool],
    file: Optional[bool],
    dev_file: Optional[bool],
) -> LogSettings:
    log = cfg.logging

    use_console = console if console is not None else log.console
    use_file = file if file is not None else log.file
    use_dev = dev_file if dev_file is not None else log.dev_file

    return LogSettings(
        level=LogLevel.parse(level or log.level),
        format=LogFormat.parse(format or log.format),
        console=bool(use_console),
        file=bool(use_file),
        dev_file=bool(use_dev),
    )


def bootstrap_logging(
    config: Optional[ShellConfig] = None,
    *,
    level: Optional[str] = None,
    format: Optional[str] = None,
    console: Optional[bool] = None,
    file: Optional[bool] = None,
    dev_file: Optional[bool] = None,
) -> LogSettings:
    """Resolve logging settings (arguments, then config, then silent defaults) and apply them."""
    settings = _resolve(
        config or ShellConfig.from_env(),
        level=level,
        format=format,
        console=console,
        file=file,
        dev_file=dev_file,
    )
    Log.configure(
        level=settings.level,
        format=settings.format,
        console=settings.console,
        file=settings.file,
        dev=settings.dev_file,
    )
    return settings
