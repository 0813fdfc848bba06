"""Command event logging.

``Log.create({"service": "shell"})`` returns a logger whose tags ride along
on every event. Events render as one key=value or JSON line and go to stderr
and/or a log file under the data directory. Both sinks start disabled, so the
runner stays quiet until ``Log.configure`` (or ``bootstrap_logging``) turns
one on.
"""

import json
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from ..core.global_paths import GlobalPath
from .error import describe_error


class LogLevel(str, Enum):
    """Severity, lowest first."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"

    @classmethod
    def parse(cls, value: str | None) -> "LogLevel":
        if value is None:
            return cls.INFO
        text = value.strip().upper()
        if text == "WARNING":
            return cls.WARN
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"invalid log level: {value}") from None

    @property
    def rank(self) -> int:
        return list(LogLevel).index(self)


class LogFormat(str, Enum):
    """Line format of emitted events."""
    KV = "kv"
    JSON = "json"

    @classmethod
    def parse(cls, value: str | None) -> "LogFormat":
        if value is None:
            return cls.KV
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"invalid log format: {value}") from None


# Timestamped run logs kept in the log directory; dev.log is never rotated.
MAX_LOG_FILES = 10


@dataclass
class _Sinks:
    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.KV
    console: bool = False
    file: Optional[TextIO] = None


_sinks = _Sinks()


@dataclass
class LogTimer:
    """Pairs a ``started`` event with a ``completed`` one carrying the duration in ms."""
    logger: "Logger"
    message: str
    extra: Dict[str, Any]
    start_time: float = field(default_factory=time.monotonic)

    def stop(self, extra: Optional[Dict[str, Any]] = None) -> None:
        duration = int((time.monotonic() - self.start_time) * 1000)
        self.logger.info(self.message, {**self.extra, **(extra or {}), "status": "completed", "duration": duration})

    def __enter__(self) -> "LogTimer":
        return self

    def __exit__(self, *args) -> None:
        self.stop()


def _plain(value: Any) -> Any:
    if isinstance(value, BaseException):
        return describe_error(value)
    if value is None or isinstance(value, (str, bool, int, float, list, tuple, dict)):
        return value
    return str(value)


def _kv(value: Any) -> str:
    if isinstance(value, str):
        if value and not any(ch.isspace() or ch == "=" for ch in value):
            return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class Logger:
    def __init__(self, tags: Optional[Dict[str, Any]] = None):
        self.tags = tags or {}

    def _line(self, level: LogLevel, message: Any, extra: Optional[Dict[str, Any]]) -> str:
        fields = {k: _plain(v) for k, v in {**self.tags, **(extra or {})}.items() if v is not None}
        stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        if _sinks.format is LogFormat.JSON:
            record = {"time": stamp, "level": level.value.lower(), "msg": _plain(message), **fields}
            return json.dumps(record, ensure_ascii=False, separators=(",", ":"))
        pairs = [f"level={level.value.lower()}", f"msg={_kv(_plain(message))}"]
        pairs += [f"{k}={_kv(v)}" for k, v in fields.items()]
        return " ".join([stamp, *pairs])

    def _emit(self, level: LogLevel, message: Any, extra: Optional[Dict[str, Any]]) -> None:
        if level.rank < _sinks.level.rank:
            return
        if not _sinks.console and _sinks.file is None:
            return
        line = self._line(level, message, extra) + "\n"
        if _sinks.console:
            sys.stderr.write(line)
            sys.stderr.flush()
        if _sinks.file is not None:
            _sinks.file.write(line)
            _sinks.file.flush()

    def debug(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._emit(LogLevel.DEBUG, message, extra)

    def info(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._emit(LogLevel.INFO, message, extra)

    def warn(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._emit(LogLevel.WARN, message, extra)

    def error(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._emit(LogLevel.ERROR, message, extra)

    def time(self, message: str, extra: Optional[Dict[str, Any]] = None) -> LogTimer:
        extra = extra or {}
        self.debug(message, {**extra, "status": "started"})
        return LogTimer(logger=self, message=message, extra=extra)


class Log:
    """Logger registry and sink switches."""

    _loggers: Dict[str, Logger] = {}

    @classmethod
    def create(cls, tags: Optional[Dict[str, Any]] = None) -> Logger:
        """One shared logger per ``service`` tag; untagged loggers are never cached."""
        tags = tags or {}
        service = tags.get("service")
        if not service:
            return Logger(tags=tags)
        return cls._loggers.setdefault(service, Logger(tags=tags))

    @classmethod
    def configure(
        cls,
        *,
        level: LogLevel | None = None,
        format: LogFormat | None = None,
        console: bool | None = None,
        file: bool | None = None,
        dev: bool = False,
    ) -> None:
        """Update the sinks; arguments left as None keep their current value.

        Turning the file sink on opens ``dev.log`` (appending) when ``dev`` is
        set, otherwise a fresh timestamped file, after pruning old ones.
        """
        if level is not None:
            _sinks.level = level
        if format is not None:
            _sinks.format = format
        if console is not None:
            _sinks.console = console

        keep_file = _sinks.file is not None if file is None else file
        cls.close()
        if not keep_file:
            return

        log_dir = Path(GlobalPath.log())
        log_dir.mkdir(parents=True, exist_ok=True)
        if dev:
            _sinks.file = (log_dir / "dev.log").open("a", encoding="utf-8")
            return
        runs = sorted(log_dir.glob("????-??-??T??????.log"), key=lambda p: p.stat().st_mtime)
        for stale in runs[: max(len(runs) - MAX_LOG_FILES + 1, 0)]:
            stale.unlink(missing_ok=True)
        stamp = datetime.now().strftime("%Y-%m-%dT%H%M%S")
        _sinks.file = (log_dir / f"{stamp}.log").open("w", encoding="utf-8")

    @classmethod
    def close(cls) -> None:
        if _sinks.file is not None:
            _sinks.file.close()
            _sinks.file = None

    @classmethod
    def reset(cls) -> None:
        """Back to the silent defaults."""
        cls.close()
        _sinks.level = LogLevel.INFO
        _sinks.format = LogFormat.KV
        _sinks.console = False
