"""Runtime configuration.

Defaults for the command runner and the logger, overridable through
``SHELLOUT_*`` environment variables. No configuration files are read.
"""

import os
from typing import Callable, Dict, Literal, Mapping, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..util.log import Log, LogFormat, LogLevel

log = Log.create({"service": "config"})

T = TypeVar("T")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Raised when a configuration value cannot be parsed."""

    def __init__(self, key: str, value: str, reason: str):
        self.key = key
        self.value = value
        super().__init__(f"invalid value for {key}: {value!r} ({reason})")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Optional[str] = None
    format: Optional[Literal["kv", "json"]] = None
    console: Optional[bool] = None
    file: Optional[bool] = None
    dev_file: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")


class ShellConfig(BaseModel):
    """Defaults applied when normalizing shell options."""
    force_color_var: Optional[str] = Field(
        "FORCE_COLOR",
        description="Variable injected into every child environment; None disables injection",
    )
    force_color_value: str = "1"
    echo: bool = Field(True, description="Echo synchronous output to the parent stdout")
    accumulate: bool = Field(True, description="Capture all stdout chunks in async mode")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ShellConfig":
        """Build a config from ``SHELLOUT_*`` variables in ``environ`` (default: os.environ).

        Raises:
            ConfigError: a variable holds a value that cannot be parsed.
        """
        env = os.environ if environ is None else environ
        data = _runner_fields(env, strict=True)

        logging: Dict[str, object] = {}
        _read(env, "SHELLOUT_LOG_LEVEL", _parse_level, logging, "level")
        _read(env, "SHELLOUT_LOG_FORMAT", _parse_format, logging, "format")
        _read(env, "SHELLOUT_LOG_CONSOLE", _parse_bool, logging, "console")
        _read(env, "SHELLOUT_LOG_FILE", _parse_bool, logging, "file")
        _read(env, "SHELLOUT_LOG_DEV", _parse_bool, logging, "dev_file")
        if logging:
            data["logging"] = LoggingConfig(**logging)

        return cls(**data)

    @classmethod
    def runner_from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ShellConfig":
        """Runner settings only; invalid values keep their defaults and log a warning."""
        env = os.environ if environ is None else environ
        return cls(**_runner_fields(env, strict=False))


def _runner_fields(env: Mapping[str, str], strict: bool) -> Dict[str, object]:
    data: Dict[str, object] = {}

    color_var = env.get("SHELLOUT_FORCE_COLOR_VAR")
    if color_var is not None:
        data["force_color_var"] = color_var.strip() or None
    color = env.get("SHELLOUT_FORCE_COLOR")
    if color is not None:
        if color.strip().lower() in _FALSE:
            data["force_color_var"] = None
        else:
            data["force_color_value"] = color.strip()

    for key, field in (("SHELLOUT_ECHO", "echo"), ("SHELLOUT_ACCUMULATE", "accumulate")):
        try:
            _read(env, key, _parse_bool, data, field)
        except ConfigError as e:
            if strict:
                raise
            log.warn("ignoring invalid setting", {"key": e.key, "value": e.value})
    return data


def _parse_bool(value: str) -> bool:
    text = value.strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError("expected a boolean")


def _parse_level(value: str) -> str:
    LogLevel.parse(value)
    return value.strip().lower()


def _parse_format(value: str) -> str:
    return LogFormat.parse(value).value


def _read(
    env: Mapping[str, str],
    key: str,
    parse: Callable[[str], T],
    target: Dict[str, object],
    field: str,
) -> None:
    raw = env.get(key)
    if raw is None:
        return
    try:
        target[field] = parse(raw)
    except ValueError as e:
        raise ConfigError(key, raw, str(e)) from e
