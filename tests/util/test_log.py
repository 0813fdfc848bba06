from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from shellout.core.global_paths import GlobalPath
from shellout.util.error import describe_error, first_line
from shellout.util.log import Log, LogFormat, LogLevel


def test_log_writes_console_and_file(monkeypatch, tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setattr(GlobalPath, "log", classmethod(lambda cls: str(tmp_path)))
    Log.configure(level=LogLevel.INFO, format=LogFormat.KV, console=True, file=True, dev=True)

    log = Log.create({"service": "test.log"})
    log.info("hello", {"command": "echo hi"})
    Log.close()

    stderr = capsys.readouterr().err
    text = (tmp_path / "dev.log").read_text(encoding="utf-8")

    assert "msg=hello" in stderr
    assert "service=test.log" in stderr
    assert 'command="echo hi"' in text


def test_log_supports_json_format(monkeypatch, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setattr(GlobalPath, "log", classmethod(lambda cls: str(tmp_path)))
    Log.configure(level=LogLevel.INFO, format=LogFormat.JSON, console=False, file=True, dev=True)

    log = Log.create({"service": "test.json"})
    log.error("command failed", {"exit_code": 3, "error": ValueError("bad")})
    Log.close()

    payload = json.loads((tmp_path / "dev.log").read_text(encoding="utf-8").strip())

    assert payload["level"] == "error"
    assert payload["msg"] == "command failed"
    assert payload["service"] == "test.json"
    assert payload["exit_code"] == 3
    assert payload["error"] == "ValueError: bad"


def test_log_is_silent_by_default(capsys) -> None:  # type: ignore[no-untyped-def]
    Log.create({"service": "test.silent"}).error("nobody hears this")

    assert capsys.readouterr().err == ""


def test_log_filters_below_level(capsys) -> None:  # type: ignore[no-untyped-def]
    Log.configure(level=LogLevel.WARN, console=True, file=False)
    log = Log.create({"service": "test.level"})

    log.info("skipped")
    log.warn("kept")

    err = capsys.readouterr().err
    assert "skipped" not in err
    assert "msg=kept" in err


def test_log_timer_reports_duration(capsys) -> None:  # type: ignore[no-untyped-def]
    Log.configure(level=LogLevel.DEBUG, format=LogFormat.KV, console=True, file=False)
    log = Log.create({"service": "test.timer"})

    with log.time("command", {"mode": "sync"}):
        pass

    lines = capsys.readouterr().err.splitlines()
    assert "status=started" in lines[0]
    assert "status=completed" in lines[1]
    assert "duration=" in lines[1]


def test_log_prunes_old_run_files(monkeypatch, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setattr(GlobalPath, "log", classmethod(lambda cls: str(tmp_path)))
    for day in range(1, 13):
        run = tmp_path / f"2020-01-{day:02d}T000000.log"
        run.write_text("", encoding="utf-8")
        os.utime(run, (day * 86400, day * 86400))
    (tmp_path / "dev.log").write_text("kept\n", encoding="utf-8")

    Log.configure(file=True)
    Log.close()

    runs = sorted(p.name for p in tmp_path.glob("????-??-??T??????.log"))
    assert len(runs) == 10
    assert "2020-01-01T000000.log" not in runs
    assert (tmp_path / "dev.log").read_text(encoding="utf-8") == "kept\n"


def test_create_caches_by_service() -> None:
    assert Log.create({"service": "same"}) is Log.create({"service": "same"})
    assert Log.create() is not Log.create()


def test_level_and_format_parsing() -> None:
    assert LogLevel.parse(None) is LogLevel.INFO
    assert LogLevel.parse("warning") is LogLevel.WARN
    assert LogLevel.parse(" Debug ") is LogLevel.DEBUG
    assert LogFormat.parse("JSON") is LogFormat.JSON
    with pytest.raises(ValueError):
        LogLevel.parse("loud")
    with pytest.raises(ValueError):
        LogFormat.parse("xml")


def test_first_line_and_describe_error() -> None:
    assert first_line("one\ntwo") == "one"
    assert first_line(None) == ""
    assert describe_error(OSError("disk\nfull")) == "OSError: disk"
    assert describe_error(KeyError()) == "KeyError"
