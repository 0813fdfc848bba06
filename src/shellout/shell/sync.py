"""Blocking command runner."""

import subprocess
from typing import NoReturn, Optional

from ..util.error import describe_error, first_line
from ..util.log import Log
from .errors import ShellError
from .options import NormalizedOptions, stdio_kwargs
from .transforms import transform_string

log = Log.create({"service": "shell.sync"})


def decode_output(data: object) -> Optional[str]:
    """Decode captured output; ``None`` when nothing was captured."""
    if not data:
        return None
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return str(data)


def run_sync(command: str, options: NormalizedOptions) -> Optional[str]:
    """Run ``command`` through the shell and block until it exits.

    Returns the captured stdout (transformed when a transform is set), or
    None if the command printed nothing. Unless silent, the text is also
    written to the parent stdout.

    Raises:
        ShellError: on spawn failure, non-zero exit or timeout.
    """
    timer = log.time("command", {"command": command, "mode": "sync"})
    try:
        completed = options.run(
            command,
            shell=True,
            cwd=options.cwd,
            env=options.env,
            timeout=options.timeout,
            check=True,
            **stdio_kwargs(options.stdio),
        )
    except subprocess.CalledProcessError as e:
        log.error("command failed", {
            "command": command,
            "exit_code": e.returncode,
            "stderr": first_line(decode_output(e.stderr)) or None,
        })
        _fail(options, f"Command failed: {command} with exit code {e.returncode}", e)
    except subprocess.TimeoutExpired as e:
        log.error("command timeout", {"command": command, "timeout": options.timeout})
        _fail(options, f"Command timeout: {command}", e)
    except OSError as e:
        log.error("command failed to start", {"command": command, "error": e})
        _fail(options, f"Failed to start command: {command}; {describe_error(e)}", e)

    timer.stop({"exit_code": completed.returncode})

    output = decode_output(completed.stdout)
    if output is None:
        return None
    output = transform_string(options.transform, output)
    if options.echo:
        options.stdout.write(output)
        options.stdout.flush()
    return output


def _fail(options: NormalizedOptions, message: str, cause: BaseException) -> NoReturn:
    raise ShellError(transform_string(options.transform, message)) from cause
