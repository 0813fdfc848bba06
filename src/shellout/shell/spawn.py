"""Asynchronous command runner.

The child is spawned through the shell and its piped streams are pumped
chunk by chunk: each chunk is optionally rewritten (transform, then prefix)
and forwarded to the parent stream, and stdout chunks are captured. The
outcome is settled once, after every pump has drained and the process has
exited, or when the timeout fires first.
"""

import asyncio
import codecs
import os
import signal
from typing import Any, Callable, List, Optional

from ..util.error import describe_error
from ..util.log import Log
from .errors import ShellError
from .options import NormalizedOptions, Stdio, stdio_kwargs
from .transforms import TransformFunction, chain, prefix_transform, transform_string

log = Log.create({"service": "shell.async"})

CHUNK_SIZE = 64 * 1024
REAP_TIMEOUT = 1.0


class OutputCapture:
    """Collects stdout text, either every chunk or only the most recent one."""

    def __init__(self, accumulate: bool = True):
        self.accumulate = accumulate
        self._chunks: List[str] = []

    def feed(self, chunk: str) -> None:
        if self.accumulate:
            self._chunks.append(chunk)
        else:
            self._chunks = [chunk]

    def value(self) -> Optional[str]:
        text = "".join(self._chunks)
        return text or None


def spawn_stdio(options: NormalizedOptions) -> Stdio:
    """Disposition used for the child; prefixing forces stdout and stderr to pipes."""
    if options.prefix is None:
        return options.stdio
    return (options.stdio[0], "pipe", "pipe")


def forward_transform(options: NormalizedOptions) -> Optional[TransformFunction]:
    prefix = prefix_transform(options.prefix) if options.prefix is not None else None
    return chain(options.transform, prefix)


async def pump(
    reader: Any,
    sink: Any = None,
    rewrite: Optional[TransformFunction] = None,
    on_chunk: Optional[Callable[[str], None]] = None,
) -> None:
    """Read ``reader`` until EOF, handing each decoded chunk to ``on_chunk`` and ``sink``."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        data = await reader.read(CHUNK_SIZE)
        text = decoder.decode(data, final=not data)
        if text:
            if on_chunk is not None:
                on_chunk(text)
            if sink is not None:
                sink.write(transform_string(rewrite, text))
                sink.flush()
        if not data:
            return


async def _settle(process: Any, pumps: List[Any]) -> int:
    await asyncio.gather(*pumps)
    return await process.wait()


def _kill(process: Any) -> None:
    """SIGKILL the child's process group, then the child itself."""
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    try:
        process.kill()
    except ProcessLookupError:
        # Already reaped.
        return


async def _reap(process: Any) -> None:
    """Kill the child's process group and wait briefly for the child to be reaped."""
    _kill(process)
    try:
        await asyncio.wait_for(process.wait(), timeout=REAP_TIMEOUT)
    except asyncio.TimeoutError:
        log.warn("child not reaped after kill", {"pid": process.pid})


async def run_async(command: str, options: NormalizedOptions) -> Optional[str]:
    """Spawn ``command`` through the shell and wait for it to exit.

    Returns the captured stdout (transformed when a transform is set), or
    None if nothing was captured.

    Raises:
        ShellError: on spawn failure, non-zero exit or timeout.
    """
    timer = log.time("command", {"command": command, "mode": "async"})
    try:
        process = await options.spawn(
            command,
            cwd=options.cwd,
            env=options.env,
            start_new_session=True,
            **stdio_kwargs(spawn_stdio(options)),
        )
    except OSError as e:
        log.error("command failed to start", {"command": command, "error": e})
        message = f"Failed to start command: {command}; {describe_error(e)}"
        raise ShellError(transform_string(options.transform, message)) from e

    capture = OutputCapture(options.accumulate)
    rewrite = forward_transform(options)
    forward = not options.silent

    pumps = []
    if process.stdout is not None:
        pumps.append(pump(process.stdout, options.stdout if forward else None, rewrite, capture.feed))
    if process.stderr is not None:
        pumps.append(pump(process.stderr, options.stderr if forward else None, rewrite))

    try:
        exit_code = await asyncio.wait_for(_settle(process, pumps), timeout=options.timeout)
    except asyncio.TimeoutError as e:
        log.error("command timeout", {"command": command, "timeout": options.timeout, "pid": process.pid})
        message = f"Command timeout: {command}"
        raise ShellError(transform_string(options.transform, message)) from e
    finally:
        if process.returncode is None:
            await _reap(process)

    if exit_code != 0:
        log.error("command failed", {"command": command, "exit_code": exit_code})
        message = f"Command failed: {command} with exit code {exit_code}"
        raise ShellError(transform_string(options.transform, message))

    timer.stop({"exit_code": exit_code})
    output = capture.value()
    if output is None:
        return None
    return transform_string(options.transform, output)
