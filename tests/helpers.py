"""Shared test helpers: fake process primitives for the runner seams."""

from __future__ import annotations

import asyncio
import subprocess
from typing import Any


# Above the Linux pid_max ceiling, so signalling its process group always
# fails with ProcessLookupError.
UNUSED_PID = 2**22 + 1


class FakeReader:
    """Stream reader that hands out pre-recorded chunks, then EOF."""

    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = list(chunks)

    async def read(self, n: int = -1) -> bytes:
        await asyncio.sleep(0)
        if self._chunks:
            return self._chunks.pop(0)
        return b""


class FakeProcess:
    """Minimal stand-in for ``asyncio.subprocess.Process``."""

    def __init__(
        self,
        *,
        stdout: list[bytes] | None = None,
        stderr: list[bytes] | None = None,
        exit_code: int = 0,
        hang: bool = False,
    ) -> None:
        self.pid = UNUSED_PID
        self.stdout = FakeReader(stdout) if stdout is not None else None
        self.stderr = FakeReader(stderr) if stderr is not None else None
        self.returncode: int | None = None
        self.kills = 0
        self._exit_code = exit_code
        self._hang = hang
        self._released = asyncio.Event()

    async def wait(self) -> int:
        if self._hang and not self.kills:
            await self._released.wait()
        self.returncode = -9 if self.kills else self._exit_code
        return self.returncode

    def kill(self) -> None:
        self.kills += 1
        self._released.set()


class FakeSpawn:
    """Async spawn primitive recording its calls."""

    def __init__(self, process: FakeProcess | None = None, error: BaseException | None = None) -> None:
        self.process = process
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def __call__(self, command: str, **kwargs: Any) -> FakeProcess:
        self.calls.append((command, kwargs))
        if self.error is not None:
            raise self.error
        assert self.process is not None
        return self.process


class FakeRun:
    """Blocking run primitive returning or raising a canned outcome."""

    def __init__(self, stdout: bytes | None = b"", error: BaseException | None = None) -> None:
        self.stdout = stdout
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, command: str, **kwargs: Any) -> subprocess.CompletedProcess[bytes]:
        self.calls.append((command, kwargs))
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(command, 0, stdout=self.stdout, stderr=b"")
