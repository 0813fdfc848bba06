import os
from collections.abc import Iterator

import pytest

from shellout.util.log import Log


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("SHELLOUT_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _log_teardown() -> Iterator[None]:
    yield
    Log.reset()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
