"""Per-user directories for shellout, resolved with platformdirs."""

import os
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "shellout"


class GlobalPath:
    """Directory locations used by the logging layer."""

    @classmethod
    def data(cls) -> str:
        """Application data directory (``SHELLOUT_DATA_DIR`` overrides it)."""
        return os.environ.get("SHELLOUT_DATA_DIR") or user_data_dir(APP_NAME)

    @classmethod
    def log(cls) -> str:
        """Log file directory."""
        return str(Path(cls.data()) / "log")
