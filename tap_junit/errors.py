from __future__ import annotations

from pathlib import Path


class TapJUnitError(Exception):
    """Base class for errors that abort a harness session."""


class HarnessError(TapJUnitError):
    """Raised when a staged output file or the report file cannot be accessed."""

    def __init__(self, path: Path | str, reason: object) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class ConfigError(TapJUnitError):
    """Custom exception for configuration and argument parsing errors."""
