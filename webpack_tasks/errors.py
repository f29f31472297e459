"""Exceptions raised by webpack task closures."""

from __future__ import annotations

from typing import Optional, Sequence


class TaskError(RuntimeError):
    """Base class for hard task failures reported to the scheduler."""


class ConfigNotFoundError(TaskError):
    """Raised when a configuration file disappears between probe and use."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Cannot find webpack configuration file: {path}")
        self.path = path


class ConfigLoadError(TaskError):
    """Raised when a configuration file does not export a usable value."""


class BuildError(TaskError):
    """Raised when the bundler reports compile or transport errors."""

    def __init__(self, error_count: int) -> None:
        super().__init__(f"Webpack failed with {error_count} error(s).")
        self.error_count = error_count


class SpawnError(TaskError):
    """Raised when a supervised child process exits unsuccessfully."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        *,
        signal_name: Optional[str] = None,
    ) -> None:
        rendered = " ".join(command)
        if signal_name:
            message = f"Command terminated by signal {signal_name}: {rendered}"
        else:
            message = f"Command failed with exit code {returncode}: {rendered}"
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.signal_name = signal_name
