"""Custom exception types used by daggy."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class DaggyError(RuntimeError):
    """Base class for every error raised on purpose by daggy."""


class InvalidInputError(DaggyError, ValueError):
    """Raised when user supplied input is rejected before touching the filesystem."""


class NotFoundError(DaggyError, FileNotFoundError):
    """Raised when a required directory (git root, template root, ...) is missing."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ModuleExistsError(DaggyError, FileExistsError):
    """Raised when a module directory is already present at the target location."""


class ConfigError(DaggyError):
    """Raised when a configuration file cannot be parsed or validated."""


class TemplateRenderingError(DaggyError):
    """Raised when the renderer cannot evaluate a placeholder."""


class CommandError(DaggyError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(
        self,
        command: Sequence[str],
        cwd: Path,
        returncode: int,
        stderr: str = "",
    ) -> None:
        self.command = tuple(command)
        self.cwd = cwd
        self.returncode = returncode
        self.stderr = stderr
        message = f"command '{' '.join(self.command)}' failed in {cwd} with exit code {returncode}"
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


__all__ = [
    "CommandError",
    "ConfigError",
    "DaggyError",
    "InvalidInputError",
    "ModuleExistsError",
    "NotFoundError",
    "TemplateRenderingError",
]
