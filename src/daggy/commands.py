"""Thin wrappers around the external tools daggy drives (git, dagger, go)."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol, Sequence

from .errors import CommandError, NotFoundError

__all__ = ["CommandRunner", "Runner", "find_git_root"]


LOGGER = logging.getLogger(__name__)


class Runner(Protocol):
    def run(self, command: Sequence[str], cwd: str | Path) -> str:
        """Run ``command`` inside ``cwd`` and return its standard output."""


class CommandRunner:
    """Run commands with :func:`subprocess.run`, always in an explicit directory.

    The process-wide working directory is never changed.
    """

    def __init__(self, *, capture_output: bool = True) -> None:
        self.capture_output = capture_output

    def run(self, command: Sequence[str], cwd: str | Path) -> str:
        command = [str(part) for part in command]
        directory = Path(cwd)
        LOGGER.info("Running '%s' in %s", " ".join(command), directory)
        try:
            result = subprocess.run(
                command,
                cwd=directory,
                capture_output=self.capture_output,
                check=False,
                text=True,
            )
        except FileNotFoundError as exc:
            if not directory.is_dir():
                raise NotFoundError(f"working directory {directory} does not exist") from exc
            raise NotFoundError(
                f"'{command[0]}' is not installed or not on PATH",
                hint=f"install '{command[0]}' and retry",
            ) from exc

        if result.returncode != 0:
            raise CommandError(command, directory, result.returncode, result.stderr or "")
        return result.stdout or ""


def find_git_root(start: str | Path, runner: Runner | None = None) -> Path:
    """Return the top level directory of the git repository containing ``start``."""

    runner = runner or CommandRunner()
    try:
        output = runner.run(["git", "rev-parse", "--show-toplevel"], cwd=start)
    except CommandError as exc:
        raise NotFoundError(
            f"{start} is not inside a git repository",
            hint="run daggy from within the repository or pass --root",
        ) from exc
    return Path(output.strip())
