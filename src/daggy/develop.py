"""Run ``dagger develop`` in every module of the repository."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from .commands import CommandRunner, Runner
from .errors import CommandError, DaggyError, NotFoundError

__all__ = ["DevelopReport", "develop_modules", "find_dagger_modules", "raise_for_failures"]


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class DevelopReport:
    succeeded: list[Path] = field(default_factory=list)
    failed: dict[Path, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed


def _walk_dirs(directory: Path) -> Iterator[Path]:
    yield directory
    for entry in sorted(directory.iterdir()):
        if entry.is_dir() and not entry.name.startswith("."):
            yield from _walk_dirs(entry)


def find_dagger_modules(root: str | Path) -> list[Path]:
    """Every directory below ``root`` holding a ``dagger.json``, hidden directories excluded."""

    return [directory for directory in _walk_dirs(Path(root)) if (directory / "dagger.json").is_file()]


def develop_modules(root: str | Path, runner: Runner | None = None) -> DevelopReport:
    """Run ``dagger develop`` in each module; failures are collected, not fatal until the end."""

    root = Path(root)
    if not (root / ".git").exists():
        raise NotFoundError(
            f"{root} is not the root of a git repository",
            hint="run 'daggy develop' from the repository root",
        )

    runner = runner or CommandRunner()
    report = DevelopReport()
    for module in find_dagger_modules(root):
        LOGGER.info("Developing module %s", module)
        try:
            runner.run(["dagger", "develop"], cwd=module)
        except (CommandError, NotFoundError) as exc:
            LOGGER.error("Failed to develop module %s: %s", module, exc)
            report.failed[module] = str(exc)
            continue
        report.succeeded.append(module)

    if report.total == 0:
        LOGGER.info("No modules found below %s", root)
    return report


def raise_for_failures(report: DevelopReport) -> None:
    if report.failed:
        raise DaggyError(
            f"dagger develop failed for {len(report.failed)} of {report.total} modules"
        )
