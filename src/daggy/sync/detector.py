"""Classify the differences between a rendered module and its template tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, Iterator

from ..config import DaggyConfig
from ..diff import diff_lines, render_diff
from ..errors import NotFoundError
from ..naming import ModuleIdentifier
from ..normalize import Normalizer
from .models import ChangeRecord, ChangeStatus

__all__ = ["ChangeDetector", "detect_changes"]


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChangeDetector:
    """Compare an instance tree with a template tree file by file.

    Only instance files carrying :attr:`source_suffix` are compared, while
    every template file counts when looking for deletions. Generated files and
    anything below an excluded, fixture or hidden directory are ignored.
    """

    source_suffix: str = ".go"
    template_suffix: str = ".tmpl"
    generated_files: frozenset[str] = field(default_factory=lambda: frozenset({"dagger.gen.go"}))
    excluded_dirs: frozenset[str] = field(default_factory=lambda: frozenset({"internal"}))
    fixture_dir: str = "testdata"

    @classmethod
    def from_config(cls, config: DaggyConfig) -> "ChangeDetector":
        return cls(
            source_suffix=config.source_suffix,
            template_suffix=config.template_suffix,
            generated_files=frozenset(config.generated_files),
            excluded_dirs=frozenset(config.excluded_dirs),
            fixture_dir=config.fixture_dir,
        )

    def _skip_dir(self, name: str) -> bool:
        return name.startswith(".") or name == self.fixture_dir or name in self.excluded_dirs

    def _walk(self, root: Path) -> Iterator[Path]:
        for entry in sorted(root.iterdir()):
            if entry.is_dir():
                if self._skip_dir(entry.name):
                    continue
                yield from self._walk(entry)
            elif entry.is_file():
                yield entry

    def instance_files(self, instance_root: Path) -> dict[str, Path]:
        """Map relative POSIX path to file for every comparable instance file."""

        files: dict[str, Path] = {}
        for path in self._walk(instance_root):
            if not path.name.endswith(self.source_suffix) or path.name in self.generated_files:
                continue
            files[path.relative_to(instance_root).as_posix()] = path
        return files

    def template_files(self, template_root: Path) -> dict[str, Path]:
        """Map the expected instance path to template file for every template, whatever its extension."""

        files: dict[str, Path] = {}
        for path in self._walk(template_root):
            if not path.name.endswith(self.template_suffix):
                continue
            relative = path.relative_to(template_root).as_posix()[: -len(self.template_suffix)]
            if Path(relative).name in self.generated_files:
                continue
            files[relative] = path
        return files

    def detect(
        self,
        instance_root: str | Path,
        template_root: str | Path,
        identifier: ModuleIdentifier | str,
        detailed: bool = False,
    ) -> tuple[ChangeRecord, ...]:
        """Return the changes of ``instance_root`` relative to ``template_root``.

        ``identifier`` names the module ``instance_root`` was rendered for;
        its concrete names are normalized away before files are compared.
        Records are sorted by path.
        """

        instance_root = Path(instance_root)
        template_root = Path(template_root)
        if not instance_root.is_dir():
            raise NotFoundError(f"instance directory {instance_root} does not exist")
        if not template_root.is_dir():
            raise NotFoundError(f"template directory {template_root} does not exist")

        if not isinstance(identifier, ModuleIdentifier):
            identifier = ModuleIdentifier(identifier)
        normalizer = Normalizer(identifier)

        instances = self.instance_files(instance_root)
        templates = self.template_files(template_root)
        records: dict[str, ChangeRecord] = {}

        for relative, instance_file in instances.items():
            template_file = templates.get(relative) or template_root / (relative + self.template_suffix)
            instance_text = instance_file.read_text(encoding="utf-8")

            if relative not in templates:
                LOGGER.debug("Added: %s", relative)
                records[relative] = ChangeRecord(
                    path=relative,
                    status=ChangeStatus.ADDED,
                    instance_file=instance_file,
                    template_file=template_file,
                    diff=instance_text if detailed else None,
                )
                continue

            normalized_instance = normalizer(instance_text)
            normalized_template = normalizer(template_file.read_text(encoding="utf-8"))
            if normalized_instance == normalized_template:
                continue

            LOGGER.debug("Modified: %s", relative)
            records[relative] = ChangeRecord(
                path=relative,
                status=ChangeStatus.MODIFIED,
                instance_file=instance_file,
                template_file=template_file,
                diff=render_diff(diff_lines(normalized_template, normalized_instance)) if detailed else None,
            )

        for relative, template_file in templates.items():
            if relative in instances or (instance_root / relative).is_file():
                continue
            LOGGER.debug("Deleted: %s", relative)
            records[relative] = ChangeRecord(
                path=relative,
                status=ChangeStatus.DELETED,
                instance_file=instance_root / relative,
                template_file=template_file,
                diff=template_file.read_text(encoding="utf-8") if detailed else None,
            )

        ordered = tuple(records[key] for key in sorted(records))
        LOGGER.info("Detected %d changes between %s and %s", len(ordered), instance_root, template_root)
        return ordered


def detect_changes(
    instance_root: str | Path,
    template_root: str | Path,
    identifier: ModuleIdentifier | str,
    detailed: bool = False,
    *,
    detector: ChangeDetector | None = None,
    exclude: Iterable[str] | None = None,
) -> tuple[ChangeRecord, ...]:
    """Detect changes with the default settings, optionally adding ``exclude`` directory names."""

    detector = detector or ChangeDetector()
    if exclude:
        detector = replace(detector, excluded_dirs=detector.excluded_dirs | frozenset(exclude))
    return detector.detect(instance_root, template_root, identifier, detailed)
