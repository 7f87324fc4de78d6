"""Write detected changes back into a template tree."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

from ..config import DaggyConfig
from ..naming import ModuleIdentifier
from ..normalize import Normalizer
from .models import ChangeRecord, ChangeStatus

__all__ = ["TemplateUpdater", "apply_changes"]


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class TemplateUpdater:
    """Re-abstract instance content into ``template_root``.

    Each record carries its own instance and template file. Added and modified
    files are normalized and written to the template file; deleted template
    files are removed. Afterwards every fixture directory of the instance tree
    is copied over verbatim.

    Updates are applied one after another and stop at the first failure, so an
    error can leave the template tree partially updated.
    """

    template_root: Path
    instance_root: Path
    identifier: ModuleIdentifier
    fixture_dir: str = "testdata"
    excluded_dirs: frozenset[str] = field(default_factory=lambda: frozenset({"internal"}))

    def __post_init__(self) -> None:
        self.template_root = Path(self.template_root)
        self.instance_root = Path(self.instance_root)
        if not isinstance(self.identifier, ModuleIdentifier):
            self.identifier = ModuleIdentifier(self.identifier)

    @classmethod
    def from_config(
        cls,
        config: DaggyConfig,
        *,
        template_root: str | Path,
        instance_root: str | Path,
        identifier: ModuleIdentifier | str,
    ) -> "TemplateUpdater":
        return cls(
            template_root=Path(template_root),
            instance_root=Path(instance_root),
            identifier=identifier,
            fixture_dir=config.fixture_dir,
            excluded_dirs=frozenset(config.excluded_dirs),
        )

    def apply(self, records: Iterable[ChangeRecord]) -> list[Path]:
        """Apply ``records`` and mirror fixtures, returning every template path touched."""

        normalizer = Normalizer(self.identifier)
        touched: list[Path] = []

        for record in records:
            target = record.template_file
            if record.status is ChangeStatus.DELETED:
                target.unlink(missing_ok=True)
                LOGGER.info("Deleted: %s", target)
            else:
                content = normalizer(record.instance_file.read_text(encoding="utf-8"))
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content, encoding="utf-8")
                LOGGER.info("Updated: %s", target)
            touched.append(target)

        touched.extend(self.mirror_fixtures())
        return touched

    def _fixture_dirs(self, root: Path) -> Iterator[Path]:
        for entry in sorted(root.iterdir()):
            if not entry.is_dir() or entry.name.startswith(".") or entry.name in self.excluded_dirs:
                continue
            if entry.name == self.fixture_dir:
                yield entry
                continue
            yield from self._fixture_dirs(entry)

    def mirror_fixtures(self) -> list[Path]:
        """Copy every fixture directory of the instance tree into the template tree byte-for-byte."""

        if not self.instance_root.is_dir():
            return []

        mirrored: list[Path] = []
        for source in self._fixture_dirs(self.instance_root):
            destination = self.template_root / source.relative_to(self.instance_root)
            shutil.copytree(source, destination, dirs_exist_ok=True)
            LOGGER.info("Mirrored fixtures %s -> %s", source, destination)
            mirrored.append(destination)
        return mirrored


def apply_changes(
    records: Iterable[ChangeRecord],
    template_root: str | Path,
    *,
    instance_root: str | Path,
    identifier: ModuleIdentifier | str,
) -> list[Path]:
    """Apply ``records`` to ``template_root`` (see :class:`TemplateUpdater`)."""

    updater = TemplateUpdater(
        template_root=Path(template_root),
        instance_root=Path(instance_root),
        identifier=identifier,
    )
    return updater.apply(records)
