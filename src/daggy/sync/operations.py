"""The ``inspect`` and ``sync`` operations over one or more module variants."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from ..config import DaggyConfig, VariantConfig
from ..errors import InvalidInputError, NotFoundError
from .detector import ChangeDetector
from .models import ChangeRecord, ChangeStatus, count_by_status
from .updater import TemplateUpdater

__all__ = [
    "ALL_VARIANTS",
    "VariantReport",
    "generate_summary",
    "inspect_changes",
    "resolve_variants",
    "sync_changes",
]


LOGGER = logging.getLogger(__name__)

ALL_VARIANTS = "all"

ConfirmCallback = Callable[[VariantConfig, Sequence[ChangeRecord]], bool]


@dataclass(slots=True)
class VariantReport:
    """Outcome of inspecting or syncing a single variant."""

    variant: str
    instance_root: Path
    template_root: Path
    changes: tuple[ChangeRecord, ...]
    applied: bool = False
    touched: list[Path] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    def counts(self) -> dict[ChangeStatus, int]:
        return count_by_status(self.changes)


def resolve_variants(selector: str, config: DaggyConfig | None = None) -> list[VariantConfig]:
    """Translate ``full``, ``light`` or ``all`` into the configured variants."""

    config = config or DaggyConfig()
    if selector == ALL_VARIANTS:
        return list(config.variants)
    for variant in config.variants:
        if variant.name == selector:
            return [variant]
    choices = ", ".join(f"'{name}'" for name in [*config.variant_names(), ALL_VARIANTS])
    raise InvalidInputError(f"invalid inspect type '{selector}'. Must be one of {choices}.")


def _variant_roots(root: Path, variant: VariantConfig, config: DaggyConfig) -> tuple[Path, Path]:
    instance_root = root / variant.reference_module
    template_root = config.template_root(root, variant)
    if not instance_root.is_dir():
        raise NotFoundError(
            f"reference module '{variant.reference_module}' not found at {instance_root}",
            hint=f"create it first with 'daggy create {variant.reference_module} --type {variant.name}'",
        )
    if not template_root.is_dir():
        raise NotFoundError(
            f"template directory for '{variant.name}' not found at {template_root}",
            hint="check 'templates_dir' and the variant 'template_dir' in daggy.toml",
        )
    return instance_root, template_root


def _detect(root: Path, variant: VariantConfig, config: DaggyConfig, detailed: bool) -> VariantReport:
    instance_root, template_root = _variant_roots(root, variant, config)
    detector = ChangeDetector.from_config(config)
    changes = detector.detect(instance_root, template_root, variant.identifier, detailed)
    return VariantReport(
        variant=variant.name,
        instance_root=instance_root,
        template_root=template_root,
        changes=changes,
    )


def inspect_changes(
    root: str | Path,
    selector: str,
    *,
    detailed: bool = False,
    config: DaggyConfig | None = None,
) -> list[VariantReport]:
    """Report the changes of every selected variant without touching any file."""

    config = config or DaggyConfig()
    variants = resolve_variants(selector, config)
    reports = []
    for variant in variants:
        LOGGER.info("Inspecting changes for %s module type", variant.name)
        reports.append(_detect(Path(root), variant, config, detailed))
    return reports


def sync_changes(
    root: str | Path,
    selector: str,
    *,
    dry_run: bool = False,
    detailed: bool = False,
    confirm: ConfirmCallback | None = None,
    config: DaggyConfig | None = None,
) -> list[VariantReport]:
    """Detect changes per variant and write them back into the template trees.

    Variants are processed one after another. With ``dry_run`` nothing is
    written. ``confirm`` is asked before each variant with pending changes;
    when it returns ``False`` the variant is left untouched.
    """

    config = config or DaggyConfig()
    variants = resolve_variants(selector, config)
    reports = []
    for variant in variants:
        LOGGER.info("Syncing changes for %s module type (dry run: %s)", variant.name, dry_run)
        report = _detect(Path(root), variant, config, detailed)
        reports.append(report)

        if not report.has_changes or dry_run:
            continue
        if confirm is not None and not confirm(variant, report.changes):
            LOGGER.info("Sync cancelled for %s module type", variant.name)
            continue

        updater = TemplateUpdater.from_config(
            config,
            template_root=report.template_root,
            instance_root=report.instance_root,
            identifier=variant.identifier,
        )
        report.touched = updater.apply(report.changes)
        report.applied = True
        LOGGER.info("Changes synced successfully for %s module type", variant.name)
    return reports


def generate_summary(changes: Sequence[ChangeRecord], detailed: bool = False) -> str:
    lines: list[str] = []
    for change in changes:
        lines.append(f"{change.status}: {change.path}\n")
        if detailed and change.diff is not None:
            lines.append("Diff:\n")
            lines.append(change.diff)
            if not change.diff.endswith("\n"):
                lines.append("\n")
    return "".join(lines)
