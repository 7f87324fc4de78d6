"""Reverse synchronization from rendered modules back into template trees."""

from __future__ import annotations

from .detector import ChangeDetector, detect_changes
from .models import ChangeRecord, ChangeStatus
from .operations import (
    VariantReport,
    generate_summary,
    inspect_changes,
    resolve_variants,
    sync_changes,
)
from .updater import TemplateUpdater, apply_changes

__all__ = [
    "ChangeDetector",
    "ChangeRecord",
    "ChangeStatus",
    "TemplateUpdater",
    "VariantReport",
    "apply_changes",
    "detect_changes",
    "generate_summary",
    "inspect_changes",
    "resolve_variants",
    "sync_changes",
]
