"""Scaffold modules from template trees and keep the templates in sync.

Rendering turns a template tree into a concrete module for a hyphenated
module name. The reverse direction compares a rendered module with its
template, normalizes the expected naming differences away, classifies what is
left and writes real edits back into the template as placeholders.
"""

from __future__ import annotations

from .config import DaggyConfig, ModuleConfig, VariantConfig
from .errors import (
    CommandError,
    ConfigError,
    DaggyError,
    InvalidInputError,
    ModuleExistsError,
    NotFoundError,
    TemplateRenderingError,
)
from .naming import (
    ModuleIdentifier,
    to_lower_camel,
    to_lowercase,
    to_package_safe,
    to_title_concatenated,
)
from .normalize import Normalizer, normalize
from .placeholders import Placeholder
from .scaffold import ModuleScaffolder
from .sync import ChangeRecord, ChangeStatus, apply_changes, detect_changes
from .template import TemplateRenderer, render

__all__ = [
    "ChangeRecord",
    "ChangeStatus",
    "CommandError",
    "ConfigError",
    "DaggyConfig",
    "DaggyError",
    "InvalidInputError",
    "ModuleConfig",
    "ModuleExistsError",
    "ModuleIdentifier",
    "ModuleScaffolder",
    "Normalizer",
    "NotFoundError",
    "Placeholder",
    "TemplateRenderer",
    "TemplateRenderingError",
    "VariantConfig",
    "apply_changes",
    "detect_changes",
    "normalize",
    "render",
    "to_lower_camel",
    "to_lowercase",
    "to_package_safe",
    "to_title_concatenated",
]

__version__ = "0.1.0"
