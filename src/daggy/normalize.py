"""Turn rendered content back into its placeholder-bearing form.

Rendering a template replaces ``{{.module_name}}`` with ``PaymentService`` and
``{{.module_name_pkg}}`` with ``payment-service``. The :class:`Normalizer`
undoes exactly those two substitutions so a rendered file can be compared with
(or written back into) its template. Tokens already present in the text are
matched first and passed through untouched, so normalizing twice is the same
as normalizing once.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .naming import ModuleIdentifier
from .placeholders import PLACEHOLDER_PATTERN, Placeholder

__all__ = ["Normalizer", "normalize"]


@dataclass(frozen=True, slots=True)
class Normalizer:
    """Replace the concrete names of ``identifier`` with placeholder tokens."""

    identifier: ModuleIdentifier
    _pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)
    _replacements: dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        identifier = self.identifier
        if not isinstance(identifier, ModuleIdentifier):
            identifier = ModuleIdentifier(identifier)
            object.__setattr__(self, "identifier", identifier)

        replacements: dict[str, str] = {}
        for placeholder in (Placeholder.TITLE, Placeholder.PACKAGE):
            concrete = placeholder.derive(identifier)
            if concrete:
                replacements.setdefault(concrete, placeholder.token)

        # Longest names first so "ModuleTemplateLight" wins over "ModuleTemplate".
        names = sorted(replacements, key=len, reverse=True)
        alternatives = [PLACEHOLDER_PATTERN.pattern] + [re.escape(name) for name in names]
        object.__setattr__(self, "_pattern", re.compile("|".join(f"(?:{alt})" for alt in alternatives)))
        object.__setattr__(self, "_replacements", replacements)

    def __call__(self, content: str) -> str:
        return self.normalize(content)

    def normalize(self, content: str) -> str:
        def substitute(match: re.Match[str]) -> str:
            if match.group("key") is not None:
                return match.group(0)
            return self._replacements[match.group(0)]

        return self._pattern.sub(substitute, content)


def normalize(content: str, identifier: ModuleIdentifier | str) -> str:
    """Normalize ``content`` for ``identifier`` (see :class:`Normalizer`)."""

    if not isinstance(identifier, ModuleIdentifier):
        identifier = ModuleIdentifier(identifier)
    return Normalizer(identifier).normalize(content)
