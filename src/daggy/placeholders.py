"""The closed set of placeholder tokens understood inside template files."""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable

from .naming import ModuleIdentifier

__all__ = ["PLACEHOLDER_PATTERN", "Placeholder"]


# ``{{.module_name}}`` and ``{{ .module_name }}`` are equivalent.
PLACEHOLDER_PATTERN = re.compile(r"{{\s*\.(?P<key>[A-Za-z_][\w.]*?)\s*}}")


_DERIVATIONS: dict[str, Callable[[ModuleIdentifier], str]] = {
    "module_name_pkg": lambda identifier: identifier.package,
    "module_name": lambda identifier: identifier.title,
    "module_name_camel": lambda identifier: identifier.camel,
    "module_name_lowercase": lambda identifier: identifier.lowercase,
}


class Placeholder(str, Enum):
    """Placeholder kinds and the identifier form each one resolves to."""

    PACKAGE = "module_name_pkg"
    TITLE = "module_name"
    CAMEL = "module_name_camel"
    LOWERCASE = "module_name_lowercase"

    @property
    def token(self) -> str:
        """Canonical spelling written back into templates."""

        return "{{." + self.value + "}}"

    def derive(self, identifier: ModuleIdentifier) -> str:
        return _DERIVATIONS[self.value](identifier)

    @classmethod
    def from_key(cls, key: str) -> "Placeholder | None":
        try:
            return cls(key)
        except ValueError:
            return None
