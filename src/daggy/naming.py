"""Name-case conversion for hyphenated module identifiers."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import InvalidInputError

__all__ = [
    "ModuleIdentifier",
    "capitalize",
    "to_lower_camel",
    "to_lowercase",
    "to_package_safe",
    "to_package_slug",
    "to_title_concatenated",
]


_VALID_IDENTIFIER = re.compile(r"^\w[\w\-]*$")


def capitalize(segment: str) -> str:
    """Uppercase the first character of ``segment`` and keep the rest as is.

    Unlike :meth:`str.capitalize` the remainder is not lowercased, so
    ``"fooBar"`` becomes ``"FooBar"``.
    """

    if not segment:
        return ""
    return segment[0].upper() + segment[1:]


def to_title_concatenated(identifier: str) -> str:
    """``"my-module"`` -> ``"MyModule"``."""

    return "".join(capitalize(part) for part in identifier.split("-"))


def to_lower_camel(identifier: str) -> str:
    """``"my-module"`` -> ``"myModule"``."""

    if not identifier:
        return ""
    first, *rest = identifier.split("-")
    return first.lower() + "".join(capitalize(part) for part in rest)


def to_lowercase(identifier: str) -> str:
    return identifier.lower()


def to_package_safe(identifier: str) -> str:
    """``"Foo-Bar"`` -> ``"foo_bar"``."""

    return identifier.lower().replace("-", "_")


def to_package_slug(identifier: str) -> str:
    """Lowercased, trimmed form with inner spaces turned into hyphens."""

    return identifier.lower().strip().replace(" ", "-")


@dataclass(frozen=True, slots=True)
class ModuleIdentifier:
    """A validated, hyphen-delimited module name such as ``payment-service``.

    Every presentation form is derived on access and never stored.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise InvalidInputError("module name must be a string")
        cleaned = self.value.strip()
        if not cleaned:
            raise InvalidInputError("module name must not be empty")
        if not _VALID_IDENTIFIER.match(cleaned):
            raise InvalidInputError(
                f"invalid module name '{self.value}'. Use letters, digits, '_' and '-' only."
            )
        object.__setattr__(self, "value", cleaned)

    def __str__(self) -> str:
        return self.value

    @property
    def title(self) -> str:
        return to_title_concatenated(self.value)

    @property
    def camel(self) -> str:
        return to_lower_camel(self.value)

    @property
    def lowercase(self) -> str:
        return to_lowercase(self.value)

    @property
    def package_safe(self) -> str:
        return to_package_safe(self.value)

    @property
    def package(self) -> str:
        """Form substituted for the package placeholder."""

        return to_package_slug(self.value)
