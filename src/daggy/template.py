"""Render template trees into concrete module trees."""

from __future__ import annotations

import logging
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from .errors import TemplateRenderingError
from .naming import ModuleIdentifier
from .placeholders import PLACEHOLDER_PATTERN, Placeholder

__all__ = [
    "DEFAULT_TEMPLATE_SUFFIX",
    "TemplateRenderer",
    "TemplateRenderingError",
    "render",
]


LOGGER = logging.getLogger(__name__)

DEFAULT_TEMPLATE_SUFFIX = ".tmpl"


def _coerce_identifier(identifier: ModuleIdentifier | str) -> ModuleIdentifier:
    if isinstance(identifier, ModuleIdentifier):
        return identifier
    return ModuleIdentifier(identifier)


def _iter_tree(root: Path, exclusions: frozenset[str]) -> Iterator[Path]:
    """Yield directories and files below ``root`` in sorted order, pruning ``exclusions``."""

    for entry in sorted(root.iterdir()):
        if entry.name in exclusions:
            LOGGER.debug("Skipping excluded entry %s", entry)
            continue
        yield entry
        if entry.is_dir():
            yield from _iter_tree(entry, exclusions)


@dataclass(slots=True)
class TemplateRenderer:
    """Render templates holding ``{{.module_name}}`` style placeholders.

    Files ending with :attr:`template_suffix` are rendered and written without
    the suffix. Every other file is copied byte-for-byte, which is how fixture
    data travels through a template tree untouched.
    """

    template_suffix: str = DEFAULT_TEMPLATE_SUFFIX
    missing: str = "keep"

    def __post_init__(self) -> None:
        if self.missing not in {"keep", "error"}:
            raise ValueError("missing must be 'keep' or 'error'")
        if not self.template_suffix:
            raise ValueError("template_suffix must not be empty")

    def render_string(
        self,
        template: str,
        identifier: ModuleIdentifier | str,
        *,
        missing: str | None = None,
    ) -> str:
        """Render ``template`` for ``identifier``.

        Parameters
        ----------
        template:
            The template text to evaluate.
        identifier:
            The module the placeholders are resolved for.
        missing:
            Policy for ``{{.key}}`` tokens outside the known placeholder set.
            ``"keep"`` leaves them untouched, ``"error"`` raises
            :class:`TemplateRenderingError`. Defaults to :attr:`missing`.
        """

        policy = missing or self.missing
        if policy not in {"keep", "error"}:
            raise ValueError("missing must be 'keep' or 'error'")
        module = _coerce_identifier(identifier)

        def substitute(match: re.Match[str]) -> str:
            placeholder = Placeholder.from_key(match.group("key"))
            if placeholder is None:
                if policy == "error":
                    raise TemplateRenderingError(f"unknown placeholder '{match.group(0)}'")
                return match.group(0)
            return placeholder.derive(module)

        return PLACEHOLDER_PATTERN.sub(substitute, template)

    def output_name(self, name: str) -> str:
        """Strip the template suffix from ``name`` when present."""

        if name.endswith(self.template_suffix) and len(name) > len(self.template_suffix):
            return name[: -len(self.template_suffix)]
        return name

    def render_file(
        self,
        template_path: str | Path,
        identifier: ModuleIdentifier | str,
        *,
        target: str | Path | None = None,
        encoding: str = "utf-8",
    ) -> str:
        """Render ``template_path`` and optionally write the result to ``target``."""

        template_path = Path(template_path)
        if not template_path.is_file():
            raise FileNotFoundError(template_path)

        text = template_path.read_text(encoding=encoding)
        rendered = self.render_string(text, identifier)

        if target is not None:
            target_path = Path(target)
            target_path.parent.mkdir(parents=True, exist_ok=True)
            target_path.write_text(rendered, encoding=encoding)

        return rendered

    def render_directory(
        self,
        template_dir: str | Path,
        target_dir: str | Path,
        identifier: ModuleIdentifier | str,
        *,
        exclusions: Iterable[str] | None = None,
    ) -> list[Path]:
        """Mirror ``template_dir`` into ``target_dir`` and return the written files.

        Entries whose name is listed in ``exclusions`` are neither traversed
        nor rendered. A failure leaves whatever was already written in place.
        """

        template_dir = Path(template_dir)
        target_dir = Path(target_dir)
        if not template_dir.is_dir():
            raise FileNotFoundError(template_dir)

        module = _coerce_identifier(identifier)
        excluded = frozenset(exclusions or ())
        target_dir.mkdir(parents=True, exist_ok=True)

        written: list[Path] = []
        for source in _iter_tree(template_dir, excluded):
            relative = source.relative_to(template_dir)
            if source.is_dir():
                (target_dir / relative).mkdir(parents=True, exist_ok=True)
                continue

            destination = target_dir / relative.parent / self.output_name(source.name)
            if source.name.endswith(self.template_suffix):
                self.render_file(source, module, target=destination)
                LOGGER.debug("Rendered %s -> %s", source, destination)
            else:
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(source, destination)
                LOGGER.debug("Copied %s -> %s", source, destination)
            written.append(destination)

        LOGGER.info("Rendered %d files from %s into %s", len(written), template_dir, target_dir)
        return written


def render(
    template_root: str | Path,
    dest_root: str | Path,
    identifier: ModuleIdentifier | str,
    exclusions: Iterable[str] | None = None,
    *,
    template_suffix: str = DEFAULT_TEMPLATE_SUFFIX,
) -> list[Path]:
    """Render ``template_root`` into ``dest_root`` for ``identifier``."""

    renderer = TemplateRenderer(template_suffix=template_suffix)
    return renderer.render_directory(template_root, dest_root, identifier, exclusions=exclusions)
