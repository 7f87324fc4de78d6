"""Configuration shared by the scaffolder, the sync engine and the CLI."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import ConfigError, InvalidInputError, NotFoundError
from .naming import ModuleIdentifier

__all__ = [
    "CONFIG_FILENAME",
    "DaggyConfig",
    "ModuleConfig",
    "VariantConfig",
]


CONFIG_FILENAME = "daggy.toml"


class VariantConfig(BaseModel):
    """A module flavor and where its templates and reference module live."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1, description="Selector used on the command line, e.g. 'full'.")
    template_dir: str = Field(..., min_length=1, description="Template root, relative to the templates directory.")
    reference_module: str = Field(
        ...,
        min_length=1,
        description="Module rendered from this variant inside the repository and synced back into it.",
    )

    @property
    def identifier(self) -> ModuleIdentifier:
        return ModuleIdentifier(self.reference_module)


def _default_variants() -> List[VariantConfig]:
    return [
        VariantConfig(name="full", template_dir="mod-full", reference_module="module-template"),
        VariantConfig(name="light", template_dir="mod-light", reference_module="module-template-light"),
    ]


class DaggyConfig(BaseModel):
    """Repository level settings.

    Every field has a default matching the repository layout the tool was
    written for, so an absent configuration file is valid.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    templates_dir: str = Field(".daggerx/templates", description="Directory holding every template tree.")
    template_suffix: str = Field(".tmpl", min_length=1, description="Suffix marking files that are rendered.")
    source_suffix: str = Field(".go", min_length=1, description="Extension of the files compared by sync.")
    generated_files: List[str] = Field(
        default_factory=lambda: ["dagger.gen.go"],
        description="File names produced by tooling, never compared.",
    )
    excluded_dirs: List[str] = Field(
        default_factory=lambda: ["internal"],
        description="Directory names whose content is never compared.",
    )
    fixture_dir: str = Field("testdata", min_length=1, description="Directory name of verbatim fixture data.")
    go_module_prefix: str = Field("github.com/Excoriate/daggerverse", description="Prefix for 'go mod edit -module'.")
    workflows_dir: str = Field(".github/workflows", description="Where CI workflows are generated.")
    workflow_template: str = Field(
        ".github/workflows/mod-template-ci.yaml.tmpl",
        description="CI workflow template, relative to the templates directory.",
    )
    dagger_json_exclude: List[str] = Field(
        default_factory=lambda: [
            ".direnv",
            ".devenv",
            ".vscode",
            ".idea",
            ".trunk",
            "go.work",
            "go.work.sum",
        ],
        description="Repository-root entries excluded from every generated dagger.json.",
    )
    variants: List[VariantConfig] = Field(default_factory=_default_variants)

    @model_validator(mode="after")
    def check_variants(self) -> "DaggyConfig":
        names = [variant.name for variant in self.variants]
        if not names:
            raise ValueError("at least one variant must be configured")
        if len(set(names)) != len(names):
            raise ValueError("variant names must be unique")
        if "all" in names:
            raise ValueError("'all' is reserved and cannot name a variant")
        return self

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DaggyConfig":
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise ConfigError(f"invalid configuration: {exc}") from exc

    @classmethod
    def load(cls, path: str | Path | None = None, *, root: str | Path | None = None) -> "DaggyConfig":
        """Load settings from ``path``, or ``<root>/daggy.toml`` when it exists.

        A ``pyproject.toml`` is read from its ``[tool.daggy]`` table. Any
        other file is read as a whole.
        """

        if path is None:
            if root is None:
                return cls()
            candidate = Path(root) / CONFIG_FILENAME
            if not candidate.is_file():
                return cls()
            path = candidate

        config_path = Path(path)
        if not config_path.is_file():
            raise NotFoundError(f"configuration file {config_path} does not exist")

        try:
            with config_path.open("rb") as handle:
                data: Dict[str, Any] = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"{config_path} is not valid TOML: {exc}") from exc

        if config_path.name == "pyproject.toml":
            data = data.get("tool", {}).get("daggy", {})
        return cls.from_mapping(data)

    def variant_names(self) -> List[str]:
        return [variant.name for variant in self.variants]

    def variant(self, name: str) -> VariantConfig:
        for variant in self.variants:
            if variant.name == name:
                return variant
        choices = ", ".join(f"'{item}'" for item in self.variant_names())
        raise InvalidInputError(f"invalid module type '{name}'. Must be one of {choices}.")

    def templates_root(self, root: str | Path) -> Path:
        return Path(root) / self.templates_dir

    def template_root(self, root: str | Path, variant: VariantConfig) -> Path:
        return self.templates_root(root) / variant.template_dir


@dataclass(frozen=True, slots=True)
class ModuleConfig:
    """Paths derived for a module about to be created.

    Attributes
    ----------
    identifier:
        The validated module name.
    module_type:
        The variant the module is rendered from.
    path:
        Directory of the module, ``<root>/<name>``.
    template_root:
        Template tree of the selected variant.
    workflow_path:
        CI workflow generated for the module.
    """

    identifier: ModuleIdentifier
    module_type: str
    root: Path
    path: Path
    template_root: Path
    workflow_path: Path

    @classmethod
    def from_name(
        cls,
        name: str,
        module_type: str,
        root: str | Path,
        config: DaggyConfig | None = None,
    ) -> "ModuleConfig":
        config = config or DaggyConfig()
        identifier = ModuleIdentifier(name)
        variant = config.variant(module_type)
        root_path = Path(root)
        return cls(
            identifier=identifier,
            module_type=variant.name,
            root=root_path,
            path=root_path / identifier.value,
            template_root=config.template_root(root_path, variant),
            workflow_path=root_path / config.workflows_dir / f"ci-mod-{identifier.value}.yaml",
        )

    @property
    def name(self) -> str:
        return self.identifier.value

    @property
    def tests_path(self) -> Path:
        return self.path / "tests"

    @property
    def examples_path(self) -> Path:
        return self.path / "examples" / "go"
