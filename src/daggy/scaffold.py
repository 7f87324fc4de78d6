"""Create a new module from a variant's template tree."""

from __future__ import annotations

import json
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .commands import CommandRunner, Runner
from .config import DaggyConfig, ModuleConfig
from .errors import ModuleExistsError, NotFoundError
from .template import TemplateRenderer

__all__ = ["ModuleScaffolder", "README_PLACEHOLDER"]


LOGGER = logging.getLogger(__name__)

README_PLACEHOLDER = "[@MODULE_NAME]"


@dataclass(frozen=True, slots=True)
class _Section:
    """One dagger module inside the generated tree (the module, its tests, its examples)."""

    name: str
    template_dir: Path
    target_dir: Path
    go_module_suffix: str
    install_parent: str | None


class ModuleScaffolder:
    """Render a module and drive the toolchain steps around it.

    External commands always receive the directory they must run in; the
    scaffolder never changes the process working directory.
    """

    def __init__(
        self,
        config: DaggyConfig | None = None,
        *,
        runner: Runner | None = None,
        renderer: TemplateRenderer | None = None,
        run_toolchain: bool = True,
    ) -> None:
        self.config = config or DaggyConfig()
        self.runner = runner or CommandRunner()
        self.renderer = renderer or TemplateRenderer(template_suffix=self.config.template_suffix)
        self.run_toolchain = run_toolchain

    def create(self, name: str, module_type: str, root: str | Path) -> ModuleConfig:
        """Create module ``name`` of ``module_type`` below ``root`` and return its configuration."""

        module = ModuleConfig.from_name(name, module_type, Path(root), self.config)
        if not module.template_root.is_dir():
            raise NotFoundError(
                f"template directory {module.template_root} does not exist",
                hint="check 'templates_dir' in daggy.toml or run from the repository root",
            )
        if module.path.exists():
            raise ModuleExistsError(f"module '{module.name}' already exists at {module.path}")

        LOGGER.info("Creating module %s (%s) at %s", module.name, module.module_type, module.path)
        for section in self._sections(module):
            self._initialize(module, section)

        self.copy_readme_and_license(module)
        self.generate_workflow(module)
        if self.run_toolchain:
            self.format_code(module)

        LOGGER.info("Module %s initialized successfully", module.name)
        return module

    def _sections(self, module: ModuleConfig) -> list[_Section]:
        name = module.name
        sections = [
            _Section("module", module.template_root, module.path, name, None),
            _Section("tests", module.template_root / "tests", module.tests_path, f"{name}/tests", "../"),
            _Section(
                "examples",
                module.template_root / "examples" / "go",
                module.examples_path,
                f"{name}/examples/go",
                "../../",
            ),
        ]
        return [section for section in sections if section.template_dir.is_dir()]

    def _initialize(self, module: ModuleConfig, section: _Section) -> None:
        LOGGER.info("Initializing %s for %s in %s", section.name, module.name, section.target_dir)
        section.target_dir.mkdir(parents=True, exist_ok=True)
        dagger_name = module.name if section.name == "module" else section.target_dir.name

        if self.run_toolchain:
            self.runner.run(
                ["dagger", "init", "--sdk", "go", "--name", dagger_name, "--source", "."],
                cwd=section.target_dir,
            )

        exclusions = {"tests", "examples"} if section.name == "module" else set()
        self.renderer.render_directory(
            section.template_dir,
            section.target_dir,
            module.identifier,
            exclusions=exclusions,
        )
        self.update_dagger_json(section.target_dir, module.root)

        if not self.run_toolchain:
            return
        self.runner.run(
            ["go", "mod", "edit", "-module", f"{self.config.go_module_prefix}/{section.go_module_suffix}"],
            cwd=section.target_dir,
        )
        if section.install_parent is not None:
            self.runner.run(["dagger", "install", section.install_parent], cwd=section.target_dir)
        self.runner.run(["dagger", "develop"], cwd=section.target_dir)

    def update_dagger_json(self, module_dir: Path, root: Path) -> bool:
        """Point the ``exclude`` list of ``module_dir/dagger.json`` at the repository root entries."""

        dagger_json = module_dir / "dagger.json"
        if not dagger_json.is_file():
            LOGGER.debug("No dagger.json in %s, skipping exclude update", module_dir)
            return False

        content: dict[str, Any] = json.loads(dagger_json.read_text(encoding="utf-8"))
        prefix = Path(os.path.relpath(root, module_dir)).as_posix()
        content["exclude"] = [f"{prefix}/{entry}" for entry in self.config.dagger_json_exclude]
        dagger_json.write_text(json.dumps(content, indent=2) + "\n", encoding="utf-8")
        LOGGER.debug("Updated %s", dagger_json)
        return True

    def copy_readme_and_license(self, module: ModuleConfig) -> None:
        templates_root = self.config.templates_root(module.root)
        readme = templates_root / "README.md"
        license_file = templates_root / "LICENSE"

        if readme.is_file():
            text = readme.read_text(encoding="utf-8").replace(README_PLACEHOLDER, module.name)
            (module.path / "README.md").write_text(text, encoding="utf-8")
        else:
            LOGGER.warning("README template %s not found, skipping", readme)

        if license_file.is_file():
            shutil.copyfile(license_file, module.path / "LICENSE")
        else:
            LOGGER.warning("LICENSE template %s not found, skipping", license_file)

    def generate_workflow(self, module: ModuleConfig) -> Path | None:
        template = self.config.templates_root(module.root) / self.config.workflow_template
        if not template.is_file():
            LOGGER.warning("Workflow template %s not found, skipping", template)
            return None
        self.renderer.render_file(template, module.identifier, target=module.workflow_path)
        LOGGER.info("Generated CI workflow %s", module.workflow_path)
        return module.workflow_path

    def format_code(self, module: ModuleConfig) -> None:
        for directory in (module.path, module.examples_path, module.tests_path):
            if directory.is_dir():
                self.runner.run(["go", "fmt", "./..."], cwd=directory)
