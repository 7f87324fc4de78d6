from __future__ import annotations

from pathlib import Path

import pytest

from daggy.config import DaggyConfig
from daggy.errors import InvalidInputError, NotFoundError
from daggy.sync import ChangeStatus, generate_summary, inspect_changes, resolve_variants, sync_changes


@pytest.fixture()
def repo(tmp_path: Path, tree_writer) -> Path:
    tree_writer(
        tmp_path,
        {
            ".daggerx/templates/mod-full/main.go.tmpl": "type {{.module_name}} struct{}\n",
            ".daggerx/templates/mod-full/removed.go.tmpl": "package main\n",
            "module-template/main.go": "type ModuleTemplate struct{}\nfunc (m *ModuleTemplate) New() {}\n",
            ".daggerx/templates/mod-light/main.go.tmpl": "type {{.module_name}} struct{}\n",
            "module-template-light/main.go": "type ModuleTemplateLight struct{}\n",
        },
    )
    return tmp_path


def test_resolve_variants():
    assert [v.name for v in resolve_variants("full")] == ["full"]
    assert [v.name for v in resolve_variants("light")] == ["light"]
    assert [v.name for v in resolve_variants("all")] == ["full", "light"]


def test_resolve_variants_rejects_unknown_selector():
    with pytest.raises(InvalidInputError):
        resolve_variants("heavy")


def test_inspect_reports_each_variant_in_order(repo: Path):
    reports = inspect_changes(repo, "all")

    assert [report.variant for report in reports] == ["full", "light"]
    full, light = reports
    assert {c.path: c.status for c in full.changes} == {
        "main.go": ChangeStatus.MODIFIED,
        "removed.go": ChangeStatus.DELETED,
    }
    assert light.changes == ()
    assert full.counts()[ChangeStatus.DELETED] == 1


def test_inspect_never_mutates(repo: Path):
    before = (repo / ".daggerx/templates/mod-full/main.go.tmpl").read_text(encoding="utf-8")
    inspect_changes(repo, "full", detailed=True)
    assert (repo / ".daggerx/templates/mod-full/main.go.tmpl").read_text(encoding="utf-8") == before
    assert (repo / ".daggerx/templates/mod-full/removed.go.tmpl").exists()


def test_sync_dry_run_never_mutates(repo: Path):
    reports = sync_changes(repo, "full", dry_run=True)

    assert reports[0].has_changes
    assert not reports[0].applied
    assert (repo / ".daggerx/templates/mod-full/removed.go.tmpl").exists()


def test_sync_applies_changes(repo: Path):
    (report,) = sync_changes(repo, "full")

    assert report.applied
    template = repo / ".daggerx/templates/mod-full"
    assert (template / "main.go.tmpl").read_text(encoding="utf-8") == (
        "type {{.module_name}} struct{}\nfunc (m *{{.module_name}}) New() {}\n"
    )
    assert not (template / "removed.go.tmpl").exists()
    assert inspect_changes(repo, "full")[0].changes == ()


def test_sync_respects_declined_confirmation(repo: Path):
    asked = []

    def decline(variant, changes):
        asked.append((variant.name, len(changes)))
        return False

    (report,) = sync_changes(repo, "full", confirm=decline)

    assert asked == [("full", 2)]
    assert not report.applied
    assert (repo / ".daggerx/templates/mod-full/removed.go.tmpl").exists()


def test_missing_reference_module_is_not_found(repo: Path):
    config = DaggyConfig.from_mapping(
        {"variants": [{"name": "full", "template_dir": "mod-full", "reference_module": "absent"}]}
    )
    with pytest.raises(NotFoundError) as excinfo:
        inspect_changes(repo, "full", config=config)
    assert excinfo.value.hint


def test_invalid_selector_rejected_before_touching_disk(tmp_path: Path):
    with pytest.raises(InvalidInputError):
        sync_changes(tmp_path / "does-not-exist", "everything")


def test_generate_summary(repo: Path):
    (report,) = inspect_changes(repo, "full", detailed=True)

    summary = generate_summary(report.changes, detailed=True)

    assert summary.startswith("Modified: main.go\nDiff:\n")
    assert "+func (m *{{.module_name}}) New() {}" in summary
    assert "Deleted: removed.go\n" in summary
    assert generate_summary(report.changes) == "Modified: main.go\nDeleted: removed.go\n"
