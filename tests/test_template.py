from __future__ import annotations

from pathlib import Path

import pytest

from daggy.errors import TemplateRenderingError
from daggy.placeholders import Placeholder
from daggy.template import TemplateRenderer, render


@pytest.fixture()
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


def test_render_string_resolves_every_placeholder(renderer: TemplateRenderer):
    template = (
        "package {{.module_name_pkg}}\n"
        "type {{.module_name}} struct{}\n"
        "var {{.module_name_camel}} = \"{{.module_name_lowercase}}\"\n"
    )
    rendered = renderer.render_string(template, "payment-service")
    assert rendered == (
        "package payment-service\n"
        "type PaymentService struct{}\n"
        "var paymentService = \"payment-service\"\n"
    )


def test_render_string_ignores_whitespace_around_key(renderer: TemplateRenderer):
    assert renderer.render_string("{{ .module_name }}Handler", "payment-service") == "PaymentServiceHandler"


def test_render_string_is_single_pass(renderer: TemplateRenderer):
    # The title token must not be resolved inside the longer camel token.
    assert renderer.render_string("{{.module_name_camel}}", "foo-bar") == "fooBar"


def test_unknown_placeholder_kept_by_default(renderer: TemplateRenderer):
    template = "{{.unknown}} and {{ name }}"
    assert renderer.render_string(template, "demo") == template


def test_unknown_placeholder_raises_with_error_policy(renderer: TemplateRenderer):
    with pytest.raises(TemplateRenderingError):
        renderer.render_string("{{.unknown}}", "demo", missing="error")


def test_invalid_missing_policy_rejected():
    with pytest.raises(ValueError):
        TemplateRenderer(missing="empty")


def test_placeholder_tokens_and_lookup():
    assert Placeholder.TITLE.token == "{{.module_name}}"
    assert Placeholder.from_key("module_name_pkg") is Placeholder.PACKAGE
    assert Placeholder.from_key("nope") is None


def test_render_file_writes_target(tmp_path: Path, renderer: TemplateRenderer):
    template_path = tmp_path / "main.go.tmpl"
    template_path.write_text("type {{.module_name}} struct{}", encoding="utf-8")
    output_path = tmp_path / "out" / "main.go"
    renderer.render_file(template_path, "demo", target=output_path)
    assert output_path.read_text(encoding="utf-8") == "type Demo struct{}"


def test_render_file_missing_source(tmp_path: Path, renderer: TemplateRenderer):
    with pytest.raises(FileNotFoundError):
        renderer.render_file(tmp_path / "missing.tmpl", "demo")


def test_render_handler_template(tmp_path: Path, tree_writer):
    template_root = tree_writer(tmp_path / "template", {"handler.go.tmpl": "{{.module_name}}Handler\n"})
    dest = tmp_path / "instance"

    render(template_root, dest, "payment-service")

    assert (dest / "handler.go").read_text(encoding="utf-8") == "PaymentServiceHandler\n"
    assert not (dest / "handler.go.tmpl").exists()


def test_render_directory_mirrors_nested_trees(tmp_path: Path, tree_writer, renderer: TemplateRenderer):
    template_root = tree_writer(
        tmp_path / "template",
        {
            "main.go.tmpl": "package main // {{.module_name}}",
            "tests/main.go.tmpl": "// {{.module_name_pkg}}",
            "examples/go/main.go.tmpl": "// {{.module_name_camel}}",
            "tests/testdata/common/config.yaml": "name: {{.module_name}}",
        },
    )
    (template_root / "empty").mkdir()
    dest = tmp_path / "instance"

    written = renderer.render_directory(template_root, dest, "my-module")

    assert (dest / "main.go").read_text(encoding="utf-8") == "package main // MyModule"
    assert (dest / "tests" / "main.go").read_text(encoding="utf-8") == "// my-module"
    assert (dest / "examples" / "go" / "main.go").read_text(encoding="utf-8") == "// myModule"
    # Files without the template suffix are copied verbatim.
    assert (dest / "tests" / "testdata" / "common" / "config.yaml").read_text(
        encoding="utf-8"
    ) == "name: {{.module_name}}"
    assert (dest / "empty").is_dir()
    assert len(written) == 4


def test_render_directory_skips_exclusions(tmp_path: Path, tree_writer, renderer: TemplateRenderer):
    template_root = tree_writer(
        tmp_path / "template",
        {
            "main.go.tmpl": "x",
            "tests/main.go.tmpl": "y",
            "skip.go.tmpl": "z",
        },
    )
    dest = tmp_path / "instance"

    renderer.render_directory(template_root, dest, "demo", exclusions={"tests", "skip.go.tmpl"})

    assert (dest / "main.go").exists()
    assert not (dest / "tests").exists()
    assert not (dest / "skip.go").exists()


def test_render_directory_missing_root(tmp_path: Path, renderer: TemplateRenderer):
    with pytest.raises(FileNotFoundError):
        renderer.render_directory(tmp_path / "missing", tmp_path / "out", "demo")


def test_output_name_strips_suffix_only(renderer: TemplateRenderer):
    assert renderer.output_name("main.go.tmpl") == "main.go"
    assert renderer.output_name("main.go") == "main.go"
    assert renderer.output_name(".tmpl") == ".tmpl"
